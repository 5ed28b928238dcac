# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Naming normalization for generated identifiers.

Every Struct, enum value, attribute, Service, Method, parameter and header
gets a ``clean_name`` that is a valid Python identifier. Names are computed
from the original schema names only, so repeated runs over the same input
produce identical identifiers.

Collisions are resolved per scope. Entities that share a candidate name are
ordered by (namespace, original name, declaration index); the first keeps
the bare candidate and the others receive ``_<n>``.
"""

from __future__ import annotations

import keyword
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from wsdlgen.config.options import GeneratorOptions
from wsdlgen.model.containers import ServiceContainer, StructContainer
from wsdlgen.model.entities import Method, Service, Struct
from wsdlgen.model.types import StructKind, StructTypeRef

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def split_words(name: str) -> list[str]:
    """Split *name* into words at separators and case boundaries.

    Examples: ``"getHTTPStatus"`` gives ``["get", "HTTP", "Status"]`` and
    ``"order-line_item"`` gives ``["order", "line", "item"]``.
    """
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(name):
        words.extend(_WORD_RE.findall(chunk))
    return words


def to_class_name(name: str, case: str = "pascal") -> str:
    """Return a class identifier for *name*."""
    if case == "preserve":
        identifier = _INVALID_RE.sub("", name)
    else:
        identifier = "".join(w[:1].upper() + w[1:] for w in split_words(name))
    return _make_valid(identifier, "Unnamed")


def to_member_name(name: str, case: str = "snake") -> str:
    """Return an attribute, method, or parameter identifier for *name*."""
    if case == "preserve":
        identifier = _INVALID_RE.sub("", name)
    else:
        words = split_words(name)
        if case == "camel":
            identifier = "".join(
                w.lower() if i == 0 else w[:1].upper() + w[1:].lower() for i, w in enumerate(words)
            )
        else:
            identifier = "_".join(w.lower() for w in words)
    return _make_valid(identifier, "value")


def to_constant_name(value: str) -> str:
    """Return an UPPER_SNAKE constant identifier for an enumeration value."""
    return _make_valid("_".join(w.upper() for w in split_words(value)), "VALUE")


def class_name_for(name: str, options: GeneratorOptions) -> str:
    """Return the class identifier for *name* with the package prefix and suffix applied."""
    class_case = options.naming.class_case
    parts = [p for p in (options.prefix, name, options.suffix) if p]
    separator = "" if class_case == "preserve" else "_"
    return to_class_name(separator.join(parts), class_case)


def normalize_names(
    structs: StructContainer,
    services: ServiceContainer,
    options: GeneratorOptions,
) -> None:
    """Assign a collision-free ``clean_name`` to every model entity.

    Args:
        structs: The resolved Struct registry.
        services: The assembled Service registry.
        options: Casing, prefix, and suffix options.
    """
    member_case = options.naming.member_case

    def class_name(name: str) -> str:
        return class_name_for(name, options)

    # Virtual placeholders share the scope of real Structs, except one that
    # stands in for a real Struct on a cycle-breaking edge: it takes that
    # Struct's name.
    shadowed = {id(s): _shadowed_struct(structs, s) for s in structs.virtual()}
    placeholders = [s for s in structs.virtual() if shadowed[id(s)] is None]
    for kind in StructKind:
        members = [s for s in structs.real() if s.kind is kind]
        if kind is StructKind.STRUCT:
            members.extend(placeholders)
        _assign(members, lambda s: (s.namespace, s.name), class_name)
    for struct in structs.virtual():
        real = shadowed[id(struct)]
        if real is not None:
            struct.clean_name = real.clean_name

    for struct in structs:
        _normalize_struct_members(struct, member_case, options.generic_constants_names)

    service_list = list(services)
    _assign(service_list, lambda s: ("", s.name), class_name)
    for service in service_list:
        normalize_service_members(service, options)
    logger.debug("Normalized names of %d struct(s) and %d service(s)", len(structs), len(service_list))


def normalize_service_members(service: Service, options: GeneratorOptions) -> None:
    """Assign ``clean_name`` to the methods of *service* and their arguments.

    Methods are scoped per service. The parameters and headers of one
    method share a scope, since both become arguments of the same call.
    """
    member_case = options.naming.member_case
    _assign(service.methods, lambda m: (m.namespace, m.name), lambda n: to_member_name(n, member_case))
    for method in service.methods:
        _normalize_method_arguments(method, member_case)


# ################
# Implementation
# ################

_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z]|[0-9]|$)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")
_INVALID_RE = re.compile(r"[^A-Za-z0-9_]")


def _make_valid(identifier: str, fallback: str) -> str:
    if not identifier:
        identifier = fallback
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    if keyword.iskeyword(identifier):
        identifier = f"{identifier}_"
    return identifier


@dataclass
class _Candidate:
    entity: object
    namespace: str
    name: str
    index: int
    base: str


def _assign(
    entities: Sequence,
    identity: Callable[[object], tuple[str, str]],
    make_name: Callable[[str], str],
) -> None:
    """Set ``clean_name`` on each entity, suffixing colliding candidates."""
    groups: dict[str, list[_Candidate]] = {}
    for index, entity in enumerate(entities):
        namespace, name = identity(entity)
        base = make_name(name)
        groups.setdefault(base, []).append(_Candidate(entity, namespace, name, index, base))

    taken = set(groups)
    for base, members in groups.items():
        members.sort(key=lambda c: (c.namespace, c.name, c.index))
        members[0].entity.clean_name = base
        counter = 0
        for candidate in members[1:]:
            counter += 1
            while f"{base}_{counter}" in taken:
                counter += 1
            suffixed = f"{base}_{counter}"
            taken.add(suffixed)
            candidate.entity.clean_name = suffixed
            logger.debug(
                "Renamed '%s' (%s) to '%s' to avoid a collision", candidate.name, candidate.namespace, suffixed
            )


def _normalize_struct_members(struct: Struct, member_case: str, generic_constants: bool) -> None:
    _assign(
        struct.attributes,
        lambda a: (struct.namespace, a.name),
        lambda n: to_member_name(n, member_case),
    )
    if generic_constants:
        for index, value in enumerate(struct.values):
            value.clean_name = f"ENUM_VALUE_{index}"
    else:
        _assign(struct.values, lambda v: (struct.namespace, v.value), to_constant_name)


def _normalize_method_arguments(method: Method, member_case: str) -> None:
    _assign(
        [*method.parameters, *method.headers],
        lambda a: (method.namespace, a.name),
        lambda n: to_member_name(n, member_case),
    )


def _shadowed_struct(structs: StructContainer, placeholder: Struct) -> Struct | None:
    """Return the real Struct a placeholder stands in for, or None."""
    target = structs.resolve(StructTypeRef(name=placeholder.name, namespace=placeholder.namespace))
    if target is None or target.is_virtual:
        return None
    return target
