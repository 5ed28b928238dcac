# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Service assembly: portType operations to Services and Methods.

Every operation becomes a :class:`~wsdlgen.model.entities.Method` whose
parameters, output, and SOAP headers are looked up through the type
resolver. The Service a Method lands in is chosen by a gather strategy:

* ``none`` keeps the WSDL portType grouping;
* ``all`` puts every Method into the single default Service;
* ``start`` and ``end`` cluster operations by the first or last word of
  their name, so ``CustomerGetList`` and ``CustomerGetDetail`` share the
  ``Customer`` Service.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from wsdlgen.compiler.ingest import QName, RawMessage, RawOperation, RawPart, Wsdl
from wsdlgen.compiler.naming import split_words
from wsdlgen.compiler.resolver import TypeResolver, resolve_types
from wsdlgen.config.options import GATHER_ALL, GATHER_END, GATHER_NONE, GATHER_START, GeneratorOptions
from wsdlgen.model.containers import ServiceContainer, StructContainer
from wsdlgen.model.entities import DEFAULT_SERVICE_NAME, HeaderBinding, Method, MethodParameter
from wsdlgen.model.types import ScalarType, ScalarTypeRef, TypeRef

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class GatherStrategy(ABC):
    """Decides which Service an operation belongs to."""

    @abstractmethod
    def compute_group_name(self, operation_name: str, port_type: str) -> str:
        """Return the name of the Service for *operation_name* declared on *port_type*."""


class PortTypeGather(GatherStrategy):
    """One Service per WSDL portType."""

    def compute_group_name(self, operation_name: str, port_type: str) -> str:
        return port_type or DEFAULT_SERVICE_NAME


class SingleServiceGather(GatherStrategy):
    """Every operation goes into the default Service."""

    def compute_group_name(self, operation_name: str, port_type: str) -> str:
        return DEFAULT_SERVICE_NAME


class TokenGather(GatherStrategy):
    """Groups operations by one word of their name.

    Underscores and digits are dropped before the name is split at case
    boundaries, or on *separator* when one is given. The selected word is
    returned with its first letter upper-cased.

    Args:
        index: ``0`` for the first word, ``-1`` for the last.
        separator: Optional literal separator replacing case splitting.
    """

    def __init__(self, index: int = 0, separator: str | None = None) -> None:
        self._index = index
        self._separator = separator

    def compute_group_name(self, operation_name: str, port_type: str) -> str:
        if self._separator:
            tokens = [_DIGITS_RE.sub("", t) for t in operation_name.split(self._separator)]
            tokens = [t for t in tokens if t]
        else:
            tokens = split_words(_UNDERSCORE_DIGITS_RE.sub("", operation_name))
        if not tokens:
            return DEFAULT_SERVICE_NAME
        token = tokens[self._index]
        return token[:1].upper() + token[1:]


def gather_strategy_for(options: GeneratorOptions) -> GatherStrategy:
    """Return the gather strategy selected by ``options.gather_methods``."""
    mode = options.gather_methods
    if mode == GATHER_NONE:
        return PortTypeGather()
    if mode == GATHER_ALL:
        return SingleServiceGather()
    if mode == GATHER_END:
        return TokenGather(-1, options.gather_separator)
    if mode == GATHER_START:
        return TokenGather(0, options.gather_separator)
    raise ValueError(f"Unknown gather mode: {mode!r}")


def assemble_services(
    wsdl: Wsdl,
    structs: StructContainer,
    services: ServiceContainer,
    options: GeneratorOptions,
    *,
    resolver: TypeResolver | None = None,
    strategy: GatherStrategy | None = None,
) -> ServiceContainer:
    """Build a Method for every portType operation and file it into a Service.

    Args:
        wsdl: The ingested WSDL.
        structs: The resolved Struct registry. Parts whose declarations are
            missing add virtual placeholders to it.
        services: The registry Services are created in.
        options: Generator options; selects the gather strategy.
        resolver: The resolver that populated *structs*. A new one is run
            when omitted.
        strategy: Overrides the strategy derived from *options*.

    Returns:
        The populated Service registry.
    """
    if resolver is None:
        resolver = resolve_types(wsdl, structs)
    if strategy is None:
        strategy = gather_strategy_for(options)

    for operation in wsdl.operations:
        method = _build_method(wsdl, resolver, operation)
        group = strategy.compute_group_name(operation.name, operation.port_type) or DEFAULT_SERVICE_NAME
        service = services.get_or_create(group)
        service.add_method(method)
        logger.debug("Assembled method '%s' into service '%s'", method.name, service.name)

    logger.info("Assembled %d method(s) into %d service(s)", len(services.methods()), len(services))
    return services


# ################
# Implementation
# ################

_DIGITS_RE = re.compile(r"[0-9]+")
_UNDERSCORE_DIGITS_RE = re.compile(r"[_0-9]+")


def _build_method(wsdl: Wsdl, resolver: TypeResolver, operation: RawOperation) -> Method:
    parameters: list[MethodParameter] = []
    input_message = _message(wsdl, operation.input_message, operation.name)
    if input_message is not None:
        for part in input_message.parts:
            parameters.append(MethodParameter(name=part.name, type=_part_type(resolver, part)))

    output_type: TypeRef | None = None
    output_message = _message(wsdl, operation.output_message, operation.name)
    if output_message is not None and output_message.parts:
        output_type = _part_type(resolver, output_message.parts[0])

    soap_action: str | None = None
    headers: list[HeaderBinding] = []
    seen: set[tuple[str, str]] = set()
    for binding in wsdl.bindings:
        if binding.port_type.name != operation.port_type:
            continue
        for binding_operation in binding.operations:
            if binding_operation.name != operation.name:
                continue
            if soap_action is None and binding_operation.soap_action:
                soap_action = binding_operation.soap_action
            for raw_header in binding_operation.headers:
                header = _header_binding(wsdl, resolver, raw_header.message, raw_header.part)
                if header is None:
                    continue
                header.namespace = raw_header.namespace or header.namespace or wsdl.target_namespace
                header.required = raw_header.required
                if (header.name, header.namespace) in seen:
                    continue
                seen.add((header.name, header.namespace))
                headers.append(header)

    return Method(
        name=operation.name,
        namespace=operation.namespace,
        port_type=operation.port_type,
        soap_action=soap_action,
        parameters=parameters,
        output_type=output_type,
        headers=headers,
        documentation=operation.documentation,
    )


def _message(wsdl: Wsdl, qname: QName | None, operation_name: str) -> RawMessage | None:
    if qname is None:
        return None
    message = wsdl.get_message(qname)
    if message is None:
        logger.warning("Message '%s' of operation '%s' is not declared", qname.name, operation_name)
    return message


def _part_type(resolver: TypeResolver, part: RawPart) -> TypeRef:
    if part.element is not None:
        return resolver.lookup(part.element, "element")
    if part.type is not None:
        return resolver.lookup(part.type, "type")
    return ScalarTypeRef(scalar=ScalarType.ANY, xsd_name="anyType")


def _header_binding(wsdl: Wsdl, resolver: TypeResolver, message_name: QName, part_name: str) -> HeaderBinding | None:
    message = wsdl.get_message(message_name)
    if message is None:
        logger.warning("Header message '%s' is not declared", message_name.name)
        return None
    for part in message.parts:
        if part.name == part_name:
            namespace = part.element.namespace if part.element is not None else ""
            return HeaderBinding(name=part.name, type=_part_type(resolver, part), namespace=namespace)
    logger.warning("Header part '%s' is missing from message '%s'", part_name, message_name.name)
    return None
