# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type resolution: raw declarations to the Struct registry.

Resolution runs in passes instead of following references recursively:

1. Every declaration that describes a data shape becomes a Struct right
   away. Type references are recorded by name and left pending.
2. Pending references are resolved against the complete declaration
   tables. A reference that matches nothing gets a virtual placeholder so
   that no attribute type is ever left dangling.
3. Inheritance chains are walked once; the edge that closes a cycle is
   redirected to a virtual placeholder of its target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wsdlgen.compiler.ingest import QName, RawField, RawType, Wsdl
from wsdlgen.model.containers import StructContainer
from wsdlgen.model.entities import EnumValue, Struct, StructAttribute
from wsdlgen.model.types import (
    SOAP_ENCODING_NAMESPACE,
    ScalarType,
    ScalarTypeRef,
    StructKind,
    StructTypeRef,
    TypeRef,
    is_builtin_namespace,
    scalar_for_xsd_name,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

VALUE_ATTRIBUTE_NAME = "_"
ELEMENT_SCOPE = "element"


class TypeResolver:
    """Resolves type and element references of one Wsdl against a Struct registry.

    After :meth:`resolve` has run, the resolver keeps its declaration tables
    so that later phases (the service assembler) can look up message parts
    with the same rules.
    """

    def __init__(self, wsdl: Wsdl, structs: StructContainer) -> None:
        self._wsdl = wsdl
        self._structs = structs
        # XSD keeps type names and element names in separate symbol spaces.
        self._types: dict[QName, Struct | RawType] = {}
        self._elements: dict[QName, Struct | RawType] = {}
        self._inline: dict[int, Struct | RawType] = {}
        self._pending: list[_Pending] = []

    def resolve(self) -> StructContainer:
        """Run all resolution passes and return the populated registry."""
        self._declare()
        self._resolve_pending()
        self._break_inheritance_cycles()
        logger.info(
            "Resolved %d struct(s), %d virtual",
            len(self._structs.real()),
            len(self._structs.virtual()),
        )
        return self._structs

    def lookup(self, qname: QName, space: str = "type") -> TypeRef:
        """Return a type reference for *qname*, creating a virtual Struct if it is unknown.

        Args:
            qname: The qualified type or element name.
            space: ``"type"`` or ``"element"``; the other space is tried
                when the requested one has no match.
        """
        return self._lookup(qname, space, set())

    # ------------------------------------------------------------------
    # First pass
    # ------------------------------------------------------------------

    def _declare(self) -> None:
        raws = [raw for raw in self._wsdl.iter_types() if raw.category not in ("group", "attributeGroup")]
        type_names = {
            raw.qname for raw in raws if raw.category != "element" and not raw.is_anonymous and not raw.is_alias
        }
        for raw in raws:
            entry: Struct | RawType = raw if raw.is_alias else self._create_struct(raw, _scope_for(raw, type_names))
            if raw.is_anonymous:
                self._inline[id(raw)] = entry
                continue
            table = self._elements if raw.category == "element" else self._types
            if raw.qname in table:
                logger.debug("Ignoring duplicate declaration of '%s'", raw.name)
                continue
            table[raw.qname] = entry

    def _create_struct(self, raw: RawType, scope: str) -> Struct:
        struct = Struct(
            name=raw.name,
            namespace=raw.namespace,
            kind=_infer_kind(raw),
            scope=scope,
            is_abstract=raw.is_abstract,
            documentation=raw.documentation,
        )
        if struct.kind is StructKind.ENUM:
            struct.values = [EnumValue(value=v) for v in raw.enumerations]
        registered = self._structs.add(struct)
        if registered is not struct:
            if not raw.is_anonymous:
                # Same key reached through another import path; the first declaration wins.
                return registered
            # Sibling anonymous types with the same name under one owner.
            counter = 2
            while self._structs.get(struct.name, struct.namespace, struct.kind, f"{scope}#{counter}") is not None:
                counter += 1
            struct.scope = f"{scope}#{counter}"
            self._structs.add(struct)

        for raw_field in raw.fields:
            struct.attributes.append(
                StructAttribute(
                    name=raw_field.name,
                    type=ScalarTypeRef(scalar=ScalarType.ANY, xsd_name="anyType"),
                    nullable=raw_field.nillable,
                    min_occurs=raw_field.min_occurs,
                    max_occurs=raw_field.max_occurs,
                    is_xml_attribute=raw_field.is_attribute,
                    default=raw_field.default,
                    documentation=raw_field.documentation,
                )
            )
            self._pending.append(_Pending(struct, "attribute", raw_field=raw_field, index=len(struct.attributes) - 1))

        if raw.base is not None and struct.kind is not StructKind.ENUM:
            if not (raw.base.namespace == SOAP_ENCODING_NAMESPACE and raw.base.name == "Array"):
                self._pending.append(_Pending(struct, "parent", qname=raw.base))

        if struct.kind is StructKind.ARRAY:
            if raw.array_item is not None:
                self._pending.append(_Pending(struct, "item", qname=raw.array_item))
            else:
                self._pending.append(_Pending(struct, "item", index=0))
        return struct

    # ------------------------------------------------------------------
    # Second pass
    # ------------------------------------------------------------------

    def _resolve_pending(self) -> None:
        for pending in self._pending:
            struct = pending.struct
            if pending.role == "attribute":
                assert pending.raw_field is not None and pending.index is not None
                struct.attributes[pending.index].type = self._field_type(pending.raw_field)
            elif pending.role == "parent":
                assert pending.qname is not None
                self._resolve_parent(struct, pending.qname)
            elif pending.role == "item":
                if pending.qname is not None:
                    struct.item_type = self._lookup(pending.qname, "type", set())
                elif struct.attributes:
                    struct.item_type = struct.attributes[0].type

    def _field_type(self, raw_field: RawField) -> TypeRef:
        if raw_field.inline_type is not None:
            entry = self._inline.get(id(raw_field.inline_type))
            if entry is None:
                return self._missing(QName(raw_field.inline_type.namespace, raw_field.inline_type.name))
            return self._entry_ref(entry, set())
        if raw_field.type is None:
            return ScalarTypeRef(scalar=ScalarType.ANY, xsd_name="anyType")
        return self._lookup(raw_field.type, raw_field.space, set())

    def _resolve_parent(self, struct: Struct, base: QName) -> None:
        target = self._lookup(base, "type", set())
        if isinstance(target, StructTypeRef):
            struct.parent = target
            return
        # A scalar base (simple content) becomes the value carried by the struct.
        struct.attributes.insert(0, StructAttribute(name=VALUE_ATTRIBUTE_NAME, type=target))

    def _lookup(self, qname: QName, space: str, seen: set[QName]) -> TypeRef:
        if is_builtin_namespace(qname.namespace):
            scalar = scalar_for_xsd_name(qname.name)
            if scalar is None:
                logger.warning("Unknown built-in type '%s', treating it as anyType", qname.name)
                scalar = ScalarType.ANY
            return ScalarTypeRef(scalar=scalar, xsd_name=qname.name)

        primary, secondary = (self._elements, self._types) if space == "element" else (self._types, self._elements)
        entry = primary.get(qname) or secondary.get(qname)
        if entry is None:
            return self._missing(qname)
        if qname in seen:
            logger.warning("Circular alias involving '%s'", qname.name)
            return self._missing(qname)
        seen.add(qname)
        return self._entry_ref(entry, seen)

    def _entry_ref(self, entry: Struct | RawType, seen: set[QName]) -> TypeRef:
        if isinstance(entry, Struct):
            return entry.ref()
        target = entry.element_type if entry.element_type is not None else entry.base
        if target is None:
            return ScalarTypeRef(scalar=ScalarType.STRING, xsd_name="string")
        return self._lookup(target, "type", seen)

    def _missing(self, qname: QName) -> StructTypeRef:
        existing = self._structs.get_virtual(qname.name, qname.namespace)
        if existing is None:
            logger.warning(
                "Type '%s' in namespace '%s' is not declared; using a virtual struct",
                qname.name,
                qname.namespace,
            )
        return self._structs.add_virtual(qname.name, qname.namespace).ref()

    # ------------------------------------------------------------------
    # Third pass
    # ------------------------------------------------------------------

    def _break_inheritance_cycles(self) -> None:
        for struct in self._structs.real():
            path: list[Struct] = [struct]
            current = struct
            while current.parent is not None and not current.parent.virtual:
                target = self._structs.resolve(current.parent)
                if target is None or target.is_virtual:
                    break
                if any(target is s for s in path):
                    logger.warning(
                        "Inheritance cycle: '%s' extends '%s'; the edge now points at a virtual struct",
                        current.name,
                        target.name,
                    )
                    self._structs.add_virtual(target.name, target.namespace)
                    current.parent = target.ref(virtual=True)
                    break
                path.append(target)
                current = target


def resolve_types(wsdl: Wsdl, structs: StructContainer) -> TypeResolver:
    """Populate *structs* from the raw declarations of *wsdl*.

    Returns:
        The resolver, which keeps its lookup tables for later phases.
    """
    resolver = TypeResolver(wsdl, structs)
    resolver.resolve()
    return resolver


# ################
# Implementation
# ################


@dataclass
class _Pending:
    """A reference recorded in the first pass and resolved in the second."""

    struct: Struct
    role: str
    qname: QName | None = None
    raw_field: RawField | None = None
    index: int | None = None


def _infer_kind(raw: RawType) -> StructKind:
    if raw.enumerations:
        return StructKind.ENUM
    if raw.array_item is not None:
        return StructKind.ARRAY
    is_soap_array = raw.base is not None and raw.base.namespace == SOAP_ENCODING_NAMESPACE and raw.base.name == "Array"
    if raw.base is not None and not is_soap_array:
        return StructKind.STRUCT
    if len(raw.fields) == 1:
        only = raw.fields[0]
        if not only.is_attribute and (only.max_occurs is None or only.max_occurs > 1):
            return StructKind.ARRAY
    return StructKind.STRUCT


def _scope_for(raw: RawType, type_names: set[QName]) -> str:
    """Return the registry scope separating *raw* from same-named declarations.

    Anonymous types are scoped by the path of their owner. A top-level element
    with an inline type lives in the element symbol space, so it moves to the
    ``element`` scope when a type of the same name is declared.
    """
    if raw.is_anonymous:
        return raw.owner or raw.name
    if raw.category == "element" and raw.qname in type_names:
        return ELEMENT_SCOPE
    return ""
