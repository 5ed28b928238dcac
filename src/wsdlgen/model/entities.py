# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolved model entities: structs, methods and services."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field as _Field

from wsdlgen.model.types import StructKind, StructTypeRef, TypeRef

# ###############
# Public Interface
# ###############

DEFAULT_SERVICE_NAME = "Service"


class StructAttribute(BaseModel):
    """A named, typed member of a Struct (an XSD element or attribute)."""

    name: str
    type: TypeRef
    clean_name: str = ""
    nullable: bool = False
    min_occurs: int = 1
    max_occurs: int | None = 1
    is_xml_attribute: bool = False
    default: str | None = None
    documentation: str | None = None

    @property
    def is_required(self) -> bool:
        """Return True if the attribute must be present and non-null."""
        return self.min_occurs > 0 and not self.nullable

    @property
    def is_repeated(self) -> bool:
        """Return True if the attribute may occur more than once."""
        return self.max_occurs is None or self.max_occurs > 1


class EnumValue(BaseModel):
    """One enumeration facet of an enum Struct."""

    value: str
    clean_name: str = ""


class Struct(BaseModel):
    """A named data shape: a structure, an array wrapper or an enumeration."""

    name: str
    namespace: str = ""
    kind: StructKind = StructKind.STRUCT
    # Owner path of an anonymous type, or "element" for an element-inline type
    # named like a declared type. Empty for named declarations.
    scope: str = ""
    clean_name: str = ""
    attributes: list[StructAttribute] = _Field(default_factory=list)
    parent: StructTypeRef | None = None
    is_abstract: bool = False
    is_virtual: bool = False
    values: list[EnumValue] = _Field(default_factory=list)
    item_type: TypeRef | None = None
    documentation: str | None = None

    @property
    def key(self) -> tuple[str, str, StructKind, str]:
        """Return the registry key of this Struct."""
        return (self.namespace, self.name, self.kind, self.scope)

    def ref(self, *, virtual: bool = False) -> StructTypeRef:
        """Return a type reference pointing at this Struct."""
        # Virtual placeholders are keyed by (namespace, name) alone.
        scope = "" if virtual else self.scope
        return StructTypeRef(
            name=self.name, namespace=self.namespace, struct_kind=self.kind, scope=scope, virtual=virtual
        )

    def get_attribute(self, name: str) -> StructAttribute | None:
        """Return the own attribute named *name*, or None."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


class HeaderBinding(BaseModel):
    """A SOAP header declared on the input of an operation binding."""

    name: str
    type: TypeRef
    namespace: str = ""
    required: bool = False
    clean_name: str = ""


class MethodParameter(BaseModel):
    """One part of an operation's input message."""

    name: str
    type: TypeRef
    clean_name: str = ""


class Method(BaseModel):
    """A service operation."""

    name: str
    clean_name: str = ""
    namespace: str = ""
    port_type: str = ""
    soap_action: str | None = None
    parameters: list[MethodParameter] = _Field(default_factory=list)
    output_type: TypeRef | None = None
    headers: list[HeaderBinding] = _Field(default_factory=list)
    documentation: str | None = None

    @property
    def input_type(self) -> TypeRef | None:
        """Return the input type when the input message has exactly one part."""
        if len(self.parameters) == 1:
            return self.parameters[0].type
        return None


class Service(BaseModel):
    """A named grouping of Methods."""

    name: str
    clean_name: str = ""
    methods: list[Method] = _Field(default_factory=list)

    def get_method(self, name: str) -> Method | None:
        """Return the first Method originally named *name*, or None."""
        for method in self.methods:
            if method.name == name:
                return method
        return None

    def add_method(self, method: Method) -> Method:
        """Append *method* unless an identical one is already present.

        Returns the Method held by the service afterwards.
        """
        for existing in self.methods:
            if existing is method or existing == method:
                return existing
        self.methods.append(method)
        return method
