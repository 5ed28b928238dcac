# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type references for the wsdlgen resolved model."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
SOAP_ENCODING_NAMESPACE = "http://schemas.xmlsoap.org/soap/encoding/"


class ScalarType(Enum):
    """Scalar types an attribute can be bound to without a Struct."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOL = "bool"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    DURATION = "duration"
    ANY = "any"


class StructKind(Enum):
    """The shape of a Struct."""

    STRUCT = "struct"
    ARRAY = "array"
    ENUM = "enum"


class ScalarTypeRef(BaseModel):
    """Reference to a built-in XSD type."""

    kind: Literal["scalar"] = "scalar"
    scalar: ScalarType
    xsd_name: str = ""


class StructTypeRef(BaseModel):
    """Reference to a Struct in the registry, by name.

    ``virtual`` pins the reference to the virtual placeholder of the named
    Struct even when a real declaration exists (used on inheritance edges
    that close a cycle). ``scope`` selects an anonymous or element-inline
    declaration that shares its name with another one.
    """

    kind: Literal["struct"] = "struct"
    name: str
    namespace: str = ""
    struct_kind: StructKind = StructKind.STRUCT
    scope: str = ""
    virtual: bool = False


# An attribute, item, parameter or header type.
# The `kind` discriminator field enables fast, unambiguous deserialization.
TypeRef = Annotated[ScalarTypeRef | StructTypeRef, _Field(discriminator="kind")]


def scalar_for_xsd_name(local_name: str) -> ScalarType | None:
    """Return the ScalarType for an XSD built-in type name, or None if unknown."""
    return _XSD_SCALARS.get(local_name)


def is_builtin_namespace(namespace: str) -> bool:
    """Return True if *namespace* holds built-in (scalar) type names."""
    return namespace in (XSD_NAMESPACE, SOAP_ENCODING_NAMESPACE)


# ################
# Implementation
# ################

_XSD_SCALARS: dict[str, ScalarType] = {
    "string": ScalarType.STRING,
    "normalizedString": ScalarType.STRING,
    "token": ScalarType.STRING,
    "language": ScalarType.STRING,
    "Name": ScalarType.STRING,
    "NCName": ScalarType.STRING,
    "NMTOKEN": ScalarType.STRING,
    "NMTOKENS": ScalarType.STRING,
    "ID": ScalarType.STRING,
    "IDREF": ScalarType.STRING,
    "IDREFS": ScalarType.STRING,
    "ENTITY": ScalarType.STRING,
    "ENTITIES": ScalarType.STRING,
    "QName": ScalarType.STRING,
    "NOTATION": ScalarType.STRING,
    "anyURI": ScalarType.STRING,
    "gYear": ScalarType.STRING,
    "gYearMonth": ScalarType.STRING,
    "gMonth": ScalarType.STRING,
    "gMonthDay": ScalarType.STRING,
    "gDay": ScalarType.STRING,
    "int": ScalarType.INT,
    "integer": ScalarType.INT,
    "long": ScalarType.INT,
    "short": ScalarType.INT,
    "byte": ScalarType.INT,
    "nonNegativeInteger": ScalarType.INT,
    "nonPositiveInteger": ScalarType.INT,
    "positiveInteger": ScalarType.INT,
    "negativeInteger": ScalarType.INT,
    "unsignedLong": ScalarType.INT,
    "unsignedInt": ScalarType.INT,
    "unsignedShort": ScalarType.INT,
    "unsignedByte": ScalarType.INT,
    "float": ScalarType.FLOAT,
    "double": ScalarType.FLOAT,
    "decimal": ScalarType.DECIMAL,
    "boolean": ScalarType.BOOL,
    "base64Binary": ScalarType.BYTES,
    "hexBinary": ScalarType.BYTES,
    "base64": ScalarType.BYTES,
    "date": ScalarType.DATE,
    "time": ScalarType.TIME,
    "dateTime": ScalarType.DATETIME,
    "duration": ScalarType.DURATION,
    "anyType": ScalarType.ANY,
    "anySimpleType": ScalarType.ANY,
}
