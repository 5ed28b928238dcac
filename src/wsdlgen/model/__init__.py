# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolved model for wsdlgen (structs, services, and their registries)."""

from wsdlgen.model.containers import RegistryError, ServiceContainer, StructContainer
from wsdlgen.model.entities import (
    DEFAULT_SERVICE_NAME,
    EnumValue,
    HeaderBinding,
    Method,
    MethodParameter,
    Service,
    Struct,
    StructAttribute,
)
from wsdlgen.model.types import (
    ScalarType,
    ScalarTypeRef,
    StructKind,
    StructTypeRef,
    TypeRef,
)

__all__ = [
    # Type system
    "ScalarType",
    "ScalarTypeRef",
    "StructKind",
    "StructTypeRef",
    "TypeRef",
    # Entities
    "DEFAULT_SERVICE_NAME",
    "EnumValue",
    "HeaderBinding",
    "Method",
    "MethodParameter",
    "Service",
    "Struct",
    "StructAttribute",
    # Registries
    "RegistryError",
    "ServiceContainer",
    "StructContainer",
]
