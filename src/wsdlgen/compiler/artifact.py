# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of resolved model snapshots.

A snapshot holds the generator options and the sealed Struct and Service
registries as compact JSON. Registries are written in insertion order and
rebuilt in the same order, so registry keys, virtual flags, and normalized
names survive a round trip unchanged. The format is versioned so future
schema changes can be detected.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from wsdlgen.config.options import ConfigurationError, options_from_mapping
from wsdlgen.model.containers import RegistryError, ServiceContainer, StructContainer
from wsdlgen.model.entities import (
    EnumValue,
    HeaderBinding,
    Method,
    MethodParameter,
    Service,
    Struct,
    StructAttribute,
)
from wsdlgen.model.types import ScalarType, ScalarTypeRef, StructKind, StructTypeRef, TypeRef

if TYPE_CHECKING:
    from wsdlgen.compiler.build import Generator

# ###############
# Public Interface
# ###############

SNAPSHOT_FORMAT_VERSION = "1"
SNAPSHOT_SUFFIX = ".json"
DEFAULT_SNAPSHOT_NAME = f"wsdlgen-model{SNAPSHOT_SUFFIX}"


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read or does not match the format."""


def serialize(generator: Generator) -> str:
    """Serialize the options and registries of *generator* to a compact JSON string."""
    return json.dumps(_generator_to_dict(generator), separators=(",", ":"))


def deserialize(data: str) -> Generator:
    """Rebuild a Generator from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.

    Returns:
        A :class:`~wsdlgen.compiler.build.Generator` with sealed registries.

    Raises:
        SnapshotError: If the JSON is malformed, the format version is not
            recognised, or a required key or value is missing or invalid.
    """
    try:
        obj = json.loads(data)
    except ValueError as exc:
        raise SnapshotError(f"Malformed snapshot: {exc}") from exc
    if not isinstance(obj, dict):
        raise SnapshotError("Malformed snapshot: top-level value must be an object")
    version = obj.get("v")
    if version != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotError(f"Unsupported snapshot format version: {version!r}")
    try:
        return _generator_from_dict(obj)
    except ConfigurationError as exc:
        raise SnapshotError(f"Invalid options in snapshot: {exc}") from exc
    except KeyError as exc:
        raise SnapshotError(f"Missing key in snapshot: {exc}") from exc
    except (TypeError, ValueError, RegistryError) as exc:
        raise SnapshotError(f"Invalid value in snapshot: {exc}") from exc


def write_snapshot(generator: Generator, path: Path) -> None:
    """Write a snapshot to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(generator), encoding="utf-8")


def read_snapshot(path: Path) -> Generator:
    """Read and deserialize a snapshot from *path*.

    Raises:
        SnapshotError: If the file cannot be read or is not a valid snapshot.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SnapshotError(f"Snapshot not found: {path}") from None
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot: {exc}") from exc
    return deserialize(text)


# ################
# Implementation
# ################


def _generator_to_dict(generator: Generator) -> dict[str, Any]:
    return {
        "v": SNAPSHOT_FORMAT_VERSION,
        "options": generator.options.to_mapping(),
        "structs": [_struct_to_dict(s) for s in generator.structs],
        "services": [_service_to_dict(s) for s in generator.services],
    }


def _generator_from_dict(obj: dict[str, Any]) -> Generator:
    from wsdlgen.compiler.build import Generator

    generator = Generator(options_from_mapping(obj.get("options", {}), "snapshot"))
    structs = StructContainer()
    for item in obj.get("structs", []):
        structs.add(_struct_from_dict(item))
    services = ServiceContainer()
    for item in obj.get("services", []):
        services.add(_service_from_dict(item))
    structs.seal()
    services.seal()
    generator.structs = structs
    generator.services = services
    return generator


def _struct_to_dict(struct: Struct) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": struct.name,
        "ns": struct.namespace,
        "kind": struct.kind.value,
        "clean": struct.clean_name,
        "attrs": [_attribute_to_dict(a) for a in struct.attributes],
        "abstract": struct.is_abstract,
        "virtual": struct.is_virtual,
    }
    if struct.scope:
        d["scope"] = struct.scope
    if struct.parent is not None:
        d["parent"] = _type_ref_to_dict(struct.parent)
    if struct.values:
        d["values"] = [{"value": v.value, "clean": v.clean_name} for v in struct.values]
    if struct.item_type is not None:
        d["item"] = _type_ref_to_dict(struct.item_type)
    if struct.documentation is not None:
        d["doc"] = struct.documentation
    return d


def _struct_from_dict(obj: dict[str, Any]) -> Struct:
    parent = _type_ref_from_dict(obj["parent"]) if "parent" in obj else None
    if parent is not None and not isinstance(parent, StructTypeRef):
        raise ValueError(f"Parent of struct '{obj['name']}' must be a struct reference")
    return Struct(
        name=obj["name"],
        namespace=obj.get("ns", ""),
        kind=StructKind(obj.get("kind", StructKind.STRUCT.value)),
        scope=obj.get("scope", ""),
        clean_name=obj.get("clean", ""),
        attributes=[_attribute_from_dict(a) for a in obj.get("attrs", [])],
        parent=parent,
        is_abstract=obj.get("abstract", False),
        is_virtual=obj.get("virtual", False),
        values=[EnumValue(value=v["value"], clean_name=v.get("clean", "")) for v in obj.get("values", [])],
        item_type=_type_ref_from_dict(obj["item"]) if "item" in obj else None,
        documentation=obj.get("doc"),
    )


def _attribute_to_dict(attribute: StructAttribute) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": attribute.name,
        "type": _type_ref_to_dict(attribute.type),
        "clean": attribute.clean_name,
        "nullable": attribute.nullable,
        "min": attribute.min_occurs,
        "max": attribute.max_occurs,
        "xml_attr": attribute.is_xml_attribute,
    }
    if attribute.default is not None:
        d["default"] = attribute.default
    if attribute.documentation is not None:
        d["doc"] = attribute.documentation
    return d


def _attribute_from_dict(obj: dict[str, Any]) -> StructAttribute:
    return StructAttribute(
        name=obj["name"],
        type=_type_ref_from_dict(obj["type"]),
        clean_name=obj.get("clean", ""),
        nullable=obj.get("nullable", False),
        min_occurs=obj.get("min", 1),
        # null encodes an unbounded maximum.
        max_occurs=obj["max"] if "max" in obj else 1,
        is_xml_attribute=obj.get("xml_attr", False),
        default=obj.get("default"),
        documentation=obj.get("doc"),
    )


def _service_to_dict(service: Service) -> dict[str, Any]:
    return {
        "name": service.name,
        "clean": service.clean_name,
        "methods": [_method_to_dict(m) for m in service.methods],
    }


def _service_from_dict(obj: dict[str, Any]) -> Service:
    return Service(
        name=obj["name"],
        clean_name=obj.get("clean", ""),
        methods=[_method_from_dict(m) for m in obj.get("methods", [])],
    )


def _method_to_dict(method: Method) -> dict[str, Any]:
    d: dict[str, Any] = {
        "name": method.name,
        "clean": method.clean_name,
        "ns": method.namespace,
        "port_type": method.port_type,
        "params": [
            {"name": p.name, "type": _type_ref_to_dict(p.type), "clean": p.clean_name} for p in method.parameters
        ],
        "headers": [_header_to_dict(h) for h in method.headers],
    }
    if method.soap_action is not None:
        d["action"] = method.soap_action
    if method.output_type is not None:
        d["output"] = _type_ref_to_dict(method.output_type)
    if method.documentation is not None:
        d["doc"] = method.documentation
    return d


def _method_from_dict(obj: dict[str, Any]) -> Method:
    return Method(
        name=obj["name"],
        clean_name=obj.get("clean", ""),
        namespace=obj.get("ns", ""),
        port_type=obj.get("port_type", ""),
        soap_action=obj.get("action"),
        parameters=[
            MethodParameter(name=p["name"], type=_type_ref_from_dict(p["type"]), clean_name=p.get("clean", ""))
            for p in obj.get("params", [])
        ],
        output_type=_type_ref_from_dict(obj["output"]) if "output" in obj else None,
        headers=[_header_from_dict(h) for h in obj.get("headers", [])],
        documentation=obj.get("doc"),
    )


def _header_to_dict(header: HeaderBinding) -> dict[str, Any]:
    return {
        "name": header.name,
        "type": _type_ref_to_dict(header.type),
        "ns": header.namespace,
        "required": header.required,
        "clean": header.clean_name,
    }


def _header_from_dict(obj: dict[str, Any]) -> HeaderBinding:
    return HeaderBinding(
        name=obj["name"],
        type=_type_ref_from_dict(obj["type"]),
        namespace=obj.get("ns", ""),
        required=obj.get("required", False),
        clean_name=obj.get("clean", ""),
    )


def _type_ref_to_dict(type_ref: TypeRef) -> dict[str, Any]:
    """Encode a TypeRef as a tagged dict with compact keys."""
    if isinstance(type_ref, ScalarTypeRef):
        return {"k": "scalar", "t": type_ref.scalar.value, "x": type_ref.xsd_name}
    # StructTypeRef is the only remaining variant.
    assert isinstance(type_ref, StructTypeRef)
    d: dict[str, Any] = {"k": "struct", "n": type_ref.name, "ns": type_ref.namespace, "sk": type_ref.struct_kind.value}
    if type_ref.scope:
        d["sc"] = type_ref.scope
    if type_ref.virtual:
        d["virtual"] = True
    return d


def _type_ref_from_dict(obj: dict[str, Any]) -> TypeRef:
    """Decode a TypeRef from a tagged dict."""
    kind = obj["k"]
    if kind == "scalar":
        return ScalarTypeRef(scalar=ScalarType(obj["t"]), xsd_name=obj.get("x", ""))
    if kind == "struct":
        return StructTypeRef(
            name=obj["n"],
            namespace=obj.get("ns", ""),
            struct_kind=StructKind(obj.get("sk", StructKind.STRUCT.value)),
            scope=obj.get("sc", ""),
            virtual=obj.get("virtual", False),
        )
    raise ValueError(f"Unknown type ref kind: {kind!r}")
