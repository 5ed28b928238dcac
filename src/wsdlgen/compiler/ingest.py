# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema ingestion: WSDL and XSD documents to raw declarations.

The ingestor reads a WSDL document, every ``wsdl:import`` it names, its
inline ``types`` schemas, and every schema those import, include, or
redefine. Each schema is parsed once per (namespace, location) pair.

The result is a :class:`Wsdl` holding flat, namespace-tagged raw
declarations. Type references are kept as qualified names; turning them
into a model is the resolver's job.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from lxml import etree

from wsdlgen.compiler.fetch import ContentFetcher, resolve_location
from wsdlgen.model.types import XSD_NAMESPACE

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

WSDL_NAMESPACE = "http://schemas.xmlsoap.org/wsdl/"
SOAP11_NAMESPACE = "http://schemas.xmlsoap.org/wsdl/soap/"
SOAP12_NAMESPACE = "http://schemas.xmlsoap.org/wsdl/soap12/"


class IngestError(Exception):
    """Raised when a fetched document is not a parsable WSDL or XSD document."""


class QName(NamedTuple):
    """A namespace-qualified XML name."""

    namespace: str
    name: str


@dataclass
class RawField:
    """An element, attribute, or group reference inside a type declaration.

    ``space`` tells which XSD symbol space ``type`` lives in: ``"type"`` for
    ``type=`` references and ``"element"`` for ``ref=`` references. An
    anonymous inline type is carried in ``inline_type`` instead.
    """

    name: str
    type: QName | None = None
    inline_type: RawType | None = None
    space: str = "type"
    min_occurs: int = 1
    max_occurs: int | None = 1
    nillable: bool = False
    is_attribute: bool = False
    default: str | None = None
    documentation: str | None = None
    group_ref: QName | None = None
    group_kind: str | None = None


@dataclass
class RawType:
    """A complex type, simple type, or top-level element declaration."""

    name: str
    namespace: str
    category: str
    fields: list[RawField] = field(default_factory=list)
    base: QName | None = None
    derivation: str | None = None
    simple_content: bool = False
    enumerations: list[str] = field(default_factory=list)
    is_abstract: bool = False
    array_item: QName | None = None
    element_type: QName | None = None
    is_anonymous: bool = False
    owner: str = ""
    documentation: str | None = None

    @property
    def qname(self) -> QName:
        return QName(self.namespace, self.name)

    @property
    def path(self) -> str:
        """Return the slash-separated path from the top-level declaration to this one."""
        return f"{self.owner}/{self.name}" if self.owner else self.name

    @property
    def is_alias(self) -> bool:
        """Return True if the declaration only renames another type.

        Non-enumerated simple types collapse to their base, and elements
        declared with ``type=`` collapse to that type.
        """
        if self.element_type is not None:
            return True
        return self.category == "simpleType" and not self.enumerations


@dataclass
class RawPart:
    """One part of a WSDL message."""

    name: str
    element: QName | None = None
    type: QName | None = None


@dataclass
class RawMessage:
    name: str
    namespace: str
    parts: list[RawPart] = field(default_factory=list)


@dataclass
class RawHeader:
    """A ``soap:header`` declared on a binding operation's input."""

    message: QName
    part: str
    namespace: str | None = None
    required: bool = False


@dataclass
class RawBindingOperation:
    name: str
    soap_action: str | None = None
    headers: list[RawHeader] = field(default_factory=list)


@dataclass
class RawBinding:
    name: str
    namespace: str
    port_type: QName
    operations: list[RawBindingOperation] = field(default_factory=list)


@dataclass
class RawOperation:
    """An operation declared by a WSDL portType."""

    name: str
    port_type: str
    namespace: str
    input_message: QName | None = None
    output_message: QName | None = None
    documentation: str | None = None


@dataclass
class Schema:
    """One parsed XSD document (or inline ``types`` schema)."""

    namespace: str
    location: str
    wsdl: Wsdl | None = field(default=None, repr=False, compare=False)
    types: list[RawType] = field(default_factory=list)


@dataclass
class Wsdl:
    """The root of the raw declarations gathered from one origin."""

    location: str
    target_namespace: str = ""
    schemas: list[Schema] = field(default_factory=list)
    messages: dict[QName, RawMessage] = field(default_factory=dict)
    operations: list[RawOperation] = field(default_factory=list)
    bindings: list[RawBinding] = field(default_factory=list)
    groups: dict[tuple[str, QName], list[RawField]] = field(default_factory=dict)
    generator: Any = field(default=None, repr=False, compare=False)

    def has_schema(self, namespace: str, location: str) -> bool:
        """Return True if the (namespace, location) schema is already loaded."""
        return any(s.namespace == namespace and s.location == location for s in self.schemas)

    def iter_types(self) -> Iterator[RawType]:
        """Yield every raw type declaration in discovery order."""
        for schema in self.schemas:
            yield from schema.types

    def get_message(self, qname: QName | None) -> RawMessage | None:
        """Return the message with the given qualified name.

        Falls back to a local-name match when the namespace does not match,
        since message references are frequently written without a prefix.
        """
        if qname is None:
            return None
        message = self.messages.get(qname)
        if message is not None:
            return message
        for candidate in self.messages.values():
            if candidate.name == qname.name:
                return candidate
        return None


def ingest(origin: str, fetcher: ContentFetcher) -> Wsdl:
    """Parse the WSDL at *origin* and every schema it references.

    Args:
        origin: URL or filesystem path of the WSDL document.
        fetcher: Content retrieval used for every document.

    Returns:
        The populated :class:`Wsdl`.

    Raises:
        RetrievalError: If a document cannot be fetched.
        IngestError: If a document is not well-formed XML, or the origin is
            not a WSDL document.
    """
    return _Ingestor(fetcher).run(origin)


def parse_xml(content: str, location: str) -> etree._Element:
    """Parse *content* into an lxml element tree.

    Raises:
        IngestError: If the content is not well-formed XML.
    """
    text = _XML_DECLARATION_RE.sub("", content, count=1)
    try:
        return etree.fromstring(text, parser=_PARSER)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise IngestError(f"Cannot parse '{location}': {exc}") from exc


# ################
# Implementation
# ################

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")
_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)

_WSDL_DEFINITIONS = f"{{{WSDL_NAMESPACE}}}definitions"
_XSD_SCHEMA = f"{{{XSD_NAMESPACE}}}schema"
_SOAP_NAMESPACES = (SOAP11_NAMESPACE, SOAP12_NAMESPACE)


def _wsdl(tag: str) -> str:
    return f"{{{WSDL_NAMESPACE}}}{tag}"


def _xsd(tag: str) -> str:
    return f"{{{XSD_NAMESPACE}}}{tag}"


def _local(el: etree._Element) -> str:
    return etree.QName(el).localname


def _xsd_children(el: etree._Element) -> Iterator[etree._Element]:
    for child in el:
        if isinstance(child.tag, str) and etree.QName(child).namespace == XSD_NAMESPACE:
            yield child


def _qname(el: etree._Element, value: str | None, default_namespace: str = "") -> QName | None:
    """Resolve a prefixed name against the in-scope namespace declarations of *el*."""
    if not value:
        return None
    value = value.strip()
    if ":" in value:
        prefix, local = value.split(":", 1)
        namespace = el.nsmap.get(prefix)
        if namespace is None:
            logger.warning("Unknown namespace prefix '%s' in '%s'", prefix, value)
            namespace = ""
        return QName(namespace, local)
    return QName(el.nsmap.get(None, default_namespace), value)


def _occurs(value: str | None, default: int | None) -> int | None:
    if value is None:
        return default
    if value == "unbounded":
        return None
    try:
        return int(value)
    except ValueError:
        return default


def _documentation(el: etree._Element) -> str | None:
    texts = [
        " ".join(doc.xpath("string()").split())
        for doc in el.findall(f"{_xsd('annotation')}/{_xsd('documentation')}")
    ]
    texts.extend(" ".join(doc.xpath("string()").split()) for doc in el.findall(_wsdl("documentation")))
    texts = [t for t in texts if t]
    return "\n".join(texts) if texts else None


class _Ingestor:
    """Walks WSDL and XSD documents and collects raw declarations."""

    def __init__(self, fetcher: ContentFetcher) -> None:
        self._fetcher = fetcher
        self._wsdl: Wsdl | None = None
        self._seen_documents: set[str] = set()
        self._seen_schemas: set[tuple[str, str]] = set()

    def run(self, origin: str) -> Wsdl:
        self._wsdl = Wsdl(location=origin)
        root = parse_xml(self._fetcher.fetch(origin), origin)
        if root.tag != _WSDL_DEFINITIONS:
            raise IngestError(f"'{origin}' is not a WSDL document (root element is '{_local(root)}')")
        self._seen_documents.add(origin)
        self._wsdl.target_namespace = root.get("targetNamespace", "")
        self._load_definitions(root, origin)
        self._expand_groups()
        logger.info(
            "Ingested %d schema(s), %d operation(s) from '%s'",
            len(self._wsdl.schemas),
            len(self._wsdl.operations),
            origin,
        )
        return self._wsdl

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def _load_document(self, location: str, inherited_namespace: str | None = None) -> None:
        """Load an imported document, which may be a WSDL or a bare schema."""
        root = parse_xml(self._fetcher.fetch(location), location)
        if root.tag == _WSDL_DEFINITIONS:
            if location in self._seen_documents:
                return
            self._seen_documents.add(location)
            self._load_definitions(root, location)
        elif root.tag == _XSD_SCHEMA:
            self._load_schema(root, location, location, inherited_namespace)
        else:
            raise IngestError(f"'{location}' is neither a WSDL nor an XSD document")

    def _load_definitions(self, root: etree._Element, location: str) -> None:
        assert self._wsdl is not None
        namespace = root.get("targetNamespace", "")
        logger.debug("Loading WSDL definitions from '%s'", location)

        for imp in root.findall(_wsdl("import")):
            ref = imp.get("location")
            if ref:
                target = resolve_location(location, ref)
                if target not in self._seen_documents:
                    self._load_document(target, imp.get("namespace"))

        for index, schema_el in enumerate(root.findall(f"{_wsdl('types')}/{_XSD_SCHEMA}")):
            self._load_schema(schema_el, f"{location}#{index}", location, None)

        for message_el in root.findall(_wsdl("message")):
            message = RawMessage(name=message_el.get("name", ""), namespace=namespace)
            for part_el in message_el.findall(_wsdl("part")):
                message.parts.append(
                    RawPart(
                        name=part_el.get("name", ""),
                        element=_qname(part_el, part_el.get("element"), namespace),
                        type=_qname(part_el, part_el.get("type"), namespace),
                    )
                )
            self._wsdl.messages.setdefault(QName(namespace, message.name), message)

        for port_type_el in root.findall(_wsdl("portType")):
            port_type = port_type_el.get("name", "")
            for op_el in port_type_el.findall(_wsdl("operation")):
                input_el = op_el.find(_wsdl("input"))
                output_el = op_el.find(_wsdl("output"))
                self._wsdl.operations.append(
                    RawOperation(
                        name=op_el.get("name", ""),
                        port_type=port_type,
                        namespace=namespace,
                        input_message=None
                        if input_el is None
                        else _qname(input_el, input_el.get("message"), namespace),
                        output_message=None
                        if output_el is None
                        else _qname(output_el, output_el.get("message"), namespace),
                        documentation=_documentation(op_el),
                    )
                )

        for binding_el in root.findall(_wsdl("binding")):
            port_type_ref = _qname(binding_el, binding_el.get("type"), namespace)
            binding = RawBinding(
                name=binding_el.get("name", ""),
                namespace=namespace,
                port_type=port_type_ref or QName(namespace, ""),
            )
            for bop_el in binding_el.findall(_wsdl("operation")):
                binding.operations.append(self._binding_operation(bop_el, namespace))
            self._wsdl.bindings.append(binding)

    def _binding_operation(self, bop_el: etree._Element, namespace: str) -> RawBindingOperation:
        operation = RawBindingOperation(name=bop_el.get("name", ""))
        for soap_ns in _SOAP_NAMESPACES:
            soap_op = bop_el.find(f"{{{soap_ns}}}operation")
            if soap_op is not None and soap_op.get("soapAction") is not None:
                operation.soap_action = soap_op.get("soapAction")
                break
        input_el = bop_el.find(_wsdl("input"))
        if input_el is None:
            return operation
        for header_el in input_el:
            if not isinstance(header_el.tag, str):
                continue
            tag = etree.QName(header_el)
            if tag.namespace not in _SOAP_NAMESPACES or tag.localname != "header":
                continue
            message = _qname(header_el, header_el.get("message"), namespace)
            if message is None:
                continue
            operation.headers.append(
                RawHeader(
                    message=message,
                    part=header_el.get("part", ""),
                    namespace=header_el.get("namespace"),
                    required=header_el.get(_wsdl("required"), "false").lower() in ("true", "1"),
                )
            )
        return operation

    # ------------------------------------------------------------------
    # Schemas
    # ------------------------------------------------------------------

    def _load_schema(
        self,
        el: etree._Element,
        location: str,
        base_location: str,
        inherited_namespace: str | None,
    ) -> None:
        assert self._wsdl is not None
        namespace = el.get("targetNamespace") or inherited_namespace or ""
        key = (namespace, location)
        if key in self._seen_schemas:
            return
        self._seen_schemas.add(key)
        logger.debug("Loading schema '%s' (namespace '%s')", location, namespace)

        schema = Schema(namespace=namespace, location=location, wsdl=self._wsdl)
        self._wsdl.schemas.append(schema)

        for child in _xsd_children(el):
            tag = _local(child)
            if tag == "import":
                self._follow_schema_reference(child, base_location, child.get("namespace") or "", False)
            elif tag in ("include", "redefine"):
                self._follow_schema_reference(child, base_location, namespace, True)
                if tag == "redefine":
                    self._load_top_level(child, schema)
            else:
                self._load_top_level_child(child, schema)

    def _follow_schema_reference(
        self,
        el: etree._Element,
        base_location: str,
        namespace: str,
        inherit: bool,
    ) -> None:
        ref = el.get("schemaLocation")
        if not ref:
            return
        target = resolve_location(base_location, ref)
        if (namespace, target) in self._seen_schemas:
            return
        self._load_document(target, namespace if inherit else None)

    def _load_top_level(self, el: etree._Element, schema: Schema) -> None:
        for child in _xsd_children(el):
            self._load_top_level_child(child, schema)

    def _load_top_level_child(self, child: etree._Element, schema: Schema) -> None:
        assert self._wsdl is not None
        tag = _local(child)
        namespace = schema.namespace
        name = child.get("name", "")
        if tag == "complexType":
            schema.types.extend(self._complex_type(child, namespace, name, "complexType"))
        elif tag == "simpleType":
            schema.types.extend(self._simple_type(child, namespace, name, "simpleType"))
        elif tag == "element":
            schema.types.extend(self._top_level_element(child, namespace))
        elif tag in ("group", "attributeGroup"):
            holder = RawType(name=name, namespace=namespace, category=tag)
            nested: list[RawType] = []
            self._content(child, holder, nested)
            self._wsdl.groups.setdefault((tag, QName(namespace, name)), holder.fields)
            schema.types.extend(nested)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _top_level_element(self, el: etree._Element, namespace: str) -> list[RawType]:
        name = el.get("name", "")
        type_ref = _qname(el, el.get("type"), namespace)
        if type_ref is not None:
            return [
                RawType(
                    name=name,
                    namespace=namespace,
                    category="element",
                    element_type=type_ref,
                    documentation=_documentation(el),
                )
            ]
        complex_el = el.find(_xsd("complexType"))
        if complex_el is not None:
            declared = self._complex_type(complex_el, namespace, name, "element")
            declared[0].is_abstract = declared[0].is_abstract or el.get("abstract") == "true"
            declared[0].documentation = declared[0].documentation or _documentation(el)
            return declared
        simple_el = el.find(_xsd("simpleType"))
        if simple_el is not None:
            return self._simple_type(simple_el, namespace, name, "element")
        return [RawType(name=name, namespace=namespace, category="element", documentation=_documentation(el))]

    def _complex_type(
        self,
        el: etree._Element,
        namespace: str,
        name: str,
        category: str,
        *,
        owner: str | None = None,
    ) -> list[RawType]:
        """Return the declaration for *el* followed by its anonymous nested types.

        An *owner* path marks the declaration as anonymous.
        """
        raw = RawType(
            name=name,
            namespace=namespace,
            category=category,
            is_abstract=el.get("abstract") == "true",
            is_anonymous=owner is not None,
            owner=owner or "",
            documentation=_documentation(el),
        )
        nested: list[RawType] = []
        self._content(el, raw, nested)
        return [raw, *nested]

    def _simple_type(
        self,
        el: etree._Element,
        namespace: str,
        name: str,
        category: str,
        *,
        owner: str | None = None,
    ) -> list[RawType]:
        raw = RawType(
            name=name,
            namespace=namespace,
            category=category,
            is_anonymous=owner is not None,
            owner=owner or "",
            documentation=_documentation(el),
        )
        restriction = el.find(_xsd("restriction"))
        if restriction is not None:
            raw.derivation = "restriction"
            raw.base = _qname(restriction, restriction.get("base"), namespace)
            raw.enumerations = [
                e.get("value", "") for e in restriction.findall(_xsd("enumeration"))
            ]
        if raw.base is None:
            # Lists, unions, and restrictions of anonymous types travel as strings.
            raw.base = QName(XSD_NAMESPACE, "string")
        if category == "element" and not raw.enumerations:
            raw.element_type = raw.base
        return [raw]

    def _content(self, el: etree._Element, raw: RawType, nested: list[RawType]) -> None:
        """Collect fields and derivation details from the children of *el*."""
        for child in _xsd_children(el):
            tag = _local(child)
            if tag in ("sequence", "all", "choice"):
                self._model_group(child, raw, nested, optional=False, repeated=False)
            elif tag in ("group", "attributeGroup"):
                raw.fields.append(self._group_reference(child, raw.namespace, tag))
            elif tag == "attribute":
                self._attribute(child, raw, nested)
            elif tag in ("complexContent", "simpleContent"):
                raw.simple_content = tag == "simpleContent"
                for derivation in _xsd_children(child):
                    if _local(derivation) not in ("extension", "restriction"):
                        continue
                    raw.derivation = _local(derivation)
                    raw.base = _qname(derivation, derivation.get("base"), raw.namespace)
                    self._content(derivation, raw, nested)
            elif tag == "enumeration":
                raw.enumerations.append(child.get("value", ""))

    def _model_group(
        self,
        el: etree._Element,
        raw: RawType,
        nested: list[RawType],
        *,
        optional: bool,
        repeated: bool,
    ) -> None:
        optional = optional or _local(el) == "choice" or _occurs(el.get("minOccurs"), 1) == 0
        repeated = repeated or _occurs(el.get("maxOccurs"), 1) != 1
        for child in _xsd_children(el):
            tag = _local(child)
            if tag == "element":
                raw_field = self._element_field(child, raw, nested)
            elif tag in ("sequence", "all", "choice"):
                self._model_group(child, raw, nested, optional=optional, repeated=repeated)
                continue
            elif tag == "group":
                raw_field = self._group_reference(child, raw.namespace, tag)
            else:
                continue
            if optional:
                raw_field.min_occurs = 0
            if repeated:
                raw_field.max_occurs = None
            raw.fields.append(raw_field)

    def _element_field(self, el: etree._Element, owner: RawType, nested: list[RawType]) -> RawField:
        namespace = owner.namespace
        ref = _qname(el, el.get("ref"), namespace)
        if ref is not None:
            raw_field = RawField(name=ref.name, type=ref, space="element")
        else:
            name = el.get("name", "")
            type_ref = _qname(el, el.get("type"), namespace)
            complex_el = el.find(_xsd("complexType"))
            simple_el = el.find(_xsd("simpleType"))
            if type_ref is not None:
                raw_field = RawField(name=name, type=type_ref)
            elif complex_el is not None:
                inner = self._complex_type(complex_el, namespace, name, "element", owner=owner.path)
                nested.extend(inner)
                raw_field = RawField(name=name, inline_type=inner[0])
            elif simple_el is not None:
                inner = self._simple_type(simple_el, namespace, name, "simpleType", owner=owner.path)
                nested.extend(inner)
                raw_field = RawField(name=name, inline_type=inner[0])
            else:
                raw_field = RawField(name=name, type=QName(XSD_NAMESPACE, "anyType"))
        raw_field.min_occurs = _occurs(el.get("minOccurs"), 1) or 0
        raw_field.max_occurs = _occurs(el.get("maxOccurs"), 1)
        raw_field.nillable = el.get("nillable") == "true"
        raw_field.default = el.get("default")
        raw_field.documentation = _documentation(el)
        return raw_field

    def _attribute(self, el: etree._Element, raw: RawType, nested: list[RawType]) -> None:
        array_type = el.get(_wsdl("arrayType"))
        if array_type:
            raw.array_item = _qname(el, array_type.split("[", 1)[0], raw.namespace)
            return
        ref = _qname(el, el.get("ref"), raw.namespace)
        if ref is not None:
            if ref.name == "arrayType":
                return
            raw_field = RawField(name=ref.name, type=QName(XSD_NAMESPACE, "string"))
        else:
            name = el.get("name", "")
            type_ref = _qname(el, el.get("type"), raw.namespace)
            simple_el = el.find(_xsd("simpleType"))
            if type_ref is not None:
                raw_field = RawField(name=name, type=type_ref)
            elif simple_el is not None:
                inner = self._simple_type(simple_el, raw.namespace, name, "simpleType", owner=raw.path)
                nested.extend(inner)
                raw_field = RawField(name=name, inline_type=inner[0])
            else:
                raw_field = RawField(name=name, type=QName(XSD_NAMESPACE, "anySimpleType"))
        raw_field.is_attribute = True
        raw_field.min_occurs = 1 if el.get("use") == "required" else 0
        raw_field.default = el.get("default")
        raw_field.documentation = _documentation(el)
        raw.fields.append(raw_field)

    def _group_reference(self, el: etree._Element, namespace: str, kind: str) -> RawField:
        ref = _qname(el, el.get("ref"), namespace) or QName(namespace, el.get("name", ""))
        return RawField(
            name=ref.name,
            group_ref=ref,
            group_kind=kind,
            min_occurs=_occurs(el.get("minOccurs"), 1) or 0,
            max_occurs=_occurs(el.get("maxOccurs"), 1),
        )

    # ------------------------------------------------------------------
    # Group expansion
    # ------------------------------------------------------------------

    def _expand_groups(self) -> None:
        """Replace group references with the fields of the referenced group."""
        assert self._wsdl is not None
        for raw in self._wsdl.iter_types():
            if any(f.group_ref is not None for f in raw.fields):
                raw.fields = self._expand(raw.fields, ())

    def _expand(self, fields: list[RawField], stack: tuple[tuple[str, QName], ...]) -> list[RawField]:
        assert self._wsdl is not None
        expanded: list[RawField] = []
        for raw_field in fields:
            if raw_field.group_ref is None or raw_field.group_kind is None:
                expanded.append(raw_field)
                continue
            key = (raw_field.group_kind, raw_field.group_ref)
            if key in stack:
                logger.warning("Ignoring circular %s reference '%s'", raw_field.group_kind, raw_field.group_ref.name)
                continue
            members = self._wsdl.groups.get(key)
            if members is None:
                logger.warning("Referenced %s '%s' is not declared", raw_field.group_kind, raw_field.group_ref.name)
                continue
            for member in self._expand(members, (*stack, key)):
                copy = dataclasses.replace(member)
                if raw_field.min_occurs == 0:
                    copy.min_occurs = 0
                if raw_field.max_occurs != 1:
                    copy.max_occurs = None
                expanded.append(copy)
        return expanded
