# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for service assembly and gather strategies."""

from pathlib import Path

import pytest

from wsdlgen.compiler.assembler import (
    GatherStrategy,
    PortTypeGather,
    SingleServiceGather,
    TokenGather,
    assemble_services,
    gather_strategy_for,
)
from wsdlgen.compiler.fetch import ContentFetcher
from wsdlgen.compiler.ingest import QName, RawMessage, RawOperation, RawPart, Wsdl, ingest
from wsdlgen.compiler.resolver import resolve_types
from wsdlgen.config.options import GeneratorOptions
from wsdlgen.model.containers import ServiceContainer, StructContainer
from wsdlgen.model.types import ScalarType, ScalarTypeRef, StructTypeRef

# ###############
# Helpers
# ###############

_SHOP = Path(__file__).parent.parent / "data" / "shop" / "shop.wsdl"


def _assemble(gather_methods: str = "start") -> tuple[ServiceContainer, StructContainer]:
    options = GeneratorOptions(gather_methods=gather_methods)
    wsdl = ingest(str(_SHOP), ContentFetcher(options))
    structs = StructContainer()
    resolver = resolve_types(wsdl, structs)
    services = ServiceContainer()
    assemble_services(wsdl, structs, services, options, resolver=resolver)
    return services, structs


# ###############
# Gather strategies
# ###############


class TestGatherStrategies:
    @pytest.mark.parametrize(
        ("operation", "expected"),
        [
            ("CustomerGetList", "Customer"),
            ("CustomerGetDetail", "Customer"),
            ("OrderCreate", "Order"),
            ("deleteList", "Delete"),
            ("get_Items2", "Get"),
            ("123", "Service"),
            ("", "Service"),
        ],
    )
    def test_start_token(self, operation: str, expected: str) -> None:
        assert TokenGather(0).compute_group_name(operation, "PortType") == expected

    def test_end_token(self) -> None:
        strategy = TokenGather(-1)
        assert strategy.compute_group_name("CustomerGetList", "PortType") == "List"
        assert strategy.compute_group_name("orderCreate", "PortType") == "Create"

    def test_separator(self) -> None:
        strategy = TokenGather(0, ".")
        assert strategy.compute_group_name("customer.getList", "PortType") == "Customer"
        assert TokenGather(-1, ".").compute_group_name("customer.getList", "PortType") == "GetList"
        assert strategy.compute_group_name("...", "PortType") == "Service"

    def test_port_type_and_single_service(self) -> None:
        assert PortTypeGather().compute_group_name("CustomerGetList", "ShopPortType") == "ShopPortType"
        assert PortTypeGather().compute_group_name("CustomerGetList", "") == "Service"
        assert SingleServiceGather().compute_group_name("CustomerGetList", "ShopPortType") == "Service"

    @pytest.mark.parametrize(
        ("mode", "strategy_type"),
        [("none", PortTypeGather), ("all", SingleServiceGather), ("start", TokenGather), ("end", TokenGather)],
    )
    def test_strategy_selection(self, mode: str, strategy_type: type) -> None:
        assert isinstance(gather_strategy_for(GeneratorOptions(gather_methods=mode)), strategy_type)
        assert isinstance(gather_strategy_for(GeneratorOptions(gather_methods=mode)), GatherStrategy)

    def test_strategy_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            GatherStrategy()  # type: ignore[abstract]

        class Incomplete(GatherStrategy):
            pass

        with pytest.raises(TypeError):
            Incomplete()  # type: ignore[abstract]


# ###############
# Assembly
# ###############


class TestAssembly:
    def test_gather_clustering(self) -> None:
        services, _ = _assemble("start")
        assert [s.name for s in services] == ["Customer", "Order"]
        customer = services.get_service_by_name("Customer")
        assert customer is not None
        assert [m.name for m in customer.methods] == ["CustomerGetList", "CustomerGetDetail"]

    def test_gather_end(self) -> None:
        services, _ = _assemble("end")
        assert [s.name for s in services] == ["List", "Detail", "Create"]

    def test_gather_all(self) -> None:
        services, _ = _assemble("all")
        assert [s.name for s in services] == ["Service"]
        assert len(services.methods()) == 3

    def test_gather_none_keeps_port_types(self) -> None:
        services, _ = _assemble("none")
        assert [s.name for s in services] == ["ShopPortType"]
        assert [m.port_type for m in services.methods()] == ["ShopPortType"] * 3

    def test_method_signature(self) -> None:
        services, structs = _assemble()
        method = services.methods()[0]
        assert method.name == "CustomerGetList"
        assert method.namespace == "urn:shop"
        assert method.soap_action == "urn:shop#CustomerGetList"
        assert method.documentation == "Lists customers matching a filter."
        assert [p.name for p in method.parameters] == ["parameters"]
        assert method.input_type == StructTypeRef(name="CustomerGetListRequest", namespace="urn:shop")
        assert method.output_type == StructTypeRef(name="CustomerGetListResponse", namespace="urn:shop")

    def test_element_alias_output(self) -> None:
        services, _ = _assemble()
        customer = services.get_service_by_name("Customer")
        assert customer is not None
        detail = customer.get_method("CustomerGetDetail")
        assert detail is not None
        assert detail.output_type == StructTypeRef(name="Customer", namespace="urn:shop")

    def test_header_fidelity(self) -> None:
        services, _ = _assemble()
        method = services.methods()[0]
        assert [(h.name, h.required, h.namespace) for h in method.headers] == [
            ("auth", True, "urn:shop"),
            ("trace", False, "urn:trace"),
        ]
        assert method.headers[0].type == StructTypeRef(name="AuthHeader", namespace="urn:shop")

    def test_headers_only_on_declaring_operations(self) -> None:
        services, _ = _assemble()
        by_name = {m.name: m for m in services.methods()}
        assert by_name["CustomerGetDetail"].headers == []
        assert [h.name for h in by_name["OrderCreate"].headers] == ["auth"]

    def test_no_dangling_method_types(self) -> None:
        services, structs = _assemble()
        for method in services.methods():
            refs = [p.type for p in method.parameters] + [h.type for h in method.headers]
            if method.output_type is not None:
                refs.append(method.output_type)
            for ref in refs:
                if isinstance(ref, StructTypeRef):
                    assert structs.resolve(ref) is not None

    def test_missing_part_declarations_become_virtual(self) -> None:
        wsdl = Wsdl(location="memory.wsdl", target_namespace="urn:t")
        wsdl.messages[QName("urn:t", "In")] = RawMessage(
            name="In",
            namespace="urn:t",
            parts=[
                RawPart(name="body", element=QName("urn:t", "Missing")),
                RawPart(name="count", type=QName("http://www.w3.org/2001/XMLSchema", "int")),
            ],
        )
        wsdl.operations.append(
            RawOperation(name="doThing", port_type="PT", namespace="urn:t", input_message=QName("urn:t", "In"))
        )
        structs = StructContainer()
        services = ServiceContainer()

        assemble_services(wsdl, structs, services, GeneratorOptions())

        method = services.methods()[0]
        assert services.get_service_by_name("Do") is not None
        assert method.output_type is None
        body, count = method.parameters
        assert isinstance(body.type, StructTypeRef)
        virtual = structs.resolve(body.type)
        assert virtual is not None and virtual.is_virtual
        assert count.type == ScalarTypeRef(scalar=ScalarType.INT, xsd_name="int")

    def test_assembly_is_deterministic(self) -> None:
        first, _ = _assemble()
        second, _ = _assemble()
        assert [s.model_dump() for s in first] == [s.model_dump() for s in second]
