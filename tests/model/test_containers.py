# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Struct and Service registries."""

import pytest

from wsdlgen.model.containers import RegistryError, ServiceContainer, StructContainer
from wsdlgen.model.entities import Method, Service, Struct, StructAttribute
from wsdlgen.model.types import ScalarType, ScalarTypeRef, StructKind, StructTypeRef

# ###############
# Helpers
# ###############


def _attr(name: str) -> StructAttribute:
    return StructAttribute(name=name, type=ScalarTypeRef(scalar=ScalarType.STRING))


# ###############
# StructContainer
# ###############


class TestStructInsertion:
    def test_enumerates_in_insertion_order(self) -> None:
        structs = StructContainer()
        for name in ("B", "A", "C"):
            structs.add(Struct(name=name))
        assert [s.name for s in structs] == ["B", "A", "C"]

    def test_re_adding_same_key_returns_existing(self) -> None:
        structs = StructContainer()
        first = structs.add(Struct(name="Customer", namespace="urn:a"))
        second = structs.add(Struct(name="Customer", namespace="urn:a", documentation="later"))
        assert second is first
        assert len(structs) == 1
        assert first.documentation is None

    def test_same_name_different_namespace_is_distinct(self) -> None:
        structs = StructContainer()
        structs.add(Struct(name="Address", namespace="urn:a"))
        structs.add(Struct(name="Address", namespace="urn:b"))
        assert len(structs) == 2

    def test_same_name_different_kind_is_distinct(self) -> None:
        structs = StructContainer()
        structs.add(Struct(name="Status", namespace="urn:a"))
        structs.add(Struct(name="Status", namespace="urn:a", kind=StructKind.ENUM))
        assert len(structs) == 2
        assert structs.get("Status", "urn:a", StructKind.ENUM) is not None

    def test_add_virtual_is_idempotent(self) -> None:
        structs = StructContainer()
        first = structs.add_virtual("Missing", "urn:a")
        second = structs.add_virtual("Missing", "urn:a")
        assert first is second
        assert first.is_virtual
        assert len(structs) == 1

    def test_real_struct_upgrades_virtual_placeholder(self) -> None:
        structs = StructContainer()
        structs.add(Struct(name="First"))
        structs.add_virtual("Late", "urn:a")
        structs.add(Struct(name="Last"))
        real = structs.add(Struct(name="Late", namespace="urn:a"))
        assert [s.name for s in structs] == ["First", "Late", "Last"]
        assert structs.get_virtual("Late", "urn:a") is None
        assert real in structs
        assert not real.is_virtual

    def test_virtual_added_after_real_coexists(self) -> None:
        structs = StructContainer()
        real = structs.add(Struct(name="Node", namespace="urn:a"))
        virtual = structs.add_virtual("Node", "urn:a")
        assert virtual is not real
        assert len(structs) == 2
        assert structs.real() == [real]
        assert structs.virtual() == [virtual]

    def test_scoped_structs_with_same_name_are_distinct(self) -> None:
        structs = StructContainer()
        named = structs.add(Struct(name="Result", namespace="urn:a"))
        first = structs.add(Struct(name="Result", namespace="urn:a", scope="GetCustomerResponse"))
        second = structs.add(Struct(name="Result", namespace="urn:a", scope="GetOrderResponse"))
        assert len({id(named), id(first), id(second)}) == 3
        assert structs.get("Result", "urn:a", StructKind.STRUCT, "GetOrderResponse") is second
        assert structs.resolve(first.ref()) is first
        assert structs.resolve(StructTypeRef(name="Result", namespace="urn:a")) is named

    def test_scoped_struct_does_not_replace_placeholder(self) -> None:
        structs = StructContainer()
        placeholder = structs.add_virtual("Result", "urn:a")
        scoped = structs.add(Struct(name="Result", namespace="urn:a", scope="Owner"))
        assert structs.get_virtual("Result", "urn:a") is placeholder
        assert structs.virtual() == [placeholder]
        assert structs.real() == [scoped]
        assert structs.resolve(StructTypeRef(name="Result", namespace="urn:a")) is placeholder

    def test_sealed_container_rejects_insertion(self) -> None:
        structs = StructContainer()
        structs.seal()
        assert structs.sealed
        with pytest.raises(RegistryError):
            structs.add(Struct(name="Late"))
        with pytest.raises(RegistryError):
            structs.add_virtual("Late")


class TestStructLookup:
    def test_get_struct_by_name_prefers_real(self) -> None:
        structs = StructContainer()
        virtual = structs.add_virtual("Node", "urn:a")
        assert structs.get_struct_by_name("Node") is virtual
        real = structs.add(Struct(name="Node", namespace="urn:b"))
        assert structs.get_struct_by_name("Node") is real

    def test_get_struct_by_name_and_kind(self) -> None:
        structs = StructContainer()
        struct = structs.add(Struct(name="Status", kind=StructKind.ENUM))
        assert structs.get_struct_by_name_and_kind("Status", StructKind.ENUM) is struct
        assert structs.get_struct_by_name_and_kind("Status", StructKind.STRUCT) is None

    def test_resolve_exact_key(self) -> None:
        structs = StructContainer()
        struct = structs.add(Struct(name="Color", namespace="urn:a", kind=StructKind.ENUM))
        assert structs.resolve(struct.ref()) is struct

    def test_resolve_falls_back_to_any_kind(self) -> None:
        structs = StructContainer()
        struct = structs.add(Struct(name="Color", namespace="urn:a", kind=StructKind.ENUM))
        assert structs.resolve(StructTypeRef(name="Color", namespace="urn:a")) is struct

    def test_resolve_virtual_ref_returns_placeholder(self) -> None:
        structs = StructContainer()
        real = structs.add(Struct(name="Node", namespace="urn:a"))
        virtual = structs.add_virtual("Node", "urn:a")
        assert structs.resolve(real.ref()) is real
        assert structs.resolve(real.ref(virtual=True)) is virtual

    def test_resolve_unknown_returns_none(self) -> None:
        assert StructContainer().resolve(StructTypeRef(name="Nope")) is None


class TestFlattenAttributes:
    def test_ancestors_first(self) -> None:
        structs = StructContainer()
        base = structs.add(Struct(name="Base", attributes=[_attr("id")]))
        child = structs.add(Struct(name="Child", attributes=[_attr("name")], parent=base.ref()))
        assert [a.name for a in structs.flatten_attributes(child)] == ["id", "name"]
        # Inherited attributes are never copied into the child.
        assert [a.name for a in child.attributes] == ["name"]

    def test_stops_at_virtual_ancestor(self) -> None:
        structs = StructContainer()
        a = structs.add(Struct(name="A", attributes=[_attr("a")]))
        b = structs.add(Struct(name="B", attributes=[_attr("b")], parent=a.ref()))
        structs.add_virtual("B")
        a.parent = b.ref(virtual=True)
        assert [x.name for x in structs.flatten_attributes(b)] == ["a", "b"]
        assert [x.name for x in structs.flatten_attributes(a)] == ["a"]

    def test_terminates_on_unbroken_cycle(self) -> None:
        structs = StructContainer()
        a = structs.add(Struct(name="A", attributes=[_attr("a")]))
        b = structs.add(Struct(name="B", attributes=[_attr("b")], parent=a.ref()))
        a.parent = b.ref()
        assert [x.name for x in structs.flatten_attributes(a)] == ["b", "a"]


# ###############
# ServiceContainer
# ###############


class TestServiceContainer:
    def test_get_or_create_is_lazy_and_idempotent(self) -> None:
        services = ServiceContainer()
        customer = services.get_or_create("Customer")
        assert services.get_or_create("Customer") is customer
        services.get_or_create("Order")
        assert [s.name for s in services] == ["Customer", "Order"]

    def test_add_existing_name_returns_existing(self) -> None:
        services = ServiceContainer()
        first = services.add(Service(name="Customer"))
        assert services.add(Service(name="Customer")) is first
        assert len(services) == 1

    def test_methods_in_registry_order(self) -> None:
        services = ServiceContainer()
        services.get_or_create("B").add_method(Method(name="b1"))
        services.get_or_create("A").add_method(Method(name="a1"))
        services.get_or_create("B").add_method(Method(name="b2"))
        assert [m.name for m in services.methods()] == ["b1", "b2", "a1"]

    def test_get_service_by_name(self) -> None:
        services = ServiceContainer()
        service = services.get_or_create("Customer")
        assert services.get_service_by_name("Customer") is service
        assert services.get_service_by_name("Order") is None

    def test_sealed_container_rejects_insertion(self) -> None:
        services = ServiceContainer()
        services.get_or_create("Customer")
        services.seal()
        assert services.get_or_create("Customer").name == "Customer"
        with pytest.raises(RegistryError):
            services.get_or_create("Order")
