# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Append-only registries for Structs and Services.

Both containers enumerate in insertion order, which drives the emission
order of everything downstream. Insertion is idempotent on the registry key
so that a declaration reached through several import paths is stored once.
A container is sealed once the phase that fills it hands it over; any
further insertion is a programming error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from wsdlgen.model.entities import Method, Service, Struct, StructAttribute
from wsdlgen.model.types import StructKind, StructTypeRef

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class RegistryError(Exception):
    """Raised when a sealed registry is modified."""


class StructContainer:
    """Registry of Structs keyed by (namespace, name, kind).

    Virtual placeholders live in a separate index keyed by (namespace, name)
    so that a placeholder standing in for an existing real Struct (as on a
    cycle-breaking inheritance edge) never clashes with it.
    """

    def __init__(self) -> None:
        self._items: list[Struct] = []
        self._index: dict[tuple[str, str, StructKind, str], Struct] = {}
        self._by_qname: dict[tuple[str, str], list[Struct]] = {}
        self._virtuals: dict[tuple[str, str], Struct] = {}
        self._sealed = False

    def __iter__(self) -> Iterator[Struct]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, struct: object) -> bool:
        return any(item is struct for item in self._items)

    @property
    def sealed(self) -> bool:
        """Return True once the container no longer accepts insertions."""
        return self._sealed

    def seal(self) -> None:
        """Refuse any further insertion."""
        self._sealed = True

    def add(self, struct: Struct) -> Struct:
        """Insert *struct* and return the entry held by the registry.

        Re-adding a key that is already present returns the existing entry.
        A real Struct whose (namespace, name) has so far only been seen as a
        virtual placeholder takes over the placeholder's slot. Scoped Structs
        (anonymous and element-inline types) are reachable by their full key
        only and never replace a placeholder.

        Raises:
            RegistryError: If the container is sealed.
        """
        self._check_writable()
        qname = (struct.namespace, struct.name)
        if struct.is_virtual:
            existing = self._virtuals.get(qname)
            if existing is not None:
                return existing
            self._virtuals[qname] = struct
            self._items.append(struct)
            return struct

        existing = self._index.get(struct.key)
        if existing is not None:
            return existing
        self._index[struct.key] = struct
        if struct.scope:
            self._items.append(struct)
            return struct

        placeholder = self._virtuals.get(qname)
        if placeholder is not None and not self._by_qname.get(qname):
            logger.debug("Upgrading virtual struct '%s' to a real declaration", struct.name)
            del self._virtuals[qname]
            self._items[self._position(placeholder)] = struct
        else:
            self._items.append(struct)
        self._by_qname.setdefault(qname, []).append(struct)
        return struct

    def add_virtual(self, name: str, namespace: str = "") -> Struct:
        """Return the virtual placeholder for (namespace, name), creating it if needed."""
        return self.add(Struct(name=name, namespace=namespace, is_virtual=True))

    def get(self, name: str, namespace: str, kind: StructKind, scope: str = "") -> Struct | None:
        """Return the real Struct with the exact registry key, or None."""
        return self._index.get((namespace, name, kind, scope))

    def get_virtual(self, name: str, namespace: str | None = None) -> Struct | None:
        """Return the virtual placeholder named *name*, or None.

        When *namespace* is None, the first placeholder with that name in
        insertion order is returned.
        """
        if namespace is not None:
            return self._virtuals.get((namespace, name))
        for struct in self._items:
            if struct.is_virtual and struct.name == name:
                return struct
        return None

    def get_struct_by_name(self, name: str) -> Struct | None:
        """Return the first real Struct named *name*, falling back to a virtual one."""
        for struct in self._items:
            if not struct.is_virtual and struct.name == name:
                return struct
        return self.get_virtual(name)

    def get_struct_by_name_and_kind(self, name: str, kind: StructKind) -> Struct | None:
        """Return the first real Struct named *name* with the given *kind*."""
        for struct in self._items:
            if not struct.is_virtual and struct.name == name and struct.kind is kind:
                return struct
        return None

    def resolve(self, ref: StructTypeRef) -> Struct | None:
        """Return the Struct a type reference points at.

        Tries the exact key first, then any real Struct with the same
        (namespace, name), then the virtual placeholder. A scoped reference
        only matches its exact key.
        """
        qname = (ref.namespace, ref.name)
        if not ref.virtual:
            struct = self._index.get((ref.namespace, ref.name, ref.struct_kind, ref.scope))
            if struct is not None or ref.scope:
                return struct
            candidates = self._by_qname.get(qname)
            if candidates:
                return candidates[0]
        return self._virtuals.get(qname)

    def real(self) -> list[Struct]:
        """Return all non-virtual Structs in insertion order."""
        return [s for s in self._items if not s.is_virtual]

    def virtual(self) -> list[Struct]:
        """Return all virtual placeholders in insertion order."""
        return [s for s in self._items if s.is_virtual]

    def parent_of(self, struct: Struct) -> Struct | None:
        """Return the Struct *struct* extends, or None."""
        if struct.parent is None:
            return None
        return self.resolve(struct.parent)

    def flatten_attributes(self, struct: Struct) -> list[StructAttribute]:
        """Return inherited and own attributes, ancestors first.

        This is a read-time projection; inherited attributes are never copied
        into the child. The walk stops at a virtual ancestor and never visits
        a Struct twice.
        """
        chain: list[Struct] = []
        seen: set[int] = set()
        current: Struct | None = struct
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(current)
            if current.is_virtual:
                break
            current = self.parent_of(current)
        attributes: list[StructAttribute] = []
        for ancestor in reversed(chain):
            attributes.extend(ancestor.attributes)
        return attributes

    def _position(self, struct: Struct) -> int:
        for index, item in enumerate(self._items):
            if item is struct:
                return index
        raise ValueError(f"Struct '{struct.name}' is not registered")

    def _check_writable(self) -> None:
        if self._sealed:
            raise RegistryError("Struct registry is sealed; no further structs can be added")


class ServiceContainer:
    """Registry of Services keyed by service name."""

    def __init__(self) -> None:
        self._items: dict[str, Service] = {}
        self._sealed = False

    def __iter__(self) -> Iterator[Service]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def sealed(self) -> bool:
        """Return True once the container no longer accepts insertions."""
        return self._sealed

    def seal(self) -> None:
        """Refuse any further insertion."""
        self._sealed = True

    def add(self, service: Service) -> Service:
        """Insert *service*, returning the existing entry if the name is taken.

        Raises:
            RegistryError: If the container is sealed.
        """
        if self._sealed:
            raise RegistryError("Service registry is sealed; no further services can be added")
        return self._items.setdefault(service.name, service)

    def get_or_create(self, name: str) -> Service:
        """Return the Service named *name*, creating it on first encounter."""
        existing = self._items.get(name)
        if existing is not None:
            return existing
        return self.add(Service(name=name))

    def get_service_by_name(self, name: str) -> Service | None:
        """Return the Service named *name*, or None."""
        return self._items.get(name)

    def methods(self) -> list[Method]:
        """Return every Method of every Service, in registry order."""
        return [method for service in self._items.values() for method in service.methods]
