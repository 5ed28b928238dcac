# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""The generator pipeline: options to sealed, named model registries.

:meth:`Generator.parse` runs the phases strictly in sequence:

1. Option sanity checks (before any network or file I/O).
2. Ingestion of the WSDL and every schema it references.
3. Type resolution into the Struct registry.
4. Service assembly with the configured gather strategy.
5. Sealing of both registries.
6. Naming normalization.

Any fatal error propagates unchanged to the caller; the registries of a
failed run are discarded.
"""

from __future__ import annotations

import logging

import requests

from wsdlgen.compiler.assembler import assemble_services, gather_strategy_for
from wsdlgen.compiler.fetch import ContentFetcher
from wsdlgen.compiler.ingest import Wsdl, ingest
from wsdlgen.compiler.naming import class_name_for, normalize_names, normalize_service_members
from wsdlgen.compiler.resolver import resolve_types
from wsdlgen.config.options import GATHER_NONE, GeneratorOptions, check_options
from wsdlgen.model.containers import ServiceContainer, StructContainer
from wsdlgen.model.entities import DEFAULT_SERVICE_NAME, Method, Service, Struct
from wsdlgen.model.types import StructKind

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class Generator:
    """Owns the options and the model registries of one generation run.

    Args:
        options: The immutable option set for this run.
        session: Optional HTTP session used to fetch remote documents.
    """

    def __init__(self, options: GeneratorOptions, *, session: requests.Session | None = None) -> None:
        self.options = options
        self.structs = StructContainer()
        self.services = ServiceContainer()
        self.wsdl: Wsdl | None = None
        self._session = session

    @classmethod
    def from_snapshot(cls, text: str) -> Generator:
        """Rebuild a generator from a serialized snapshot.

        Raises:
            SnapshotError: If *text* is not a valid snapshot.
        """
        from wsdlgen.compiler.artifact import deserialize

        return deserialize(text)

    def parse(self) -> Generator:
        """Run the full pipeline and return ``self`` with sealed registries.

        Raises:
            ConfigurationError: If the options fail the sanity checks.
            RetrievalError: If a document cannot be fetched.
            IngestError: If a document cannot be parsed.
        """
        check_options(self.options)
        fetcher = ContentFetcher(self.options, session=self._session)

        wsdl = ingest(self.options.origin, fetcher)
        wsdl.generator = self
        structs = StructContainer()
        services = ServiceContainer()

        resolver = resolve_types(wsdl, structs)
        assemble_services(wsdl, structs, services, self.options, resolver=resolver)
        structs.seal()
        services.seal()
        normalize_names(structs, services, self.options)
        fetcher.clear()

        self.wsdl = wsdl
        self.structs = structs
        self.services = services
        logger.info(
            "Generated model with %d struct(s) and %d service(s) from '%s'",
            len(structs),
            len(services),
            self.options.origin,
        )
        return self

    # ------------------------------------------------------------------
    # Struct lookups
    # ------------------------------------------------------------------

    def get_struct_by_name(self, name: str) -> Struct | None:
        """Return the first declared Struct named *name*, falling back to a virtual one."""
        return self.structs.get_struct_by_name(name)

    def get_struct_by_name_and_kind(self, name: str, kind: StructKind) -> Struct | None:
        """Return the declared Struct named *name* with the given *kind*."""
        return self.structs.get_struct_by_name_and_kind(name, kind)

    # ------------------------------------------------------------------
    # Service lookups
    # ------------------------------------------------------------------

    def get_services(self, using_gather_methods: bool = False) -> ServiceContainer:
        """Return the Service registry.

        With *using_gather_methods* and the ``none`` gather mode, every
        Method is presented in a single merged ``Service`` instead of the
        per-portType Services. The merged view holds copies of the Methods,
        renamed so that they do not collide within the one Service.
        """
        if not using_gather_methods or self.options.gather_methods != GATHER_NONE:
            return self.services
        merged = Service(name=DEFAULT_SERVICE_NAME, clean_name=class_name_for(DEFAULT_SERVICE_NAME, self.options))
        for method in self.services.methods():
            merged.add_method(method.model_copy(deep=True))
        normalize_service_members(merged, self.options)
        container = ServiceContainer()
        container.add(merged)
        container.seal()
        return container

    def get_service(self, name: str) -> Service | None:
        """Return the Service named *name*, or None."""
        return self.services.get_service_by_name(name)

    def get_service_name(self, method_name: str) -> str:
        """Return the name of the Service holding the operation *method_name*.

        Unknown operations get the name the gather strategy would give them.
        """
        for service in self.services:
            if service.get_method(method_name) is not None:
                return service.name
        name = gather_strategy_for(self.options).compute_group_name(method_name, "")
        return name or DEFAULT_SERVICE_NAME

    def get_service_method(self, method_name: str) -> Method | None:
        """Return the Method for the operation *method_name*, or None."""
        service = self.get_service(self.get_service_name(method_name))
        if service is None:
            return None
        return service.get_method(method_name)
