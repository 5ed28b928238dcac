# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator pipeline for WSDL documents: ingestion, resolution, assembly, and naming."""

from wsdlgen.compiler.artifact import (
    DEFAULT_SNAPSHOT_NAME,
    SNAPSHOT_SUFFIX,
    SnapshotError,
    deserialize,
    read_snapshot,
    serialize,
    write_snapshot,
)
from wsdlgen.compiler.assembler import GatherStrategy, assemble_services, gather_strategy_for
from wsdlgen.compiler.build import Generator
from wsdlgen.compiler.fetch import ContentFetcher, RetrievalError
from wsdlgen.compiler.ingest import IngestError, Wsdl, ingest
from wsdlgen.compiler.naming import normalize_names, normalize_service_members
from wsdlgen.compiler.resolver import TypeResolver, resolve_types

__all__ = [
    "ingest",
    "IngestError",
    "Wsdl",
    "ContentFetcher",
    "RetrievalError",
    "resolve_types",
    "TypeResolver",
    "assemble_services",
    "gather_strategy_for",
    "GatherStrategy",
    "normalize_names",
    "normalize_service_members",
    "Generator",
    "serialize",
    "deserialize",
    "write_snapshot",
    "read_snapshot",
    "SnapshotError",
    "SNAPSHOT_SUFFIX",
    "DEFAULT_SNAPSHOT_NAME",
]
