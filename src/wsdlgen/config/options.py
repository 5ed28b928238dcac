# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator options and their YAML loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# ###############
# Public Interface
# ###############

GATHER_NONE = "none"
GATHER_ALL = "all"
GATHER_START = "start"
GATHER_END = "end"

GATHER_MODES: tuple[str, ...] = (GATHER_NONE, GATHER_ALL, GATHER_START, GATHER_END)


class ConfigurationError(Exception):
    """Raised when generator options are missing, empty, or invalid."""


class NamingOptions(BaseModel):
    """Casing rules applied by the naming normalizer."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    class_case: Literal["pascal", "preserve"] = Field(alias="class-case", default="pascal")
    member_case: Literal["snake", "camel", "preserve"] = Field(alias="member-case", default="snake")


class GeneratorOptions(BaseModel):
    """Immutable option set threaded through every pipeline phase.

    Options are keyed by kebab-case names in YAML files and snapshots;
    attribute access uses the snake_case field names.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    origin: str = ""
    destination: str = ""
    category: str = "cat"
    gather_methods: str = Field(alias="gather-methods", default=GATHER_START)
    gather_separator: str | None = Field(alias="gather-separator", default=None)
    naming: NamingOptions = Field(default_factory=NamingOptions)
    generic_constants_names: bool = Field(alias="generic-constants-names", default=False)
    namespace_prefix: str = Field(alias="namespace-prefix", default="")
    prefix: str = ""
    suffix: str = ""
    struct_class: str = Field(alias="struct-class", default="StructBase")
    struct_array_class: str = Field(alias="struct-array-class", default="StructArrayBase")
    struct_enum_class: str = Field(alias="struct-enum-class", default="StructEnumBase")
    soap_client_class: str = Field(alias="soap-client-class", default="SoapClientBase")
    header_client_class: str = Field(alias="header-client-class", default="SoapHeaderClientBase")
    validation: bool = True
    add_comments: dict[str, str] = Field(alias="add-comments", default_factory=dict)
    standalone: bool = False
    package_name: str = Field(alias="package-name", default="")
    basic_login: str | None = Field(alias="basic-login", default=None)
    basic_password: str | None = Field(alias="basic-password", default=None)
    proxy_host: str | None = Field(alias="proxy-host", default=None)
    proxy_port: int | None = Field(alias="proxy-port", default=None)
    proxy_login: str | None = Field(alias="proxy-login", default=None)
    proxy_password: str | None = Field(alias="proxy-password", default=None)
    schemas_save: bool = Field(alias="schemas-save", default=False)
    schemas_folder: str = Field(alias="schemas-folder", default="wsdl")

    @field_validator("gather_methods")
    @classmethod
    def _check_gather_methods(cls, value: str) -> str:
        if value not in GATHER_MODES:
            raise ValueError(f"must be one of {', '.join(GATHER_MODES)}, got {value!r}")
        return value

    def with_overrides(self, **overrides: Any) -> GeneratorOptions:
        """Return a copy with the given fields replaced and re-validated.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return options_from_mapping(data)

    def to_mapping(self) -> dict[str, Any]:
        """Return the options as a plain mapping keyed by kebab-case names."""
        return self.model_dump(by_alias=True, mode="json")


def options_from_mapping(data: dict[str, Any], source_label: str = "<options>") -> GeneratorOptions:
    """Validate a plain mapping into GeneratorOptions.

    Raises:
        ConfigurationError: If the mapping does not conform to the option schema.
    """
    try:
        return GeneratorOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid options in {source_label}: {exc}") from exc


def load_options(path: Path) -> GeneratorOptions:
    """Load generator options from a YAML file.

    An empty file yields the default options.

    Args:
        path: Path to the YAML options file.

    Returns:
        A validated, frozen GeneratorOptions instance.

    Raises:
        ConfigurationError: If the file cannot be read, contains invalid YAML,
            or does not conform to the option schema.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(f"Options file not found: {path}") from None
    except OSError as exc:
        raise ConfigurationError(f"Cannot read options file: {exc}") from exc

    return _parse_options(text, source_label=str(path))


def check_options(options: GeneratorOptions) -> None:
    """Verify the options required before any retrieval or output happens.

    Raises:
        ConfigurationError: If the origin or destination is empty, or if a
            standalone package has no package name.
    """
    if not options.origin.strip():
        raise ConfigurationError("The WSDL origin must be defined")
    if not options.destination.strip():
        raise ConfigurationError("The package destination must be defined")
    if options.standalone and not options.package_name.strip():
        raise ConfigurationError("The package name must be defined for a standalone package")


# ################
# Implementation
# ################


def _parse_options(text: str, source_label: str = "<string>") -> GeneratorOptions:
    """Parse options YAML text into GeneratorOptions."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source_label}: options must be a YAML mapping")

    return options_from_mapping(data, source_label)
