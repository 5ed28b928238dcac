# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for generator options and their YAML loader."""

import pytest

from wsdlgen.config import (
    GATHER_ALL,
    GATHER_NONE,
    GATHER_START,
    ConfigurationError,
    GeneratorOptions,
    check_options,
    load_options,
    options_from_mapping,
)

# ###############
# Public Interface
# ###############


def test_defaults():
    """Default options use the start gather mode and pascal/snake casing."""
    options = GeneratorOptions()
    assert options.gather_methods == GATHER_START
    assert options.naming.class_case == "pascal"
    assert options.naming.member_case == "snake"
    assert options.struct_class == "StructBase"
    assert options.schemas_folder == "wsdl"
    assert not options.standalone


def test_load_empty_file_yields_defaults(tmp_path):
    """An empty YAML file is treated as the default options."""
    path = tmp_path / "wsdlgen.yaml"
    path.write_text("", encoding="utf-8")

    assert load_options(path) == GeneratorOptions()


def test_load_kebab_case_keys(tmp_path):
    """Options files use kebab-case keys, including nested naming options."""
    path = tmp_path / "wsdlgen.yaml"
    path.write_text(
        "origin: http://example.com/shop?wsdl\n"
        "destination: out/\n"
        "gather-methods: none\n"
        "generic-constants-names: true\n"
        "prefix: Api\n"
        "naming:\n"
        "  class-case: preserve\n"
        "  member-case: camel\n"
        "basic-login: alice\n"
        "proxy-host: proxy.local\n"
        "proxy-port: 3128\n"
        "add-comments:\n"
        "  release: '1.2'\n",
        encoding="utf-8",
    )

    options = load_options(path)

    assert options.origin == "http://example.com/shop?wsdl"
    assert options.destination == "out/"
    assert options.gather_methods == GATHER_NONE
    assert options.generic_constants_names
    assert options.prefix == "Api"
    assert options.naming.class_case == "preserve"
    assert options.naming.member_case == "camel"
    assert options.basic_login == "alice"
    assert options.proxy_port == 3128
    assert options.add_comments == {"release": "1.2"}


def test_load_missing_file_raises(tmp_path):
    """A missing options file raises ConfigurationError."""
    with pytest.raises(ConfigurationError, match="not found"):
        load_options(tmp_path / "missing.yaml")


def test_load_invalid_yaml_raises(tmp_path):
    """Malformed YAML raises ConfigurationError."""
    path = tmp_path / "wsdlgen.yaml"
    path.write_text("origin: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_options(path)


def test_load_non_mapping_raises(tmp_path):
    """A YAML document that is not a mapping raises ConfigurationError."""
    path = tmp_path / "wsdlgen.yaml"
    path.write_text("- origin\n- destination\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="mapping"):
        load_options(path)


def test_unknown_key_raises():
    """Unknown option keys are rejected."""
    with pytest.raises(ConfigurationError):
        options_from_mapping({"no-such-option": True})


def test_invalid_gather_mode_raises():
    """Only the known gather modes are accepted."""
    with pytest.raises(ConfigurationError, match="gather"):
        options_from_mapping({"gather-methods": "sideways"})


def test_options_are_frozen():
    """Options cannot be mutated after construction."""
    options = GeneratorOptions()
    with pytest.raises(Exception):
        options.origin = "elsewhere"  # type: ignore[misc]


def test_with_overrides_skips_none():
    """with_overrides replaces given fields and ignores None values."""
    options = GeneratorOptions(origin="a.wsdl", destination="out")
    updated = options.with_overrides(origin=None, destination="elsewhere", gather_methods=GATHER_ALL)
    assert updated.origin == "a.wsdl"
    assert updated.destination == "elsewhere"
    assert updated.gather_methods == GATHER_ALL
    assert options.destination == "out"


def test_with_overrides_validates():
    """Invalid overrides raise ConfigurationError."""
    with pytest.raises(ConfigurationError):
        GeneratorOptions().with_overrides(gather_methods="sideways")


def test_to_mapping_round_trip():
    """to_mapping produces kebab-case keys that load back to equal options."""
    options = GeneratorOptions(origin="a.wsdl", destination="out", prefix="Api")
    mapping = options.to_mapping()
    assert mapping["gather-methods"] == GATHER_START
    assert mapping["naming"]["class-case"] == "pascal"
    assert options_from_mapping(mapping) == options


class TestCheckOptions:
    def test_valid_options_pass(self):
        check_options(GeneratorOptions(origin="a.wsdl", destination="out"))

    def test_empty_origin_raises(self):
        with pytest.raises(ConfigurationError, match="origin"):
            check_options(GeneratorOptions(destination="out"))

    def test_empty_destination_raises(self):
        with pytest.raises(ConfigurationError, match="destination"):
            check_options(GeneratorOptions(origin="a.wsdl", destination="  "))

    def test_standalone_requires_package_name(self):
        with pytest.raises(ConfigurationError, match="package name"):
            check_options(GeneratorOptions(origin="a.wsdl", destination="out", standalone=True))
        check_options(GeneratorOptions(origin="a.wsdl", destination="out", standalone=True, package_name="shop"))
