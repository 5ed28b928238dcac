# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator options for wsdlgen."""

from wsdlgen.config.options import (
    GATHER_ALL,
    GATHER_END,
    GATHER_MODES,
    GATHER_NONE,
    GATHER_START,
    ConfigurationError,
    GeneratorOptions,
    NamingOptions,
    check_options,
    load_options,
    options_from_mapping,
)

__all__ = [
    "GATHER_ALL",
    "GATHER_END",
    "GATHER_MODES",
    "GATHER_NONE",
    "GATHER_START",
    "ConfigurationError",
    "GeneratorOptions",
    "NamingOptions",
    "check_options",
    "load_options",
    "options_from_mapping",
]
