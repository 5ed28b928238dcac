# Copyright 2026 wsdlgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the wsdlgen documentation."""

project = "wsdlgen"
author = "wsdlgen Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_typehints = "description"

html_theme = "alabaster"
