# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the typekit documentation."""

project = "typekit-model"
author = "Typekit Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
