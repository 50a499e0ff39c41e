# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration and typekit loading."""

from typekit.workspace.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    ProjectConfig,
    TypekitEntry,
    load_project_config,
)
from typekit.workspace.loader import LoaderError, TypekitLoader

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "LoaderError",
    "ProjectConfig",
    "TypekitEntry",
    "TypekitLoader",
    "load_project_config",
]
