# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the typekit project configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = "typekits.yaml"


class ConfigError(Exception):
    """Raised when a project configuration file is invalid or cannot be loaded."""


@dataclass
class TypekitEntry:
    """Where to find the files of one typekit.

    Attributes:
        name: The typekit name.
        registry: Path of the registry XML, relative to the configuration file.
        typelist: Path of the typelist, relative to the configuration file.
        imports: Names of the typekits this one depends on.
        virtual: Whether the typekit has no generated code of its own.
        define_dummy_types: Whether dummy definitions should be generated.
    """

    name: str
    registry: str
    typelist: str
    imports: list[str] = field(default_factory=list)
    virtual: bool = False
    define_dummy_types: bool = False


@dataclass
class ProjectConfig:
    """The parsed project configuration."""

    typekits: list[TypekitEntry] = field(default_factory=list)

    def find(self, name: str) -> TypekitEntry | None:
        """Return the entry of typekit *name*, if configured."""
        for entry in self.typekits:
            if entry.name == name:
                return entry
        return None


def load_project_config(path: Path) -> ProjectConfig:
    """Load and parse a project configuration file.

    Args:
        path: Path to the ``typekits.yaml`` file.

    Returns:
        A ProjectConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file: {exc}") from exc

    return _parse_project_config(text, source_label=str(path))


# ################
# Implementation
# ################


def _parse_project_config(text: str, source_label: str = "<string>") -> ProjectConfig:
    """Parse project configuration YAML text into a ProjectConfig.

    Raises:
        ConfigError: If the YAML is invalid or required fields are missing.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ProjectConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    raw_typekits = data.get("typekits", [])
    if not isinstance(raw_typekits, list):
        raise ConfigError(f"{source_label}: 'typekits' must be a list")

    config = ProjectConfig()
    for index, raw in enumerate(raw_typekits):
        entry = _parse_typekit_entry(raw, index, source_label)
        if config.find(entry.name) is not None:
            raise ConfigError(f"{source_label}: typekit '{entry.name}' is defined more than once")
        config.typekits.append(entry)
    return config


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising ConfigError if missing."""
    if key not in mapping:
        raise ConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_bool(mapping: dict[str, object], key: str, source_label: str) -> bool:
    value = mapping.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be true or false")
    return value


def _parse_typekit_entry(entry: object, index: int, source_label: str) -> TypekitEntry:
    """Parse a single entry of the ``typekits`` list."""
    location = f"{source_label}: typekits[{index}]"

    if not isinstance(entry, dict):
        raise ConfigError(f"{location} must be a YAML mapping")

    imports = entry.get("imports", [])
    if not isinstance(imports, list) or not all(isinstance(i, str) for i in imports):
        raise ConfigError(f"{location}: 'imports' must be a list of typekit names")

    return TypekitEntry(
        name=_require_string(entry, "name", location),
        registry=_require_string(entry, "registry", location),
        typelist=_require_string(entry, "typelist", location),
        imports=imports,
        virtual=_optional_bool(entry, "virtual", location),
        define_dummy_types=_optional_bool(entry, "define-dummy-types", location),
    )
