# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of configured typekits from disk.

Typekits are loaded on demand and cached by name. Loading a typekit loads
the typekits it imports first; imports are recorded by name only.
"""

from __future__ import annotations

import logging
from pathlib import Path

from typekit.engine.typekit import Typekit
from typekit.model.registry import NotFound, RegistryError
from typekit.workspace.config import ProjectConfig, TypekitEntry

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class LoaderError(Exception):
    """Raised when a typekit cannot be loaded."""


class TypekitLoader:
    """Loads the typekits declared in a project configuration.

    Args:
        config: The project configuration.
        root: Directory the configured file paths are relative to.
    """

    def __init__(self, config: ProjectConfig, root: Path) -> None:
        self._config = config
        self._root = root
        self._loaded: dict[str, Typekit] = {}
        self._in_progress: set[str] = set()

    @property
    def loaded_typekits(self) -> dict[str, Typekit]:
        """The typekits loaded so far, by name."""
        return dict(self._loaded)

    def load(self, name: str) -> Typekit:
        """Return the typekit *name*, loading it and its imports if needed.

        Raises:
            LoaderError: If the typekit or one of its imports is not
                configured, its files cannot be read or are invalid, or the
                imports form a cycle.
        """
        if name in self._loaded:
            return self._loaded[name]
        if name in self._in_progress:
            raise LoaderError(f"Circular typekit import involving '{name}'")

        entry = self._config.find(name)
        if entry is None:
            raise LoaderError(f"Typekit '{name}' is not configured")

        self._in_progress.add(name)
        try:
            for imported in entry.imports:
                if self._config.find(imported) is None:
                    raise LoaderError(f"Typekit '{name}' imports unknown typekit '{imported}'")
                self.load(imported)
            typekit = self._load_entry(entry)
        finally:
            self._in_progress.discard(name)

        self._loaded[name] = typekit
        return typekit

    # ################
    # Implementation
    # ################

    def _read(self, relative_path: str, what: str, name: str) -> str:
        path = self._root / relative_path
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LoaderError(f"Cannot read {what} of typekit '{name}': {exc}") from exc

    def _load_entry(self, entry: TypekitEntry) -> Typekit:
        registry_xml = self._read(entry.registry, "registry", entry.name)
        typelist_txt = self._read(entry.typelist, "typelist", entry.name)
        logger.debug("loading typekit %s from %s", entry.name, self._root / entry.registry)
        try:
            typekit = Typekit.from_raw_data(
                entry.name,
                registry_xml,
                typelist_txt,
                virtual=entry.virtual,
                define_dummy_types=entry.define_dummy_types,
            )
        except (RegistryError, NotFound) as exc:
            raise LoaderError(f"Invalid registry for typekit '{entry.name}': {exc}") from exc
        typekit.imported_typekits.update(entry.imports)
        return typekit
