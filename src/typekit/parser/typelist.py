# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser for typelist files.

A typelist declares one type per line, optionally followed by a single
space and a single-digit flag telling whether the type is part of the
typekit's public interface (only ``1`` means it is)::

    /base/Time
    /base/Pose 1
    /unsigned char[8] 0

A missing flag means the type is an interface type. Type names may
themselves end in digits or array suffixes, so the flag is only recognized
as a single space-separated digit at the very end of the line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, MutableSet

# ###############
# Public Interface
# ###############


class Typelist(MutableSet[str]):
    """A set of type names that remembers insertion order."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: dict[str, None] = dict.fromkeys(names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"Typelist({list(self._names)!r})"

    def add(self, name: str) -> None:
        self._names[name] = None

    def discard(self, name: str) -> None:
        self._names.pop(name, None)


def parse_typelist(text: str) -> tuple[Typelist, Typelist]:
    """Parse typelist text into the full typelist and its interface subset.

    Blank lines are ignored.

    Args:
        text: Raw typelist content.

    Returns:
        A ``(typelist, interface_typelist)`` pair, both in declaration order.
    """
    typelist = Typelist()
    interface_typelist = Typelist()
    for line in text.splitlines():
        decl = line.strip()
        if not decl:
            continue
        name, is_interface = _parse_declaration(decl)
        typelist.add(name)
        if is_interface:
            interface_typelist.add(name)
    return typelist, interface_typelist


# ################
# Implementation
# ################

# Greedy on the name so that only the last space-separated token can be a flag.
_FLAGGED_DECLARATION = re.compile(r"^(.*) (\d)$")


def _parse_declaration(decl: str) -> tuple[str, bool]:
    match = _FLAGGED_DECLARATION.match(decl)
    if match is None:
        return decl, True
    return match.group(1), match.group(2) == "1"
