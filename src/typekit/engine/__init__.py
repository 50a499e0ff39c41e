# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typekits and the computation of their marshalling intermediates."""

from typekit.engine.typekit import (
    GENERATED_INTERMEDIATE_SUFFIX,
    TYPE_FACTORIES,
    InternalInconsistency,
    NotOpaque,
    Typekit,
    TypeLike,
    UnsupportedCapability,
)

__all__ = [
    "Typekit",
    "TypeLike",
    "TYPE_FACTORIES",
    "GENERATED_INTERMEDIATE_SUFFIX",
    "NotOpaque",
    "InternalInconsistency",
    "UnsupportedCapability",
]
