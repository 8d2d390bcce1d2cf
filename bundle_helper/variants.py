#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The fixed set of output variants produced for every package.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Tuple

from .core.models import BuildIntent, MinifyMode


class Variant(StrEnum):
    """Labels of the standard one-shot variants, in build order."""

    STANDARD = "standard"  # unminified esm + umd
    MINIFIED = "minified"  # esbuild-minified esm + umd
    CORE = "core"  # fully minified esm, dependencies external


_VARIANT_SETTINGS: Tuple[Tuple[Variant, MinifyMode, bool], ...] = (
    (Variant.STANDARD, MinifyMode.NONE, False),
    (Variant.MINIFIED, MinifyMode.FAST, False),
    (Variant.CORE, MinifyMode.FULL, True),
)


def variant_intents(package_name: str) -> Tuple[BuildIntent, ...]:
    """Return the three one-shot build intents for a package."""
    return tuple(
        BuildIntent(package_name=package_name, minify=minify, core=core)
        for _, minify, core in _VARIANT_SETTINGS
    )


class VariantMatrix:
    """Enumerates the one-shot variants; identical for every package."""

    variants: Tuple[Variant, ...] = tuple(v for v, _, _ in _VARIANT_SETTINGS)

    def intents_for(self, package_name: str) -> Tuple[BuildIntent, ...]:
        return variant_intents(package_name)

    def labelled(self, package_name: str) -> Tuple[Tuple[Variant, BuildIntent], ...]:
        """Pair each intent with its variant label."""
        return tuple(zip(self.variants, self.intents_for(package_name)))
