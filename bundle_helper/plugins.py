#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Source transform plugins registered into the engine's resolution pipeline.

The transforms themselves run inside the bundling engine. On this side a
plugin is only a capability token: it tells the engine which module to load
and which extra source extension to resolve.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class SourceTransform(ABC):
    """Capability interface for an engine-side source transform."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Plugin name as reported by the engine in error payloads."""

    @property
    @abstractmethod
    def extension(self) -> str:
        """Non-standard source extension the plugin handles (with dot)."""

    @abstractmethod
    def to_engine_spec(self) -> Dict[str, Any]:
        """Serializable plugin reference for the engine configuration."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceTransform):
            return NotImplemented
        return self.to_engine_spec() == other.to_engine_spec()

    def __hash__(self) -> int:
        return hash((self.name, self.extension))


class GrammarTransform(SourceTransform):
    """Jison grammar files compiled to JavaScript by an engine-side plugin."""

    def __init__(self, module: str = "./jisonPlugin.js") -> None:
        self.module = module

    @property
    def name(self) -> str:
        return "jison"

    @property
    def extension(self) -> str:
        return ".jison"

    def to_engine_spec(self) -> Dict[str, Any]:
        return {"name": self.name, "module": self.module}

    def __repr__(self) -> str:
        return f"GrammarTransform(module={self.module!r})"
