#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interactive development mode: a single persistent watch build.
"""

from __future__ import annotations

from loguru import logger

from .core.models import BuildIntent, EngineResult, MinifyMode
from .engine import BundleEngine
from .synthesizer import ConfigSynthesizer


class WatchModeController:
    """Starts one unminified, non-core watch build and leaves it to the engine."""

    def __init__(
        self,
        synthesizer: ConfigSynthesizer,
        engine: BundleEngine,
        package_name: str,
    ) -> None:
        self.synthesizer = synthesizer
        self.engine = engine
        self.package_name = package_name

    def intent(self) -> BuildIntent:
        return BuildIntent(
            package_name=self.package_name,
            minify=MinifyMode.NONE,
            core=False,
            watch=True,
        )

    async def run(self) -> EngineResult:
        """Submit the watch build once; returns when the engine process exits."""
        config = self.synthesizer.synthesize(self.intent())
        logger.info(f"Watching {self.package_name} for changes in {config.entry.parent}")
        return await self.engine.watch(config)
