#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
One-shot production builds across all registered packages.
"""

from __future__ import annotations

import asyncio
import time
from typing import List, Optional

from loguru import logger

from .core.errors import BundleSystemError
from .core.models import (
    BuildConfiguration,
    BuildReport,
    PackageBuildReport,
    VariantOutcome,
)
from .core.registry import PackageRegistry
from .engine import BundleEngine
from .synthesizer import ConfigSynthesizer
from .variants import Variant, VariantMatrix


class BuildOrchestrator:
    """
    Drives every variant of every package through the bundling engine.

    Packages are built one after another in registry order. The variants of a
    package are submitted together and all of them are waited for; a failed
    variant is recorded in the report and never stops the run.
    """

    def __init__(
        self,
        registry: PackageRegistry,
        synthesizer: ConfigSynthesizer,
        engine: BundleEngine,
        matrix: Optional[VariantMatrix] = None,
    ) -> None:
        self.registry = registry
        self.synthesizer = synthesizer
        self.engine = engine
        self.matrix = matrix or VariantMatrix()

    async def _build_variant(
        self, variant: Variant, config: BuildConfiguration
    ) -> VariantOutcome:
        start_time = time.time()
        await self.engine.build(config)
        return VariantOutcome(
            package_name=config.package_name,
            variant=str(variant),
            success=True,
            execution_time=time.time() - start_time,
        )

    async def build_package(self, package_name: str) -> PackageBuildReport:
        """
        Build all variants of one package concurrently.

        Raises:
            ConfigurationError: If the package is unknown; raised before
                anything is submitted to the engine.
        """
        labelled = self.matrix.labelled(package_name)
        # Synthesize everything first so a bad package never reaches the engine.
        configs = [(variant, self.synthesizer.synthesize(intent)) for variant, intent in labelled]

        logger.info(f"Building {package_name} ({len(configs)} variants)")
        tasks = [
            asyncio.create_task(
                self._build_variant(variant, config),
                name=f"build_{package_name}_{variant}",
            )
            for variant, config in configs
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        report = PackageBuildReport(package_name=package_name)
        for (variant, _), result in zip(configs, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                message = (
                    result.message
                    if isinstance(result, BundleSystemError)
                    else str(result)
                )
                logger.error(f"Variant {package_name}/{variant} failed: {message}")
                report.outcomes.append(
                    VariantOutcome(
                        package_name=package_name,
                        variant=str(variant),
                        success=False,
                        error=message,
                    )
                )
            else:
                logger.success(
                    f"Variant {package_name}/{variant} built in {result.execution_time:.2f}s"
                )
                report.outcomes.append(result)

        return report

    async def run(self) -> BuildReport:
        """Build every registered package in order and return the aggregate report."""
        report = BuildReport()
        start_time = time.time()

        for package in self.registry:
            report.packages.append(await self.build_package(package.name))

        self._log_summary(report, time.time() - start_time)
        return report

    @staticmethod
    def _log_summary(report: BuildReport, elapsed: float) -> None:
        total = len(report.outcomes)
        if report.failures:
            logger.error(
                f"Build finished with {report.failures} failed variant(s) "
                f"out of {total}"
            )
            failed: List[str] = [
                f"{outcome.package_name}/{outcome.variant}"
                for outcome in report.failed_outcomes
            ]
            logger.error(f"Failed variants: {', '.join(failed)}")
        else:
            logger.success(f"All {total} variant(s) built successfully")

        logger.info(f"Total execution time: {elapsed:.2f}s")
        logger.info(f"Success rate: {report.success_rate:.1%}")
