#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line entry point: one-shot build of every package, or watch mode.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from .core.errors import BundleSystemError
from .engine import SubprocessEngine
from .orchestrator import BuildOrchestrator
from .plugins import GrammarTransform
from .synthesizer import ConfigSynthesizer
from .utils.config import BundleConfig
from .watch import WatchModeController
from . import __version__

LOG_LEVEL_ENV = "BUNDLE_HELPER_LOG_LEVEL"
LOG_FILE_ENV = "BUNDLE_HELPER_LOG_FILE"


def get_log_level() -> str:
    return os.environ.get(LOG_LEVEL_ENV, "INFO").upper()


def is_verbose() -> bool:
    """Engine output is echoed when logging at DEBUG or TRACE."""
    return get_log_level() in ["DEBUG", "TRACE"]


def setup_logging() -> None:
    """Configure loguru sinks from the environment."""
    logger.remove()

    log_level = get_log_level()

    if is_verbose():
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
    else:
        log_format = (
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        )

    logger.add(sys.stderr, level=log_level, format=log_format, colorize=True)

    log_file = os.environ.get(LOG_FILE_ENV)
    if log_file:
        logger.add(
            log_file,
            level=log_level,
            format=log_format,
            rotation="10 MB",
            retention=3,
        )

    logger.debug(f"Logging initialized at {log_level} level")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse the mode switch.

    ``--watch`` is the only recognized flag; any other argument is ignored.
    """
    parser = argparse.ArgumentParser(
        prog="bundle-helper",
        description="Build every package variant, or watch the default package",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Run a single persistent development build",
    )
    args, ignored = parser.parse_known_args(argv)
    if ignored:
        logger.debug(f"Ignoring unrecognized arguments: {ignored}")
    return args


async def amain(argv: Optional[Sequence[str]] = None, cwd: Optional[Path] = None) -> int:
    """Load the project, then run the watch controller or the orchestrator."""
    args = parse_args(argv)
    logger.info(f"Bundle Helper v{__version__} starting")

    try:
        settings = BundleConfig.resolve(cwd or Path.cwd())
        registry = settings.to_registry()
        transform = GrammarTransform(settings.transform_module)
        synthesizer = ConfigSynthesizer(registry, transform)
        engine = SubprocessEngine(
            settings.engine_command,
            cwd=settings.root,
            transforms=[transform],
            verbose=is_verbose(),
        )

        if args.watch:
            controller = WatchModeController(
                synthesizer, engine, registry.default_package
            )
            await controller.run()
            return 0

        report = await BuildOrchestrator(registry, synthesizer, engine).run()
        return report.exit_code

    except BundleSystemError as e:
        logger.error(f"Build failed: {e}")
        logger.debug(f"Error context: {e.context.to_dict()}")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to run the bundle helper from the command line."""
    setup_logging()
    try:
        return asyncio.run(amain(argv))
    except KeyboardInterrupt:
        logger.warning("Build interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
