#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bundle Helper

Synthesizes bundler configurations for a multi-package JavaScript library and
drives the bundling engine over every package and output variant: an
unminified and a minified dual-format (esm + umd) build, plus a fully
minified "core" esm build with the package dependencies left external.
"""

import sys

from loguru import logger

# Package metadata
__version__ = "1.0.0"
__author__ = "Max Qian"
__license__ = "GPL-3.0-or-later"

from .core.errors import (
    BundleSystemError,
    ConfigurationError,
    EngineBuildError,
    PluginError,
)
from .core.models import (
    BuildConfiguration,
    BuildIntent,
    BuildReport,
    MinifyMode,
    ModuleFormat,
    OutputDescriptor,
    PackageDescriptor,
)
from .core.registry import PackageRegistry
from .engine import BundleEngine, SubprocessEngine
from .orchestrator import BuildOrchestrator
from .plugins import GrammarTransform, SourceTransform
from .synthesizer import ConfigSynthesizer, synthesize_config
from .utils.config import BundleConfig, ProjectSettings
from .variants import Variant, VariantMatrix, variant_intents
from .watch import WatchModeController

# Configure loguru with defaults
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
)


def get_tool_info() -> dict:
    """
    Get metadata about the bundle_helper module.

    Returns:
        dict: Module metadata including name, version, description, author,
              license, available functions and classes.
    """
    return {
        "name": "bundle_helper",
        "version": __version__,
        "description": "Configuration synthesis and build orchestration for multi-package bundles",
        "author": __author__,
        "license": __license__,
        "functions": [
            "synthesize_config",
            "variant_intents",
            "get_tool_info",
        ],
        "requirements": [
            "python>=3.11",
            "loguru",
            "pydantic>=2",
            "pyyaml",
        ],
        "classes": {
            "ConfigSynthesizer": "Maps build intents to engine configurations",
            "BuildOrchestrator": "Builds every variant of every package",
            "WatchModeController": "Runs one persistent watch build",
            "VariantMatrix": "Enumerates the standard output variants",
            "SubprocessEngine": "Runs the bundling engine as a child process",
            "GrammarTransform": "Grammar file plugin registration",
            "BundleConfig": "Project configuration loading",
        },
    }


__all__ = [
    "BundleSystemError",
    "ConfigurationError",
    "EngineBuildError",
    "PluginError",
    "BuildConfiguration",
    "BuildIntent",
    "BuildReport",
    "MinifyMode",
    "ModuleFormat",
    "OutputDescriptor",
    "PackageDescriptor",
    "PackageRegistry",
    "BundleEngine",
    "SubprocessEngine",
    "BuildOrchestrator",
    "GrammarTransform",
    "SourceTransform",
    "ConfigSynthesizer",
    "synthesize_config",
    "BundleConfig",
    "ProjectSettings",
    "Variant",
    "VariantMatrix",
    "variant_intents",
    "WatchModeController",
    "get_tool_info",
    "__version__",
    "__author__",
    "__license__",
]
