#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core components for the bundle helper.
"""

from .models import (
    HOST_MODULES,
    BuildConfiguration,
    BuildIntent,
    BuildReport,
    EngineResult,
    MinifyMode,
    ModuleFormat,
    OutputDescriptor,
    PackageBuildReport,
    PackageDescriptor,
    VariantOutcome,
    WatchSpec,
)
from .errors import (
    BundleSystemError,
    ConfigurationError,
    EngineBuildError,
    ErrorContext,
    PluginError,
    handle_build_error,
)
from .registry import PackageRegistry

__all__ = [
    "HOST_MODULES",
    "BuildConfiguration",
    "BuildIntent",
    "BuildReport",
    "EngineResult",
    "MinifyMode",
    "ModuleFormat",
    "OutputDescriptor",
    "PackageBuildReport",
    "PackageDescriptor",
    "VariantOutcome",
    "WatchSpec",
    "BundleSystemError",
    "ConfigurationError",
    "EngineBuildError",
    "ErrorContext",
    "PluginError",
    "handle_build_error",
    "PackageRegistry",
]
