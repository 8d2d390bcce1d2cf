#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Mapping from build intents to complete engine configurations.
"""

from __future__ import annotations

from typing import Tuple

from loguru import logger

from .core.models import (
    HOST_MODULES,
    STANDARD_EXTENSIONS,
    BuildConfiguration,
    BuildIntent,
    ModuleFormat,
    OutputDescriptor,
    PackageDescriptor,
    WatchSpec,
)
from .core.registry import PackageRegistry
from .plugins import SourceTransform


def _outputs_for(
    package: PackageDescriptor, intent: BuildIntent
) -> Tuple[OutputDescriptor, ...]:
    if intent.core:
        # Core bundles are always fully minified, so no suffix branching.
        return (
            OutputDescriptor(
                name=package.name,
                format=ModuleFormat.ESM,
                entry_file_names="[name].core.mjs",
            ),
        )

    suffix = intent.minify.suffix
    return (
        OutputDescriptor(
            name=package.name,
            format=ModuleFormat.ESM,
            entry_file_names=f"[name].esm{suffix}.mjs",
        ),
        OutputDescriptor(
            name=package.name,
            format=ModuleFormat.UMD,
            entry_file_names=f"[name]{suffix}.js",
        ),
    )


def synthesize_config(
    intent: BuildIntent,
    registry: PackageRegistry,
    transform: SourceTransform,
) -> BuildConfiguration:
    """
    Build the engine configuration for one intent.

    Pure: the same intent, registry and transform always give an equal
    configuration. Every combination of switches is accepted, including watch
    together with minify or core.

    Raises:
        ConfigurationError: If the intent names an unregistered package.
    """
    package = registry.get(intent.package_name)

    externals = HOST_MODULES
    if intent.core:
        externals = externals + tuple(
            dep for dep in package.dependencies if dep not in HOST_MODULES
        )

    return BuildConfiguration(
        package_name=package.name,
        lib_name=package.name,
        entry=package.entry_path,
        out_dir=package.out_dir,
        outputs=_outputs_for(package, intent),
        externals=externals,
        minify=intent.minify,
        core=intent.core,
        plugins=(transform.to_engine_spec(),),
        resolve_extensions=(transform.extension, *STANDARD_EXTENSIONS),
        watch=WatchSpec() if intent.watch else None,
    )


class ConfigSynthesizer:
    """Synthesizes configurations against one registry and transform."""

    def __init__(self, registry: PackageRegistry, transform: SourceTransform) -> None:
        self.registry = registry
        self.transform = transform

    def synthesize(self, intent: BuildIntent) -> BuildConfiguration:
        config = synthesize_config(intent, self.registry, self.transform)
        logger.bind(
            minify=str(intent.minify),
            core=intent.core,
            watch=intent.watch,
            file_names=config.file_names,
        ).debug(f"Synthesized configuration for {intent.package_name}")
        return config

    def synthesize_all(self, *intents: BuildIntent) -> Tuple[BuildConfiguration, ...]:
        return tuple(self.synthesize(intent) for intent in intents)
