#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for the bundle helper.

Build intents and configurations are frozen Pydantic models: a configuration is
produced fresh for every (package, variant) pair and handed to the engine
exactly once, so nothing downstream may mutate it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

# Runtime-provided modules that are never bundled.
HOST_MODULES: Tuple[str, ...] = ("require", "fs", "path")

STANDARD_EXTENSIONS: Tuple[str, ...] = (".js", ".ts", ".json")


class MinifyMode(StrEnum):
    """Minification levels understood by the bundling engine."""

    NONE = "none"
    FAST = "fast"  # esbuild minifier
    FULL = "full"  # terser minifier

    @property
    def engine_value(self) -> Union[bool, str]:
        """Value of the engine's ``build.minify`` option."""
        match self:
            case MinifyMode.NONE:
                return False
            case MinifyMode.FAST:
                return "esbuild"
            case MinifyMode.FULL:
                return True

    @property
    def suffix(self) -> str:
        """File name suffix marking minified output."""
        return "" if self is MinifyMode.NONE else ".min"


class ModuleFormat(StrEnum):
    """Module formats emitted by the engine."""

    ESM = "esm"
    UMD = "umd"


class PackageDescriptor(BaseModel):
    """A buildable package of the library."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, description="Logical package name")
    entry: str = Field(min_length=1, description="Entry file inside src/")
    dependencies: Tuple[str, ...] = Field(
        default=(), description="Declared dependency names from the manifest"
    )
    root: Path = Field(default=Path("."), description="Repository root")

    @property
    def package_dir(self) -> Path:
        return self.root / "packages" / self.name

    @property
    def source_dir(self) -> Path:
        return self.package_dir / "src"

    @property
    def entry_path(self) -> Path:
        return self.source_dir / self.entry

    @property
    def out_dir(self) -> Path:
        return self.package_dir / "dist"


class BuildIntent(BaseModel):
    """What to build: a package plus the minify/core/watch switches."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_name: str
    minify: MinifyMode = MinifyMode.NONE
    core: bool = False
    watch: bool = False


class OutputDescriptor(BaseModel):
    """One emitted bundle within a configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    format: ModuleFormat
    sourcemap: bool = True
    entry_file_names: str = Field(
        description="File name pattern; [name] is filled in by the engine"
    )

    def to_engine_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "format": self.format.value,
            "sourcemap": self.sourcemap,
            "entryFileNames": self.entry_file_names,
        }


class WatchSpec(BaseModel):
    """Persistent watch scope for interactive rebuilds."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include: str = "src/**"


class BuildConfiguration(BaseModel):
    """
    A complete configuration for one engine invocation.

    ``to_engine_dict`` renders the inline configuration object the engine
    consumes; everything else is the structured view used by the orchestrator
    and by tests.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_name: str
    lib_name: str
    entry: Path
    out_dir: Path
    outputs: Tuple[OutputDescriptor, ...] = Field(min_length=1)
    externals: Tuple[str, ...]
    minify: MinifyMode
    core: bool = False
    plugins: Tuple[Dict[str, Any], ...] = ()
    resolve_extensions: Tuple[str, ...] = STANDARD_EXTENSIONS
    empty_out_dir: bool = False
    watch: Optional[WatchSpec] = None

    @property
    def file_names(self) -> Tuple[str, ...]:
        return tuple(output.entry_file_names for output in self.outputs)

    def to_engine_dict(self) -> Dict[str, Any]:
        """Render the engine's inline configuration shape."""
        outputs = [output.to_engine_dict() for output in self.outputs]
        build: Dict[str, Any] = {
            "emptyOutDir": self.empty_out_dir,
            "outDir": str(self.out_dir),
            "lib": {
                "entry": str(self.entry),
                "name": self.lib_name,
                "fileName": self.lib_name,
            },
            "minify": self.minify.engine_value,
            "rollupOptions": {
                "external": list(self.externals),
                "output": outputs[0] if len(outputs) == 1 else outputs,
            },
        }
        if self.watch is not None:
            build["watch"] = {"include": self.watch.include}

        return {
            "configFile": False,
            "build": build,
            "resolve": {"extensions": list(self.resolve_extensions)},
            "plugins": [dict(plugin) for plugin in self.plugins],
        }


@dataclass
class EngineResult:
    """Result of one engine invocation."""

    success: bool
    output: str = ""
    error: str = ""
    exit_code: int = 0
    execution_time: float = 0.0

    @property
    def failed(self) -> bool:
        return not self.success


@dataclass
class VariantOutcome:
    """Terminal state of one variant build."""

    package_name: str
    variant: str
    success: bool
    error: str = ""
    execution_time: float = 0.0

    @property
    def failed(self) -> bool:
        return not self.success


@dataclass
class PackageBuildReport:
    """Outcomes of all variants of one package."""

    package_name: str
    outcomes: List[VariantOutcome] = field(default_factory=list)

    @property
    def successes(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failures(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.failed)


@dataclass
class BuildReport:
    """
    Aggregate result of a one-shot build across all packages.

    Callers must inspect this: a failed variant never raises out of the
    orchestrator, it only shows up here and in ``exit_code``.
    """

    packages: List[PackageBuildReport] = field(default_factory=list)

    @property
    def outcomes(self) -> List[VariantOutcome]:
        return [outcome for report in self.packages for outcome in report.outcomes]

    @property
    def successes(self) -> int:
        return sum(report.successes for report in self.packages)

    @property
    def failures(self) -> int:
        return sum(report.failures for report in self.packages)

    @property
    def failed_outcomes(self) -> List[VariantOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def success_rate(self) -> float:
        total = len(self.outcomes)
        return self.successes / total if total else 0.0

    @property
    def exit_code(self) -> int:
        return 1 if self.failures else 0
