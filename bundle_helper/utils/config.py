#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Project configuration and manifest loading.

A project file (``bundle.json``, ``bundle.toml`` or ``bundle.yaml``) names the
packages to build and where the engine lives. Without one, the built-in
defaults describe the mermaid library layout.
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..core.errors import ConfigurationError, ErrorContext
from ..core.registry import PackageRegistry
from ..engine import DEFAULT_ENGINE_COMMAND

DEFAULT_PACKAGES: Dict[str, str] = {
    "mermaid": "mermaid.ts",
    "mermaid-mindmap": "registry.ts",
}
DEFAULT_PACKAGE = "mermaid"
DEFAULT_TRANSFORM_MODULE = "./jisonPlugin.js"


class ProjectSettings(BaseModel):
    """Validated project configuration."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    root: Path = Field(default=Path("."), description="Repository root")
    manifest: Path = Field(
        default=Path("package.json"), description="Manifest relative to root"
    )
    default_package: Optional[str] = Field(
        default=None, description="Package built in watch mode"
    )
    engine_command: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ENGINE_COMMAND),
        min_length=1,
        description="Command that runs the bundling engine",
    )
    transform_module: str = Field(
        default=DEFAULT_TRANSFORM_MODULE,
        description="Engine-side module of the grammar transform plugin",
    )
    packages: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PACKAGES),
        min_length=1,
        description="Package name to entry file inside src/",
    )

    @field_validator("root", mode="before")
    @classmethod
    def validate_root(cls, v: Any) -> Any:
        if not isinstance(v, (str, os.PathLike)):
            raise ValueError(f"root must be a path string, got {type(v).__name__}")
        return v

    @field_validator("packages", mode="before")
    @classmethod
    def normalize_packages(cls, v: Any) -> Any:
        """Accept ``{name: "entry.ts"}`` as well as ``{name: {entry: ...}}``."""
        if not isinstance(v, dict):
            return v
        normalized: Dict[str, Any] = {}
        for name, spec in v.items():
            if isinstance(spec, dict):
                if "entry" not in spec:
                    raise ValueError(f"package {name!r} has no entry")
                spec = spec["entry"]
            normalized[name] = spec
        return normalized

    @model_validator(mode="after")
    def default_to_builtin_package(self) -> ProjectSettings:
        """The built-in table defaults to mermaid; a configured one to its first entry."""
        if self.default_package is None and "packages" not in self.model_fields_set:
            self.default_package = DEFAULT_PACKAGE
        return self

    @property
    def manifest_path(self) -> Path:
        return self.manifest if self.manifest.is_absolute() else self.root / self.manifest

    def to_registry(self) -> PackageRegistry:
        """Read the manifest and build the package registry."""
        dependencies = load_manifest_dependencies(self.manifest_path)
        default = self.default_package if self.default_package in self.packages else None
        if self.default_package and default is None:
            logger.warning(
                f"Default package {self.default_package} is not configured, "
                "falling back to the first package"
            )
        return PackageRegistry.from_entries(
            self.packages,
            dependencies=dependencies,
            root=self.root,
            default_package=default,
        )


def load_manifest_dependencies(manifest_path: Union[Path, str]) -> Tuple[str, ...]:
    """
    Return the dependency names declared in a package manifest, in order.

    Raises:
        ConfigurationError: If the manifest is missing or not valid JSON.
    """
    path = Path(manifest_path)
    if not path.is_file():
        raise ConfigurationError(
            f"Package manifest not found: {path}",
            config_file=path,
            context=ErrorContext(working_directory=path.parent),
        )

    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Failed to read package manifest: {e}", config_file=path
        )
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid package manifest: {e}",
            config_file=path,
            context=ErrorContext(additional_info={"line": e.lineno, "column": e.colno}),
        )

    dependencies = manifest.get("dependencies", {}) if isinstance(manifest, dict) else {}
    if not isinstance(dependencies, dict):
        raise ConfigurationError(
            "Manifest 'dependencies' must be an object",
            config_file=path,
            invalid_option="dependencies",
        )

    logger.debug(f"Loaded {len(dependencies)} dependencies from {path}")
    return tuple(dependencies)


class BundleConfig:
    """Loads ProjectSettings from JSON, TOML or YAML project files."""

    _SUPPORTED_EXTENSIONS = {
        ".json": "json",
        ".toml": "toml",
        ".yaml": "yaml",
        ".yml": "yaml",
    }
    _BASE_NAMES = ("bundle", ".bundle")

    @classmethod
    def load_from_file(cls, file_path: Union[Path, str]) -> ProjectSettings:
        """
        Load project settings from a file.

        Relative ``root`` values are resolved against the file's directory,
        and a missing ``root`` defaults to that directory.

        Raises:
            ConfigurationError: If the file is missing, has an unsupported
                format, or does not validate.
        """
        config_path = Path(file_path)

        if not config_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                config_file=config_path,
                context=ErrorContext(working_directory=config_path.parent),
            )

        suffix = config_path.suffix.lower()
        if suffix not in cls._SUPPORTED_EXTENSIONS:
            supported = ", ".join(cls._SUPPORTED_EXTENSIONS)
            raise ConfigurationError(
                f"Unsupported configuration file format: {suffix}. "
                f"Supported formats: {supported}",
                config_file=config_path,
            )

        try:
            content = config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read configuration file: {e}", config_file=config_path
            )

        logger.debug(f"Loading {suffix[1:].upper()} configuration from {config_path}")
        match cls._SUPPORTED_EXTENSIONS[suffix]:
            case "json":
                data = cls._parse_json(content, config_path)
            case "toml":
                data = cls._parse_toml(content, config_path)
            case _:
                data = cls._parse_yaml(content, config_path)

        return cls._normalize_config(data, config_path)

    @staticmethod
    def _parse_json(content: str, source_file: Path) -> Dict[str, Any]:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON configuration: {e}",
                config_file=source_file,
                context=ErrorContext(additional_info={"line": e.lineno, "column": e.colno}),
            )

    @staticmethod
    def _parse_toml(content: str, source_file: Path) -> Dict[str, Any]:
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f"Invalid TOML configuration: {e}", config_file=source_file
            )

    @staticmethod
    def _parse_yaml(content: str, source_file: Path) -> Dict[str, Any]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            error_details = {}
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                error_details = {"line": mark.line + 1, "column": mark.column + 1}
            raise ConfigurationError(
                f"Invalid YAML configuration: {e}",
                config_file=source_file,
                context=ErrorContext(additional_info=error_details),
            )
        return {} if data is None else data

    @classmethod
    def _normalize_config(cls, data: Any, source_file: Path) -> ProjectSettings:
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration must be a mapping", config_file=source_file
            )

        # Settings may live at the root or in a [bundle] section.
        if isinstance(data.get("bundle"), dict):
            data = data["bundle"]
        data = dict(data)

        base_dir = source_file.parent
        root = data.get("root", ".")
        if isinstance(root, (str, Path)):
            root = Path(root)
            data["root"] = root if root.is_absolute() else (base_dir / root)

        try:
            return ProjectSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid project configuration: {e}",
                config_file=source_file,
                additional_info={
                    "errors": [".".join(map(str, err["loc"])) for err in e.errors()]
                },
            )

    @classmethod
    def get_default_config_files(cls, directory: Path) -> List[Path]:
        """Project files present in ``directory``, in order of preference."""
        return [
            directory / f"{base_name}{ext}"
            for base_name in cls._BASE_NAMES
            for ext in cls._SUPPORTED_EXTENSIONS
            if (directory / f"{base_name}{ext}").is_file()
        ]

    @classmethod
    def auto_discover_config(
        cls, start_directory: Union[Path, str]
    ) -> Optional[ProjectSettings]:
        """Search ``start_directory`` and its parents for a project file."""
        search_dir = Path(start_directory).resolve()

        for directory in [search_dir, *search_dir.parents]:
            config_files = cls.get_default_config_files(directory)
            if config_files:
                logger.info(f"Auto-discovered configuration file: {config_files[0]}")
                return cls.load_from_file(config_files[0])

        logger.debug("No configuration file auto-discovered")
        return None

    @classmethod
    def resolve(cls, start_directory: Union[Path, str]) -> ProjectSettings:
        """Discovered settings, or the built-in defaults rooted at ``start_directory``."""
        settings = cls.auto_discover_config(start_directory)
        if settings is None:
            settings = ProjectSettings(root=Path(start_directory).resolve())
            logger.debug("Using built-in project defaults")
        return settings
