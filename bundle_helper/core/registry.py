#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Immutable table of the packages a build run covers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from loguru import logger

from .errors import ConfigurationError
from .models import PackageDescriptor


class PackageRegistry:
    """
    Ordered, read-only mapping of package name to PackageDescriptor.

    The registry is built once at startup and passed explicitly to the
    synthesizer and orchestrator. Iteration follows registration order, which
    is also the order packages are built in.
    """

    __slots__ = ("_packages", "_default_package")

    def __init__(
        self,
        packages: Iterable[PackageDescriptor],
        default_package: Optional[str] = None,
    ) -> None:
        table: Dict[str, PackageDescriptor] = {}
        for descriptor in packages:
            if descriptor.name in table:
                raise ConfigurationError(
                    f"Duplicate package name in registry: {descriptor.name}",
                    invalid_option="packages",
                )
            table[descriptor.name] = descriptor

        if not table:
            raise ConfigurationError(
                "Package registry must contain at least one package",
                invalid_option="packages",
            )

        if default_package is not None and default_package not in table:
            raise ConfigurationError(
                f"Default package is not registered: {default_package}",
                invalid_option="default_package",
                additional_info={"known_packages": list(table)},
            )

        self._packages: Tuple[Tuple[str, PackageDescriptor], ...] = tuple(table.items())
        self._default_package = default_package or next(iter(table))

        logger.bind(packages=list(table), default_package=self._default_package).debug(
            f"Package registry initialized with {len(table)} package(s)"
        )

    @classmethod
    def from_entries(
        cls,
        entries: Mapping[str, str],
        *,
        dependencies: Iterable[str] = (),
        root: Union[Path, str] = ".",
        default_package: Optional[str] = None,
    ) -> PackageRegistry:
        """Build a registry from ``{name: entry_file}`` sharing one dependency list."""
        deps = tuple(dependencies)
        root_path = Path(root)
        return cls(
            (
                PackageDescriptor(
                    name=name, entry=entry, dependencies=deps, root=root_path
                )
                for name, entry in entries.items()
            ),
            default_package=default_package,
        )

    @property
    def default_package(self) -> str:
        return self._default_package

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self._packages)

    def get(self, name: str) -> PackageDescriptor:
        """Look up a package, raising ConfigurationError when it is unknown."""
        for registered, descriptor in self._packages:
            if registered == name:
                return descriptor
        raise ConfigurationError(
            f"Unknown package: {name}",
            invalid_option="package_name",
            additional_info={"known_packages": list(self.names)},
        )

    def __contains__(self, name: object) -> bool:
        return any(registered == name for registered, _ in self._packages)

    def __iter__(self) -> Iterator[PackageDescriptor]:
        return (descriptor for _, descriptor in self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def __repr__(self) -> str:
        return f"PackageRegistry({list(self.names)!r}, default={self._default_package!r})"
