#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exception hierarchy for the bundle helper with structured error context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger


@dataclass(frozen=True)
class ErrorContext:
    """Context information for bundle build errors."""

    command: Optional[str] = None
    exit_code: Optional[int] = None
    working_directory: Optional[Path] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    execution_time: Optional[float] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for structured logging."""
        return {
            "command": self.command,
            "exit_code": self.exit_code,
            "working_directory": (
                str(self.working_directory) if self.working_directory else None
            ),
            "stdout": self.stdout,
            "stderr": self.stderr,
            "execution_time": self.execution_time,
            "additional_info": self.additional_info,
        }


class BundleSystemError(Exception):
    """
    Base exception class for bundle helper errors.

    Carries an ErrorContext describing the failing command or configuration
    and logs itself on construction so failures are visible even when a
    caller only records them.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.cause = cause

        logger.bind(
            error_context=self.context.to_dict(),
            original_cause=str(cause) if cause else None,
        ).error(f"{self.__class__.__name__}: {message}")

    def __str__(self) -> str:
        base_msg = super().__str__()

        if self.context.command:
            base_msg += f"\nCommand: {self.context.command}"

        if self.context.exit_code is not None:
            base_msg += f"\nExit Code: {self.context.exit_code}"

        if self.context.stderr:
            base_msg += f"\nStderr: {self.context.stderr}"

        if self.cause:
            base_msg += f"\nCaused by: {self.cause}"

        return base_msg

    @property
    def message(self) -> str:
        """The bare message without the appended context."""
        return super().__str__()


class ConfigurationError(BundleSystemError):
    """Raised for unknown packages and malformed project configuration."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Optional[Union[str, Path]] = None,
        invalid_option: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        additional_info = kwargs.pop("additional_info", {})
        if config_file:
            additional_info["config_file"] = str(config_file)
        if invalid_option:
            additional_info["invalid_option"] = invalid_option

        context = kwargs.get("context") or ErrorContext()
        context.additional_info.update(additional_info)
        kwargs["context"] = context

        self.config_file = config_file
        self.invalid_option = invalid_option
        super().__init__(message, **kwargs)


class EngineBuildError(BundleSystemError):
    """Raised when the bundling engine fails to build one variant."""

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        variant: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        additional_info = kwargs.pop("additional_info", {})
        if package_name:
            additional_info["package_name"] = package_name
        if variant:
            additional_info["variant"] = variant

        context = kwargs.get("context") or ErrorContext()
        context.additional_info.update(additional_info)
        kwargs["context"] = context

        self.package_name = package_name
        self.variant = variant
        super().__init__(message, **kwargs)


class PluginError(EngineBuildError):
    """Raised when a source transform plugin fails on a source file."""

    def __init__(
        self,
        message: str,
        *,
        plugin: Optional[str] = None,
        source_file: Optional[Union[str, Path]] = None,
        **kwargs: Any,
    ) -> None:
        additional_info = kwargs.pop("additional_info", {})
        if plugin:
            additional_info["plugin"] = plugin
        if source_file:
            additional_info["source_file"] = str(source_file)
        kwargs["additional_info"] = additional_info

        self.plugin = plugin
        self.source_file = source_file
        super().__init__(message, **kwargs)


def handle_build_error(
    func_name: str,
    error: Exception,
    *,
    context: Optional[ErrorContext] = None,
) -> BundleSystemError:
    """
    Convert generic exceptions to BundleSystemError with context.

    Args:
        func_name: Name of the function where the error occurred
        error: The original exception
        context: Error context information

    Returns:
        BundleSystemError with enhanced context
    """
    if isinstance(error, BundleSystemError):
        return error

    message = f"Error in {func_name}: {error}"

    match error:
        case FileNotFoundError():
            return EngineBuildError(
                message,
                context=context,
                cause=error,
                additional_info={
                    "missing_command": str(error.filename) if error.filename else None
                },
            )
        case _:
            return BundleSystemError(message, context=context, cause=error)
