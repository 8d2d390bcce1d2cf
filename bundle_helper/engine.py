#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bundling engine boundary.

``BundleEngine`` is the capability the orchestrator and the watch controller
depend on. ``SubprocessEngine`` drives an external engine process that reads
one inline configuration as JSON on stdin.
"""

from __future__ import annotations

import asyncio
import json
import time
from abc import ABC, abstractmethod
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger

from .core.errors import EngineBuildError, ErrorContext, PluginError, handle_build_error
from .core.models import BuildConfiguration, EngineResult
from .plugins import SourceTransform

DEFAULT_ENGINE_COMMAND: List[str] = ["node", ".vite/engine.mjs"]
STDERR_TAIL_LINES = 50


class BundleEngine(ABC):
    """Capability interface of the external bundling engine."""

    @abstractmethod
    async def build(self, config: BuildConfiguration) -> EngineResult:
        """
        Run one build to completion.

        Raises:
            EngineBuildError: If the build fails.
            PluginError: If a source transform fails on a file.
        """

    @abstractmethod
    async def watch(self, config: BuildConfiguration) -> EngineResult:
        """Start a persistent watch build; returns only when the engine exits."""


class SubprocessEngine(BundleEngine):
    """
    Engine adapter running the bundler as a child process.

    The configuration is written to stdin as JSON; exit code 0 means success.
    When the process fails, the last stderr line is checked for a JSON error
    payload carrying a ``plugin`` field so transform failures can be told
    apart from other build errors.

    One-shot builds collect the engine output and return it. Watch builds
    relay it line by line through the logger while the process runs.
    """

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        cwd: Optional[Union[Path, str]] = None,
        transforms: Iterable[SourceTransform] = (),
        verbose: bool = False,
    ) -> None:
        self.command = list(command or DEFAULT_ENGINE_COMMAND)
        self.cwd = Path(cwd).resolve() if cwd else Path.cwd()
        self.transforms = {transform.name: transform for transform in transforms}
        self.verbose = verbose

        logger.bind(command=self.command, cwd=str(self.cwd)).debug(
            "Initialized SubprocessEngine"
        )

    async def build(self, config: BuildConfiguration) -> EngineResult:
        cmd = self.command
        cmd_str = " ".join(cmd)
        logger.info(f"Running engine for {config.package_name}: {cmd_str}")
        start_time = time.time()

        process = await self._spawn(cmd, start_time)
        stdout, stderr = await process.communicate(self._payload(config))

        result = EngineResult(
            success=process.returncode == 0,
            output=stdout.decode("utf-8", errors="replace").strip(),
            error=stderr.decode("utf-8", errors="replace").strip(),
            exit_code=process.returncode or 0,
            execution_time=time.time() - start_time,
        )

        if self.verbose and result.output:
            logger.info(f"Engine output: {result.output}")

        return self._finish(config, cmd_str, result)

    async def watch(self, config: BuildConfiguration) -> EngineResult:
        cmd = [*self.command, "--watch"]
        cmd_str = " ".join(cmd)
        logger.info(f"Starting watch engine for {config.package_name}: {cmd_str}")
        start_time = time.time()

        process = await self._spawn(cmd, start_time)
        stderr_tail: Deque[str] = deque(maxlen=STDERR_TAIL_LINES)

        try:
            try:
                process.stdin.write(self._payload(config))
                await process.stdin.drain()
            except (BrokenPipeError, ConnectionResetError) as e:
                logger.warning(f"Engine closed stdin early: {e}")
            finally:
                process.stdin.close()

            await asyncio.gather(
                self._relay(process.stdout, config.package_name, "INFO"),
                self._relay(process.stderr, config.package_name, "WARNING", stderr_tail),
            )
            returncode = await process.wait()
        finally:
            if process.returncode is None:
                logger.info(f"Stopping watch engine for {config.package_name}")
                process.kill()
                await process.wait()

        result = EngineResult(
            success=returncode == 0,
            error="\n".join(stderr_tail),
            exit_code=returncode,
            execution_time=time.time() - start_time,
        )
        return self._finish(config, cmd_str, result)

    async def _spawn(self, cmd: List[str], start_time: float) -> asyncio.subprocess.Process:
        try:
            # No timeout: watch builds only end with the process.
            return await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
            )
        except OSError as e:
            raise handle_build_error(
                "SubprocessEngine._spawn",
                e,
                context=ErrorContext(
                    command=" ".join(cmd),
                    working_directory=self.cwd,
                    execution_time=time.time() - start_time,
                ),
            )

    @staticmethod
    def _payload(config: BuildConfiguration) -> bytes:
        return json.dumps(config.to_engine_dict()).encode("utf-8")

    @staticmethod
    async def _relay(
        stream: asyncio.StreamReader,
        package_name: str,
        level: str,
        tail: Optional[Deque[str]] = None,
    ) -> None:
        """Log each line of an engine stream as it arrives."""
        async for raw in stream:
            line = raw.decode("utf-8", errors="replace").rstrip()
            if not line:
                continue
            logger.log(level, f"[{package_name}] {line}")
            if tail is not None:
                tail.append(line)

    def _finish(
        self, config: BuildConfiguration, cmd_str: str, result: EngineResult
    ) -> EngineResult:
        if result.failed:
            raise self._classify_failure(config, cmd_str, result)

        logger.bind(execution_time=result.execution_time).debug(
            f"Engine finished {config.package_name} in {result.execution_time:.2f}s"
        )
        return result

    def _classify_failure(
        self, config: BuildConfiguration, cmd_str: str, result: EngineResult
    ) -> EngineBuildError:
        context = ErrorContext(
            command=cmd_str,
            exit_code=result.exit_code,
            working_directory=self.cwd,
            stdout=result.output or None,
            stderr=result.error or None,
            execution_time=result.execution_time,
        )

        details = self._parse_error_payload(result.error)
        plugin = details.get("plugin")
        if plugin in self.transforms:
            return PluginError(
                f"Plugin {plugin} failed while building {config.package_name}: "
                f"{details.get('message', 'unknown error')}",
                plugin=plugin,
                source_file=details.get("id"),
                package_name=config.package_name,
                context=context,
            )

        return EngineBuildError(
            f"Engine build failed for {config.package_name} "
            f"(exit code {result.exit_code})",
            package_name=config.package_name,
            context=context,
        )

    @staticmethod
    def _parse_error_payload(stderr: str) -> Dict[str, Any]:
        lines = [line for line in stderr.splitlines() if line.strip()]
        if not lines:
            return {}
        try:
            payload = json.loads(lines[-1])
        except json.JSONDecodeError:
            return {}
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            payload = payload["error"]
        return payload if isinstance(payload, dict) else {}
