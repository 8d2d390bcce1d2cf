#!/usr/bin/env python3
"""
Tests for watch mode.
"""

from unittest.mock import AsyncMock

import pytest

from bundle_helper.core.errors import ConfigurationError
from bundle_helper.core.models import EngineResult, MinifyMode
from bundle_helper.core.registry import PackageRegistry
from bundle_helper.engine import BundleEngine
from bundle_helper.plugins import GrammarTransform
from bundle_helper.synthesizer import ConfigSynthesizer
from bundle_helper.watch import WatchModeController


@pytest.fixture
def synthesizer(tmp_path):
    registry = PackageRegistry.from_entries(
        {"mermaid": "mermaid.ts", "mermaid-mindmap": "registry.ts"},
        dependencies=("d3",),
        root=tmp_path,
    )
    return ConfigSynthesizer(registry, GrammarTransform())


@pytest.fixture
def mock_engine():
    engine = AsyncMock(spec=BundleEngine)
    engine.watch.return_value = EngineResult(success=True)
    return engine


def test_watch_intent_is_unminified_and_not_core(synthesizer, mock_engine):
    intent = WatchModeController(synthesizer, mock_engine, "mermaid").intent()

    assert intent.watch is True
    assert intent.core is False
    assert intent.minify is MinifyMode.NONE


@pytest.mark.asyncio
async def test_run_submits_single_watch_build(synthesizer, mock_engine):
    controller = WatchModeController(synthesizer, mock_engine, "mermaid")

    result = await controller.run()

    assert result.success
    mock_engine.watch.assert_awaited_once()
    mock_engine.build.assert_not_awaited()
    config = mock_engine.watch.await_args.args[0]
    assert config.package_name == "mermaid"
    assert config.core is False
    assert config.externals == ("require", "fs", "path")
    assert config.watch is not None and config.watch.include == "src/**"
    assert config.file_names == ("[name].esm.mjs", "[name].js")


@pytest.mark.asyncio
async def test_unknown_watch_package(synthesizer, mock_engine):
    controller = WatchModeController(synthesizer, mock_engine, "nope")

    with pytest.raises(ConfigurationError):
        await controller.run()

    mock_engine.watch.assert_not_awaited()
