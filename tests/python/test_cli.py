#!/usr/bin/env python3
"""
Tests for the command-line entry point.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from bundle_helper import cli
from bundle_helper.core.errors import EngineBuildError
from bundle_helper.core.models import EngineResult
from bundle_helper.engine import BundleEngine


@pytest.fixture
def project_dir(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"x": "1", "y": "2"}}))
    (tmp_path / "bundle.json").write_text(
        json.dumps({"packages": {"alpha": "alpha.ts", "beta": "beta.ts"}})
    )
    return tmp_path


@pytest.fixture
def mock_engine():
    engine = AsyncMock(spec=BundleEngine)
    engine.build.return_value = EngineResult(success=True)
    engine.watch.return_value = EngineResult(success=True)
    return engine


@pytest.fixture
def patched_engine(mock_engine):
    with patch("bundle_helper.cli.SubprocessEngine", return_value=mock_engine) as factory:
        yield factory


def test_parse_args_watch_flag():
    assert cli.parse_args(["--watch"]).watch is True
    assert cli.parse_args([]).watch is False


def test_parse_args_ignores_other_arguments():
    args = cli.parse_args(["--minify", "extra", "--watch"])

    assert args.watch is True


@pytest.mark.asyncio
async def test_one_shot_build_success(project_dir, mock_engine, patched_engine):
    exit_code = await cli.amain([], cwd=project_dir)

    assert exit_code == 0
    assert mock_engine.build.await_count == 6
    mock_engine.watch.assert_not_awaited()
    _, kwargs = patched_engine.call_args
    assert kwargs["cwd"].resolve() == project_dir.resolve()


@pytest.mark.asyncio
async def test_one_shot_build_failure_sets_exit_code(project_dir, mock_engine, patched_engine):
    async def build(config):
        if config.package_name == "alpha" and config.core:
            raise EngineBuildError("core failed")
        return EngineResult(success=True)

    mock_engine.build.side_effect = build

    exit_code = await cli.amain([], cwd=project_dir)

    assert exit_code == 1
    assert mock_engine.build.await_count == 6


@pytest.mark.asyncio
async def test_watch_mode_runs_default_package(project_dir, mock_engine, patched_engine):
    exit_code = await cli.amain(["--watch"], cwd=project_dir)

    assert exit_code == 0
    mock_engine.build.assert_not_awaited()
    config = mock_engine.watch.await_args.args[0]
    assert config.package_name == "alpha"
    assert config.watch is not None
    assert config.core is False


@pytest.mark.asyncio
async def test_configuration_error_returns_one(tmp_path, mock_engine, patched_engine):
    (tmp_path / "bundle.json").write_text(json.dumps({"packages": {"alpha": "a.ts"}}))

    exit_code = await cli.amain([], cwd=tmp_path)

    assert exit_code == 1
    mock_engine.build.assert_not_awaited()


def test_main_returns_exit_code(project_dir, mock_engine, patched_engine, monkeypatch):
    monkeypatch.chdir(project_dir)
    monkeypatch.setattr(cli, "setup_logging", lambda: None)

    assert cli.main([]) == 0


@pytest.mark.asyncio
async def test_engine_verbose_follows_log_level(project_dir, patched_engine, monkeypatch):
    monkeypatch.delenv(cli.LOG_LEVEL_ENV, raising=False)
    await cli.amain([], cwd=project_dir)
    assert patched_engine.call_args.kwargs["verbose"] is False

    monkeypatch.setenv(cli.LOG_LEVEL_ENV, "debug")
    await cli.amain([], cwd=project_dir)
    assert patched_engine.call_args.kwargs["verbose"] is True
