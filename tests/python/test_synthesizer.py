#!/usr/bin/env python3
"""
Tests for configuration synthesis.
"""

from pathlib import Path

import pytest

from bundle_helper.core.errors import ConfigurationError
from bundle_helper.core.models import (
    HOST_MODULES,
    BuildIntent,
    MinifyMode,
    ModuleFormat,
    WatchSpec,
)
from bundle_helper.core.registry import PackageRegistry
from bundle_helper.plugins import GrammarTransform
from bundle_helper.synthesizer import ConfigSynthesizer, synthesize_config
from bundle_helper.variants import variant_intents


@pytest.fixture
def registry(tmp_path: Path) -> PackageRegistry:
    return PackageRegistry.from_entries(
        {"alpha": "alpha.ts", "beta": "registry.ts"},
        dependencies=("x", "y"),
        root=tmp_path,
    )


@pytest.fixture
def synthesizer(registry: PackageRegistry) -> ConfigSynthesizer:
    return ConfigSynthesizer(registry, GrammarTransform())


def test_unknown_package_raises_configuration_error(synthesizer):
    with pytest.raises(ConfigurationError) as exc_info:
        synthesizer.synthesize(BuildIntent(package_name="missing"))

    assert exc_info.value.invalid_option == "package_name"
    assert exc_info.value.context.additional_info["known_packages"] == ["alpha", "beta"]


def test_paths_resolved_from_descriptor(synthesizer, tmp_path):
    config = synthesizer.synthesize(BuildIntent(package_name="beta"))

    assert config.entry == tmp_path / "packages" / "beta" / "src" / "registry.ts"
    assert config.out_dir == tmp_path / "packages" / "beta" / "dist"
    assert config.lib_name == "beta"
    assert config.empty_out_dir is False


def test_synthesis_is_pure(synthesizer):
    intent = BuildIntent(package_name="alpha", minify=MinifyMode.FAST)

    first = synthesizer.synthesize(intent)
    second = synthesizer.synthesize(intent)

    assert first == second
    assert first is not second
    assert first.to_engine_dict() == second.to_engine_dict()


@pytest.mark.parametrize("package_name", ["alpha", "beta"])
@pytest.mark.parametrize("minify", list(MinifyMode))
@pytest.mark.parametrize("core", [False, True])
def test_externals_follow_core_mode(synthesizer, registry, package_name, minify, core):
    config = synthesizer.synthesize(
        BuildIntent(package_name=package_name, minify=minify, core=core)
    )

    if core:
        expected = set(HOST_MODULES) | set(registry.get(package_name).dependencies)
    else:
        expected = set(HOST_MODULES)
    assert set(config.externals) == expected


def test_alpha_scenario(synthesizer):
    configs = synthesizer.synthesize_all(*variant_intents("alpha"))

    assert len(configs) == 3
    core_configs = [config for config in configs if config.core]
    assert len(core_configs) == 1
    assert core_configs[0].externals == ("require", "fs", "path", "x", "y")
    for config in configs:
        if not config.core:
            assert config.externals == ("require", "fs", "path")


def test_non_core_outputs_are_esm_and_umd(synthesizer):
    unminified = synthesizer.synthesize(BuildIntent(package_name="alpha"))
    minified = synthesizer.synthesize(
        BuildIntent(package_name="alpha", minify=MinifyMode.FAST)
    )

    assert [o.format for o in unminified.outputs] == [ModuleFormat.ESM, ModuleFormat.UMD]
    assert unminified.file_names == ("[name].esm.mjs", "[name].js")
    assert minified.file_names == ("[name].esm.min.mjs", "[name].min.js")
    assert all(o.sourcemap for o in unminified.outputs + minified.outputs)


def test_core_output_is_single_esm(synthesizer):
    config = synthesizer.synthesize(
        BuildIntent(package_name="alpha", minify=MinifyMode.FULL, core=True)
    )

    assert len(config.outputs) == 1
    assert config.outputs[0].format == ModuleFormat.ESM
    assert config.file_names == ("[name].core.mjs",)


def test_standard_variant_file_names_are_distinct(synthesizer):
    names = [
        name
        for config in synthesizer.synthesize_all(*variant_intents("alpha"))
        for name in config.file_names
    ]

    assert len(names) == len(set(names))


def test_plugin_attached_and_extension_resolved(synthesizer):
    for intent in variant_intents("alpha"):
        config = synthesizer.synthesize(intent)
        assert config.plugins == ({"name": "jison", "module": "./jisonPlugin.js"},)
        assert config.resolve_extensions == (".jison", ".js", ".ts", ".json")


def test_watch_accepted_with_any_combination(synthesizer):
    config = synthesizer.synthesize(
        BuildIntent(package_name="alpha", minify=MinifyMode.FULL, core=True, watch=True)
    )

    assert config.watch == WatchSpec(include="src/**")
    assert config.core is True


def test_no_watch_by_default(synthesizer):
    assert synthesizer.synthesize(BuildIntent(package_name="alpha")).watch is None


def test_engine_dict_shape(registry):
    config = synthesize_config(
        BuildIntent(package_name="alpha", watch=True), registry, GrammarTransform()
    )

    engine = config.to_engine_dict()

    assert engine["configFile"] is False
    assert engine["build"]["emptyOutDir"] is False
    assert engine["build"]["minify"] is False
    assert engine["build"]["lib"]["name"] == "alpha"
    assert engine["build"]["lib"]["fileName"] == "alpha"
    assert engine["build"]["watch"] == {"include": "src/**"}
    assert engine["build"]["rollupOptions"]["external"] == ["require", "fs", "path"]
    assert isinstance(engine["build"]["rollupOptions"]["output"], list)
    assert engine["resolve"]["extensions"] == [".jison", ".js", ".ts", ".json"]


def test_engine_dict_core_output_is_object(registry):
    config = synthesize_config(
        BuildIntent(package_name="alpha", minify=MinifyMode.FULL, core=True),
        registry,
        GrammarTransform(),
    )

    build = config.to_engine_dict()["build"]

    assert build["minify"] is True
    assert "watch" not in build
    assert build["rollupOptions"]["output"] == {
        "name": "alpha",
        "format": "esm",
        "sourcemap": True,
        "entryFileNames": "[name].core.mjs",
    }


def test_fast_minify_maps_to_esbuild(synthesizer):
    config = synthesizer.synthesize(
        BuildIntent(package_name="alpha", minify=MinifyMode.FAST)
    )

    assert config.to_engine_dict()["build"]["minify"] == "esbuild"


def test_core_externals_skip_host_module_dependencies(tmp_path):
    registry = PackageRegistry.from_entries(
        {"alpha": "alpha.ts"}, dependencies=("fs", "x", "path", "y"), root=tmp_path
    )

    config = synthesize_config(
        BuildIntent(package_name="alpha", core=True), registry, GrammarTransform()
    )

    assert config.externals == ("require", "fs", "path", "x", "y")
