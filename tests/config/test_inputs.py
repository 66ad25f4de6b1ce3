"""
Tests for layered input resolution.
"""

import logging

import pytest

from maturinkit.config.inputs import (
    ActionInputs,
    InputProvider,
    env_var_name,
    load_config_file,
    load_inputs,
)
from maturinkit.core.exceptions import ConfigError


class TestEnvVarName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("target", "INPUT_TARGET"),
            ("maturin-version", "INPUT_MATURIN-VERSION"),
            ("rust toolchain", "INPUT_RUST_TOOLCHAIN"),
        ],
    )
    def test_name(self, name, expected):
        assert env_var_name(name) == expected


class TestLoadConfigFile:
    """Test load_config_file."""

    def test_missing_optional_file(self, tmp_path):
        assert load_config_file(tmp_path / "maturinkit.yaml") == {}

    def test_missing_required_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "maturinkit.yaml", required=True)

    def test_values_are_strings(self, tmp_path):
        config = tmp_path / "maturinkit.yaml"
        config.write_text(
            "manylinux: 2014\n"
            "args: --release --out dist\n"
            "maturin-version: v1.4.0\n"
            "container:\n"
        )

        assert load_config_file(config) == {
            "manylinux": "2014",
            "args": "--release --out dist",
            "maturin-version": "v1.4.0",
            "container": "",
        }

    def test_empty_file(self, tmp_path):
        config = tmp_path / "maturinkit.yaml"
        config.write_text("")

        assert load_config_file(config) == {}

    def test_unknown_keys_are_ignored(self, tmp_path, caplog):
        config = tmp_path / "maturinkit.yaml"
        config.write_text("target: aarch64\ntoolchain: nightly\n")

        with caplog.at_level(logging.WARNING):
            assert load_config_file(config) == {"target": "aarch64"}

        assert "Ignoring unknown input 'toolchain'" in caplog.text

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "maturinkit.yaml"
        config.write_text("target: [aarch64\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file(config)

    def test_non_mapping(self, tmp_path):
        config = tmp_path / "maturinkit.yaml"
        config.write_text("- build\n- --release\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config_file(config)


class TestInputProvider:
    """Test InputProvider precedence."""

    def test_defaults(self):
        provider = InputProvider(environ={})

        assert provider.get_input("command") == "build"
        assert provider.get_input("maturin-version") == "latest"
        assert provider.get_input("target") == ""

    def test_environment_beats_config(self):
        provider = InputProvider(
            environ={"INPUT_TARGET": "aarch64"}, config={"target": "armv7"}
        )

        assert provider.get_input("target") == "aarch64"

    def test_layer_beats_environment(self):
        provider = InputProvider(
            [{"target": "x64"}], environ={"INPUT_TARGET": "aarch64"}
        )

        assert provider.get_input("target") == "x64"

    def test_first_layer_wins(self):
        provider = InputProvider([{"args": "--release"}, {"args": "--sdist"}], environ={})

        assert provider.get_input("args") == "--release"

    def test_none_layer_value_is_skipped(self):
        provider = InputProvider([{"target": None}], environ={"INPUT_TARGET": "x64"})

        assert provider.get_input("target") == "x64"

    def test_empty_environment_value_falls_through(self):
        provider = InputProvider(
            environ={"INPUT_MATURIN-VERSION": ""}, config={"maturin-version": "v1.0.0"}
        )

        assert provider.get_input("maturin-version") == "v1.0.0"

    def test_values_are_trimmed(self):
        provider = InputProvider(environ={"INPUT_MANYLINUX": "  2014\n"})

        assert provider.get_input("manylinux") == "2014"

    def test_resolve(self):
        provider = InputProvider(
            environ={
                "INPUT_COMMAND": "publish",
                "INPUT_RUST-TOOLCHAIN": "nightly",
                "INPUT_EXTRA-BUILD-COMMAND": "yum install -y openssl-devel",
            }
        )

        assert provider.resolve() == ActionInputs(
            command="publish",
            rust_toolchain="nightly",
            extra_build_command="yum install -y openssl-devel",
        )


class TestLoadInputs:
    """Test load_inputs."""

    def test_project_config_is_found(self, tmp_path):
        (tmp_path / "maturinkit.yaml").write_text("manylinux: auto\n")

        inputs = load_inputs(environ={}, project_root=tmp_path)

        assert inputs.manylinux == "auto"

    def test_explicit_config_must_exist(self, tmp_path):
        with pytest.raises(ConfigError):
            load_inputs(config_file=tmp_path / "missing.yaml", environ={})

    def test_full_precedence(self, tmp_path):
        config = tmp_path / "build.yaml"
        config.write_text("target: armv7\nmanylinux: 2014\nargs: --release\n")
        environ = {"INPUT_TARGET": "aarch64", "INPUT_MANYLINUX": "2_24"}

        inputs = load_inputs(
            overrides={"target": "x64"}, config_file=config, environ=environ
        )

        assert inputs.target == "x64"
        assert inputs.manylinux == "2_24"
        assert inputs.args == "--release"
        assert inputs.command == "build"
