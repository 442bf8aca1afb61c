"""
Tests for host environment and settings resolution.
"""

from pathlib import Path

import pytest
from flask import Flask

from tailbreeze.config.parser import TailbreezeOptions, Toggle
from tailbreeze.core.exceptions import ConfigError, InvalidVersionSpec
from tailbreeze.hosting.environment import (
    HostEnvironment,
    provisioner_from_options,
    resolve_settings,
)


@pytest.fixture
def environment(tmp_path):
    return HostEnvironment(
        content_root=tmp_path, static_root=tmp_path / "static", is_development=True
    )


class TestResolveSettings:
    def test_paths(self, environment, tmp_path):
        settings = resolve_settings(TailbreezeOptions(), environment)

        assert settings.input_path == tmp_path / "styles" / "app.css"
        assert settings.output_path == tmp_path / "static" / "css" / "app.css"
        assert settings.config_path == tmp_path / "tailwind.config.js"
        assert settings.content_root == tmp_path

    def test_no_config_path(self, environment):
        settings = resolve_settings(TailbreezeOptions(config_path=None), environment)

        assert settings.config_path is None

    def test_auto_toggles_in_development(self, environment):
        """Test development means fallback on and minify off."""
        settings = resolve_settings(TailbreezeOptions(), environment)

        assert settings.fallback_enabled is True
        assert settings.minify is False
        assert settings.is_development is True

    def test_auto_toggles_in_production(self, tmp_path):
        env = HostEnvironment(tmp_path, tmp_path / "static", is_development=False)

        settings = resolve_settings(TailbreezeOptions(), env)

        assert settings.fallback_enabled is False
        assert settings.minify is True

    def test_explicit_toggles(self, environment):
        options = TailbreezeOptions(cdn_fallback=Toggle.OFF, minify=Toggle.ON)

        settings = resolve_settings(options, environment)

        assert settings.fallback_enabled is False
        assert settings.minify is True

    def test_invalid_version(self, environment):
        with pytest.raises(InvalidVersionSpec):
            resolve_settings(TailbreezeOptions(tailwind_version="abc"), environment)

    def test_unknown_major_rejected(self, environment):
        with pytest.raises(InvalidVersionSpec, match="known: 3, 4"):
            resolve_settings(TailbreezeOptions(tailwind_version="5"), environment)

    def test_major_from_injected_table(self, environment):
        options = TailbreezeOptions(
            tailwind_version="5", major_releases={4: "latest", 5: "v5.0.0"}
        )

        assert resolve_settings(options, environment).version.major == 5

    def test_additional_arguments_split_once(self, environment):
        options = TailbreezeOptions(additional_arguments="--poll --content 'a b'")

        settings = resolve_settings(options, environment)

        assert settings.additional_arguments == ("--poll", "--content", "a b")

    def test_malformed_additional_arguments(self, environment):
        options = TailbreezeOptions(additional_arguments='--foo "unterminated')

        with pytest.raises(ConfigError):
            resolve_settings(options, environment)


class TestFromFlask:
    def test_from_flask(self, tmp_path):
        app = Flask("testapp", root_path=str(tmp_path))
        app.debug = True

        env = HostEnvironment.from_flask(app)

        assert env.content_root == tmp_path
        assert env.static_root == tmp_path / "static"
        assert env.is_development is True


class TestProvisionerFromOptions:
    def test_uses_configured_cache_and_tables(self, tmp_path):
        options = TailbreezeOptions(
            cache_dir=str(tmp_path / "cli-cache"),
            major_releases={3: "v3.4.2", 4: "latest"},
            download_timeout=42,
        )

        provisioner = provisioner_from_options(options)

        assert provisioner.cache_dir == Path(tmp_path / "cli-cache")
        assert provisioner.download_timeout == 42
        assert provisioner.resolver.major_releases == {3: "v3.4.2", 4: "latest"}
