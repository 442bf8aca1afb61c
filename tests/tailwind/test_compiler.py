"""
Tests for one-shot compilation.
"""

from unittest.mock import MagicMock

import pytest

from tailbreeze.core.exceptions import (
    ConfigError,
    InstallationFailed,
    InvalidVersionSpec,
    ProcessExitedNonZero,
)
from tailbreeze.core.process import ProcessRunner
from tailbreeze.tailwind.compiler import (
    build_arguments,
    compile_stylesheet,
    split_arguments,
)
from tests.fixtures.binaries import recorded_args


def make_provisioner(cli_path, installed=True):
    provisioner = MagicMock()
    provisioner.runner = ProcessRunner()
    provisioner.ensure_installed.return_value = cli_path
    provisioner.local_path.return_value = cli_path
    provisioner.is_installed.return_value = installed
    return provisioner


class TestBuildArguments:
    def test_minimal(self, tmp_path):
        args = build_arguments(tmp_path / "in.css", tmp_path / "out.css")

        assert args == ["-i", str(tmp_path / "in.css"), "-o", str(tmp_path / "out.css")]

    def test_config_only_when_present(self, tmp_path):
        config = tmp_path / "tailwind.config.js"

        assert "-c" not in build_arguments("in", "out", config)

        config.write_text("export default {}")
        args = build_arguments("in", "out", config)
        assert args[args.index("-c") + 1] == str(config)

    def test_watch_minify_and_extra(self, tmp_path):
        args = build_arguments(
            "in",
            "out",
            None,
            minify=True,
            watch=True,
            additional_arguments='--poll --content "./a b/*.html"',
        )

        assert args == ["-i", "in", "-o", "out", "--watch", "--minify"] + [
            "--poll",
            "--content",
            "./a b/*.html",
        ]

    def test_extra_as_list(self):
        args = build_arguments("in", "out", additional_arguments=["--poll"])

        assert args[-1] == "--poll"


@pytest.mark.posix
class TestCompileStylesheet:
    def test_success(self, tmp_path, fake_cli_factory):
        """Test the stylesheet is built and the input scaffolded."""
        cli = fake_cli_factory()
        input_path = tmp_path / "styles" / "app.css"
        output_path = tmp_path / "static" / "css" / "app.css"

        result = compile_stylesheet(
            input_path,
            output_path,
            minify=True,
            provisioner=make_provisioner(cli),
        )

        assert result.success
        assert result.exit_code == 0
        assert result.error is None
        assert "Rebuilding..." in result.stdout
        assert output_path.read_text() == '@import "tailwindcss";\n'
        assert "--minify" in recorded_args(cli)

    def test_config_scaffolded_and_passed(self, tmp_path, fake_cli_factory, project):
        cli = fake_cli_factory()
        config = project / "tailwind.config.js"

        result = compile_stylesheet(
            project / "styles" / "app.css",
            project / "static" / "app.css",
            config_path=config,
            version="3.4.17",
            project_dir=project,
            provisioner=make_provisioner(cli),
        )

        assert result.success
        assert "module.exports" in config.read_text()
        assert "./templates/" in config.read_text()
        assert recorded_args(cli)[-2:] == ["-c", str(config)]

    def test_non_zero_exit(self, tmp_path, fake_cli_factory):
        """Test a failing CLI yields success=False with stderr in the error."""
        cli = fake_cli_factory(exit_code=1, stderr="Error: unknown utility")

        result = compile_stylesheet(
            tmp_path / "in.css", tmp_path / "out.css", provisioner=make_provisioner(cli)
        )

        assert not result.success
        assert result.exit_code == 1
        assert isinstance(result.error, ProcessExitedNonZero)
        assert result.error.stderr == ["Error: unknown utility"]
        assert "Error: unknown utility" in result.diagnostics

    def test_missing_binary_without_auto_install(self, tmp_path):
        provisioner = make_provisioner(tmp_path / "missing", installed=False)

        result = compile_stylesheet(
            tmp_path / "in.css",
            tmp_path / "out.css",
            auto_install=False,
            provisioner=provisioner,
        )

        assert not result.success
        assert isinstance(result.error, InstallationFailed)
        provisioner.ensure_installed.assert_not_called()

    def test_installation_failure_reported(self, tmp_path):
        provisioner = make_provisioner(None)
        provisioner.ensure_installed.side_effect = InstallationFailed("latest", "offline")

        result = compile_stylesheet(
            tmp_path / "in.css", tmp_path / "out.css", provisioner=provisioner
        )

        assert not result.success
        assert "offline" in result.diagnostics

    def test_invalid_version_reported(self, tmp_path):
        result = compile_stylesheet(
            tmp_path / "in.css",
            tmp_path / "out.css",
            version="banana",
            provisioner=make_provisioner(None),
        )

        assert not result.success
        assert isinstance(result.error, InvalidVersionSpec)

    def test_malformed_extra_arguments_reported(self, tmp_path):
        """Test an unbalanced quote yields a failed result, not an exception."""
        provisioner = make_provisioner(None)

        result = compile_stylesheet(
            tmp_path / "in.css",
            tmp_path / "out.css",
            additional_arguments='"oops',
            provisioner=provisioner,
        )

        assert not result.success
        assert isinstance(result.error, ConfigError)
        assert "additional_arguments" in result.diagnostics
        provisioner.ensure_installed.assert_not_called()


class TestSplitArguments:
    def test_shell_style_string(self):
        assert split_arguments('--content "a b" --poll') == ["--content", "a b", "--poll"]

    def test_empty(self):
        assert split_arguments(None) == []
        assert split_arguments("") == []

    def test_unbalanced_quote(self):
        with pytest.raises(ConfigError, match="No closing quotation"):
            split_arguments("--foo 'bar")
