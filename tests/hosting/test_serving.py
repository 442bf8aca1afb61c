"""
Tests for the framework-neutral serving layer.
"""

import pytest

from tailbreeze.config.parser import TailbreezeOptions, Toggle
from tailbreeze.hosting.environment import HostEnvironment, resolve_settings
from tailbreeze.hosting.serving import (
    CSS_CONTENT_TYPE,
    DEVELOPMENT_CACHE_CONTROL,
    PRODUCTION_CACHE_CONTROL,
    ServingLayer,
    path_matches,
)
from tailbreeze.tailwind.resolver import DEFAULT_CDN_FALLBACK_URLS, ReleaseResolver

SERVE_PATH = "/tailbreeze/app.css"


def make_layer(tmp_path, is_development=True, enabled=True, **options):
    env = HostEnvironment(tmp_path, tmp_path / "static", is_development=is_development)
    settings = resolve_settings(TailbreezeOptions(**options), env)
    return ServingLayer(settings, SERVE_PATH, enabled, ReleaseResolver())


def write_output(tmp_path, text="body{color:red}"):
    output = tmp_path / "static" / "css" / "app.css"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    return output


class TestPathMatches:
    @pytest.mark.parametrize(
        "path",
        ["/tailbreeze/app.css", "/TailBreeze/App.CSS", "/tailbreeze/app.css/extra"],
    )
    def test_matches(self, path):
        assert path_matches(path, SERVE_PATH)

    @pytest.mark.parametrize(
        "path", ["/tailbreeze/app.css2", "/tailbreeze", "/static/app.css", "/"]
    )
    def test_does_not_match(self, path):
        assert not path_matches(path, SERVE_PATH)


class TestHandle:
    def test_pass_through_for_other_paths(self, tmp_path):
        assert make_layer(tmp_path).handle("/index.html") is None

    def test_pass_through_when_disabled(self, tmp_path):
        write_output(tmp_path)

        assert make_layer(tmp_path, enabled=False).handle(SERVE_PATH) is None

    def test_serves_file_in_development(self, tmp_path):
        write_output(tmp_path)

        result = make_layer(tmp_path).handle(SERVE_PATH)

        assert result.status == 200
        assert result.body == b"body{color:red}"
        assert result.headers["Content-Type"] == CSS_CONTENT_TYPE
        assert result.headers["Cache-Control"] == DEVELOPMENT_CACHE_CONTROL

    def test_production_cache_headers(self, tmp_path):
        write_output(tmp_path)

        result = make_layer(tmp_path, is_development=False).handle(SERVE_PATH)

        assert result.headers["Cache-Control"] == PRODUCTION_CACHE_CONTROL

    def test_reads_fresh_content_each_request(self, tmp_path):
        """Test a rebuild between requests is visible immediately."""
        layer = make_layer(tmp_path)
        output = write_output(tmp_path, "a{}")
        assert layer.handle(SERVE_PATH).body == b"a{}"

        output.write_text("b{}")

        assert layer.handle(SERVE_PATH).body == b"b{}"

    def test_missing_with_fallback_redirects(self, tmp_path):
        result = make_layer(tmp_path).handle(SERVE_PATH)

        url = DEFAULT_CDN_FALLBACK_URLS[4]
        assert result.status == 302
        assert result.headers["Location"] == url
        assert result.body == f"/* Redirecting to Tailwind CDN: {url} */".encode()

    def test_missing_v3_redirects_to_v3_cdn(self, tmp_path):
        result = make_layer(tmp_path, tailwind_version="3.4").handle(SERVE_PATH)

        assert result.headers["Location"] == DEFAULT_CDN_FALLBACK_URLS[3]

    def test_missing_without_fallback_is_404(self, tmp_path):
        result = make_layer(tmp_path, cdn_fallback=Toggle.OFF).handle(SERVE_PATH)

        assert result.status == 404

    def test_missing_in_production_is_404(self, tmp_path):
        result = make_layer(tmp_path, is_development=False).handle(SERVE_PATH)

        assert result.status == 404

    def test_unreadable_artifact_treated_as_missing(self, tmp_path):
        """Test a directory in place of the file resolves to a status."""
        (tmp_path / "static" / "css" / "app.css").mkdir(parents=True)

        result = make_layer(tmp_path, cdn_fallback=Toggle.OFF).handle(SERVE_PATH)

        assert result.status == 404
