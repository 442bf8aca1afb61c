"""
Pytest configuration and shared fixtures for Tailbreeze tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from tailbreeze.core.platform import PlatformInfo, clear_platform_cache
from tailbreeze.tailwind.provisioner import Provisioner

# ruff: noqa: F401
from tests.fixtures.binaries import fake_cli_factory


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that download the real Tailwind CLI",
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip integration tests unless --integration flag is provided.
    Skip POSIX-only tests on Windows.
    """
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)

    if os.name == "nt":
        skip_posix = pytest.mark.skip(reason="requires a POSIX shell")
        for item in items:
            if "posix" in item.keywords:
                item.add_marker(skip_posix)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "posix: marks tests that run fake CLI shell scripts"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch) -> Path:
    """Create isolated home directory and tool cache for tests."""
    fake_home = temp_dir / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))
    monkeypatch.setenv("LOCALAPPDATA", str(fake_home / "AppData" / "Local"))
    monkeypatch.delenv("TAILBREEZE_CACHE_DIR", raising=False)

    return fake_home


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Empty tool cache directory."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def linux_platform() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def provisioner(cache_dir: Path, linux_platform: PlatformInfo) -> Provisioner:
    """Provisioner on an empty cache that believes it runs on linux-x64."""
    return Provisioner(cache_dir=cache_dir, platform=linux_platform, download_timeout=10)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Minimal Flask-style project root with a templates directory."""
    root = tmp_path / "project"
    (root / "templates").mkdir(parents=True)
    (root / "static").mkdir()
    (root / "templates" / "index.html").write_text(
        '<div class="p-4 text-blue-500">Hello</div>\n'
    )
    return root


@pytest.fixture
def no_network(monkeypatch):
    """Disable network access for tests."""
    import socket

    def guard(*args, **kwargs):
        raise RuntimeError("Network access not allowed in this test")

    monkeypatch.setattr(socket, "socket", guard)


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset cached platform detection between tests."""
    clear_platform_cache()
    yield
    clear_platform_cache()
