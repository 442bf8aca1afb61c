"""
Platform detection for Tailbreeze.

This module maps the current interpreter's operating system and CPU
architecture onto the identifiers used by the standalone Tailwind CSS
release assets (e.g. ``tailwindcss-linux-x64``).

Usage:
    from tailbreeze.core.platform import detect_platform, platform_identifier

    info = detect_platform()
    print(info.platform_string())  # 'linux-x64'

    os_name, arch = platform_identifier()  # raises UnsupportedPlatform
"""

import functools
import platform
from dataclasses import dataclass
from typing import Optional, Tuple

from tailbreeze.core.exceptions import UnsupportedPlatform

SUPPORTED_OS = ("windows", "linux", "macos")
SUPPORTED_ARCH = ("x64", "arm64", "x86")


@dataclass(frozen=True)
class PlatformInfo:
    """
    Normalized platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos', or the raw name)
        arch: CPU architecture ('x64', 'arm64', 'x86', or the raw name)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def executable_name(self) -> str:
        """Name of the Tailwind CLI executable on this platform."""
        return "tailwindcss.exe" if self.is_windows else "tailwindcss"

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.
    Unknown systems are returned verbatim so callers can report them;
    use :func:`is_supported_platform` or :func:`platform_identifier`
    to enforce the supported set.
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """Normalize ``platform.system()`` to 'windows', 'linux' or 'macos'."""
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """Normalize ``platform.machine()`` to 'x64', 'arm64' or 'x86'."""
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    # Return original for unknown architectures
    return machine


def is_supported_platform(info: Optional[PlatformInfo] = None) -> bool:
    """
    Check if a Tailwind CLI build exists for the platform.

    Args:
        info: PlatformInfo to check. If None, detects current platform.
    """
    if info is None:
        info = detect_platform()

    return info.os in SUPPORTED_OS and info.arch in SUPPORTED_ARCH


def platform_identifier(info: Optional[PlatformInfo] = None) -> Tuple[str, str]:
    """
    Get the ``(os, arch)`` pair used in Tailwind release asset names.

    Args:
        info: PlatformInfo to use. If None, detects current platform.

    Returns:
        Tuple of OS and architecture identifiers

    Raises:
        UnsupportedPlatform: If the combination is outside the supported set
    """
    if info is None:
        info = detect_platform()

    if not is_supported_platform(info):
        raise UnsupportedPlatform(info.os, info.arch)

    return info.os, info.arch


def get_supported_platforms() -> list[str]:
    """Get list of all supported platform strings."""
    return [f"{os_name}-{arch}" for os_name in SUPPORTED_OS for arch in SUPPORTED_ARCH]


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "platform_identifier",
    "get_supported_platforms",
    "clear_platform_cache",
    "SUPPORTED_OS",
    "SUPPORTED_ARCH",
]
