"""
Release resolution for the standalone Tailwind CSS CLI.

Maps a :class:`VersionSpec` plus a platform identifier onto the URL of the
matching release asset, and a major version onto the CDN location used
when the compiled stylesheet is unavailable.

Both mappings are plain tables that can be replaced through configuration,
so a new upstream major does not require a code change.
"""

import logging
from typing import Dict, Mapping, Optional

from tailbreeze.core.exceptions import InvalidVersionSpec
from tailbreeze.tailwind.version import LATEST_MAJOR, VersionSpec

logger = logging.getLogger(__name__)

RELEASE_BASE_URL = "https://github.com/tailwindlabs/tailwindcss/releases"

# Release tag used when only a major version is requested.
# "latest" points at the latest published release.
DEFAULT_MAJOR_RELEASES: Dict[int, str] = {
    4: "latest",
    3: "v3.4.17",
}

DEFAULT_CDN_FALLBACK_URLS: Dict[int, str] = {
    4: "https://cdn.jsdelivr.net/npm/@tailwindcss/browser@4",
    3: "https://cdn.tailwindcss.com",
}


class ReleaseResolver:
    """
    Builds download and CDN URLs for Tailwind CLI releases.

    Attributes:
        base_url: Release archive root (no trailing slash)
        major_releases: Major version -> release tag or "latest"
        cdn_fallback_urls: Major version -> CDN fallback URL
    """

    def __init__(
        self,
        base_url: str = RELEASE_BASE_URL,
        major_releases: Optional[Mapping[int, str]] = None,
        cdn_fallback_urls: Optional[Mapping[int, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.major_releases = dict(
            DEFAULT_MAJOR_RELEASES if major_releases is None else major_releases
        )
        self.cdn_fallback_urls = dict(
            DEFAULT_CDN_FALLBACK_URLS
            if cdn_fallback_urls is None
            else cdn_fallback_urls
        )

    @staticmethod
    def asset_name(os_name: str, arch: str) -> str:
        """
        Release asset file name for a platform.

        Example:
            >>> ReleaseResolver.asset_name("windows", "x64")
            'tailwindcss-windows-x64.exe'
        """
        suffix = ".exe" if os_name == "windows" else ""
        return f"tailwindcss-{os_name}-{arch}{suffix}"

    def release_tag(self, spec: VersionSpec) -> str:
        """
        Release tag for a version request, or "latest".

        Raises:
            InvalidVersionSpec: If a major-only request has no table entry
        """
        if spec.is_latest:
            return "latest"

        if spec.is_major_only:
            tag = self.major_releases.get(spec.major)
            if tag is None:
                known = ", ".join(str(m) for m in sorted(self.major_releases))
                raise InvalidVersionSpec(
                    str(spec), f"no release known for major {spec.major}; known: {known}"
                )
            return tag

        return f"v{spec.package_version()}"

    def download_url(self, spec: VersionSpec, os_name: str, arch: str) -> str:
        """
        Download URL of the CLI binary for a version and platform.

        Example:
            >>> ReleaseResolver().download_url(parse_version("3.4.1"), "linux", "x64")
            'https://github.com/tailwindlabs/tailwindcss/releases/download/v3.4.1/tailwindcss-linux-x64'
        """
        asset = self.asset_name(os_name, arch)
        tag = self.release_tag(spec)

        if tag == "latest":
            return f"{self.base_url}/latest/download/{asset}"
        return f"{self.base_url}/download/{tag}/{asset}"

    def cdn_fallback_url(self, spec: VersionSpec) -> str:
        """CDN location serving Tailwind for the requested major line."""
        url = self.cdn_fallback_urls.get(spec.major)
        if url is None:
            logger.debug(
                f"No CDN fallback for major {spec.major}, using v{LATEST_MAJOR}"
            )
            url = self.cdn_fallback_urls.get(
                LATEST_MAJOR, DEFAULT_CDN_FALLBACK_URLS[LATEST_MAJOR]
            )
        return url


__all__ = [
    "RELEASE_BASE_URL",
    "DEFAULT_MAJOR_RELEASES",
    "DEFAULT_CDN_FALLBACK_URLS",
    "ReleaseResolver",
]
