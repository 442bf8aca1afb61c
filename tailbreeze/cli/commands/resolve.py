"""Resolve command: show what a version request resolves to."""

import logging

from tailbreeze.cli.utils import load_options, safe_print
from tailbreeze.core.platform import platform_identifier
from tailbreeze.hosting.environment import provisioner_from_options
from tailbreeze.tailwind.version import parse_version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command. Nothing is downloaded.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    options = load_options(args)
    spec = parse_version(options.tailwind_version)
    provisioner = provisioner_from_options(options)
    os_name, arch = platform_identifier(provisioner.platform)
    resolver = provisioner.resolver

    safe_print(f"Version:      {spec}")
    safe_print(f"Platform:     {os_name}-{arch}")
    safe_print(f"Download URL: {resolver.download_url(spec, os_name, arch)}")
    safe_print(f"Install path: {provisioner.local_path(spec)}")
    safe_print(f"Installed:    {'yes' if provisioner.is_installed(spec) else 'no'}")
    safe_print(f"CDN fallback: {resolver.cdn_fallback_url(spec)}")
    return 0
