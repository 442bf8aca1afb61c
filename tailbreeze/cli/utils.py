"""
Shared utilities for CLI commands.
"""

import logging
from pathlib import Path
from typing import Optional

from tailbreeze.config.parser import DEFAULT_CONFIG_FILE, TailbreezeOptions, parse_config

logger = logging.getLogger(__name__)


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """Absolute project root (default: current directory)."""
    return Path(path or Path.cwd()).resolve()


def load_options(args) -> TailbreezeOptions:
    """
    Load options for a command.

    An explicit ``--config`` must exist; otherwise ``tailbreeze.yaml`` in the
    project root is used when present, and the defaults when it is not.
    A ``--tailwind-version`` argument overrides the configured version.

    Raises:
        ConfigError: If the configuration file is missing or invalid
    """
    project_root = resolve_project_root(getattr(args, "project_root", None))
    config_file = getattr(args, "config", None)

    if config_file:
        options = parse_config(Path(config_file))
    elif (project_root / DEFAULT_CONFIG_FILE).exists():
        options = parse_config(project_root / DEFAULT_CONFIG_FILE)
    else:
        logger.debug("No configuration file found, using defaults")
        options = TailbreezeOptions()

    version = getattr(args, "tailwind_version", None)
    if version:
        options.tailwind_version = version

    return options


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for Windows console.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        print(message.encode("ascii", "replace").decode("ascii"), file=file)


__all__ = ["load_options", "resolve_project_root", "safe_print"]
