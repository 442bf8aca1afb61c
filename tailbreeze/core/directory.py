"""
Directory structure management for Tailbreeze.

This module resolves the global tool cache used for provisioned Tailwind
CLI binaries and makes sure it exists and is writable.

Directory Structure:
    Tool Cache (~/.tailbreeze/cli/ or %LOCALAPPDATA%\\Tailbreeze\\cli\\):
        - <version>/      : One directory per canonical version string
          - tailwindcss   : The binary (tailwindcss.exe on Windows)
        - lock/           : Installation lock files
"""

import os
from pathlib import Path
from typing import Optional

CACHE_DIR_ENV = "TAILBREEZE_CACHE_DIR"


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


class DirectoryCreationError(DirectoryError):
    """Raised when directory creation fails."""

    pass


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific tool cache directory path.

    The ``TAILBREEZE_CACHE_DIR`` environment variable overrides the default.

    Returns:
        Path: The tool cache directory path.
            - Windows: %LOCALAPPDATA%\\Tailbreeze\\cli
            - Linux/macOS: ~/.tailbreeze/cli

    Example:
        >>> cache_dir = get_global_cache_dir()
        >>> print(cache_dir)
        /home/user/.tailbreeze/cli  # on Linux
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if os.name == "nt":  # Windows
        local_app_data = os.environ.get("LOCALAPPDATA")
        if not local_app_data:
            raise DirectoryError(
                "LOCALAPPDATA environment variable is not set. "
                "Cannot determine Tailbreeze cache directory."
            )
        return Path(local_app_data) / "Tailbreeze" / "cli"
    else:  # Linux/macOS
        return Path.home() / ".tailbreeze" / "cli"


def verify_directory_writable(path: Path) -> bool:
    """
    Verify that a directory exists and is writable.

    Args:
        path: Directory path to verify.

    Returns:
        bool: True if directory exists and is writable, False otherwise.
    """
    if not path.is_dir():
        return False

    # Try to create a temporary file to test write permissions
    try:
        test_file = path / ".write_test"
        test_file.touch()
        test_file.unlink()
        return True
    except OSError:
        return False


def ensure_cache_structure(cache_dir: Optional[Path] = None) -> Path:
    """
    Create the tool cache directory structure if it doesn't exist.

    Args:
        cache_dir: Cache root to create (default: :func:`get_global_cache_dir`)

    Returns:
        Path: The cache root.

    Raises:
        DirectoryCreationError: If directory creation fails or the
            directory is not writable.
    """
    root = Path(cache_dir) if cache_dir is not None else get_global_cache_dir()

    for directory in (root, root / "lock"):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(
                f"Failed to create cache directory at {directory}: {e}"
            ) from e

    if not verify_directory_writable(root):
        raise DirectoryCreationError(
            f"Cache directory at {root} is not writable. "
            "Please check directory permissions."
        )

    return root


__all__ = [
    "CACHE_DIR_ENV",
    "DirectoryError",
    "DirectoryCreationError",
    "get_global_cache_dir",
    "verify_directory_writable",
    "ensure_cache_structure",
]
