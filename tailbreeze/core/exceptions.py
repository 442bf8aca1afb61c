"""
Centralized exception hierarchy for Tailbreeze.

This module defines all custom exceptions used across the codebase
so callers can tell configuration mistakes apart from transient
installation or process failures.
"""

from typing import List, Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class TailbreezeError(Exception):
    """Base exception for all Tailbreeze errors."""

    pass


class OperationCancelled(TailbreezeError):
    """Raised when a cancellation signal aborts a download or process."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(TailbreezeError):
    """Configuration parsing or validation error."""

    pass


class InvalidVersionSpec(ConfigError):
    """Raised when a Tailwind version string cannot be parsed."""

    def __init__(self, raw: str, reason: str = ""):
        self.raw = raw
        msg = f"Invalid Tailwind version: {raw!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Provisioning Exceptions
# ============================================================================


class UnsupportedPlatform(TailbreezeError):
    """Raised when the host OS/architecture has no Tailwind CLI build."""

    def __init__(self, os_name: str, arch: str):
        self.os_name = os_name
        self.arch = arch
        super().__init__(f"Unsupported platform: {os_name}-{arch}")


class InstallationFailed(TailbreezeError):
    """Raised when the Tailwind CLI cannot be downloaded or installed.

    The underlying error is always attached as ``__cause__``.
    """

    def __init__(self, version: str, reason: str):
        self.version = version
        self.reason = reason
        super().__init__(f"Failed to install Tailwind CLI {version}: {reason}")


# ============================================================================
# Process Exceptions
# ============================================================================


class ProcessError(TailbreezeError):
    """Base exception for subprocess failures."""

    pass


class ProcessLaunchFailed(ProcessError):
    """Raised when the binary is missing or cannot be executed."""

    def __init__(self, binary: str, reason: str):
        self.binary = binary
        super().__init__(f"Failed to launch {binary}: {reason}")


class ProcessExitedNonZero(ProcessError):
    """Raised for one-shot runs that exit with a non-zero code."""

    def __init__(self, exit_code: int, stderr: Optional[Sequence[str]] = None):
        self.exit_code = exit_code
        self.stderr: List[str] = list(stderr or [])
        msg = f"Tailwind CLI exited with code {exit_code}"
        if self.stderr:
            msg += ":\n" + "\n".join(self.stderr)
        super().__init__(msg)


class ProcessTimeout(ProcessError):
    """Raised when a one-shot run exceeds its timeout."""

    pass


# ============================================================================
# Serving Exceptions
# ============================================================================


class ArtifactMissing(TailbreezeError):
    """Raised when the compiled stylesheet is not present on disk."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Tailwind CSS file not found at {path}")
