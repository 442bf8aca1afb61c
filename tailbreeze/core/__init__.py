"""
Core functionality for Tailbreeze.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    get_global_cache_dir,
    ensure_cache_structure,
    verify_directory_writable,
    DirectoryError,
)

from .locking import (
    LockManager,
    LockTimeout,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    is_supported_platform,
    platform_identifier,
    get_supported_platforms,
    clear_platform_cache,
)

from .process import (
    ProcessResult,
    ProcessRunner,
    WatchHandle,
    make_log_sink,
)

from .exceptions import (
    TailbreezeError,
    OperationCancelled,
    ConfigError,
    InvalidVersionSpec,
    UnsupportedPlatform,
    InstallationFailed,
    ProcessError,
    ProcessLaunchFailed,
    ProcessExitedNonZero,
    ProcessTimeout,
    ArtifactMissing,
)

__all__ = [
    "get_global_cache_dir",
    "ensure_cache_structure",
    "verify_directory_writable",
    "DirectoryError",
    "LockManager",
    "LockTimeout",
    "PlatformInfo",
    "detect_platform",
    "is_supported_platform",
    "platform_identifier",
    "get_supported_platforms",
    "clear_platform_cache",
    "ProcessResult",
    "ProcessRunner",
    "WatchHandle",
    "make_log_sink",
    "TailbreezeError",
    "OperationCancelled",
    "ConfigError",
    "InvalidVersionSpec",
    "UnsupportedPlatform",
    "InstallationFailed",
    "ProcessError",
    "ProcessLaunchFailed",
    "ProcessExitedNonZero",
    "ProcessTimeout",
    "ArtifactMissing",
]
