"""
One-shot stylesheet compilation.

:func:`compile_stylesheet` is the build-time entry point: it scaffolds
missing project files, provisions the CLI, runs it once and reports the
outcome as a :class:`CompileResult` instead of raising.
"""

import logging
import shlex
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from tailbreeze.core.exceptions import (
    ConfigError,
    InstallationFailed,
    ProcessExitedNonZero,
    TailbreezeError,
)
from tailbreeze.core.process import make_log_sink
from tailbreeze.tailwind.provisioner import Provisioner
from tailbreeze.tailwind.scaffold import ensure_config_file, ensure_input_file
from tailbreeze.tailwind.version import parse_version

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Outcome of a one-shot compile."""

    success: bool
    exit_code: Optional[int] = None
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def diagnostics(self) -> str:
        """Human-readable summary of what went wrong (empty on success)."""
        if self.success:
            return ""
        lines = [str(self.error)] if self.error else []
        if not isinstance(self.error, ProcessExitedNonZero):
            lines.extend(self.stderr)
        return "\n".join(lines)


def split_arguments(value: Union[str, Sequence[str], None]) -> List[str]:
    """
    Turn extra CLI arguments into a list.

    Strings are split shell-style; sequences are copied as given.

    Raises:
        ConfigError: If the string cannot be split, e.g. an unbalanced quote
    """
    if not value:
        return []
    if not isinstance(value, str):
        return list(value)
    try:
        return shlex.split(value)
    except ValueError as e:
        raise ConfigError(f"Invalid additional_arguments {value!r}: {e}") from e


def build_arguments(
    input_path: Path,
    output_path: Path,
    config_path: Optional[Path] = None,
    minify: bool = False,
    watch: bool = False,
    additional_arguments: Union[str, Sequence[str], None] = None,
) -> List[str]:
    """
    Assemble Tailwind CLI arguments.

    ``config_path`` is only passed when the file exists.
    ``additional_arguments`` may be a shell-style string or a list.

    Raises:
        ConfigError: If ``additional_arguments`` cannot be split
    """
    args = ["-i", str(input_path), "-o", str(output_path)]

    if watch:
        args.append("--watch")

    if config_path is not None and Path(config_path).exists():
        args += ["-c", str(config_path)]

    if minify:
        args.append("--minify")

    args += split_arguments(additional_arguments)

    return args


def compile_stylesheet(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config_path: Union[str, Path, None] = None,
    minify: bool = False,
    additional_arguments: Union[str, Sequence[str], None] = None,
    version: str = "latest",
    auto_install: bool = True,
    project_dir: Union[str, Path, None] = None,
    provisioner: Optional[Provisioner] = None,
    cancel_event: Optional[threading.Event] = None,
) -> CompileResult:
    """
    Compile a stylesheet with the Tailwind CLI once.

    Args:
        input_path: Source stylesheet (created with defaults if missing)
        output_path: Destination file
        config_path: Tailwind config (created with defaults if given and missing)
        minify: Pass ``--minify``
        additional_arguments: Extra CLI arguments
        version: Tailwind version request
        auto_install: Download the CLI if it is not installed
        project_dir: Scanned for content directories when scaffolding config
        provisioner: Provisioner to use (default: a new one)
        cancel_event: Aborts the download or the running process when set

    Returns:
        CompileResult with exit code and captured output
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    config = Path(config_path) if config_path else None
    stdout: List[str] = []
    stderr: List[str] = []

    try:
        spec = parse_version(version)
        extra = split_arguments(additional_arguments)
        provisioner = provisioner or Provisioner()

        ensure_input_file(input_path, spec)
        if config is not None:
            ensure_config_file(
                config, spec, Path(project_dir) if project_dir else None
            )

        if auto_install:
            cli_path = provisioner.ensure_installed(spec, cancel_event=cancel_event)
        else:
            cli_path = provisioner.local_path(spec)
            if not provisioner.is_installed(spec):
                raise InstallationFailed(
                    str(spec),
                    f"Tailwind CLI not found at {cli_path} and auto-install is disabled",
                )

        output_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Compiling Tailwind CSS...")
        result = provisioner.runner.run_captured(
            cli_path,
            build_arguments(
                input_path, output_path, config, minify, False, extra
            ),
            sink=make_log_sink(stdout_level=logging.INFO),
            cwd=Path(project_dir) if project_dir else None,
            cancel_event=cancel_event,
        )
        stdout, stderr = result.stdout, result.stderr
    except (TailbreezeError, OSError) as e:
        logger.error(f"Tailwind compilation failed: {e}")
        return CompileResult(success=False, stdout=stdout, stderr=stderr, error=e)

    if not result.ok:
        error = ProcessExitedNonZero(result.exit_code, result.stderr)
        logger.error(str(error))
        return CompileResult(
            success=False,
            exit_code=result.exit_code,
            stdout=stdout,
            stderr=stderr,
            error=error,
        )

    logger.info(f"Tailwind CSS compiled successfully to {output_path}")
    return CompileResult(success=True, exit_code=0, stdout=stdout, stderr=stderr)


__all__ = ["CompileResult", "build_arguments", "compile_stylesheet", "split_arguments"]
