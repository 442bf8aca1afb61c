"""
Subprocess execution for the Tailwind CLI.

Two modes are supported:

- :meth:`ProcessRunner.run` blocks until the process exits and returns its
  exit code.
- :meth:`ProcessRunner.start_watch` launches a long-lived process (watch
  mode) and returns a :class:`WatchHandle` that owns it.

In both modes stdout and stderr are read by one background thread per
stream and every non-blank line is handed to a caller-supplied sink as soon
as it is produced. Lines within a stream keep their order; interleaving
between the two streams is not guaranteed.

Stopping a process always terminates its whole descendant tree (via
``psutil``), since watch-mode tools fork helper processes.
"""

import logging
import os
import signal
import subprocess
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import psutil

from tailbreeze.core.exceptions import (
    OperationCancelled,
    ProcessLaunchFailed,
    ProcessTimeout,
)

logger = logging.getLogger(__name__)

STDOUT = "stdout"
STDERR = "stderr"

# sink(stream_name, line)
OutputSink = Callable[[str, str], None]


def make_log_sink(
    prefix: str = "Tailwind",
    stdout_level: int = logging.DEBUG,
    stderr_level: int = logging.WARNING,
    target: Optional[logging.Logger] = None,
) -> OutputSink:
    """
    Build a sink that forwards process output to a logger.

    Args:
        prefix: Text prepended to every line
        stdout_level: Log level for stdout lines
        stderr_level: Log level for stderr lines
        target: Logger to write to (default: this module's logger)
    """
    log = target or logger

    def sink(stream: str, line: str) -> None:
        level = stderr_level if stream == STDERR else stdout_level
        log.log(level, f"{prefix}: {line}")

    return sink


def tee_sink(*sinks: Optional[OutputSink]) -> OutputSink:
    """Combine several sinks into one, skipping ``None`` entries."""
    active = [s for s in sinks if s is not None]

    def sink(stream: str, line: str) -> None:
        for s in active:
            s(stream, line)

    return sink


@dataclass
class ProcessResult:
    """Exit code and captured output of a completed one-shot run."""

    exit_code: int
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class OutputPump:
    """Background readers that drain a process's stdout and stderr."""

    def __init__(self, process: subprocess.Popen, sink: OutputSink, name: str):
        self._threads = [
            threading.Thread(
                target=_read_stream,
                args=(process.stdout, STDOUT, sink),
                name=f"{name}-stdout-{process.pid}",
                daemon=True,
            ),
            threading.Thread(
                target=_read_stream,
                args=(process.stderr, STDERR, sink),
                name=f"{name}-stderr-{process.pid}",
                daemon=True,
            ),
        ]
        for thread in self._threads:
            thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for both readers to reach end of stream.

        Returns:
            True if both readers finished within the timeout
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in self._threads:
            remaining = None if deadline is None else max(0, deadline - time.monotonic())
            thread.join(remaining)
        return not any(t.is_alive() for t in self._threads)


def _read_stream(stream, name: str, sink: OutputSink) -> None:
    """Deliver each non-blank line of ``stream`` to ``sink`` until EOF."""
    try:
        for raw in iter(stream.readline, ""):
            line = raw.rstrip("\r\n")
            if not line.strip():
                continue
            try:
                sink(name, line)
            except Exception:
                logger.exception(f"Output sink failed for {name} line")
    except ValueError:
        # Stream closed underneath us during shutdown
        pass
    finally:
        stream.close()


def _signal_group(process: subprocess.Popen, force: bool) -> bool:
    """
    Signal the process group led by ``process``.

    The group id is only trusted while the leader is unreaped, since a
    reaped pid may already belong to an unrelated process.

    Returns:
        True if the group was signalled
    """
    if os.name == "nt" or process.poll() is not None:
        return False
    try:
        os.killpg(process.pid, signal.SIGKILL if force else signal.SIGTERM)
    except (ProcessLookupError, PermissionError):
        return False
    return True


def terminate_process_tree(process: subprocess.Popen, grace_period: float = 5.0) -> None:
    """
    Terminate a process and every process it spawned.

    Descendants are collected before the parent is signalled so that
    children re-parented on the parent's exit are not lost. On POSIX the
    whole process group is signalled while the parent is still unreaped.
    Processes still alive after ``grace_period`` seconds are killed.

    Args:
        process: The root process (a direct child of this interpreter)
        grace_period: Seconds to wait after SIGTERM before SIGKILL
    """
    try:
        children = psutil.Process(process.pid).children(recursive=True)
    except psutil.NoSuchProcess:
        children = []

    for proc in children:
        try:
            proc.terminate()
        except psutil.NoSuchProcess:
            pass

    if process.poll() is None:
        if not _signal_group(process, force=False):
            process.terminate()
        try:
            process.wait(timeout=grace_period)
        except subprocess.TimeoutExpired:
            logger.warning(
                f"Process {process.pid} did not stop gracefully, forcing kill"
            )
            if not _signal_group(process, force=True):
                process.kill()
            process.wait()

    _, alive = psutil.wait_procs(children, timeout=grace_period)
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            pass
    psutil.wait_procs(alive, timeout=grace_period)


class WatchHandle:
    """
    Owner of one long-running Tailwind process.

    :meth:`close` stops the process tree exactly once, no matter how many
    times or from how many threads it is called, and returns only after
    the process has been reaped and its buffered output delivered.
    """

    def __init__(
        self,
        process: subprocess.Popen,
        pump: OutputPump,
        name: str = "tailwindcss",
        grace_period: float = 5.0,
    ):
        self._process = process
        self._pump = pump
        self._name = name
        self._grace_period = grace_period
        self._lock = threading.Lock()
        self._closed = False

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._process.poll()

    @property
    def is_running(self) -> bool:
        return self._process.poll() is None

    @property
    def closed(self) -> bool:
        return self._closed

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Wait for the process to exit on its own; None on timeout."""
        try:
            return self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            return None

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True

            if self._process.poll() is None:
                logger.info(f"Stopping {self._name} watch mode (pid {self.pid})")
                terminate_process_tree(self._process, self._grace_period)
            else:
                logger.debug(
                    f"{self._name} watch process already exited "
                    f"with code {self._process.returncode}"
                )

            if self._process.stdin:
                try:
                    self._process.stdin.close()
                except OSError:
                    pass

            if not self._pump.join(timeout=self._grace_period):
                logger.debug(f"Output readers for pid {self.pid} still draining")

    def __enter__(self) -> "WatchHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("running" if self.is_running else "exited")
        return f"WatchHandle(pid={self.pid}, {state})"


class ProcessRunner:
    """
    Launches the Tailwind CLI and streams its output.

    Attributes:
        name: Short tool name used in logs and thread names
        grace_period: Seconds between terminate and kill on shutdown
        poll_interval: How often a blocking run checks for cancellation
    """

    def __init__(
        self,
        name: str = "tailwindcss",
        grace_period: float = 5.0,
        poll_interval: float = 0.1,
    ):
        self.name = name
        self.grace_period = grace_period
        self.poll_interval = poll_interval

    def run(
        self,
        binary: Union[str, Path],
        args: Sequence[str],
        sink: Optional[OutputSink] = None,
        cwd: Optional[Path] = None,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Run the binary to completion.

        Args:
            binary: Executable to run
            args: Argument list (not shell-parsed)
            sink: Receives ``(stream, line)`` for every output line
                (default: stdout at DEBUG, stderr at WARNING)
            cwd: Working directory
            cancel_event: When set, the process tree is terminated
            timeout: Optional limit in seconds

        Returns:
            The process exit code

        Raises:
            ProcessLaunchFailed: If the binary cannot be started
            OperationCancelled: If cancel_event is set before exit
            ProcessTimeout: If the timeout elapses before exit
        """
        _raise_if_cancelled(cancel_event, f"run of {binary}")
        if sink is None:
            sink = make_log_sink()

        process = self._spawn(binary, args, cwd, stdin=subprocess.DEVNULL)
        pump = OutputPump(process, sink, self.name)
        deadline = None if timeout is None else time.monotonic() + timeout

        try:
            while True:
                try:
                    exit_code = process.wait(timeout=self.poll_interval)
                    break
                except subprocess.TimeoutExpired:
                    pass

                if cancel_event is not None and cancel_event.is_set():
                    raise OperationCancelled(f"Cancelled {self.name} (pid {process.pid})")
                if deadline is not None and time.monotonic() >= deadline:
                    raise ProcessTimeout(
                        f"{self.name} did not finish within {timeout}s"
                    )
        except BaseException:
            terminate_process_tree(process, self.grace_period)
            pump.join(timeout=self.grace_period)
            raise

        pump.join(timeout=self.grace_period)
        logger.debug(f"{self.name} exited with code {exit_code}")
        return exit_code

    def run_captured(
        self,
        binary: Union[str, Path],
        args: Sequence[str],
        sink: Optional[OutputSink] = None,
        cwd: Optional[Path] = None,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """Like :meth:`run`, but also collects the output lines per stream."""
        stdout: List[str] = []
        stderr: List[str] = []

        def collect(stream: str, line: str) -> None:
            (stderr if stream == STDERR else stdout).append(line)

        exit_code = self.run(
            binary,
            args,
            sink=tee_sink(collect, sink),
            cwd=cwd,
            cancel_event=cancel_event,
            timeout=timeout,
        )
        return ProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr)

    def start_watch(
        self,
        binary: Union[str, Path],
        args: Sequence[str],
        sink: Optional[OutputSink] = None,
        cwd: Optional[Path] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> WatchHandle:
        """
        Launch a long-running process without waiting for it.

        A cancel signal observed before the handle is returned aborts the
        launch and leaves no process behind. After that, :meth:`WatchHandle.close`
        is the only way to stop it.

        Raises:
            ProcessLaunchFailed: If the binary cannot be started
            OperationCancelled: If cancel_event is set during the launch
        """
        _raise_if_cancelled(cancel_event, f"watch of {binary}")
        if sink is None:
            sink = make_log_sink()

        # Tailwind's watcher exits when stdin reaches EOF, so the pipe stays
        # open for the lifetime of the handle.
        process = self._spawn(binary, args, cwd, stdin=subprocess.PIPE)
        handle = WatchHandle(
            process,
            OutputPump(process, sink, self.name),
            name=self.name,
            grace_period=self.grace_period,
        )

        if cancel_event is not None and cancel_event.is_set():
            handle.close()
            raise OperationCancelled(f"Cancelled launch of {self.name}")

        logger.info(f"Started {self.name} watch mode (pid {process.pid})")
        return handle

    def _spawn(
        self,
        binary: Union[str, Path],
        args: Sequence[str],
        cwd: Optional[Path],
        stdin,
    ) -> subprocess.Popen:
        command = [str(binary), *[str(a) for a in args]]
        logger.debug(f"Executing: {' '.join(command)}")

        kwargs = {}
        if os.name == "nt":
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True  # Own process group for cleanup

        try:
            return subprocess.Popen(
                command,
                stdin=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=str(cwd) if cwd else None,
                text=True,
                encoding="utf-8",
                errors="replace",
                **kwargs,
            )
        except OSError as e:
            raise ProcessLaunchFailed(str(binary), str(e)) from e


def _raise_if_cancelled(cancel_event: Optional[threading.Event], what: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelled(f"Cancelled before {what}")


__all__ = [
    "STDOUT",
    "STDERR",
    "OutputSink",
    "ProcessResult",
    "ProcessRunner",
    "WatchHandle",
    "OutputPump",
    "make_log_sink",
    "tee_sink",
    "terminate_process_tree",
]
