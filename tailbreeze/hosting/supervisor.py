"""
Watch-mode supervisor.

Drives the Tailwind CLI through the lifecycle of a hosting application:

    IDLE -> PREPARING -> PROVISIONING -> WATCHING -> STOPPED

Any failure while preparing, provisioning or launching the watcher either
moves the supervisor to DEGRADED (when CDN fallback is permitted) or is
re-raised. Cancellation is never swallowed.

Usage:
    supervisor = Supervisor(options, HostEnvironment.from_flask(app))
    supervisor.start()
    ...
    supervisor.stop()
"""

import enum
import logging
import threading
from typing import Optional

from tailbreeze.config.parser import TailbreezeOptions
from tailbreeze.core.exceptions import (
    InstallationFailed,
    OperationCancelled,
    TailbreezeError,
)
from tailbreeze.core.process import OutputSink, ProcessRunner, WatchHandle
from tailbreeze.hosting.environment import (
    HostEnvironment,
    RuntimeSettings,
    provisioner_from_options,
    resolve_settings,
)
from tailbreeze.tailwind.compiler import build_arguments
from tailbreeze.tailwind.provisioner import Provisioner
from tailbreeze.tailwind.scaffold import ensure_config_file, ensure_input_file

logger = logging.getLogger(__name__)


class SupervisorState(enum.Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    PROVISIONING = "provisioning"
    WATCHING = "watching"
    DEGRADED = "degraded"
    STOPPED = "stopped"


class Supervisor:
    """
    Owns the Tailwind watch process for one host.

    Attributes:
        options: User options
        environment: Host facts used to resolve the options
        runner: Launches the watch process
        provisioner: Supplies the CLI binary
        settings: Resolved settings (available after :meth:`start`)
        failure: The error that caused DEGRADED, if any
    """

    def __init__(
        self,
        options: TailbreezeOptions,
        environment: HostEnvironment,
        provisioner: Optional[Provisioner] = None,
        runner: Optional[ProcessRunner] = None,
        sink: Optional[OutputSink] = None,
    ):
        self.options = options
        self.environment = environment
        self.runner = runner or ProcessRunner()
        self.provisioner = provisioner or provisioner_from_options(options, self.runner)
        self.sink = sink
        self.settings: Optional[RuntimeSettings] = None
        self.failure: Optional[Exception] = None
        self._state = SupervisorState.IDLE
        self._handle: Optional[WatchHandle] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> SupervisorState:
        """Current state; notices a watcher that exited on its own."""
        with self._lock:
            handle = self._handle
            if (
                self._state is SupervisorState.WATCHING
                and handle is not None
                and not handle.is_running
            ):
                logger.error(
                    f"Tailwind watch process exited unexpectedly "
                    f"(code {handle.returncode})"
                )
                self._state = (
                    SupervisorState.DEGRADED
                    if self.settings and self.settings.fallback_enabled
                    else SupervisorState.STOPPED
                )
            return self._state

    @property
    def handle(self) -> Optional[WatchHandle]:
        return self._handle

    @property
    def degraded(self) -> bool:
        return self.state is SupervisorState.DEGRADED

    def start(self, cancel_event: Optional[threading.Event] = None) -> SupervisorState:
        """
        Prepare files, provision the CLI and launch watch mode.

        Args:
            cancel_event: Aborts provisioning or the launch when set

        Returns:
            The state reached (IDLE, WATCHING or DEGRADED)

        Raises:
            ConfigError: If the options are invalid (including an unparseable
                version or extra arguments)
            OperationCancelled: If cancel_event is set during start
            TailbreezeError: On failure when CDN fallback is not permitted
        """
        if self._state is not SupervisorState.IDLE:
            logger.warning(f"Supervisor already started (state: {self._state.value})")
            return self._state

        settings = resolve_settings(self.options, self.environment)
        self.settings = settings

        if not self.options.enable_watch:
            logger.info("Tailwind watch mode is disabled")
            return self._state
        if not settings.is_development:
            logger.info(
                "Not a development environment; skipping Tailwind watch mode. "
                "Build the stylesheet with 'tailbreeze compile' instead."
            )
            return self._state

        stage = "preparation"
        try:
            if not self._set_state(SupervisorState.PREPARING):
                return self._stopped_during_start(stage)
            self._prepare(settings)

            stage = "provisioning"
            if not self._set_state(SupervisorState.PROVISIONING):
                return self._stopped_during_start(stage)
            cli_path = self._provision(settings, cancel_event)

            stage = "watch launch"
            handle = self.runner.start_watch(
                cli_path,
                build_arguments(
                    settings.input_path,
                    settings.output_path,
                    settings.config_path,
                    minify=settings.minify,
                    watch=True,
                    additional_arguments=settings.additional_arguments,
                ),
                sink=self.sink,
                cwd=settings.content_root,
                cancel_event=cancel_event,
            )
        except OperationCancelled:
            logger.info("Tailwind startup cancelled")
            self._set_state(SupervisorState.STOPPED)
            raise
        except (TailbreezeError, OSError) as e:
            logger.error(f"Tailwind {stage} failed: {e}")
            if not settings.fallback_enabled:
                self._set_state(SupervisorState.STOPPED)
                raise
            logger.warning(
                f"Falling back to Tailwind CDN: "
                f"{self.provisioner.resolver.cdn_fallback_url(settings.version)}"
            )
            self.failure = e
            self._set_state(SupervisorState.DEGRADED)
            return self._state

        with self._lock:
            if self._state is SupervisorState.STOPPED:
                # stop() won the race while we were launching
                stopped = True
            else:
                stopped = False
                self._handle = handle
                self._state = SupervisorState.WATCHING
        if stopped:
            handle.close()
            return SupervisorState.STOPPED

        logger.info(f"Tailwind CSS watch mode started ({settings.output_path})")
        return SupervisorState.WATCHING

    def stop(self) -> None:
        """Stop the watch process. Idempotent and never raises."""
        with self._lock:
            handle, self._handle = self._handle, None
            self._state = SupervisorState.STOPPED

        if handle is None:
            return

        try:
            handle.close()
            logger.info("Tailwind CSS watch process stopped")
        except Exception as e:
            logger.error(f"Error stopping Tailwind watch process: {e}")

    def _set_state(self, state: SupervisorState) -> bool:
        """Move to ``state`` unless stop() has already been called."""
        with self._lock:
            if self._state is SupervisorState.STOPPED:
                return False
            logger.debug(f"Supervisor: {self._state.value} -> {state.value}")
            self._state = state
            return True

    def _stopped_during_start(self, stage: str) -> SupervisorState:
        logger.info(f"Tailwind startup abandoned before {stage}: supervisor stopped")
        return SupervisorState.STOPPED

    def _prepare(self, settings: RuntimeSettings) -> None:
        ensure_input_file(settings.input_path, settings.version)
        if settings.config_path is not None:
            ensure_config_file(
                settings.config_path,
                settings.version,
                settings.content_root,
                self.options.content_paths,
            )
        settings.output_path.parent.mkdir(parents=True, exist_ok=True)

    def _provision(self, settings: RuntimeSettings, cancel_event):
        if self.options.auto_install:
            return self.provisioner.ensure_installed(
                settings.version, cancel_event=cancel_event
            )

        cli_path = self.provisioner.local_path(settings.version)
        if not self.provisioner.is_installed(settings.version):
            raise InstallationFailed(
                str(settings.version),
                f"Tailwind CLI not found at {cli_path} and auto_install is disabled",
            )
        return cli_path

    def __enter__(self) -> "Supervisor":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


__all__ = ["Supervisor", "SupervisorState"]
