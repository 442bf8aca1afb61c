"""
Watch command: run Tailwind in watch mode in the foreground.

The project is treated as a development host, so files are scaffolded and
the CLI is provisioned exactly as the Flask extension would do it.
"""

import logging
import threading

from tailbreeze.cli.utils import load_options, resolve_project_root
from tailbreeze.hosting.environment import HostEnvironment
from tailbreeze.hosting.supervisor import Supervisor, SupervisorState

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the watch command until interrupted or the watcher exits.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code: 0 after Ctrl+C, the watcher's exit code if it stopped on
        its own, 1 if watch mode could not start
    """
    options = load_options(args)
    options.enable_watch = True
    project_root = resolve_project_root(args.project_root)

    environment = HostEnvironment(
        content_root=project_root,
        static_root=(args.static_root or project_root / "static").resolve(),
        is_development=True,
    )
    supervisor = Supervisor(options, environment)
    cancel_event = threading.Event()

    try:
        state = supervisor.start(cancel_event=cancel_event)
        if state is not SupervisorState.WATCHING:
            logger.error(f"Watch mode did not start (state: {state.value})")
            return 1

        logger.info("Watching for changes. Press Ctrl+C to stop.")
        exit_code = supervisor.handle.wait()
        if exit_code:
            logger.error(f"Tailwind watch process exited with code {exit_code}")
        else:
            logger.info("Tailwind watch process exited")
        return exit_code
    except KeyboardInterrupt:
        cancel_event.set()
        logger.info("Stopping watch mode")
        return 0
    finally:
        supervisor.stop()
