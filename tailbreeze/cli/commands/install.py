"""Install command: provision the Tailwind CLI into the local cache."""

import logging

from tailbreeze.cli.utils import load_options, safe_print
from tailbreeze.core.exceptions import TailbreezeError
from tailbreeze.core.locking import LockTimeout
from tailbreeze.hosting.environment import provisioner_from_options
from tailbreeze.tailwind.version import parse_version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    options = load_options(args)
    spec = parse_version(options.tailwind_version)
    provisioner = provisioner_from_options(options)

    try:
        if args.force:
            _remove_installed(provisioner, spec, options.download_timeout)
        cli_path = provisioner.ensure_installed(spec)
    except (TailbreezeError, LockTimeout, OSError) as e:
        logger.error(f"Installation failed: {e}")
        return 1

    safe_print(f"Tailwind CLI {spec} installed at {cli_path}")
    return 0


def _remove_installed(provisioner, spec, timeout: float) -> None:
    cli_path = provisioner.local_path(spec)
    with provisioner.lock_manager.install_lock(timeout=timeout):
        if cli_path.exists():
            logger.info(f"Removing existing Tailwind CLI at {cli_path}")
            cli_path.unlink()
