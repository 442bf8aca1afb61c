"""
Tailbreeze CLI argument parser.

This module implements the command-line interface for Tailbreeze using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tailbreeze import __version__

logger = logging.getLogger(__name__)


class CLI:
    """Tailbreeze command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="tailbreeze",
            description="Tailbreeze - Tailwind CSS without Node.js",
            epilog='Use "tailbreeze COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"Tailbreeze {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./tailbreeze.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_compile_command(subparsers)
        self._add_install_command(subparsers)
        self._add_watch_command(subparsers)
        self._add_resolve_command(subparsers)

        return parser

    @staticmethod
    def _add_version_argument(parser):
        parser.add_argument(
            "--tailwind-version",
            metavar="VERSION",
            help="Tailwind version: latest, 4, 3.4.17, v4.1.0 (default: from config)",
        )

    def _add_compile_command(self, subparsers):
        """Add 'compile' subcommand."""
        parser = subparsers.add_parser(
            "compile",
            help="Compile the stylesheet once",
            description="Run the Tailwind CLI once, e.g. as a build step",
        )
        parser.add_argument(
            "-i", "--input", type=Path, metavar="PATH", help="Input CSS file"
        )
        parser.add_argument(
            "-o", "--output", type=Path, metavar="PATH", help="Output CSS file"
        )
        parser.add_argument(
            "-c",
            "--tailwind-config",
            type=Path,
            metavar="PATH",
            help="Tailwind config file",
        )
        parser.add_argument(
            "--minify", action="store_true", help="Minify the generated CSS"
        )
        parser.add_argument(
            "--extra-args",
            metavar="ARGS",
            help="Additional arguments passed to the Tailwind CLI",
        )
        parser.add_argument(
            "--no-auto-install",
            action="store_true",
            help="Fail instead of downloading a missing Tailwind CLI",
        )
        self._add_version_argument(parser)

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Download the Tailwind CLI",
            description="Provision the Tailwind CLI into the local cache",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Re-download even if a working binary is installed",
        )
        self._add_version_argument(parser)

    def _add_watch_command(self, subparsers):
        """Add 'watch' subcommand."""
        parser = subparsers.add_parser(
            "watch",
            help="Run Tailwind in watch mode",
            description="Rebuild the stylesheet on change until interrupted",
        )
        parser.add_argument(
            "--static-root",
            type=Path,
            metavar="PATH",
            help="Directory the output path is relative to (default: PROJECT_ROOT/static)",
        )
        self._add_version_argument(parser)

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show version, download URL and install path",
            description="Resolve a Tailwind version without downloading anything",
        )
        self._add_version_argument(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "compile": "tailbreeze.cli.commands.compile",
            "install": "tailbreeze.cli.commands.install",
            "watch": "tailbreeze.cli.commands.watch",
            "resolve": "tailbreeze.cli.commands.resolve",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to load command module: {e}")
            return 1

        if not hasattr(module, "run"):
            logger.error(f"Command module {module_name} has no run() function")
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
