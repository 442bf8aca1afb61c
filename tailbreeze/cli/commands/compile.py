"""
Compile command: run the Tailwind CLI once.

Intended as a build step before deploying, since watch mode only runs in
development.
"""

import logging
import sys

from tailbreeze.cli.utils import load_options, resolve_project_root, safe_print
from tailbreeze.hosting.environment import provisioner_from_options
from tailbreeze.tailwind.compiler import compile_stylesheet

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the compile command.

    Paths not given on the command line come from the configuration:
    input and config relative to the project root, output relative to
    ``<project root>/static``.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    options = load_options(args)
    project_root = resolve_project_root(args.project_root)

    input_path = args.input or project_root / options.input_css_path
    output_path = args.output or project_root / "static" / options.output_css_path
    config_path = args.tailwind_config
    if config_path is None and options.config_path:
        config_path = project_root / options.config_path

    # A build is a production artifact, so AUTO means minified
    minify = args.minify or options.minify.resolve(True)

    result = compile_stylesheet(
        input_path,
        output_path,
        config_path=config_path,
        minify=minify,
        additional_arguments=args.extra_args or options.additional_arguments,
        version=options.tailwind_version,
        auto_install=options.auto_install and not args.no_auto_install,
        project_dir=project_root,
        provisioner=provisioner_from_options(options),
    )

    if not result.success:
        safe_print(f"Compilation failed: {result.diagnostics}", file=sys.stderr)
        return 1

    safe_print(f"Compiled {input_path} -> {output_path}")
    return 0
