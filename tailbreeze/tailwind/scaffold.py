"""
Default project files for Tailwind.

Creates the input stylesheet and ``tailwind.config.js`` when a project does
not have them yet. Both documents differ between Tailwind v3 and v4.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from tailbreeze.tailwind.version import VersionSpec

logger = logging.getLogger(__name__)

V4_INPUT_CSS = '@import "tailwindcss";\n'

V3_INPUT_CSS = "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n"

# Conventional template directories of a web project and the globs they map to
CONTENT_DIRECTORIES = (
    ("templates", "./templates/**/*.{html,jinja,jinja2,j2}"),
    ("pages", "./pages/**/*.{html,jinja,jinja2,j2}"),
    ("components", "./components/**/*.{html,jinja,jinja2,j2,js}"),
    ("views", "./views/**/*.html"),
)

CATCH_ALL_CONTENT = "./**/*.{html,jinja,jinja2,j2}"


def uses_legacy_syntax(version: VersionSpec) -> bool:
    """Whether files use the v3 syntax; majors after 4 keep the v4 one."""
    return version.major <= 3


def default_input_css(version: VersionSpec) -> str:
    return V3_INPUT_CSS if uses_legacy_syntax(version) else V4_INPUT_CSS


def detect_content_paths(project_root: Optional[Path]) -> List[str]:
    """
    Guess Tailwind content globs from the project's directory layout.

    Args:
        project_root: Directory to scan; None skips scanning

    Returns:
        Globs for every conventional directory found, or a single
        catch-all glob when none exist
    """
    paths = []
    if project_root is not None:
        for directory, glob in CONTENT_DIRECTORIES:
            if (Path(project_root) / directory).is_dir():
                paths.append(glob)

    return paths or [CATCH_ALL_CONTENT]


def generate_config(version: VersionSpec, content_paths: Sequence[str]) -> str:
    """Render a minimal ``tailwind.config.js`` for the version's major line."""
    content_array = ",\n    ".join(f'"{p}"' for p in content_paths)

    if not uses_legacy_syntax(version):
        return (
            "export default {\n"
            "  content: [\n"
            f"    {content_array}\n"
            "  ],\n"
            "}\n"
        )

    return (
        "/** @type {import('tailwindcss').Config} */\n"
        "module.exports = {\n"
        "  content: [\n"
        f"    {content_array}\n"
        "  ],\n"
        "  theme: {\n"
        "    extend: {},\n"
        "  },\n"
        "  plugins: [],\n"
        "}\n"
    )


def ensure_input_file(input_path: Path, version: VersionSpec) -> bool:
    """
    Create the input stylesheet if it is missing.

    Returns:
        True if a file was created
    """
    if input_path.exists():
        return False

    input_path.parent.mkdir(parents=True, exist_ok=True)
    input_path.write_text(default_input_css(version), encoding="utf-8")
    logger.info(f"Created default input CSS file at {input_path}")
    return True


def ensure_config_file(
    config_path: Path,
    version: VersionSpec,
    project_root: Optional[Path],
    content_paths: Optional[Sequence[str]] = None,
) -> bool:
    """
    Create the Tailwind config file if it is missing.

    Args:
        config_path: Where the config belongs
        version: Selects module.exports (v3) or export default (v4)
        project_root: Scanned for content directories when no paths are given
        content_paths: Explicit content globs

    Returns:
        True if a file was created
    """
    if config_path.exists():
        return False

    paths = list(content_paths) if content_paths else detect_content_paths(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_config(version, paths), encoding="utf-8")
    logger.info(f"Created default Tailwind config at {config_path}")
    return True


__all__ = [
    "V4_INPUT_CSS",
    "V3_INPUT_CSS",
    "CATCH_ALL_CONTENT",
    "default_input_css",
    "detect_content_paths",
    "generate_config",
    "ensure_input_file",
    "ensure_config_file",
]
