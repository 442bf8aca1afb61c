"""
Tailbreeze - Tailwind CSS for Python web applications without Node.js.

Downloads the standalone Tailwind CLI on demand, runs it in watch mode
during development and serves the compiled stylesheet.
"""

__version__ = "0.1.0"

from tailbreeze.config.parser import TailbreezeOptions, Toggle  # noqa: E402
from tailbreeze.core.exceptions import TailbreezeError  # noqa: E402
from tailbreeze.hosting.flask import Tailbreeze  # noqa: E402
from tailbreeze.hosting.tags import render_link_tag  # noqa: E402
from tailbreeze.tailwind.compiler import CompileResult, compile_stylesheet  # noqa: E402

__all__ = [
    "__version__",
    "Tailbreeze",
    "TailbreezeOptions",
    "TailbreezeError",
    "Toggle",
    "render_link_tag",
    "compile_stylesheet",
    "CompileResult",
]
