"""
Tailwind CLI management.

Version parsing, release resolution, provisioning, project scaffolding and
one-shot compilation.
"""

from tailbreeze.tailwind.version import LATEST_MAJOR, VersionSpec, parse_version
from tailbreeze.tailwind.resolver import ReleaseResolver
from tailbreeze.tailwind.provisioner import Provisioner
from tailbreeze.tailwind.compiler import CompileResult, compile_stylesheet

__all__ = [
    "LATEST_MAJOR",
    "VersionSpec",
    "parse_version",
    "ReleaseResolver",
    "Provisioner",
    "CompileResult",
    "compile_stylesheet",
]
