"""
Host environment and resolved runtime settings.

:class:`TailbreezeOptions` holds what the user asked for; :class:`RuntimeSettings`
is what those options mean for one particular host: absolute paths, a parsed
version and concrete booleans for every three-state toggle. Settings are
resolved once at startup and never change afterwards.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from tailbreeze.config.parser import TailbreezeOptions
from tailbreeze.core.process import ProcessRunner
from tailbreeze.tailwind.compiler import split_arguments
from tailbreeze.tailwind.provisioner import Provisioner
from tailbreeze.tailwind.resolver import ReleaseResolver
from tailbreeze.tailwind.version import VersionSpec, parse_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostEnvironment:
    """
    Facts about the hosting application.

    Attributes:
        content_root: Project root; input and config paths are relative to it
        static_root: Directory served as static files; output is relative to it
        is_development: Whether the host runs in a development-like mode
    """

    content_root: Path
    static_root: Path
    is_development: bool = False

    @classmethod
    def from_flask(cls, app) -> "HostEnvironment":
        """
        Build the environment from a Flask application.

        Uses ``app.root_path`` as the content root, ``app.static_folder``
        (or ``<root>/static``) as the static root and ``app.debug`` as the
        development flag.
        """
        content_root = Path(app.root_path)
        static_root = (
            Path(app.static_folder) if app.static_folder else content_root / "static"
        )
        return cls(
            content_root=content_root,
            static_root=static_root,
            is_development=bool(app.debug),
        )


@dataclass(frozen=True)
class RuntimeSettings:
    """Options resolved against a host environment."""

    version: VersionSpec
    input_path: Path
    output_path: Path
    config_path: Optional[Path]
    content_root: Path
    fallback_enabled: bool
    minify: bool
    is_development: bool
    additional_arguments: Tuple[str, ...] = ()


def resolve_settings(
    options: TailbreezeOptions, environment: HostEnvironment
) -> RuntimeSettings:
    """
    Resolve options for a host.

    Raises:
        InvalidVersionSpec: If ``tailwind_version`` cannot be parsed, or
            names a major with no entry in ``major_releases``
        ConfigError: If ``additional_arguments`` cannot be split
    """
    version = parse_version(options.tailwind_version)
    resolver_from_options(options).release_tag(version)

    root = environment.content_root
    config_path = (root / options.config_path) if options.config_path else None

    settings = RuntimeSettings(
        version=version,
        input_path=root / options.input_css_path,
        output_path=environment.static_root / options.output_css_path,
        config_path=config_path,
        content_root=root,
        fallback_enabled=options.cdn_fallback.resolve(environment.is_development),
        minify=options.minify.resolve(not environment.is_development),
        is_development=environment.is_development,
        additional_arguments=tuple(split_arguments(options.additional_arguments)),
    )
    logger.debug(f"Resolved Tailbreeze settings: {settings}")
    return settings


def resolver_from_options(options: TailbreezeOptions) -> ReleaseResolver:
    """Release resolver using the tables configured in ``options``."""
    return ReleaseResolver(
        base_url=options.release_base_url,
        major_releases=options.major_releases,
        cdn_fallback_urls=options.cdn_fallback_urls,
    )


def provisioner_from_options(
    options: TailbreezeOptions, runner: Optional[ProcessRunner] = None
) -> Provisioner:
    """Provisioner honouring the configured cache directory and timeout."""
    return Provisioner(
        cache_dir=Path(options.cache_dir).expanduser() if options.cache_dir else None,
        resolver=resolver_from_options(options),
        runner=runner,
        download_timeout=options.download_timeout,
    )


__all__ = [
    "HostEnvironment",
    "RuntimeSettings",
    "resolve_settings",
    "resolver_from_options",
    "provisioner_from_options",
]
