"""Configuration for Tailbreeze.

Options can come from a ``tailbreeze.yaml`` file, from a mapping (for
example ``app.config["TAILBREEZE"]`` in Flask) or be built directly.

Example ``tailbreeze.yaml``::

    tailwind_version: "4"
    input_css_path: styles/app.css
    output_css_path: css/app.css
    minify: auto
    cdn_fallback: true
    content_paths:
      - ./templates/**/*.html
"""

import enum
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from tailbreeze.core.exceptions import ConfigError
from tailbreeze.tailwind.resolver import (
    DEFAULT_CDN_FALLBACK_URLS,
    DEFAULT_MAJOR_RELEASES,
    RELEASE_BASE_URL,
)
from tailbreeze.tailwind.compiler import split_arguments

DEFAULT_CONFIG_FILE = "tailbreeze.yaml"


class Toggle(enum.Enum):
    """A boolean option whose default depends on the environment."""

    ON = "on"
    OFF = "off"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Any) -> "Toggle":
        """
        Accept None, bools, Toggle members and on/off/auto style strings.

        Raises:
            ConfigError: For anything else
        """
        if value is None:
            return cls.AUTO
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.ON if value else cls.OFF
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("on", "true", "yes", "1"):
                return cls.ON
            if text in ("off", "false", "no", "0"):
                return cls.OFF
            if text in ("auto", ""):
                return cls.AUTO
        raise ConfigError(f"Invalid toggle value: {value!r} (expected on, off or auto)")

    def resolve(self, auto: bool) -> bool:
        """Concrete value, using ``auto`` when the toggle is AUTO."""
        if self is Toggle.AUTO:
            return auto
        return self is Toggle.ON


@dataclass
class TailbreezeOptions:
    """Complete Tailbreeze configuration."""

    tailwind_version: str = "latest"
    input_css_path: str = "styles/app.css"  # relative to the content root
    output_css_path: str = "css/app.css"  # relative to the static root
    config_path: Optional[str] = "tailwind.config.js"
    enable_watch: bool = True
    auto_install: bool = True
    minify: Toggle = Toggle.AUTO  # AUTO: minify outside development
    additional_arguments: Optional[str] = None
    content_paths: List[str] = field(default_factory=list)
    cdn_fallback: Toggle = Toggle.AUTO  # AUTO: fall back only in development
    serve_path: str = "/tailbreeze/app.css"
    serve_via_middleware: bool = True
    cache_dir: Optional[str] = None
    release_base_url: str = RELEASE_BASE_URL
    major_releases: Dict[int, str] = field(
        default_factory=lambda: dict(DEFAULT_MAJOR_RELEASES)
    )
    cdn_fallback_urls: Dict[int, str] = field(
        default_factory=lambda: dict(DEFAULT_CDN_FALLBACK_URLS)
    )
    download_timeout: int = 300


def parse_config(config_path: Path) -> TailbreezeOptions:
    """
    Parse a tailbreeze.yaml configuration file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Parsed and validated options

    Raises:
        ConfigError: If the file is missing or invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    return options_from_mapping(data or {})


def options_from_mapping(data: Mapping[str, Any]) -> TailbreezeOptions:
    """
    Build options from a plain mapping.

    Unknown keys are rejected so that typos do not silently fall back
    to defaults.

    Raises:
        ConfigError: If a key is unknown or a value has the wrong type
    """
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration must be a mapping")

    known = {f.name for f in fields(TailbreezeOptions)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}

    for name in (
        "tailwind_version",
        "input_css_path",
        "output_css_path",
        "serve_path",
        "release_base_url",
    ):
        if name in data:
            values[name] = _require_str(data, name)

    for name in ("config_path", "additional_arguments", "cache_dir"):
        if name in data:
            values[name] = None if data[name] is None else _require_str(data, name)

    split_arguments(values.get("additional_arguments"))

    for name in ("enable_watch", "auto_install", "serve_via_middleware"):
        if name in data:
            if not isinstance(data[name], bool):
                raise ConfigError(f"{name} must be true or false")
            values[name] = data[name]

    for name in ("minify", "cdn_fallback"):
        if name in data:
            values[name] = Toggle.parse(data[name])

    if "content_paths" in data:
        paths = data["content_paths"] or []
        if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
            raise ConfigError("content_paths must be a list of strings")
        values["content_paths"] = list(paths)

    for name in ("major_releases", "cdn_fallback_urls"):
        if name in data:
            values[name] = _parse_major_table(name, data[name])

    if "download_timeout" in data:
        timeout = data["download_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
            raise ConfigError("download_timeout must be a positive integer")
        values["download_timeout"] = timeout

    options = TailbreezeOptions(**values)

    if not options.serve_path.startswith("/"):
        raise ConfigError(f"serve_path must start with '/': {options.serve_path}")

    return options


def _require_str(data: Mapping[str, Any], name: str) -> str:
    value = data[name]
    # Allow numeric versions written unquoted in YAML (tailwind_version: 4)
    if name == "tailwind_version" and isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string")
    return value


def _parse_major_table(name: str, table: Any) -> Dict[int, str]:
    if not isinstance(table, Mapping) or not table:
        raise ConfigError(f"{name} must be a non-empty mapping of major version to string")

    parsed = {}
    for key, value in table.items():
        try:
            major = int(str(key).lstrip("vV"))
        except ValueError:
            raise ConfigError(f"{name}: invalid major version key {key!r}")
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{name}.{key} must be a non-empty string")
        parsed[major] = value
    return parsed


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "Toggle",
    "TailbreezeOptions",
    "parse_config",
    "options_from_mapping",
]
