"""
Configuration system for Tailbreeze.

Provides the options dataclass, three-state toggles and loaders for YAML
files and plain mappings.
"""

from tailbreeze.config.parser import (
    DEFAULT_CONFIG_FILE,
    TailbreezeOptions,
    Toggle,
    options_from_mapping,
    parse_config,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "TailbreezeOptions",
    "Toggle",
    "options_from_mapping",
    "parse_config",
]
