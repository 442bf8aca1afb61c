"""Test fixtures for Tailbreeze tests.

- binaries: Fake Tailwind CLI shell scripts and helpers to inspect them

Import fixtures in your tests using:
    from tests.fixtures.binaries import write_fake_cli, recorded_args
"""

__all__ = [
    "binaries",
]
