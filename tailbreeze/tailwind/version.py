"""Tailwind CSS version requests.

A version request comes from configuration as a free-form string:
``"latest"``, ``"4"``, ``"v3.4"`` or ``"3.4.17"``. :func:`parse_version`
turns it into an immutable :class:`VersionSpec`.
"""

import re
from dataclasses import dataclass
from typing import Optional

from tailbreeze.core.exceptions import InvalidVersionSpec

# Major line that "latest" resolves to
LATEST_MAJOR = 4

_NUMERIC = re.compile(r"^\d+$")


@dataclass(frozen=True)
class VersionSpec:
    """
    Structured Tailwind version request.

    Attributes:
        major: Major version (3 or 4 in practice)
        minor: Minor version, only set when requested
        patch: Patch version, only set when minor is set
        is_latest: True for the "latest" request
    """

    major: int
    minor: Optional[int] = None
    patch: Optional[int] = None
    is_latest: bool = False

    def __post_init__(self):
        if self.patch is not None and self.minor is None:
            raise ValueError("patch requires minor")
        if self.is_latest and (self.minor is not None or self.patch is not None):
            raise ValueError("latest cannot pin minor or patch")

    @property
    def is_v4(self) -> bool:
        return self.major == 4

    @property
    def is_v3(self) -> bool:
        return self.major == 3

    @property
    def is_major_only(self) -> bool:
        return not self.is_latest and self.minor is None

    def package_version(self) -> str:
        """Dotted version string without the 'latest' special case."""
        parts = [self.major, self.minor, self.patch]
        return ".".join(str(p) for p in parts if p is not None)

    def __str__(self) -> str:
        return "latest" if self.is_latest else self.package_version()


def latest() -> VersionSpec:
    return VersionSpec(major=LATEST_MAJOR, is_latest=True)


def parse_version(raw: Optional[str]) -> VersionSpec:
    """
    Parse a version request string.

    Args:
        raw: Version string; ``None``, blank or "latest" (any case) mean latest

    Returns:
        Parsed VersionSpec

    Raises:
        InvalidVersionSpec: If the leading component is not a number

    Example:
        >>> parse_version("v3.4.1")
        VersionSpec(major=3, minor=4, patch=1, is_latest=False)
        >>> parse_version("4")
        VersionSpec(major=4, minor=None, patch=None, is_latest=False)
    """
    if raw is None:
        return latest()

    text = raw.strip()
    if not text or text.lower() == "latest":
        return latest()

    text = text.lstrip("vV")
    parts = text.split(".")

    if not _NUMERIC.match(parts[0]):
        raise InvalidVersionSpec(raw, "major version must be a number")

    numbers = [int(parts[0])]
    # Minor and patch fill in order; stop at the first non-numeric part
    for part in parts[1:3]:
        if not _NUMERIC.match(part):
            break
        numbers.append(int(part))

    numbers += [None] * (3 - len(numbers))
    return VersionSpec(major=numbers[0], minor=numbers[1], patch=numbers[2])
