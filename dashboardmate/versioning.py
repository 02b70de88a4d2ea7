"""Parsing and ordering of dotted ``major.minor.patch`` version strings."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Version:
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def _component(segment: str) -> int:
    segment = segment.strip()
    # int() only accepts Unicode decimal digits; "²" and "①" are digits, not decimals
    return int(segment) if segment.isdecimal() else 0


def parse_version(version: str) -> Version:
    """Parse ``"X.Y.Z"`` into a :class:`Version`.

    Missing or non-numeric components become ``0`` and anything past the
    third component is ignored, so this never raises.
    """

    parts = [_component(segment) for segment in str(version or "").split(".")[:3]]
    parts.extend([0] * (3 - len(parts)))
    return Version(*parts)


def compare_versions(a: str, b: str) -> int:
    """Return a negative, zero or positive number as ``a`` sorts before, equal to or after ``b``."""

    left = parse_version(a)
    right = parse_version(b)
    if left.major != right.major:
        return left.major - right.major
    if left.minor != right.minor:
        return left.minor - right.minor
    return left.patch - right.patch
