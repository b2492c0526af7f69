"""
Release version parsing and ordering.

Versions are restricted to "x.y.z": three unsigned decimal integers and
nothing else (no "v" prefix, no pre-release or build suffix). Components are
compared numerically, so "1.9.0" < "1.10.0".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from appconsole.errors import DowngradeRejected, EqualRejected, InvalidFormat, ReleaseRejected

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
MAX_COMPONENT = 2**31 - 1


class VersionComparison(str, Enum):
    HIGHER = "higher"
    LOWER = "lower"
    EQUAL = "equal"


@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int

    def to_tuple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def bump(self, part: str) -> Version:
        """Next version for a "major", "minor" or "patch" release."""
        if part == "major":
            return Version(self.major + 1, 0, 0)
        if part == "minor":
            return Version(self.major, self.minor + 1, 0)
        if part == "patch":
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"unknown version part: {part}")

    def __str__(self) -> str:
        return format_version(self.major, self.minor, self.patch)


def format_version(major: int, minor: int, patch: int) -> str:
    return f"{major}.{minor}.{patch}"


def parse(text: str) -> Version:
    """
    "1.2.3" -> Version(1, 2, 3)

    Leading zeros are accepted and dropped ("01.2.3" -> 1.2.3). Components
    above 2**31 - 1 are rejected.
    """
    if not isinstance(text, str) or not VERSION_PATTERN.fullmatch(text):
        raise InvalidFormat(str(text))
    groups = text.split(".")
    # int() refuses very long digit strings, so bound the length first
    if any(len(g.lstrip("0")) > len(str(MAX_COMPONENT)) for g in groups):
        raise InvalidFormat(text)
    parts = tuple(int(g) for g in groups)
    if any(p > MAX_COMPONENT for p in parts):
        raise InvalidFormat(text)
    return Version(*parts)


def compare(a: Version, b: Version) -> VersionComparison:
    left, right = a.to_tuple(), b.to_tuple()
    if left > right:
        return VersionComparison.HIGHER
    if left < right:
        return VersionComparison.LOWER
    return VersionComparison.EQUAL


def classify(candidate: str, baseline: str) -> VersionComparison:
    """Compare candidate against baseline. Raises InvalidFormat if either side is malformed."""
    try:
        cand = parse(candidate)
    except InvalidFormat:
        raise InvalidFormat(str(candidate), field="candidate") from None
    try:
        base = parse(baseline)
    except InvalidFormat:
        raise InvalidFormat(str(baseline), field="baseline") from None
    return compare(cand, base)


def is_release_allowed(candidate: str, baseline: str) -> bool:
    """A new release must strictly increase the baseline."""
    try:
        return classify(candidate, baseline) is VersionComparison.HIGHER
    except InvalidFormat:
        return False


@dataclass(frozen=True)
class ReleaseCheck:
    candidate: str
    baseline: str
    comparison: Optional[VersionComparison] = None
    error: Optional[Exception] = None

    @property
    def allowed(self) -> bool:
        return self.error is None and self.comparison is VersionComparison.HIGHER

    @property
    def reason(self) -> str:
        return str(self.error) if self.error else ""

    def raise_for_rejection(self) -> None:
        if self.error is not None:
            raise self.error


def check_release(candidate: str, baseline: str) -> ReleaseCheck:
    """Inline validation for a release form: tells format errors apart from ordering rejections."""
    try:
        comparison = classify(candidate, baseline)
    except InvalidFormat as e:
        return ReleaseCheck(candidate, baseline, error=e)

    rejection: Optional[ReleaseRejected] = None
    if comparison is VersionComparison.LOWER:
        rejection = DowngradeRejected(candidate, baseline)
    elif comparison is VersionComparison.EQUAL:
        rejection = EqualRejected(candidate, baseline)
    return ReleaseCheck(candidate, baseline, comparison=comparison, error=rejection)


def release_tier(text: str) -> str:
    """Badge tier used in version listings: "major", "minor" or "patch"."""
    v = parse(text)
    if v.major > 0:
        return "major"
    if v.minor > 0:
        return "minor"
    return "patch"
