"""
Version string comparison.

Release versions are dotted numeric strings, optionally followed by a build
stamp (``1.0.2-1765514379``). The build stamp is metadata only and takes no
part in ordering. Comparison is numeric per segment, so ``1.10.0`` sorts
after ``1.9.9`` and ``1.2`` equals ``1.2.0``.

Parsing is deliberately lenient: a segment that is not a plain number counts
as ``0`` instead of failing the comparison.
"""

from __future__ import annotations

import re
from typing import List

_NUMERIC_SEGMENT = re.compile(r"\+?[0-9]+")


def strip_build_suffix(version: str) -> str:
    """Drop everything from the first ``-`` onward."""
    return (version or "").split("-", 1)[0]


def _segment_value(segment: str) -> int:
    if _NUMERIC_SEGMENT.fullmatch(segment):
        return int(segment)
    return 0


def parse_version(version: str) -> List[int]:
    """Return the numeric segments of ``version``.

    Examples:
        "1.0.2-1765514379" -> [1, 0, 2]
        "2.x"              -> [2, 0]
        ""                 -> [0]
    """
    return [_segment_value(part) for part in strip_build_suffix(version).split(".")]


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Returns 1 if ``a`` is newer, -1 if ``b`` is newer and 0 when they are
    equivalent. Never raises.
    """
    left = parse_version(a)
    right = parse_version(b)

    for i in range(max(len(left), len(right))):
        x = left[i] if i < len(left) else 0
        y = right[i] if i < len(right) else 0
        if x > y:
            return 1
        if x < y:
            return -1
    return 0


def is_newer(candidate: str, current: str) -> bool:
    """True when ``candidate`` is strictly newer than ``current``."""
    return compare_versions(candidate, current) > 0
