"""
Canonical enums for release records.
"""

from enum import Enum


class Platform(str, Enum):
    """Client platforms a release can target."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    ANDROID = "android"
    IOS = "ios"


class DistributionType(str, Enum):
    """How the release artifact is delivered."""

    URL = "url"
    OSS = "oss"


class ReleaseStatus(str, Enum):
    """Publication lifecycle status.

    Only ``published`` rows are visible to clients. Any status may move to
    any other; there is no terminal state.
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    DEPRECATED = "deprecated"


PLATFORMS = tuple(p.value for p in Platform)
