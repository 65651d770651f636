"""
Release Control Tower

Client update distribution and release rollout control.
"""

import importlib.metadata

__version__ = importlib.metadata.version("release-control-tower")

from .versioning import compare_versions, is_newer, parse_version, strip_build_suffix

__all__ = [
    "compare_versions",
    "is_newer",
    "parse_version",
    "strip_build_suffix",
]
