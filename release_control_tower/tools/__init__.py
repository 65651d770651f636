"""
Operator tools: API client and artifact hashing used by the CLI.
"""

from .client import ReleaseAPIClient, ReleaseAPIError
from .integrity import ArtifactDigest, ArtifactError, hash_file, hash_url

__all__ = [
    "ArtifactDigest",
    "ArtifactError",
    "ReleaseAPIClient",
    "ReleaseAPIError",
    "hash_file",
    "hash_url",
]
