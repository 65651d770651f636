"""
Artifact integrity hashing.

Computes the content hash and size of a release artifact, either a local
file or a remote URL, so they can be recorded on the release. The default
algorithm is MD5 because that is what update clients verify against.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
SUPPORTED_ALGORITHMS = ("md5", "sha256")


class ArtifactError(Exception):
    """The artifact could not be read or downloaded."""


@dataclass
class ArtifactDigest:
    source: str
    algorithm: str
    hexdigest: str
    size: int

    @property
    def size_mb(self) -> float:
        return self.size / 1024 / 1024


def _new_hash(algorithm: str):
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ArtifactError(
            f"Unsupported algorithm '{algorithm}', use one of: {', '.join(SUPPORTED_ALGORITHMS)}"
        )
    return hashlib.new(algorithm)


def hash_file(path: Path | str, algorithm: str = "md5") -> ArtifactDigest:
    """Hash a local file in chunks. Size comes from the file system."""
    path = Path(path)
    digest = _new_hash(algorithm)
    try:
        size = path.stat().st_size
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        raise ArtifactError(f"Cannot read {path}: {e}") from e

    logger.info(f"Hashed {path} ({size} bytes) with {algorithm}")
    return ArtifactDigest(str(path), algorithm, digest.hexdigest(), size)


async def hash_url(
    url: str,
    algorithm: str = "md5",
    timeout: float = 300.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ArtifactDigest:
    """Download ``url`` and hash it while streaming.

    Size is the number of bytes actually received, not Content-Length.
    """
    digest = _new_hash(algorithm)
    size = 0
    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, transport=transport
        ) as client:
            async with client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise ArtifactError(
                        f"Download failed with status {response.status_code}"
                    )
                async for chunk in response.aiter_bytes(CHUNK_SIZE):
                    digest.update(chunk)
                    size += len(chunk)
    except httpx.RequestError as e:
        raise ArtifactError(f"Download of {url} failed: {e}") from e

    logger.info(f"Hashed {url} ({size} bytes) with {algorithm}")
    return ArtifactDigest(url, algorithm, digest.hexdigest(), size)
