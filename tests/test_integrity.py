"""Tests for artifact hashing."""

import asyncio

import httpx
import pytest

from release_control_tower.tools.integrity import ArtifactError, hash_file, hash_url

CONTENT = b"hello world"
MD5 = "5eb63bbbe01eeed093cb22bb8f5acdc3"
SHA256 = "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"


@pytest.fixture
def artifact(tmp_path):
    path = tmp_path / "app_1.0.0.apk"
    path.write_bytes(CONTENT)
    return path


class TestHashFile:
    def test_md5(self, artifact):
        digest = hash_file(artifact)

        assert digest.algorithm == "md5"
        assert digest.hexdigest == MD5
        assert digest.size == len(CONTENT)
        assert digest.source == str(artifact)

    def test_sha256(self, artifact):
        assert hash_file(str(artifact), "sha256").hexdigest == SHA256

    def test_missing_file(self, tmp_path):
        with pytest.raises(ArtifactError):
            hash_file(tmp_path / "missing.apk")

    def test_unsupported_algorithm(self, artifact):
        with pytest.raises(ArtifactError):
            hash_file(artifact, "crc32")

    def test_size_mb(self, tmp_path):
        path = tmp_path / "big.bin"
        path.write_bytes(b"\0" * (3 * 1024 * 1024))

        digest = hash_file(path)
        assert digest.size == 3 * 1024 * 1024
        assert digest.size_mb == 3.0


class TestHashUrl:
    def test_streams_and_hashes(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/app.apk"
            return httpx.Response(200, content=CONTENT)

        digest = asyncio.run(
            hash_url(
                "https://cdn.example.com/app.apk",
                transport=httpx.MockTransport(handler),
            )
        )

        assert digest.hexdigest == MD5
        assert digest.size == len(CONTENT)
        assert digest.source == "https://cdn.example.com/app.apk"

    def test_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))

        with pytest.raises(ArtifactError, match="404"):
            asyncio.run(hash_url("https://cdn.example.com/gone.apk", transport=transport))

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ArtifactError):
            asyncio.run(
                hash_url(
                    "https://cdn.example.com/app.apk",
                    transport=httpx.MockTransport(handler),
                )
            )
