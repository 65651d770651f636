"""
HTTP client for the release management API.

Used by the operator tools; everything they do goes through the same
endpoints an admin UI would call.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class ReleaseAPIError(Exception):
    """The API could not be reached or answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ReleaseAPIClient:
    """
    Async client for the /api release endpoints.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_token}"} if api_token else {},
            transport=transport,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "ReleaseAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, f"/api{path}", **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Release API request {method} {path} failed: {e}")
            raise ReleaseAPIError(f"Request to {self.base_url} failed: {e}") from e

        if response.is_error:
            raise ReleaseAPIError(_error_message(response), response.status_code)
        return response.json()

    async def create_release(
        self,
        platform: str,
        version: str,
        package_url: str,
        release_notes: str = "",
        is_force_update: bool = False,
        file_size: int = 0,
        file_hash: str = "",
        distribution_type: str = "url",
    ) -> int:
        """Create a draft release and return its id."""
        data: Dict[str, Any] = {
            "platform": platform,
            "version": version,
            "package_url": package_url,
            "release_notes": release_notes,
            "is_force_update": is_force_update,
            "distribution_type": distribution_type,
        }
        if file_size > 0:
            data["file_size"] = file_size
        if file_hash:
            data["file_hash"] = file_hash

        result = await self._request("POST", "/app-versions", json=data)
        if "id" not in result:
            raise ReleaseAPIError("Server response did not include a release id")
        return int(result["id"])

    async def update_release(self, release_id: int, **fields: Any) -> None:
        await self._request("PUT", f"/app-versions/{release_id}", json=fields)

    async def publish_release(self, release_id: int) -> None:
        await self._request("POST", f"/app-versions/{release_id}/publish")

    async def deprecate_release(self, release_id: int) -> None:
        await self._request("POST", f"/app-versions/{release_id}/deprecate")

    async def delete_release(self, release_id: int) -> None:
        await self._request("DELETE", f"/app-versions/{release_id}")

    async def get_release(self, release_id: int) -> Dict[str, Any]:
        result = await self._request("GET", f"/app-versions/{release_id}")
        return result["version"]

    async def list_releases(
        self, platform: Optional[str] = None, page: int = 1, page_size: int = 20
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": page, "page_size": page_size}
        if platform:
            params["platform"] = platform
        return await self._request("GET", "/app-versions", params=params)

    async def latest_release(self, platform: str) -> Optional[Dict[str, Any]]:
        """Latest published release, or None when the platform has none."""
        try:
            result = await self._request(
                "GET", "/app-versions/latest", params={"platform": platform}
            )
        except ReleaseAPIError as e:
            if e.status_code == 404:
                return None
            raise
        return result["version"]

    async def latest_releases(self) -> Dict[str, Dict[str, Any]]:
        result = await self._request("GET", "/app-versions/latest-all")
        return result["versions"]

    async def check_update(
        self, platform: str, current_version: str
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/check-update",
            params={"platform": platform, "current_version": current_version},
        )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Server returned status {response.status_code}"
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("detail")
        if message:
            return f"{message} (status {response.status_code})"
    return f"Server returned status {response.status_code}"
