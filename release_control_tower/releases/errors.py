"""
Error taxonomy for release management.

Every error is terminal for the request that raised it; nothing is retried.
"""

from typing import Any, Dict, Optional, Union

ReleaseId = Union[int, str]


class ReleaseError(Exception):
    """Base class for release management failures."""

    code = "RELEASE_ERROR"
    status_code = 500

    def __init__(self, message: str, release_id: Optional[ReleaseId] = None):
        self.message = message
        self.release_id = release_id
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.code, "message": self.message}
        if self.release_id is not None:
            payload["release_id"] = self.release_id
        return payload


class ValidationError(ReleaseError):
    """Raised when required input is missing or malformed."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        release_id: Optional[ReleaseId] = None,
    ):
        self.field = field
        super().__init__(message, release_id=release_id)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class NotFoundError(ReleaseError):
    """Raised when no release matches the given id or platform."""

    code = "NOT_FOUND"
    status_code = 404


class StorageError(ReleaseError):
    """Raised when the database cannot be reached or a query fails."""

    code = "STORAGE_ERROR"
    status_code = 500
