"""
Request and response schemas for release management.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..db.models import AppVersionModel


class ReleaseCreate(BaseModel):
    """Input for creating a draft release.

    Required fields default to empty so that the lifecycle manager, not the
    schema, decides what counts as missing.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "platform": "android",
                "version": "1.0.1",
                "package_url": "https://cdn.example.com/app_1.0.1.apk",
                "release_notes": "Bug fixes",
                "file_size": 52428800,
                "file_hash": "9e107d9d372bb6826bd81d3542a419d6",
                "is_force_update": False,
            }
        },
    )

    platform: Optional[str] = Field(
        None, description="windows, macos, linux, android or ios"
    )
    version: Optional[str] = Field(None, description="Dotted version, e.g. 1.0.2")
    package_url: Optional[str] = Field(None, description="Direct download link")
    distribution_type: Optional[str] = Field(
        None, description="'url' (default) or 'oss'"
    )
    oss_object_key: Optional[str] = None
    release_notes: Optional[str] = None
    file_size: int = Field(0, ge=0, description="Artifact size in bytes")
    file_hash: Optional[str] = Field(None, description="Hex-encoded content hash")
    is_force_update: bool = False
    min_supported_version: Optional[str] = None
    created_by: Optional[str] = None


class ReleasePatch(BaseModel):
    """Partial update of a release.

    Which fields the caller actually sent is tracked by pydantic
    (``model_fields_set``); the lifecycle manager applies the per-field rules.
    """

    model_config = ConfigDict(extra="ignore")

    version: Optional[str] = None
    package_url: Optional[str] = None
    distribution_type: Optional[str] = None
    oss_object_key: Optional[str] = None
    release_notes: Optional[str] = None
    file_size: Optional[int] = None
    file_hash: Optional[str] = None
    is_force_update: Optional[bool] = None
    min_supported_version: Optional[str] = None


class UpdateInfo(BaseModel):
    """What a client needs to download and apply a newer release."""

    version: str
    version_code: str
    download_url: str = ""
    release_notes: str = ""
    file_size: int = 0
    md5: str = ""
    file_hash: str = ""
    force_update: bool = False
    release_date: str


class CheckUpdateResult(BaseModel):
    has_update: bool
    update_info: Optional[UpdateInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass
class ReleasePage:
    versions: List[AppVersionModel] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

    def to_dict(self) -> Dict[str, Any]:
        return {
            "versions": [v.to_dict() for v in self.versions],
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
        }
