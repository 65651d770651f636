"""
SQLAlchemy models for Release Control Tower.
"""

from typing import Any, Dict

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)

from ..releases.primitives import format_timestamp
from .base import Base


class AppVersionModel(Base):
    """One release artifact for one platform.

    (platform, version) is unique by convention only; duplicates are allowed.
    """

    __tablename__ = "app_versions"

    # Primary fields
    id = Column(Integer, primary_key=True, autoincrement=True)
    version = Column(String(64), nullable=False)
    platform = Column(String(20), nullable=False, index=True)

    # Distribution
    distribution_type = Column(String(10), nullable=True, default="url")
    package_url = Column(Text, nullable=True)
    oss_object_key = Column(String(512), nullable=True)

    release_notes = Column(Text, nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default="draft", index=True)
    is_force_update = Column(Boolean, nullable=False, default=False)
    # Stored for compatibility; update checks do not read it.
    min_supported_version = Column(String(64), nullable=True)

    # Artifact integrity
    file_size = Column(BigInteger, nullable=False, default=0)
    file_hash = Column(String(128), nullable=True)

    # Timestamps (UTC)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    created_by = Column(String(128), nullable=True)

    __table_args__ = (
        Index(
            "ix_app_versions_platform_status_created",
            "platform",
            "status",
            "created_at",
        ),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "version": self.version,
            "platform": self.platform,
            "distribution_type": self.distribution_type,
            "package_url": self.package_url,
            "oss_object_key": self.oss_object_key,
            "release_notes": self.release_notes,
            "status": self.status,
            "is_force_update": bool(self.is_force_update),
            "min_supported_version": self.min_supported_version,
            "file_size": self.file_size or 0,
            "file_hash": self.file_hash,
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
            "published_at": format_timestamp(self.published_at),
            "created_by": self.created_by,
        }

    def __repr__(self) -> str:
        return (
            f"<AppVersionModel id={self.id} platform={self.platform} "
            f"version={self.version} status={self.status}>"
        )
