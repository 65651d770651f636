"""
Release lifecycle management.

Releases are created as drafts and then moved between ``draft``,
``published`` and ``deprecated``. No transition is refused: a deprecated
release can be published again, and publishing always resets
``published_at``. Deletion is permanent and ignores status.
"""

from typing import Any, Dict, Optional, Union

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from ..db.models import AppVersionModel
from ..db.store import ReleaseStore
from .enums import PLATFORMS, DistributionType
from .errors import NotFoundError, ValidationError
from .schemas import ReleaseCreate, ReleasePage, ReleasePatch

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 20

# Patch fields whose empty string means "leave unchanged" and whose explicit
# null clears the column.
_CLEARABLE_TEXT_FIELDS = (
    "package_url",
    "oss_object_key",
    "release_notes",
    "file_hash",
    "min_supported_version",
)
# Patch fields that can never be null; blank strings and null leave them
# unchanged, other values are trimmed.
_REQUIRED_TEXT_FIELDS = ("version", "distribution_type")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _parse(schema: type, data: Dict[str, Any]) -> BaseModel:
    """Validate raw input against ``schema``, reporting the first bad field."""
    try:
        return schema.model_validate(data)
    except SchemaError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ())) or None
        logger.warning("Release rejected", reason="invalid input", field=field)
        raise ValidationError(
            f"{field or 'input'}: {error.get('msg', 'invalid value')}", field=field
        ) from e


def _normalize_distribution_type(value: Optional[str]) -> str:
    value = _clean(value).lower() or DistributionType.URL.value
    allowed = [d.value for d in DistributionType]
    if value not in allowed:
        raise ValidationError(
            f"distribution_type must be one of: {', '.join(allowed)}",
            field="distribution_type",
        )
    return value


class ReleaseLifecycleManager:
    """Create, edit and move releases through their lifecycle."""

    def __init__(self, store: ReleaseStore):
        self.store = store

    def create(self, data: Union[ReleaseCreate, Dict[str, Any]]) -> int:
        """Validate ``data`` and insert it as a draft. Returns the new id."""
        if not isinstance(data, ReleaseCreate):
            data = _parse(ReleaseCreate, data)

        platform = _clean(data.platform).lower()
        version = _clean(data.version)
        package_url = _clean(data.package_url)

        for name, value in (
            ("platform", platform),
            ("version", version),
            ("package_url", package_url),
        ):
            if not value:
                logger.warning("Release rejected", reason="missing field", field=name)
                raise ValidationError(f"{name} is required", field=name)

        if platform not in PLATFORMS:
            logger.warning("Release rejected", reason="unknown platform", platform=platform)
            raise ValidationError(
                f"platform must be one of: {', '.join(PLATFORMS)}", field="platform"
            )

        release_id = self.store.insert(
            {
                "platform": platform,
                "version": version,
                "package_url": package_url,
                "distribution_type": _normalize_distribution_type(
                    data.distribution_type
                ),
                "oss_object_key": data.oss_object_key or None,
                "release_notes": data.release_notes or None,
                "file_size": data.file_size,
                "file_hash": data.file_hash or None,
                "is_force_update": data.is_force_update,
                "min_supported_version": data.min_supported_version or None,
                "created_by": data.created_by or None,
            }
        )
        logger.info(
            "Release created",
            release_id=release_id,
            platform=platform,
            version=version,
        )
        return release_id

    def changes_for(self, patch: ReleasePatch) -> Dict[str, Any]:
        """Translate a patch into the column values to write.

        - absent field: unchanged
        - "" on a text field, 0 or less on file_size: unchanged
        - explicit null on a nullable text field: cleared
        - is_force_update: absent/null unchanged, true/false set
        """
        sent = patch.model_fields_set
        changes: Dict[str, Any] = {}

        for name in _REQUIRED_TEXT_FIELDS:
            value = _clean(getattr(patch, name))
            if name in sent and value:
                changes[name] = value

        if "distribution_type" in changes:
            changes["distribution_type"] = _normalize_distribution_type(
                changes["distribution_type"]
            )

        for name in _CLEARABLE_TEXT_FIELDS:
            if name not in sent:
                continue
            value = getattr(patch, name)
            if value is None:
                changes[name] = None
            elif value != "":
                changes[name] = value

        if patch.file_size is not None and patch.file_size > 0:
            changes["file_size"] = patch.file_size

        if patch.is_force_update is not None:
            changes["is_force_update"] = patch.is_force_update

        return changes

    def update(
        self, release_id: int, patch: Union[ReleasePatch, Dict[str, Any]]
    ) -> None:
        """Apply a partial update. ``updated_at`` is refreshed even for empty patches."""
        if not isinstance(patch, ReleasePatch):
            patch = _parse(ReleasePatch, patch)

        changes = self.changes_for(patch)
        matched = self.store.update_fields(release_id, changes)
        self._require_match(matched, release_id, "update")
        logger.info("Release updated", release_id=release_id, fields=sorted(changes))

    def publish(self, release_id: int) -> None:
        """Make the release visible to clients, from any prior status."""
        matched = self.store.mark_published(release_id)
        self._require_match(matched, release_id, "publish")
        logger.info("Release published", release_id=release_id)

    def deprecate(self, release_id: int) -> None:
        """Hide the release from clients, from any prior status."""
        matched = self.store.mark_deprecated(release_id)
        self._require_match(matched, release_id, "deprecate")
        logger.info("Release deprecated", release_id=release_id)

    def delete(self, release_id: int) -> None:
        matched = self.store.delete(release_id)
        self._require_match(matched, release_id, "delete")
        logger.info("Release deleted", release_id=release_id)

    def get(self, release_id: int) -> AppVersionModel:
        release = self.store.get(release_id)
        if release is None:
            logger.warning("Release not found", release_id=release_id)
            raise NotFoundError("Release not found", release_id=release_id)
        return release

    def list(
        self,
        platform: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ReleasePage:
        """Page through releases of every status, newest first.

        ``total`` honours the platform filter but not the pagination.
        """
        if page < 1:
            raise ValidationError("page must be >= 1", field="page")
        if page_size < 1:
            raise ValidationError("page_size must be >= 1", field="page_size")

        platform = _clean(platform).lower() or None
        offset = (page - 1) * page_size
        return ReleasePage(
            versions=self.store.list_page(platform, limit=page_size, offset=offset),
            total=self.store.count(platform),
            page=page,
            page_size=page_size,
        )

    @staticmethod
    def _require_match(matched: int, release_id: int, action: str) -> None:
        if not matched:
            logger.warning("Release not found", release_id=release_id, action=action)
            raise NotFoundError("Release not found", release_id=release_id)
