"""
Release API Routes.

Client update checks and administrative release management. Authentication
of the administrative endpoints is handled by the surrounding middleware.
All endpoints are mounted under /api.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db.base import get_db
from ..db.store import ReleaseStore
from .errors import NotFoundError, ValidationError
from .lifecycle import DEFAULT_PAGE_SIZE, ReleaseLifecycleManager
from .resolver import VersionResolver
from .schemas import ReleaseCreate, ReleasePatch
from .update_check import UpdateDecisionEngine

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["releases"])


def get_store(db: Session = Depends(get_db)) -> ReleaseStore:
    return ReleaseStore(db)


def get_lifecycle(store: ReleaseStore = Depends(get_store)) -> ReleaseLifecycleManager:
    return ReleaseLifecycleManager(store)


def get_resolver(store: ReleaseStore = Depends(get_store)) -> VersionResolver:
    return VersionResolver(store)


def get_update_engine(
    resolver: VersionResolver = Depends(get_resolver),
) -> UpdateDecisionEngine:
    return UpdateDecisionEngine(resolver)


def _require_platform(platform: Optional[str]) -> str:
    platform = (platform or "").strip().lower()
    if not platform:
        raise ValidationError("platform query parameter is required", field="platform")
    return platform


# =============================================================================
# Client Endpoints
# =============================================================================


@router.get("/check-update")
def check_update(
    platform: Optional[str] = None,
    current_version: str = "",
    version_code: Optional[str] = None,
    engine: UpdateDecisionEngine = Depends(get_update_engine),
) -> Dict[str, Any]:
    """Tell a client whether a newer published release exists."""
    platform = _require_platform(platform)
    logger.info(
        "Update check",
        platform=platform,
        current_version=current_version,
        version_code=version_code,
    )
    return engine.check(platform, current_version).to_dict()


# =============================================================================
# Release Endpoints
# =============================================================================


@router.get("/app-versions/latest")
def get_latest_version(
    platform: Optional[str] = None,
    resolver: VersionResolver = Depends(get_resolver),
) -> Dict[str, Any]:
    """Latest published release for one platform."""
    platform = _require_platform(platform)
    release = resolver.latest_published(platform)
    if release is None:
        logger.info("No published release", platform=platform)
        raise NotFoundError(f"No published release for platform '{platform}'")
    return {"version": release.to_dict()}


@router.get("/app-versions/latest-all")
def get_latest_versions(
    resolver: VersionResolver = Depends(get_resolver),
) -> Dict[str, Any]:
    """Latest published release per platform; platforms without one are omitted."""
    latest = resolver.latest_per_platform()
    return {
        "versions": {platform: release.to_dict() for platform, release in latest.items()}
    }


@router.get("/app-versions")
def list_versions(
    platform: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=1000),
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """List releases of every status, newest first."""
    return lifecycle.list(platform=platform, page=page, page_size=page_size).to_dict()


@router.get("/app-versions/{release_id}")
def get_version(
    release_id: int,
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """Get a release by ID."""
    return {"version": lifecycle.get(release_id).to_dict()}


@router.post("/app-versions", status_code=201)
def create_version(
    release: ReleaseCreate,
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """Create a draft release."""
    release_id = lifecycle.create(release)
    return {"message": "Release created", "id": release_id}


@router.put("/app-versions/{release_id}")
def update_version(
    release_id: int,
    patch: ReleasePatch,
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """Partially update a release."""
    lifecycle.update(release_id, patch)
    return {"message": "Release updated"}


@router.post("/app-versions/{release_id}/publish")
def publish_version(
    release_id: int,
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """Publish a release, whatever its current status."""
    lifecycle.publish(release_id)
    return {"message": "Release published"}


@router.post("/app-versions/{release_id}/deprecate")
def deprecate_version(
    release_id: int,
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """Deprecate a release, whatever its current status."""
    lifecycle.deprecate(release_id)
    return {"message": "Release deprecated"}


@router.delete("/app-versions/{release_id}")
def delete_version(
    release_id: int,
    lifecycle: ReleaseLifecycleManager = Depends(get_lifecycle),
) -> Dict[str, Any]:
    """Permanently delete a release."""
    lifecycle.delete(release_id)
    return {"message": "Release deleted"}
