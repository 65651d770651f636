"""
Release store.

Thin persistence layer over the ``app_versions`` table. Every mutating method
issues exactly one SQL statement and commits it; atomicity is whatever the
database engine gives a single statement. Failures are rolled back and
re-raised as ``StorageError`` without retrying.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog
from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..releases.enums import ReleaseStatus
from ..releases.errors import StorageError
from ..releases.primitives import utc_now
from .models import AppVersionModel

logger = structlog.get_logger()


class ReleaseStore:
    """Storage operations for release rows."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str, release_id: Any = None) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Release storage operation failed",
                operation=operation,
                release_id=release_id,
                error=str(e),
            )
            raise StorageError(
                f"Failed to {operation}: {e.__class__.__name__}",
                release_id=release_id,
            ) from e

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, values: Dict[str, Any]) -> int:
        """Insert a draft row and return its id."""
        now = utc_now()
        row = AppVersionModel(
            **values,
            status=ReleaseStatus.DRAFT.value,
            created_at=now,
            updated_at=now,
        )
        with self._guard("create release"):
            self.db.add(row)
            self.db.commit()
            return row.id

    def update_fields(self, release_id: int, values: Dict[str, Any]) -> int:
        """Apply ``values`` and refresh ``updated_at``. Returns matched row count."""
        values = {**values, "updated_at": utc_now()}
        return self._execute_update("update release", release_id, values)

    def mark_published(self, release_id: int) -> int:
        now = utc_now()
        return self._execute_update(
            "publish release",
            release_id,
            {
                "status": ReleaseStatus.PUBLISHED.value,
                "published_at": now,
                "updated_at": now,
            },
        )

    def mark_deprecated(self, release_id: int) -> int:
        return self._execute_update(
            "deprecate release",
            release_id,
            {"status": ReleaseStatus.DEPRECATED.value, "updated_at": utc_now()},
        )

    def delete(self, release_id: int) -> int:
        with self._guard("delete release", release_id):
            result = self.db.execute(
                delete(AppVersionModel).where(AppVersionModel.id == release_id)
            )
            self.db.commit()
            return result.rowcount

    def _execute_update(
        self, operation: str, release_id: int, values: Dict[str, Any]
    ) -> int:
        with self._guard(operation, release_id):
            result = self.db.execute(
                update(AppVersionModel)
                .where(AppVersionModel.id == release_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
            return result.rowcount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, release_id: int) -> Optional[AppVersionModel]:
        """Get a release by ID."""
        with self._guard("load release", release_id):
            return self.db.execute(
                select(AppVersionModel).where(AppVersionModel.id == release_id)
            ).scalar_one_or_none()

    def latest_published(self, platform: str) -> Optional[AppVersionModel]:
        """Most recently created published row for ``platform``."""
        with self._guard("resolve latest release"):
            return (
                self.db.execute(
                    select(AppVersionModel)
                    .where(
                        AppVersionModel.platform == platform,
                        AppVersionModel.status == ReleaseStatus.PUBLISHED.value,
                    )
                    .order_by(desc(AppVersionModel.created_at), desc(AppVersionModel.id))
                    .limit(1)
                )
                .scalars()
                .first()
            )

    def list_page(
        self, platform: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> List[AppVersionModel]:
        """Rows of any status, newest first."""
        query = select(AppVersionModel)
        if platform:
            query = query.where(AppVersionModel.platform == platform)

        with self._guard("list releases"):
            return list(
                self.db.execute(
                    query.order_by(
                        desc(AppVersionModel.created_at), desc(AppVersionModel.id)
                    )
                    .offset(offset)
                    .limit(limit)
                ).scalars()
            )

    def count(self, platform: Optional[str] = None) -> int:
        """Row count for ``platform`` (all platforms when empty), any status."""
        query = select(func.count(AppVersionModel.id))
        if platform:
            query = query.where(AppVersionModel.platform == platform)

        with self._guard("count releases"):
            return self.db.execute(query).scalar_one()
