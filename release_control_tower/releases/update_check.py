"""
Client update decisions.

Answers "is there something newer than what I run, and must I install it?"
for one platform. The force flag is copied from the release row as-is;
``min_supported_version`` plays no part in the decision.
"""

import structlog

from ..versioning import compare_versions
from .primitives import format_release_date
from .resolver import VersionResolver
from .schemas import CheckUpdateResult, UpdateInfo

logger = structlog.get_logger()


class UpdateDecisionEngine:
    def __init__(self, resolver: VersionResolver):
        self.resolver = resolver

    def check(self, platform: str, client_version: str) -> CheckUpdateResult:
        """Compare ``client_version`` with the latest published release."""
        latest = self.resolver.latest_published(platform)
        if latest is None:
            logger.info("No published release", platform=platform)
            return CheckUpdateResult(has_update=False)

        if compare_versions(latest.version, client_version) <= 0:
            logger.info(
                "Client is up to date",
                platform=platform,
                client_version=client_version,
                latest_version=latest.version,
            )
            return CheckUpdateResult(has_update=False)

        released = latest.published_at or latest.created_at
        file_hash = latest.file_hash or ""
        logger.info(
            "Update available",
            platform=platform,
            client_version=client_version,
            latest_version=latest.version,
            release_id=latest.id,
            force_update=latest.is_force_update,
        )
        return CheckUpdateResult(
            has_update=True,
            update_info=UpdateInfo(
                version=latest.version,
                # Clients read the version string as their version code.
                version_code=latest.version,
                download_url=latest.package_url or "",
                release_notes=latest.release_notes or "",
                file_size=latest.file_size or 0,
                md5=file_hash,
                file_hash=file_hash,
                force_update=bool(latest.is_force_update),
                release_date=format_release_date(released),
            ),
        )
