"""
Latest published release resolution.

"Latest" means most recently *created*, not highest version: a lower
version created after a higher one is live wins once it is published.
"""

from typing import Dict, Iterable, Optional

from ..db.models import AppVersionModel
from ..db.store import ReleaseStore
from .enums import PLATFORMS


class VersionResolver:
    def __init__(self, store: ReleaseStore):
        self.store = store

    def latest_published(self, platform: str) -> Optional[AppVersionModel]:
        """Newest published release for ``platform``, or None."""
        return self.store.latest_published(platform)

    def latest_per_platform(
        self, platforms: Iterable[str] = PLATFORMS
    ) -> Dict[str, AppVersionModel]:
        """Latest published release keyed by platform.

        Each platform is a separate read with no shared snapshot. Platforms
        without a published release are left out of the result.
        """
        result: Dict[str, AppVersionModel] = {}
        for platform in platforms:
            release = self.latest_published(platform)
            if release is not None:
                result[platform] = release
        return result
