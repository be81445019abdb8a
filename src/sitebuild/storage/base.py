"""Storage abstraction consumed by the build pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from sitebuild.storage.models import SiteBuildRow, SiteBundleRow, SiteRow


class Storage(ABC):
    """Durable store for sites, builds and bundles.

    Every method is a single-record operation keyed by site or build id.
    Implementations raise :class:`~sitebuild.core.exceptions.StorageError`
    on failure; the pipeline lets it propagate as a stage failure.
    """

    # -- sites --------------------------------------------------------------

    @abstractmethod
    async def create_site(self, site: SiteRow) -> SiteRow: ...

    @abstractmethod
    async def get_site(self, site_id: str) -> SiteRow | None: ...

    @abstractmethod
    async def update_site(self, site_id: str, updates: dict[str, Any]) -> SiteRow: ...

    # -- builds -------------------------------------------------------------

    @abstractmethod
    async def create_build(self, build: SiteBuildRow) -> SiteBuildRow: ...

    @abstractmethod
    async def get_build(self, build_id: str) -> SiteBuildRow | None: ...

    @abstractmethod
    async def update_build(
        self, build_id: str, updates: dict[str, Any]
    ) -> SiteBuildRow: ...

    # -- bundles ------------------------------------------------------------

    @abstractmethod
    async def save_bundle(self, bundle: SiteBundleRow) -> SiteBundleRow: ...

    @abstractmethod
    async def get_bundle(self, site_id: str, build_id: str) -> SiteBundleRow | None: ...

    @abstractmethod
    async def get_latest_bundle(self, site_id: str) -> SiteBundleRow | None:
        """Return the most recently saved bundle for *site_id*, or ``None``."""
