from __future__ import annotations

from typing import Any

from sitebuild.core.exceptions import StorageError
from sitebuild.storage.base import Storage
from sitebuild.storage.models import SiteBuildRow, SiteBundleRow, SiteRow


class InMemoryStorage(Storage):
    """Dict-backed :class:`Storage` for tests and local runs.

    Usage::

        storage = InMemoryStorage()
        storage.fail_on("save_bundle", StorageError("disk full"))   # inject a failure
        orchestrator = BuildPipelineOrchestrator(storage, provider)

        storage.assert_called("create_site")
    """

    def __init__(self) -> None:
        self.sites: dict[str, SiteRow] = {}
        self.builds: dict[str, SiteBuildRow] = {}
        self.bundles: list[SiteBundleRow] = []
        self.calls: list[tuple[str, Any]] = []
        self._failures: dict[str, Exception] = {}

    # ------------------------------------------------------------------ #
    # Test helpers
    # ------------------------------------------------------------------ #

    def fail_on(self, method: str, error: Exception) -> None:
        """Make every subsequent call to *method* raise *error*."""
        self._failures[method] = error

    def assert_called(self, method: str) -> None:
        methods = [c[0] for c in self.calls]
        assert method in methods, f"Expected call to '{method}', got: {methods}"

    def _record(self, method: str, arg: Any) -> None:
        self.calls.append((method, arg))
        error = self._failures.get(method)
        if error is not None:
            raise error

    # ------------------------------------------------------------------ #
    # Storage ABC implementation
    # ------------------------------------------------------------------ #

    async def create_site(self, site: SiteRow) -> SiteRow:
        self._record("create_site", site)
        if site.site_id in self.sites:
            raise StorageError(f"Site '{site.site_id}' already exists", code="CONFLICT")
        self.sites[site.site_id] = site.model_copy()
        return site

    async def get_site(self, site_id: str) -> SiteRow | None:
        self._record("get_site", site_id)
        return self.sites.get(site_id)

    async def update_site(self, site_id: str, updates: dict[str, Any]) -> SiteRow:
        self._record("update_site", (site_id, updates))
        if site_id not in self.sites:
            raise StorageError(f"Site '{site_id}' not found", code="NOT_FOUND")
        row = self.sites[site_id].model_copy(update=updates)
        self.sites[site_id] = row
        return row

    async def create_build(self, build: SiteBuildRow) -> SiteBuildRow:
        self._record("create_build", build)
        if build.build_id in self.builds:
            raise StorageError(f"Build '{build.build_id}' already exists", code="CONFLICT")
        self.builds[build.build_id] = build.model_copy()
        return build

    async def get_build(self, build_id: str) -> SiteBuildRow | None:
        self._record("get_build", build_id)
        return self.builds.get(build_id)

    async def update_build(self, build_id: str, updates: dict[str, Any]) -> SiteBuildRow:
        self._record("update_build", (build_id, updates))
        if build_id not in self.builds:
            raise StorageError(f"Build '{build_id}' not found", code="NOT_FOUND")
        row = self.builds[build_id].model_copy(update=updates)
        self.builds[build_id] = row
        return row

    async def save_bundle(self, bundle: SiteBundleRow) -> SiteBundleRow:
        self._record("save_bundle", bundle)
        self.bundles.append(bundle.model_copy())
        return bundle

    async def get_bundle(self, site_id: str, build_id: str) -> SiteBundleRow | None:
        self._record("get_bundle", (site_id, build_id))
        for row in reversed(self.bundles):
            if row.site_id == site_id and row.build_id == build_id:
                return row
        return None

    async def get_latest_bundle(self, site_id: str) -> SiteBundleRow | None:
        self._record("get_latest_bundle", site_id)
        for row in reversed(self.bundles):
            if row.site_id == site_id:
                return row
        return None
