"""Durable storage for sites, builds and bundles."""

from __future__ import annotations

from sitebuild.storage.base import Storage
from sitebuild.storage.memory import InMemoryStorage
from sitebuild.storage.models import SiteBuildRow, SiteBundleRow, SiteRow
from sitebuild.storage.sqlite import SQLiteStorage

__all__ = [
    "InMemoryStorage",
    "SQLiteStorage",
    "SiteBuildRow",
    "SiteBundleRow",
    "SiteRow",
    "Storage",
]
