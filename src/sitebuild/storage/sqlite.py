"""SQLite storage using stdlib ``sqlite3`` + ``asyncio.to_thread``.

Zero external dependencies. Site and build rows are stored as JSON
documents keyed by id; bundle rows keep their columns so the latest bundle
for a site can be found by insertion order.
"""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any, Callable, TypeVar

import structlog

from sitebuild.core.exceptions import StorageError
from sitebuild.storage.base import Storage
from sitebuild.storage.models import SiteBuildRow, SiteBundleRow, SiteRow

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sites (
    site_id TEXT PRIMARY KEY,
    data TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS site_builds (
    build_id TEXT PRIMARY KEY,
    site_id TEXT NOT NULL,
    data TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS site_bundles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    site_id TEXT NOT NULL,
    build_id TEXT NOT NULL,
    version TEXT NOT NULL,
    bundle_json TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_site_bundles_site ON site_bundles (site_id, id);
"""


class SQLiteStorage(Storage):
    """:class:`Storage` backed by a SQLite database.

    Args:
        database: Path to the SQLite database file, or ``":memory:"``.

    Supports ``async with`` to open and close the connection.
    """

    def __init__(self, database: str = ":memory:") -> None:
        self._database = database
        self._conn: sqlite3.Connection | None = None

    # -- lifecycle ----------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection and create the tables if needed."""

        def _connect() -> sqlite3.Connection:
            conn = sqlite3.connect(self._database, check_same_thread=False)
            conn.executescript(_SCHEMA)
            conn.commit()
            return conn

        try:
            self._conn = await asyncio.to_thread(_connect)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database {self._database!r}: {exc}") from exc
        logger.info("sqlite_storage.connected", database=self._database)

    async def close(self) -> None:
        if self._conn is not None:
            await asyncio.to_thread(self._conn.close)
            self._conn = None
            logger.info("sqlite_storage.closed", database=self._database)

    async def __aenter__(self) -> SQLiteStorage:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def _run(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        if self._conn is None:
            raise StorageError("SQLiteStorage not connected. Call await storage.connect() first.")
        conn = self._conn  # capture for closure

        def _exec() -> T:
            try:
                result = fn(conn)
                conn.commit()
                return result
            except sqlite3.Error:
                conn.rollback()
                raise

        try:
            return await asyncio.to_thread(_exec)
        except sqlite3.IntegrityError as exc:
            raise StorageError(str(exc), code="CONFLICT") from exc
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    # -- sites --------------------------------------------------------------

    async def create_site(self, site: SiteRow) -> SiteRow:
        await self._run(
            lambda c: c.execute(
                "INSERT INTO sites (site_id, data) VALUES (?, ?)",
                (site.site_id, site.model_dump_json()),
            )
        )
        return site

    async def get_site(self, site_id: str) -> SiteRow | None:
        row = await self._run(
            lambda c: c.execute("SELECT data FROM sites WHERE site_id = ?", (site_id,)).fetchone()
        )
        return SiteRow.model_validate_json(row[0]) if row else None

    async def update_site(self, site_id: str, updates: dict[str, Any]) -> SiteRow:
        current = await self.get_site(site_id)
        if current is None:
            raise StorageError(f"Site '{site_id}' not found", code="NOT_FOUND")
        updated = SiteRow.model_validate({**current.model_dump(), **updates})
        await self._run(
            lambda c: c.execute(
                "UPDATE sites SET data = ? WHERE site_id = ?",
                (updated.model_dump_json(), site_id),
            )
        )
        return updated

    # -- builds -------------------------------------------------------------

    async def create_build(self, build: SiteBuildRow) -> SiteBuildRow:
        await self._run(
            lambda c: c.execute(
                "INSERT INTO site_builds (build_id, site_id, data) VALUES (?, ?, ?)",
                (build.build_id, build.site_id, build.model_dump_json()),
            )
        )
        return build

    async def get_build(self, build_id: str) -> SiteBuildRow | None:
        row = await self._run(
            lambda c: c.execute(
                "SELECT data FROM site_builds WHERE build_id = ?", (build_id,)
            ).fetchone()
        )
        return SiteBuildRow.model_validate_json(row[0]) if row else None

    async def update_build(self, build_id: str, updates: dict[str, Any]) -> SiteBuildRow:
        current = await self.get_build(build_id)
        if current is None:
            raise StorageError(f"Build '{build_id}' not found", code="NOT_FOUND")
        updated = SiteBuildRow.model_validate({**current.model_dump(), **updates})
        await self._run(
            lambda c: c.execute(
                "UPDATE site_builds SET data = ? WHERE build_id = ?",
                (updated.model_dump_json(), build_id),
            )
        )
        return updated

    # -- bundles ------------------------------------------------------------

    async def save_bundle(self, bundle: SiteBundleRow) -> SiteBundleRow:
        await self._run(
            lambda c: c.execute(
                "INSERT INTO site_bundles (site_id, build_id, version, bundle_json, created_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (
                    bundle.site_id,
                    bundle.build_id,
                    bundle.version,
                    bundle.bundle_json,
                    bundle.created_at.isoformat(),
                ),
            )
        )
        return bundle

    async def get_bundle(self, site_id: str, build_id: str) -> SiteBundleRow | None:
        row = await self._run(
            lambda c: c.execute(
                "SELECT site_id, build_id, version, bundle_json, created_at FROM site_bundles"
                " WHERE site_id = ? AND build_id = ? ORDER BY id DESC LIMIT 1",
                (site_id, build_id),
            ).fetchone()
        )
        return _bundle_row(row)

    async def get_latest_bundle(self, site_id: str) -> SiteBundleRow | None:
        row = await self._run(
            lambda c: c.execute(
                "SELECT site_id, build_id, version, bundle_json, created_at FROM site_bundles"
                " WHERE site_id = ? ORDER BY id DESC LIMIT 1",
                (site_id,),
            ).fetchone()
        )
        return _bundle_row(row)


def _bundle_row(row: tuple[Any, ...] | None) -> SiteBundleRow | None:
    if row is None:
        return None
    site_id, build_id, version, bundle_json, created_at = row
    return SiteBundleRow(
        site_id=site_id,
        build_id=build_id,
        version=version,
        bundle_json=bundle_json,
        created_at=created_at,
    )
