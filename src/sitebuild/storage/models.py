"""Durable row shapes written by the build pipeline."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from sitebuild.bundle.models import utcnow
from sitebuild.core.constants import BUNDLE_VERSION, BuildMode, SiteStatus


class SiteRow(BaseModel):
    site_id: str
    business_id: str
    owner_user_id: str
    status: SiteStatus = SiteStatus.DRAFT
    slug: str | None = None
    domain: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SiteBuildRow(BaseModel):
    build_id: str
    site_id: str
    mode: BuildMode
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: datetime | None = None
    warnings_count: int = 0
    errors_count: int = 0


class SiteBundleRow(BaseModel):
    """The persisted build artifact: one serialized bundle per site build."""

    site_id: str
    build_id: str
    version: str = BUNDLE_VERSION
    bundle_json: str
    created_at: datetime = Field(default_factory=utcnow)
