"""Factories for skeleton bundles and default blueprints."""

from __future__ import annotations

import re

from sitebuild.bundle.models import (
    BlueprintPage,
    BrandPrimitives,
    BuildProvenance,
    BusinessBlueprint,
    IntentSystem,
    NavItem,
    RouteDef,
    RuntimeConfig,
    RuntimeEntry,
    SiteBundle,
    SiteIdentity,
    SiteManifest,
    utcnow,
)
from sitebuild.core.constants import BuildMode, PreviewEngine, SiteStatus
from sitebuild.entitlements.plans import free_tier
from sitebuild.intents.catalog import IntentCatalog

HOME_PAGE_ID = "home"

_WHITESPACE_RE = re.compile(r"\s+")


def page_id_for(title: str) -> str:
    """Derive a page id from a page title: lower-cased, whitespace runs hyphenated."""
    return _WHITESPACE_RE.sub("-", title.lower())


def default_blueprint(industry: str | None = None) -> BusinessBlueprint:
    """The fixed four-page blueprint used when no AI blueprint is generated."""
    return BusinessBlueprint(
        industry=industry or "general",
        business_name="My Business",
        primary_goal="leads",
        pages=[
            BlueprintPage(title="Home", path="/", purpose="Main landing page"),
            BlueprintPage(title="About", path="/about", purpose="About the business"),
            BlueprintPage(title="Services", path="/services", purpose="List of services"),
            BlueprintPage(title="Contact", path="/contact", purpose="Contact form"),
        ],
    )


def create_skeleton_bundle(
    *,
    site_id: str,
    build_id: str,
    business_id: str,
    owner_user_id: str,
    mode: BuildMode,
    prompt: str | None,
    catalog: IntentCatalog,
    preferred_engine: PreviewEngine = PreviewEngine.SIMPLE,
) -> SiteBundle:
    """Return a draft bundle with a single home route and default entitlements."""
    now = utcnow()
    return SiteBundle(
        site=SiteIdentity(
            site_id=site_id,
            business_id=business_id,
            owner_user_id=owner_user_id,
            status=SiteStatus.DRAFT,
            created_at=now,
            updated_at=now,
        ),
        build=BuildProvenance(
            build_id=build_id,
            build_mode=mode,
            prompt=prompt,
            started_at=now,
        ),
        brand=BrandPrimitives(),
        manifest=SiteManifest(
            routes=[RouteDef(path="/", page_id=HOME_PAGE_ID, is_home=True)],
            nav=[NavItem(label="Home", path="/", page_id=HOME_PAGE_ID)],
        ),
        intents=IntentSystem(
            catalog_version=catalog.version,
            definitions=catalog.to_dict(),
        ),
        entitlements=free_tier(),
        runtime=RuntimeConfig(
            preferred_engine=preferred_engine,
            entry=RuntimeEntry(type="html", page_id=HOME_PAGE_ID),
        ),
    )
