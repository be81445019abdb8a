"""Bundle serialization, consistency checks and read-side helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, ValidationError

from sitebuild.bundle.models import IntentBinding, SiteBundle
from sitebuild.core.constants import SiteStatus
from sitebuild.core.exceptions import BundleError

if TYPE_CHECKING:
    from sitebuild.storage.models import SiteBundleRow


class BundleIssue(BaseModel):
    path: str
    message: str
    code: str


class BundleValidationResult(BaseModel):
    valid: bool
    errors: list[BundleIssue] = Field(default_factory=list)
    warnings: list[BundleIssue] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_bundle(bundle: SiteBundle) -> str:
    return bundle.model_dump_json()


def parse_bundle(raw: str | bytes) -> SiteBundle:
    """Parse a JSON-serialized bundle.

    Raises:
        BundleError: If *raw* is not valid JSON or not a valid bundle.
    """
    try:
        return SiteBundle.model_validate_json(raw)
    except ValidationError as exc:
        raise BundleError(
            f"Invalid SiteBundle: {exc.error_count()} validation error(s)",
            code="INVALID_BUNDLE",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


def load_bundle_row(row: SiteBundleRow) -> SiteBundle:
    """Parse the bundle stored in a persisted bundle row."""
    bundle = parse_bundle(row.bundle_json)
    if bundle.site.site_id != row.site_id or bundle.build.build_id != row.build_id:
        raise BundleError(
            "Bundle ids do not match the row they were stored under",
            code="BUNDLE_ROW_MISMATCH",
            details={"site_id": row.site_id, "build_id": row.build_id},
        )
    return bundle


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------


def validate_bundle_consistency(bundle: SiteBundle) -> BundleValidationResult:
    """Check cross-references the schema alone cannot express.

    Errors: routes, nav items, bindings or the runtime entry pointing at a
    page that does not exist, and an entry page that is not the first route.
    Warnings: bindings to intents missing from the catalog, and a first
    route not flagged as home.
    """
    errors: list[BundleIssue] = []
    warnings: list[BundleIssue] = []
    pages = bundle.pages

    for route in bundle.manifest.routes:
        if route.page_id not in pages:
            errors.append(
                BundleIssue(
                    path=f"manifest.routes[{route.path}]",
                    message=f"Route references missing page {route.page_id}",
                    code="missing_page",
                )
            )

    for item in bundle.manifest.nav:
        if item.page_id not in pages:
            errors.append(
                BundleIssue(
                    path=f"manifest.nav[{item.label}]",
                    message=f"Nav item references missing page {item.page_id}",
                    code="missing_page",
                )
            )

    for binding in bundle.intents.bindings:
        if binding.page_id not in pages:
            errors.append(
                BundleIssue(
                    path=f"intents.bindings[{binding.binding_id}]",
                    message=f"Intent binding references missing page {binding.page_id}",
                    code="missing_page",
                )
            )
        if binding.intent_id not in bundle.intents.definitions:
            warnings.append(
                BundleIssue(
                    path=f"intents.bindings[{binding.binding_id}]",
                    message=f"Intent binding references undefined intent {binding.intent_id}",
                    code="undefined_intent",
                )
            )

    entry = bundle.runtime.entry.page_id
    if entry not in pages:
        errors.append(
            BundleIssue(
                path="runtime.entry.page_id",
                message=f"Runtime entry page {entry} not found",
                code="missing_page",
            )
        )

    routes = bundle.manifest.routes
    if routes:
        if not routes[0].is_home:
            warnings.append(
                BundleIssue(
                    path="manifest.routes[0]",
                    message="First route is not marked as home",
                    code="home_not_first",
                )
            )
        if entry != routes[0].page_id:
            errors.append(
                BundleIssue(
                    path="runtime.entry.page_id",
                    message=f"Runtime entry {entry} does not match first route {routes[0].page_id}",
                    code="entry_mismatch",
                )
            )

    return BundleValidationResult(valid=not errors, errors=errors, warnings=warnings)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def page_bindings(bundle: SiteBundle, page_id: str) -> list[IntentBinding]:
    return [b for b in bundle.intents.bindings if b.page_id == page_id]


def has_build_errors(bundle: SiteBundle) -> bool:
    return bool(bundle.build.errors)


def is_publishable(bundle: SiteBundle) -> bool:
    """A bundle can be published once previewable, error-free and non-empty."""
    return (
        bundle.site.status == SiteStatus.PREVIEW
        and not has_build_errors(bundle)
        and bool(bundle.pages)
    )
