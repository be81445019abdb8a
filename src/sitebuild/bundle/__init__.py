"""SiteBundle models, factories and utilities."""
from sitebuild.bundle.factory import (
    HOME_PAGE_ID,
    create_skeleton_bundle,
    default_blueprint,
    page_id_for,
)
from sitebuild.bundle.models import (
    BlueprintPage,
    BrandPrimitives,
    BuildIssue,
    BuildTraceEvent,
    BusinessBlueprint,
    IntentBinding,
    IntentDefinition,
    NavItem,
    PageBundle,
    PageOutput,
    PageRoute,
    PageSource,
    RouteDef,
    SiteBundle,
)
from sitebuild.bundle.utils import (
    BundleIssue,
    BundleValidationResult,
    has_build_errors,
    is_publishable,
    load_bundle_row,
    page_bindings,
    parse_bundle,
    serialize_bundle,
    validate_bundle_consistency,
)

__all__ = [
    "HOME_PAGE_ID",
    "BlueprintPage",
    "BrandPrimitives",
    "BuildIssue",
    "BuildTraceEvent",
    "BundleIssue",
    "BundleValidationResult",
    "BusinessBlueprint",
    "IntentBinding",
    "IntentDefinition",
    "NavItem",
    "PageBundle",
    "PageOutput",
    "PageRoute",
    "PageSource",
    "RouteDef",
    "SiteBundle",
    "create_skeleton_bundle",
    "default_blueprint",
    "has_build_errors",
    "is_publishable",
    "load_bundle_row",
    "page_bindings",
    "page_id_for",
    "parse_bundle",
    "serialize_bundle",
    "validate_bundle_consistency",
]
