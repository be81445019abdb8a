"""Plan entitlements: feature flags and numeric limits that gate a site."""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import structlog

from sitebuild.bundle.models import EntitlementSystem, IntentDefinition
from sitebuild.core.constants import PlanTier

logger = structlog.get_logger(__name__)

# Default applied by the build pipeline.
FREE_FEATURES: Mapping[str, bool] = MappingProxyType(
    {
        "customDomain": False,
        "removeWatermark": False,
        "analytics": False,
        "formSubmissions": True,
        "automations": False,
        "sslCertificate": True,
    }
)

FREE_LIMITS: Mapping[str, int | float] = MappingProxyType(
    {
        "pagesMax": 5,
        "formsMax": 2,
        "submissionsPerMonth": 100,
        "storageGb": 0.5,
        "bandwidthGb": 10,
    }
)

PLAN_ORDER: tuple[PlanTier, ...] = (
    PlanTier.FREE,
    PlanTier.STARTER,
    PlanTier.PRO,
    PlanTier.AGENCY,
    PlanTier.ENTERPRISE,
)


def _limits(
    pages: int, assets: int, automations: int, visits: int, storage_mb: int
) -> Mapping[str, int | float]:
    return MappingProxyType(
        {
            "pages": pages,
            "assets": assets,
            "automations": automations,
            "monthlyVisits": visits,
            "storage": storage_mb,
        }
    )


def _features(*enabled: str) -> Mapping[str, bool]:
    names = (
        "customDomain",
        "removeWatermark",
        "analytics",
        "seo",
        "prioritySupport",
        "teamMembers",
        "apiAccess",
        "whiteLabel",
    )
    return MappingProxyType({name: name in enabled for name in names})


# -1 means unlimited.
PLAN_LIMITS: Mapping[PlanTier, Mapping[str, int | float]] = MappingProxyType(
    {
        PlanTier.FREE: _limits(3, 50, 1, 1_000, 100),
        PlanTier.STARTER: _limits(10, 200, 5, 10_000, 500),
        PlanTier.PRO: _limits(50, 1_000, 20, 100_000, 2_000),
        PlanTier.AGENCY: _limits(200, 5_000, 100, 500_000, 10_000),
        PlanTier.ENTERPRISE: _limits(-1, -1, -1, -1, -1),
    }
)

_PAID = ("customDomain", "removeWatermark", "analytics", "seo")
_TEAM = (*_PAID, "prioritySupport", "teamMembers", "apiAccess")

PLAN_FEATURES: Mapping[PlanTier, Mapping[str, bool]] = MappingProxyType(
    {
        PlanTier.FREE: _features(),
        PlanTier.STARTER: _features(*_PAID),
        PlanTier.PRO: _features(*_TEAM),
        PlanTier.AGENCY: _features(*_TEAM, "whiteLabel"),
        PlanTier.ENTERPRISE: _features(*_TEAM, "whiteLabel"),
    }
)


def free_tier() -> EntitlementSystem:
    """Return a fresh free-plan :class:`EntitlementSystem`."""
    return EntitlementSystem(
        plan=PlanTier.FREE,
        features=dict(FREE_FEATURES),
        limits=dict(FREE_LIMITS),
    )


def entitlements_for(plan: PlanTier | str) -> EntitlementSystem:
    """Return a fresh :class:`EntitlementSystem` from the *plan* catalog tables.

    Raises:
        ValueError: If *plan* is not a known tier.
    """
    tier = PlanTier(plan)
    return EntitlementSystem(
        plan=tier,
        features=dict(PLAN_FEATURES[tier]),
        limits=dict(PLAN_LIMITS[tier]),
    )


def _as_limit(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, int):
        return value
    return None


def apply_constraints(
    entitlements: EntitlementSystem, constraints: Mapping[str, Any] | None
) -> EntitlementSystem:
    """Apply caller constraints that override plan limits.

    Only ``pagesMax`` is honoured, and only when it is a non-zero number or
    a numeric string. Anything else is logged and ignored.
    """
    if not constraints or not constraints.get("pagesMax"):
        return entitlements
    raw = constraints["pagesMax"]
    limit = _as_limit(raw)
    if not limit:
        logger.warning("entitlements.constraint_ignored", key="pagesMax", value=repr(raw))
        return entitlements
    entitlements.limits["pagesMax"] = limit
    return entitlements


def has_feature(entitlements: EntitlementSystem, feature: str) -> bool:
    return entitlements.features.get(feature, False)


def meets_plan(entitlements: EntitlementSystem, min_plan: PlanTier | str | None) -> bool:
    if min_plan is None:
        return True
    return PLAN_ORDER.index(PlanTier(entitlements.plan)) >= PLAN_ORDER.index(PlanTier(min_plan))


def intent_allowed(entitlements: EntitlementSystem, definition: IntentDefinition) -> bool:
    """Whether *definition*'s plan and feature-flag requirements are met."""
    requires = definition.requires
    if requires is None:
        return True
    if not meets_plan(entitlements, requires.min_plan):
        return False
    return requires.feature_flag is None or has_feature(entitlements, requires.feature_flag)


def is_within_limit(
    entitlements: EntitlementSystem, limit_key: str, current_value: float
) -> bool:
    """Whether *current_value* is below the *limit_key* limit.

    A missing or negative limit means unlimited.
    """
    limit = entitlements.limits.get(limit_key)
    if limit is None or limit < 0:
        return True
    return current_value < limit
