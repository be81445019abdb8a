"""Plan entitlements and gating helpers."""
from sitebuild.entitlements.plans import (
    FREE_FEATURES,
    FREE_LIMITS,
    PLAN_FEATURES,
    PLAN_LIMITS,
    PLAN_ORDER,
    apply_constraints,
    entitlements_for,
    free_tier,
    has_feature,
    intent_allowed,
    is_within_limit,
    meets_plan,
)

__all__ = [
    "FREE_FEATURES",
    "FREE_LIMITS",
    "PLAN_FEATURES",
    "PLAN_LIMITS",
    "PLAN_ORDER",
    "apply_constraints",
    "entitlements_for",
    "free_tier",
    "has_feature",
    "intent_allowed",
    "is_within_limit",
    "meets_plan",
]
