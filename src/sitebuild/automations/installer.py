"""Automation recipe tables and the installer that applies them to a bundle."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from sitebuild.bundle.models import (
    AutomationInstall,
    AutomationRuntime,
    AutomationSystem,
    AutomationTrigger,
    SecretRequirement,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AutomationRecipe:
    recipe_id: str
    name: str


BASE_RECIPES: tuple[AutomationRecipe, ...] = (
    AutomationRecipe("lead-notification", "Lead Email Notification"),
    AutomationRecipe("lead-crm-sync", "CRM Lead Sync"),
)

INDUSTRY_RECIPES: Mapping[str, tuple[AutomationRecipe, ...]] = MappingProxyType(
    {
        "contractor": (
            AutomationRecipe("estimate-request", "Estimate Request Handler"),
            AutomationRecipe("job-scheduling", "Job Scheduling"),
        ),
        "restaurant": (
            AutomationRecipe("reservation-handler", "Reservation Handler"),
            AutomationRecipe("menu-update", "Menu Auto-Update"),
        ),
        "ecommerce": (
            AutomationRecipe("cart-abandonment", "Cart Abandonment Email"),
            AutomationRecipe("order-confirmation", "Order Confirmation"),
        ),
    }
)

_SMTP = ("SMTP_HOST", "SMTP_USER", "SMTP_PASS")

RECIPE_SECRETS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "lead-crm-sync": ("CRM_API_KEY",),
        "cart-abandonment": _SMTP,
        "order-confirmation": _SMTP,
    }
)


@dataclass
class InstallReport:
    """What :meth:`AutomationInstaller.install` did, for tracing."""

    industry: str
    automations: AutomationSystem
    disabled: list[tuple[AutomationRecipe, tuple[str, ...]]] = field(default_factory=list)


class AutomationInstaller:
    """Installs the base and industry-specific automation recipes.

    A recipe whose required secrets are not yet configured is still
    installed, but disabled; each missing secret key is listed once in
    ``secrets_required``.

    Args:
        base_recipes: Recipes installed for every industry.
        industry_recipes: Extra recipes per industry name.
        recipe_secrets: Secret keys each recipe needs before it may run.
    """

    def __init__(
        self,
        base_recipes: tuple[AutomationRecipe, ...] = BASE_RECIPES,
        industry_recipes: Mapping[str, tuple[AutomationRecipe, ...]] = INDUSTRY_RECIPES,
        recipe_secrets: Mapping[str, tuple[str, ...]] = RECIPE_SECRETS,
    ) -> None:
        self._base = tuple(base_recipes)
        self._industry = MappingProxyType(
            {name: tuple(recipes) for name, recipes in industry_recipes.items()}
        )
        self._secrets = MappingProxyType(
            {recipe_id: tuple(keys) for recipe_id, keys in recipe_secrets.items()}
        )

    def __repr__(self) -> str:
        return f"AutomationInstaller(base={len(self._base)}, industries={sorted(self._industry)})"

    def recipes_for(self, industry: str) -> list[AutomationRecipe]:
        return [*self._base, *self._industry.get(industry, ())]

    def secrets_for(self, recipe_id: str) -> tuple[str, ...]:
        return self._secrets.get(recipe_id, ())

    def install(self, industry: str) -> InstallReport:
        """Build the :class:`AutomationSystem` for *industry*."""
        system = AutomationSystem()
        report = InstallReport(industry=industry, automations=system)
        seen: set[str] = set()

        for recipe in self.recipes_for(industry):
            secrets = self.secrets_for(recipe.recipe_id)
            system.installed.append(
                AutomationInstall(
                    install_id=uuid.uuid4().hex,
                    recipe_id=recipe.recipe_id,
                    enabled=not secrets,
                    triggers=[AutomationTrigger(type="intent", intent_id="lead.submit")],
                    runtime=AutomationRuntime(kind="inngest", entrypoint=recipe.recipe_id),
                )
            )
            if secrets:
                report.disabled.append((recipe, secrets))
            for key in secrets:
                if key in seen:
                    continue
                seen.add(key)
                system.secrets_required.append(
                    SecretRequirement(provider=key, reason=f"Required for {recipe.name}")
                )

        logger.info(
            "automations.installed",
            industry=industry,
            installed=len(system.installed),
            disabled=len(report.disabled),
        )
        return report
