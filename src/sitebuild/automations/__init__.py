"""Automation recipes installed into a site bundle."""
from sitebuild.automations.installer import (
    BASE_RECIPES,
    INDUSTRY_RECIPES,
    RECIPE_SECRETS,
    AutomationInstaller,
    AutomationRecipe,
    InstallReport,
)

__all__ = [
    "BASE_RECIPES",
    "INDUSTRY_RECIPES",
    "RECIPE_SECRETS",
    "AutomationInstaller",
    "AutomationRecipe",
    "InstallReport",
]
