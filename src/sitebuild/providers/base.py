"""AI provider abstraction consumed by the build pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from sitebuild.bundle.models import (
    BrandPrimitives,
    BusinessBlueprint,
    IntentDefinition,
    PageBundle,
    PageRoute,
)

if TYPE_CHECKING:
    from sitebuild.intents.wiring import IntentWiringResult
    from sitebuild.pipeline.models import BuildPipelineContext


class AIProvider(ABC):
    """Content generation and intent inference backend.

    The pipeline treats every method as opaque. Failures of the first three
    abort their stage; a failing :meth:`infer_intent` only loses the binding
    for that one element.
    """

    @abstractmethod
    async def generate_blueprint(self, context: BuildPipelineContext) -> BusinessBlueprint: ...

    @abstractmethod
    async def generate_brand_kit(
        self, blueprint: BusinessBlueprint, context: BuildPipelineContext
    ) -> BrandPrimitives: ...

    @abstractmethod
    async def generate_page(
        self,
        route: PageRoute,
        blueprint: BusinessBlueprint,
        brand: BrandPrimitives,
        context: BuildPipelineContext,
    ) -> PageBundle: ...

    @abstractmethod
    async def infer_intent(
        self,
        text: str,
        context: str,
        available_intents: list[IntentDefinition],
    ) -> IntentWiringResult | None:
        """Pick an intent for an element no deterministic rule matched.

        Args:
            text: The element's visible label.
            context: The element's role (``"button"``, ``"link"``, ...).
            available_intents: The run's intent catalog.

        Returns:
            The chosen intent, or ``None`` to leave the element unbound.
        """
