from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any, Callable, Union

from sitebuild.bundle.factory import default_blueprint
from sitebuild.bundle.models import (
    BrandPrimitives,
    BusinessBlueprint,
    IntentDefinition,
    PageBundle,
    PageOutput,
    PageRoute,
    PageSource,
)
from sitebuild.core.constants import WiringSource
from sitebuild.intents.wiring import IntentWiringResult
from sitebuild.providers.base import AIProvider

if TYPE_CHECKING:
    from sitebuild.pipeline.models import BuildPipelineContext

# A scripted inference answer: a result, ``None`` (no binding), an intent id
# string, or an exception to raise.
IntentResponse = Union[IntentWiringResult, str, None, Exception]


def html_page(route: PageRoute, html: str) -> PageBundle:
    """Wrap raw *html* as a generated :class:`PageBundle` for *route*."""
    return PageBundle(
        page_id=route.page_id,
        title=route.title,
        path=route.path,
        source=PageSource(
            kind="html",
            content=html,
            content_hash=hashlib.sha256(html.encode()).hexdigest(),
        ),
        output=PageOutput(html=html),
    )


class MockAIProvider(AIProvider):
    """In-memory :class:`AIProvider` for testing.

    Usage::

        ai = MockAIProvider(pages={"home": "<button>Schedule Appointment</button>"})
        ai.register_intent("Frobnicate", "lead.submit")          # scripted fallback
        ai.register_intent("Explode", RuntimeError("model down"))  # failing fallback

        await orchestrator.execute(context)
        assert ai.call_count("infer_intent") == 0

    Page HTML is looked up by page id, then by title; unknown pages get a
    bare heading. ``fail`` maps a method name to an exception it raises.
    """

    def __init__(
        self,
        *,
        blueprint: BusinessBlueprint | None = None,
        brand: BrandPrimitives | None = None,
        pages: dict[str, str] | None = None,
        intents: dict[str, IntentResponse] | None = None,
        intent_handler: Callable[[str, str], IntentResponse] | None = None,
        fail: dict[str, Exception] | None = None,
    ) -> None:
        self._blueprint = blueprint
        self._brand = brand or BrandPrimitives(name="Mock Business")
        self._pages = dict(pages or {})
        self._intents: dict[str, IntentResponse] = dict(intents or {})
        self._intent_handler = intent_handler
        self._fail = dict(fail or {})
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    # ------------------------------------------------------------------ #
    # Registration helpers
    # ------------------------------------------------------------------ #

    def register_page(self, page_id: str, html: str) -> None:
        self._pages[page_id] = html

    def register_intent(self, text: str, response: IntentResponse) -> None:
        self._intents[text] = response

    def call_count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        error = self._fail.get(method)
        if error is not None:
            raise error

    # ------------------------------------------------------------------ #
    # AIProvider ABC implementation
    # ------------------------------------------------------------------ #

    async def generate_blueprint(self, context: BuildPipelineContext) -> BusinessBlueprint:
        self._record("generate_blueprint", context)
        if self._blueprint is not None:
            return self._blueprint.model_copy(deep=True)
        return default_blueprint(context.industry)

    async def generate_brand_kit(
        self, blueprint: BusinessBlueprint, context: BuildPipelineContext
    ) -> BrandPrimitives:
        self._record("generate_brand_kit", blueprint, context)
        return self._brand.model_copy(deep=True)

    async def generate_page(
        self,
        route: PageRoute,
        blueprint: BusinessBlueprint,
        brand: BrandPrimitives,
        context: BuildPipelineContext,
    ) -> PageBundle:
        self._record("generate_page", route, blueprint, brand, context)
        html = self._pages.get(route.page_id) or self._pages.get(route.title)
        if html is None:
            html = f"<h1>{route.title}</h1>"
        return html_page(route, html)

    async def infer_intent(
        self,
        text: str,
        context: str,
        available_intents: list[IntentDefinition],
    ) -> IntentWiringResult | None:
        self._record("infer_intent", text, context, available_intents)
        if text in self._intents:
            response = self._intents[text]
        elif self._intent_handler is not None:
            response = self._intent_handler(text, context)
        else:
            response = None

        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return IntentWiringResult(intent_id=response, source=WiringSource.AI)
        return response
