"""Intent wiring: deterministic rules first, AI inference as the fallback."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, Field

from sitebuild.bundle.models import BindingTarget, IntentBinding
from sitebuild.core.constants import BindingStrategy, WiringSource
from sitebuild.intents.catalog import IntentCatalog
from sitebuild.intents.extractor import InteractiveElement, extract_interactive_elements
from sitebuild.intents.rules import RuleEngine

if TYPE_CHECKING:
    from sitebuild.providers.base import AIProvider

logger = structlog.get_logger(__name__)


class IntentWiringResult(BaseModel):
    """The intent chosen for one element and where the decision came from."""

    intent_id: str
    params: dict[str, Any] = Field(default_factory=dict)
    source: WiringSource = WiringSource.AI
    confidence: float | None = Field(default=None, ge=0, le=1)


@dataclass
class WiredElement:
    element: InteractiveElement
    binding: IntentBinding
    result: IntentWiringResult


@dataclass
class PageWiring:
    """Outcome of wiring one page.

    ``failures`` holds elements whose inference call raised, with the error
    message; they produce no binding.
    """

    page_id: str
    wired: list[WiredElement] = field(default_factory=list)
    failures: list[tuple[InteractiveElement, str]] = field(default_factory=list)
    fallback_calls: int = 0

    @property
    def bindings(self) -> list[IntentBinding]:
        return [w.binding for w in self.wired]


def binding_id_for(page_id: str, sequence: int) -> str:
    return f"ut-{page_id}-{sequence}"


class IntentWiringEngine:
    """Produces one :class:`IntentBinding` per wireable element of a page.

    For each element the :class:`RuleEngine` is consulted first; only when
    no rule matches is ``AIProvider.infer_intent`` called. An inference call
    that raises is recorded as a failure for that element and never aborts
    the page.

    Binding ids are ``ut-{page_id}-{n}`` where ``n`` comes from a counter
    supplied by the caller and shared across every page of a run. Numbers
    are handed out in scan order once all of a page's inference calls have
    settled, so running those calls concurrently cannot reorder them.

    Args:
        ai_provider: Collaborator used for the fallback.
        catalog: Intents offered to the fallback.
        rule_engine: Deterministic rules. Defaults to the built-in table.
        concurrency: Maximum in-flight inference calls per page.
    """

    def __init__(
        self,
        ai_provider: AIProvider,
        catalog: IntentCatalog,
        rule_engine: RuleEngine | None = None,
        *,
        concurrency: int = 1,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._ai = ai_provider
        self._catalog = catalog
        self._rules = rule_engine if rule_engine is not None else RuleEngine()
        self._concurrency = concurrency

    def __repr__(self) -> str:
        return (
            f"IntentWiringEngine(rules={len(self._rules.rules)}, "
            f"intents={len(self._catalog)}, concurrency={self._concurrency})"
        )

    def match_deterministic(self, text: str) -> IntentWiringResult | None:
        rule = self._rules.match(text)
        if rule is None:
            return None
        return IntentWiringResult(intent_id=rule.intent_id, source=WiringSource.DETERMINISTIC)

    async def wire_page(
        self,
        page_id: str,
        html: str,
        sequence: Iterator[int],
    ) -> PageWiring:
        """Wire every interactive element of one page's *html*."""
        outcome = PageWiring(page_id=page_id)
        elements = list(extract_interactive_elements(html))
        results: list[IntentWiringResult | None] = [
            self.match_deterministic(element.text) for element in elements
        ]
        pending = [index for index, result in enumerate(results) if result is None]
        outcome.fallback_calls = len(pending)

        if pending:
            available = self._catalog.as_list()
            semaphore = asyncio.Semaphore(self._concurrency)
            errors: dict[int, str] = {}

            async def infer(index: int) -> None:
                element = elements[index]
                async with semaphore:
                    try:
                        results[index] = await self._ai.infer_intent(
                            element.text, element.context, available
                        )
                    except Exception as exc:  # noqa: BLE001
                        logger.warning(
                            "intents.inference_failed",
                            page_id=page_id,
                            text=element.text,
                            error=str(exc),
                        )
                        errors[index] = str(exc)

            if self._concurrency == 1:
                for index in pending:
                    await infer(index)
            else:
                await asyncio.gather(*(infer(index) for index in pending))
            outcome.failures = [(elements[index], errors[index]) for index in sorted(errors)]

        for element, result in zip(elements, results):
            if result is None:
                continue
            binding_id = binding_id_for(page_id, next(sequence))
            binding = IntentBinding(
                binding_id=binding_id,
                page_id=page_id,
                target=BindingTarget(
                    strategy=BindingStrategy.DATA_ATTR,
                    selector=f'[data-ut-id="{binding_id}"]',
                ),
                intent_id=result.intent_id,
                params=dict(result.params),
                label=element.text,
                source=result.source,
            )
            outcome.wired.append(WiredElement(element=element, binding=binding, result=result))

        logger.debug(
            "intents.page_wired",
            page_id=page_id,
            elements=len(elements),
            bindings=len(outcome.wired),
            fallback_calls=outcome.fallback_calls,
        )
        return outcome
