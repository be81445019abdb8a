from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from sitebuild.bundle.models import (
    BrandPrimitives,
    BusinessBlueprint,
    IntentDefinition,
    PageBundle,
    PageOutput,
    PageRoute,
    PageSource,
)
from sitebuild.core.config import ProviderConfig
from sitebuild.core.constants import WiringSource
from sitebuild.core.exceptions import AIProviderError
from sitebuild.intents.wiring import IntentWiringResult
from sitebuild.providers.base import AIProvider

if TYPE_CHECKING:
    from sitebuild.pipeline.models import BuildPipelineContext

logger = structlog.get_logger(__name__)

_CHAT_PATH = "/v1/chat/completions"

_BLUEPRINT_PROMPT = (
    "You design small-business websites. Reply with a JSON object with keys "
    "industry, business_name, primary_goal, locale, pages (list of {title, path, "
    "purpose}, home page first with path '/'), ctas, offerings, locations, contact."
)
_BRAND_PROMPT = (
    "You create brand kits. Reply with a JSON object with keys name, tagline, "
    "colors {primary, secondary, accent, background}, typography "
    "{heading_font, body_font}, tone, locale."
)
_PAGE_PROMPT = (
    "You write a single self-contained HTML page body. Reply with a JSON object "
    'of the form {"html": "...", "css": "..."}. Use <button> and <a> elements '
    "for every action a visitor can take."
)
_INTENT_PROMPT = (
    "You map a web page element to one intent from a catalog. Reply with a JSON "
    'object {"intent_id": <id or null>, "params": {}, "confidence": <0..1>}. '
    "Use null when no intent fits."
)


class _PagePayload(BaseModel):
    html: str
    css: str | None = None
    js: str | None = None


class OpenAICompatProvider(AIProvider):
    """:class:`AIProvider` backed by an OpenAI-compatible chat completions API.

    Every request asks for a JSON object response, which is validated into the
    matching bundle model. Transport failures, HTTP errors and malformed
    replies raise :class:`AIProviderError`.

    Usage::

        async with OpenAICompatProvider(ProviderConfig.from_env()) as ai:
            orchestrator = BuildPipelineOrchestrator(storage, ai)
            await orchestrator.execute(context)
    """

    def __init__(
        self,
        config: ProviderConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create an OpenAICompatProvider.

        Args:
            config: Endpoint, credentials and model settings. Defaults to
                :meth:`ProviderConfig.from_env`.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
                in tests.
        """
        self._config = config or ProviderConfig.from_env()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._config.model

    # ------------------------------------------------------------------ #
    # Connection lifecycle
    # ------------------------------------------------------------------ #

    async def connect(self) -> None:
        """Create the underlying :class:`httpx.AsyncClient`."""
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"

        self._client = httpx.AsyncClient(
            base_url=self._config.base_url.rstrip("/"),
            headers=headers,
            timeout=self._config.timeout,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> OpenAICompatProvider:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------ #
    # Chat completion helper
    # ------------------------------------------------------------------ #

    async def _complete_json(self, operation: str, system: str, user: dict[str, Any]) -> Any:
        if self._client is None:
            raise AIProviderError(
                "OpenAICompatProvider not connected. Call await provider.connect() first."
            )

        body = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": json.dumps(user, default=str)},
            ],
        }
        try:
            resp = await self._client.post(_CHAT_PATH, json=body)
        except httpx.RequestError as exc:
            raise AIProviderError(
                f"HTTP request failed for {operation}: {exc}", code="REQUEST_FAILED"
            ) from exc

        if resp.status_code >= 400:
            raise AIProviderError(
                f"{operation} returned HTTP {resp.status_code}",
                code=f"HTTP_{resp.status_code}",
                details={"body": resp.text[:500]},
            )

        try:
            content = resp.json()["choices"][0]["message"]["content"]
            payload = json.loads(content)
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise AIProviderError(
                f"Malformed completion for {operation}: {exc}", code="BAD_RESPONSE"
            ) from exc

        logger.debug("ai_provider.completed", operation=operation, model=self._config.model)
        return payload

    def _validate(self, model_cls: type[BaseModel], payload: Any, operation: str) -> Any:
        try:
            return model_cls.model_validate(payload)
        except ValidationError as exc:
            raise AIProviderError(
                f"Invalid {operation} payload: {exc.error_count()} error(s)",
                code="BAD_RESPONSE",
                details={"errors": exc.errors(include_url=False)},
            ) from exc

    # ------------------------------------------------------------------ #
    # AIProvider ABC implementation
    # ------------------------------------------------------------------ #

    async def generate_blueprint(self, context: BuildPipelineContext) -> BusinessBlueprint:
        payload = await self._complete_json(
            "generate_blueprint",
            _BLUEPRINT_PROMPT,
            {"prompt": context.prompt, "industry": context.industry},
        )
        return self._validate(BusinessBlueprint, payload, "blueprint")

    async def generate_brand_kit(
        self, blueprint: BusinessBlueprint, context: BuildPipelineContext
    ) -> BrandPrimitives:
        payload = await self._complete_json(
            "generate_brand_kit",
            _BRAND_PROMPT,
            {"prompt": context.prompt, "blueprint": blueprint.model_dump(mode="json")},
        )
        return self._validate(BrandPrimitives, payload, "brand kit")

    async def generate_page(
        self,
        route: PageRoute,
        blueprint: BusinessBlueprint,
        brand: BrandPrimitives,
        context: BuildPipelineContext,
    ) -> PageBundle:
        payload = await self._complete_json(
            "generate_page",
            _PAGE_PROMPT,
            {
                "page": route.model_dump(mode="json"),
                "business": blueprint.model_dump(mode="json"),
                "brand": brand.model_dump(mode="json"),
            },
        )
        page: _PagePayload = self._validate(_PagePayload, payload, "page")
        return PageBundle(
            page_id=route.page_id,
            title=route.title,
            path=route.path,
            source=PageSource(
                kind="html",
                content=page.html,
                content_hash=hashlib.sha256(page.html.encode()).hexdigest(),
            ),
            output=PageOutput(html=page.html, css=page.css, js=page.js),
        )

    async def infer_intent(
        self,
        text: str,
        context: str,
        available_intents: list[IntentDefinition],
    ) -> IntentWiringResult | None:
        known = {d.intent_id for d in available_intents}
        payload = await self._complete_json(
            "infer_intent",
            _INTENT_PROMPT,
            {
                "element": {"text": text, "context": context},
                "intents": [
                    {"intent_id": d.intent_id, "description": d.description}
                    for d in available_intents
                ],
            },
        )
        if not isinstance(payload, dict) or not payload.get("intent_id"):
            return None
        if payload["intent_id"] not in known:
            logger.warning(
                "ai_provider.unknown_intent", text=text, intent_id=payload["intent_id"]
            )
            return None
        payload = {**payload, "source": WiringSource.AI}
        return self._validate(IntentWiringResult, payload, "intent")
