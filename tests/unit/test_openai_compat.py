"""Tests for providers/openai_compat.py -- OpenAICompatProvider."""
from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from sitebuild.bundle.factory import default_blueprint
from sitebuild.bundle.models import BrandPrimitives, PageRoute
from sitebuild.core.config import ProviderConfig
from sitebuild.core.constants import WiringSource
from sitebuild.core.exceptions import AIProviderError
from sitebuild.intents.catalog import IntentCatalog
from sitebuild.pipeline.models import BuildPipelineContext
from sitebuild.providers.openai_compat import OpenAICompatProvider


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _completion(payload: Any) -> dict[str, Any]:
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class Recorder:
    """MockTransport handler that replays one response and keeps the requests."""

    def __init__(
        self, response: httpx.Response | Callable[[httpx.Request], httpx.Response]
    ) -> None:
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self._response):
            return self._response(request)
        return self._response

    @property
    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


async def _provider(recorder: Recorder, **config: Any) -> OpenAICompatProvider:
    transport = httpx.MockTransport(recorder)
    provider = OpenAICompatProvider(ProviderConfig(**config), transport=transport)
    await provider.connect()
    return provider


@pytest.fixture
def context() -> BuildPipelineContext:
    return BuildPipelineContext(
        prompt="Family-run Italian restaurant", business_id="biz-1", owner_user_id="user-1"
    )


@pytest.fixture
def ok() -> Callable[[Any], Recorder]:
    return lambda payload: Recorder(httpx.Response(200, json=_completion(payload)))


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


async def test_call_before_connect_raises(context: BuildPipelineContext) -> None:
    provider = OpenAICompatProvider(ProviderConfig())
    with pytest.raises(AIProviderError, match="not connected"):
        await provider.generate_blueprint(context)


async def test_context_manager_opens_and_closes() -> None:
    async with OpenAICompatProvider(ProviderConfig()) as provider:
        assert provider._client is not None
    assert provider._client is None


def test_model_property() -> None:
    assert OpenAICompatProvider(ProviderConfig(model="m-1")).model == "m-1"


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_request_shape(ok, context: BuildPipelineContext) -> None:
    recorder = ok({"industry": "restaurant", "pages": []})
    provider = await _provider(recorder, base_url="http://llm.test/", api_key="sk-1", model="m-1")

    await provider.generate_blueprint(context)

    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://llm.test/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer sk-1"
    body = recorder.last_body
    assert body["model"] == "m-1"
    assert body["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert "Family-run Italian restaurant" in body["messages"][1]["content"]
    await provider.close()


@pytest.mark.asyncio
async def test_no_auth_header_without_key(ok, context: BuildPipelineContext) -> None:
    recorder = ok({"pages": []})
    provider = await _provider(recorder)
    await provider.generate_blueprint(context)
    assert "Authorization" not in recorder.requests[0].headers
    await provider.close()


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_generate_blueprint(ok, context: BuildPipelineContext) -> None:
    payload = {
        "industry": "restaurant",
        "business_name": "Trattoria Nonna",
        "primary_goal": "reservations",
        "pages": [{"title": "Home", "path": "/"}, {"title": "Menu", "path": "/menu"}],
    }
    provider = await _provider(ok(payload))

    blueprint = await provider.generate_blueprint(context)

    assert blueprint.industry == "restaurant"
    assert blueprint.business_name == "Trattoria Nonna"
    assert [p.path for p in blueprint.pages] == ["/", "/menu"]
    await provider.close()


@pytest.mark.asyncio
async def test_generate_brand_kit(ok, context: BuildPipelineContext) -> None:
    payload = {"name": "Nonna", "colors": {"primary": "#aa0000"}, "tone": "warm"}
    provider = await _provider(ok(payload))

    brand = await provider.generate_brand_kit(default_blueprint(), context)

    assert brand.name == "Nonna"
    assert brand.colors.primary == "#aa0000"
    assert brand.tone == "warm"
    await provider.close()


@pytest.mark.asyncio
async def test_generate_page(ok, context: BuildPipelineContext) -> None:
    html = "<h1>Menu</h1><button>Book a table</button>"
    provider = await _provider(ok({"html": html, "css": "h1{}"}))
    route = PageRoute(page_id="menu", path="/menu", title="Menu")

    page = await provider.generate_page(route, default_blueprint(), BrandPrimitives(), context)

    assert page.page_id == "menu"
    assert page.path == "/menu"
    assert page.output.html == html
    assert page.output.css == "h1{}"
    assert page.source.content == html
    assert page.source.content_hash == hashlib.sha256(html.encode()).hexdigest()
    assert page.intent_bindings == []
    await provider.close()


# ---------------------------------------------------------------------------
# Intent inference
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_infer_intent(ok) -> None:
    recorder = ok({"intent_id": "nav.go", "params": {"path": "/gallery"}, "confidence": 0.7})
    provider = await _provider(recorder)

    result = await provider.infer_intent("Gallery", "button", IntentCatalog().as_list())

    assert result is not None
    assert result.intent_id == "nav.go"
    assert result.params == {"path": "/gallery"}
    assert result.source == WiringSource.AI
    assert result.confidence == 0.7
    sent = json.loads(recorder.last_body["messages"][1]["content"])
    assert sent["element"] == {"text": "Gallery", "context": "button"}
    assert len(sent["intents"]) == len(IntentCatalog())
    await provider.close()


@pytest.mark.asyncio
async def test_infer_intent_null(ok) -> None:
    provider = await _provider(ok({"intent_id": None}))
    assert await provider.infer_intent("Gallery", "button", IntentCatalog().as_list()) is None
    await provider.close()


@pytest.mark.asyncio
async def test_infer_intent_unknown_id(ok) -> None:
    provider = await _provider(ok({"intent_id": "teleport.now"}))
    assert await provider.infer_intent("Beam me up", "button", IntentCatalog().as_list()) is None
    await provider.close()


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_http_error(context: BuildPipelineContext) -> None:
    provider = await _provider(Recorder(httpx.Response(503, text="overloaded")))
    with pytest.raises(AIProviderError) as exc_info:
        await provider.generate_blueprint(context)
    assert exc_info.value.code == "HTTP_503"
    assert exc_info.value.details["body"] == "overloaded"
    await provider.close()


@pytest.mark.asyncio
async def test_transport_error(context: BuildPipelineContext) -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = await _provider(Recorder(_fail))
    with pytest.raises(AIProviderError) as exc_info:
        await provider.generate_blueprint(context)
    assert exc_info.value.code == "REQUEST_FAILED"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    await provider.close()


@pytest.mark.asyncio
async def test_non_json_content(ok, context: BuildPipelineContext) -> None:
    provider = await _provider(ok("definitely not json"))
    with pytest.raises(AIProviderError) as exc_info:
        await provider.generate_blueprint(context)
    assert exc_info.value.code == "BAD_RESPONSE"
    await provider.close()


@pytest.mark.asyncio
async def test_missing_choices(context: BuildPipelineContext) -> None:
    provider = await _provider(Recorder(httpx.Response(200, json={"object": "error"})))
    with pytest.raises(AIProviderError, match="Malformed"):
        await provider.generate_blueprint(context)
    await provider.close()


@pytest.mark.asyncio
async def test_invalid_payload(ok, context: BuildPipelineContext) -> None:
    provider = await _provider(ok({"pages": "not a list"}))
    with pytest.raises(AIProviderError, match="Invalid blueprint") as exc_info:
        await provider.generate_blueprint(context)
    assert exc_info.value.details["errors"]
    await provider.close()


@pytest.mark.asyncio
async def test_page_without_html(ok, context: BuildPipelineContext) -> None:
    provider = await _provider(ok({"css": "body{}"}))
    route = PageRoute(page_id="home", path="/", title="Home")
    with pytest.raises(AIProviderError):
        await provider.generate_page(route, default_blueprint(), BrandPrimitives(), context)
    await provider.close()
