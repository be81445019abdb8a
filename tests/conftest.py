"""Shared test fixtures."""
from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest

from sitebuild.core.config import PipelineConfig
from sitebuild.core.constants import BuildMode
from sitebuild.pipeline.models import BuildPipelineContext
from sitebuild.pipeline.orchestrator import BuildPipelineOrchestrator
from sitebuild.providers.mock import MockAIProvider
from sitebuild.storage.memory import InMemoryStorage
from sitebuild.storage.sqlite import SQLiteStorage
from sitebuild.tracing.tracer import Tracer


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
async def sqlite_storage() -> AsyncGenerator[SQLiteStorage, None]:
    store = SQLiteStorage(":memory:")
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def ai() -> MockAIProvider:
    return MockAIProvider()


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def tracer() -> Tracer:
    return Tracer()


@pytest.fixture
def orchestrator(
    storage: InMemoryStorage, ai: MockAIProvider, config: PipelineConfig, tracer: Tracer
) -> BuildPipelineOrchestrator:
    return BuildPipelineOrchestrator(storage, ai, config=config, tracer=tracer)


@pytest.fixture
def make_context() -> Callable[..., BuildPipelineContext]:
    def _make(**overrides: Any) -> BuildPipelineContext:
        fields: dict[str, Any] = {
            "prompt": "A friendly local plumbing business",
            "business_id": "biz-1",
            "owner_user_id": "user-1",
            "mode": BuildMode.SYSTEMS_AI,
        }
        fields.update(overrides)
        return BuildPipelineContext(**fields)

    return _make
