from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from sitebuild.core.constants import DEFAULT_CATALOG_VERSION, PreviewEngine
from sitebuild.core.exceptions import ConfigurationError


class PipelineConfig(BaseModel):
    catalog_version: str = DEFAULT_CATALOG_VERSION
    inference_concurrency: int = Field(default=1, ge=1, le=32)
    """Maximum in-flight ``infer_intent`` calls per page (1 = sequential)."""
    preferred_engine: PreviewEngine = PreviewEngine.SIMPLE
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @classmethod
    def from_env(cls) -> PipelineConfig:
        """Create a :class:`PipelineConfig` from ``SITEBUILD_*`` environment variables.

        Reads the following env vars (all optional):

        * ``SITEBUILD_CATALOG_VERSION`` → ``catalog_version``
        * ``SITEBUILD_INFERENCE_CONCURRENCY`` → ``inference_concurrency`` (1–32)
        * ``SITEBUILD_PREFERRED_ENGINE`` → ``preferred_engine`` (``simple``, ``vfs``, ``worker``)
        * ``SITEBUILD_LOG_LEVEL`` → ``log_level``

        Any variable that is not set or is empty is left at its default value.

        Raises:
            ConfigurationError: If a variable holds a value the model rejects.
        """
        kwargs: dict[str, Any] = {}

        catalog_version = os.environ.get("SITEBUILD_CATALOG_VERSION")
        if catalog_version:
            kwargs["catalog_version"] = catalog_version

        concurrency = os.environ.get("SITEBUILD_INFERENCE_CONCURRENCY")
        if concurrency:
            kwargs["inference_concurrency"] = concurrency

        engine = os.environ.get("SITEBUILD_PREFERRED_ENGINE")
        if engine:
            kwargs["preferred_engine"] = engine

        log_level = os.environ.get("SITEBUILD_LOG_LEVEL")
        if log_level:
            kwargs["log_level"] = log_level.upper()

        return _build(cls, kwargs)


class ProviderConfig(BaseModel):
    """Connection settings for :class:`~sitebuild.providers.openai_compat.OpenAICompatProvider`."""

    base_url: str = "http://localhost:8080"
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    timeout: float = Field(default=60.0, gt=0, le=600)
    temperature: float = Field(default=0.2, ge=0, le=2)

    @classmethod
    def from_env(cls) -> ProviderConfig:
        """Create a :class:`ProviderConfig` from ``SITEBUILD_AI_*`` environment variables.

        * ``SITEBUILD_AI_BASE_URL`` → ``base_url``
        * ``SITEBUILD_AI_API_KEY`` → ``api_key``
        * ``SITEBUILD_AI_MODEL`` → ``model``
        * ``SITEBUILD_AI_TIMEOUT`` → ``timeout`` (seconds)
        """
        kwargs: dict[str, Any] = {}

        base_url = os.environ.get("SITEBUILD_AI_BASE_URL")
        if base_url:
            kwargs["base_url"] = base_url

        api_key = os.environ.get("SITEBUILD_AI_API_KEY")
        if api_key:
            kwargs["api_key"] = api_key

        model = os.environ.get("SITEBUILD_AI_MODEL")
        if model:
            kwargs["model"] = model

        timeout = os.environ.get("SITEBUILD_AI_TIMEOUT")
        if timeout:
            kwargs["timeout"] = timeout

        return _build(cls, kwargs)


def _build(model: Any, kwargs: dict[str, Any]) -> Any:
    try:
        return model(**kwargs)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid {model.__name__} environment: {exc.error_count()} error(s)",
            code="INVALID_CONFIG",
            details={"errors": exc.errors(include_url=False)},
        ) from exc
