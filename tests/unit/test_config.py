"""Tests for PipelineConfig / ProviderConfig and their from_env() constructors."""
from __future__ import annotations

import pytest

from sitebuild.core.config import PipelineConfig, ProviderConfig
from sitebuild.core.constants import DEFAULT_CATALOG_VERSION, PreviewEngine
from sitebuild.core.exceptions import ConfigurationError

_PIPELINE_VARS = (
    "SITEBUILD_CATALOG_VERSION",
    "SITEBUILD_INFERENCE_CONCURRENCY",
    "SITEBUILD_PREFERRED_ENGINE",
    "SITEBUILD_LOG_LEVEL",
)
_PROVIDER_VARS = (
    "SITEBUILD_AI_BASE_URL",
    "SITEBUILD_AI_API_KEY",
    "SITEBUILD_AI_MODEL",
    "SITEBUILD_AI_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _PIPELINE_VARS + _PROVIDER_VARS:
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# PipelineConfig
# ---------------------------------------------------------------------------


def test_pipeline_defaults() -> None:
    config = PipelineConfig.from_env()
    assert config.catalog_version == DEFAULT_CATALOG_VERSION
    assert config.inference_concurrency == 1
    assert config.preferred_engine == PreviewEngine.SIMPLE
    assert config.log_level == "INFO"


def test_pipeline_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITEBUILD_CATALOG_VERSION", "2027-01-01")
    monkeypatch.setenv("SITEBUILD_INFERENCE_CONCURRENCY", "4")
    monkeypatch.setenv("SITEBUILD_PREFERRED_ENGINE", "vfs")
    monkeypatch.setenv("SITEBUILD_LOG_LEVEL", "debug")

    config = PipelineConfig.from_env()

    assert config.catalog_version == "2027-01-01"
    assert config.inference_concurrency == 4
    assert config.preferred_engine == PreviewEngine.VFS
    assert config.log_level == "DEBUG"


def test_empty_env_values_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITEBUILD_INFERENCE_CONCURRENCY", "")
    assert PipelineConfig.from_env().inference_concurrency == 1


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SITEBUILD_INFERENCE_CONCURRENCY", "0"),
        ("SITEBUILD_INFERENCE_CONCURRENCY", "64"),
        ("SITEBUILD_INFERENCE_CONCURRENCY", "many"),
        ("SITEBUILD_PREFERRED_ENGINE", "quantum"),
        ("SITEBUILD_LOG_LEVEL", "chatty"),
    ],
)
def test_pipeline_invalid_env(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError) as exc_info:
        PipelineConfig.from_env()
    assert exc_info.value.code == "INVALID_CONFIG"
    assert exc_info.value.details["errors"]


# ---------------------------------------------------------------------------
# ProviderConfig
# ---------------------------------------------------------------------------


def test_provider_defaults() -> None:
    config = ProviderConfig.from_env()
    assert config.base_url == "http://localhost:8080"
    assert config.api_key is None
    assert config.model == "gpt-4o-mini"
    assert config.timeout == 60.0


def test_provider_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITEBUILD_AI_BASE_URL", "https://llm.internal")
    monkeypatch.setenv("SITEBUILD_AI_API_KEY", "sk-test")
    monkeypatch.setenv("SITEBUILD_AI_MODEL", "site-writer")
    monkeypatch.setenv("SITEBUILD_AI_TIMEOUT", "12.5")

    config = ProviderConfig.from_env()

    assert config.base_url == "https://llm.internal"
    assert config.api_key == "sk-test"
    assert config.model == "site-writer"
    assert config.timeout == 12.5


def test_provider_invalid_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SITEBUILD_AI_TIMEOUT", "-1")
    with pytest.raises(ConfigurationError):
        ProviderConfig.from_env()
