"""sitebuild -- turn a business prompt into a wired, persisted site bundle."""

from sitebuild.__version__ import __version__

from sitebuild.automations.installer import AutomationInstaller, AutomationRecipe
from sitebuild.bundle.models import IntentBinding, IntentDefinition, PageBundle, SiteBundle
from sitebuild.bundle.utils import parse_bundle, serialize_bundle, validate_bundle_consistency
from sitebuild.core.config import PipelineConfig, ProviderConfig
from sitebuild.core.constants import BuildMode, PipelineStage, StageStatus
from sitebuild.core.exceptions import (
    AIProviderError,
    BundleError,
    CollaboratorError,
    ConfigurationError,
    SiteBuildError,
    StageExecutionError,
    StorageError,
)
from sitebuild.intents.catalog import IntentCatalog
from sitebuild.intents.rules import IntentWiringRule, RuleEngine
from sitebuild.intents.wiring import IntentWiringEngine, IntentWiringResult
from sitebuild.pipeline.models import BuildPipelineContext, BuildPipelineState, BuildStageResult
from sitebuild.pipeline.orchestrator import BuildPipelineOrchestrator
from sitebuild.providers.base import AIProvider
from sitebuild.providers.mock import MockAIProvider
from sitebuild.providers.openai_compat import OpenAICompatProvider
from sitebuild.storage.base import Storage
from sitebuild.storage.memory import InMemoryStorage
from sitebuild.storage.sqlite import SQLiteStorage
from sitebuild.tracing.tracer import Tracer

__all__ = [
    "__version__",
    # pipeline
    "BuildPipelineOrchestrator",
    "BuildPipelineContext",
    "BuildPipelineState",
    "BuildStageResult",
    "PipelineStage",
    "StageStatus",
    "BuildMode",
    # config
    "PipelineConfig",
    "ProviderConfig",
    # bundle
    "SiteBundle",
    "PageBundle",
    "IntentBinding",
    "IntentDefinition",
    "serialize_bundle",
    "parse_bundle",
    "validate_bundle_consistency",
    # intents
    "IntentCatalog",
    "IntentWiringRule",
    "RuleEngine",
    "IntentWiringEngine",
    "IntentWiringResult",
    # automations
    "AutomationInstaller",
    "AutomationRecipe",
    # collaborators
    "Storage",
    "InMemoryStorage",
    "SQLiteStorage",
    "AIProvider",
    "MockAIProvider",
    "OpenAICompatProvider",
    # tracing
    "Tracer",
    # exceptions
    "SiteBuildError",
    "StageExecutionError",
    "CollaboratorError",
    "StorageError",
    "AIProviderError",
    "BundleError",
    "ConfigurationError",
]
