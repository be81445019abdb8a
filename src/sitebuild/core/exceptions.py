from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sitebuild.pipeline.models import BuildPipelineState


class SiteBuildError(Exception):
    """Base exception for all sitebuild errors.

    Attributes:
        code: Optional machine-readable error code (e.g. ``"PAGES_FAILED"``).
        details: Arbitrary key/value context about the error.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(SiteBuildError): ...


class BundleError(SiteBuildError): ...


# ---------------------------------------------------------------------------
# Collaborator failures
# ---------------------------------------------------------------------------


class CollaboratorError(SiteBuildError):
    """A ``Storage`` or ``AIProvider`` call failed.

    Raised by collaborator adapters. The orchestrator never catches these
    itself; they surface as a :class:`StageExecutionError` for the stage
    that made the call.
    """


class StorageError(CollaboratorError): ...


class AIProviderError(CollaboratorError): ...


# ---------------------------------------------------------------------------
# Pipeline failures
# ---------------------------------------------------------------------------


class StageExecutionError(SiteBuildError):
    """A pipeline stage raised and the run was aborted.

    ``code`` is ``"{STAGE}_FAILED"``. ``state`` is the pipeline state at the
    moment of failure, with the failed stage's error recorded on it, so
    callers can inspect which stages completed.
    """

    def __init__(
        self,
        stage: str,
        message: str,
        state: BuildPipelineState | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=f"{stage.upper()}_FAILED", details=details)
        self.stage = stage
        self.state = state
