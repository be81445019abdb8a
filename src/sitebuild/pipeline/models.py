"""Pipeline input, per-stage results and run state."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sitebuild.bundle.models import SiteBundle, utcnow
from sitebuild.core.constants import PIPELINE_STAGES, BuildMode, PipelineStage, StageStatus


class BuildPipelineContext(BaseModel):
    """Caller input for one build. Read-only for the lifetime of the run."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    business_id: str
    owner_user_id: str
    mode: BuildMode = BuildMode.SYSTEMS_AI
    industry: str | None = None
    constraints: dict[str, Any] | None = None
    existing_assets: list[str] | None = None


class StageError(BaseModel):
    code: str
    message: str


class BuildStageResult(BaseModel):
    stage: PipelineStage
    status: StageStatus = StageStatus.PENDING
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: StageError | None = None
    warnings: list[str] = Field(default_factory=list)


def _pending_stages() -> dict[PipelineStage, BuildStageResult]:
    return {stage: BuildStageResult(stage=stage) for stage in PIPELINE_STAGES}


class BuildPipelineState(BaseModel):
    """Mutable record of one run, updated stage by stage.

    ``stages`` always holds exactly the eight pipeline stages, in execution
    order, whatever the outcome of the run.
    """

    build_id: str
    site_id: str
    mode: BuildMode
    current_stage: PipelineStage = PipelineStage.INIT
    stages: dict[PipelineStage, BuildStageResult] = Field(default_factory=_pending_stages)
    bundle: SiteBundle
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    def result(self, stage: PipelineStage | str) -> BuildStageResult:
        return self.stages[PipelineStage(stage)]

    def statuses(self) -> dict[str, StageStatus]:
        """Stage name to status, in execution order."""
        return {str(stage): result.status for stage, result in self.stages.items()}

    @property
    def succeeded(self) -> bool:
        return all(
            r.status in (StageStatus.COMPLETED, StageStatus.SKIPPED) for r in self.stages.values()
        )
