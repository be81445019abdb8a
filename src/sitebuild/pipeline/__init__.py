from sitebuild.pipeline.models import (
    BuildPipelineContext,
    BuildPipelineState,
    BuildStageResult,
    StageError,
)
from sitebuild.pipeline.orchestrator import BuildPipelineOrchestrator
from sitebuild.pipeline.stages import STAGE_EXECUTORS, TRACE_STAGES, StageRun

__all__ = [
    "BuildPipelineContext",
    "BuildPipelineOrchestrator",
    "BuildPipelineState",
    "BuildStageResult",
    "STAGE_EXECUTORS",
    "StageError",
    "StageRun",
    "TRACE_STAGES",
]
