"""BuildPipelineOrchestrator -- runs the eight build stages in order."""

from __future__ import annotations

import uuid

import structlog

from sitebuild.automations.installer import AutomationInstaller
from sitebuild.bundle.factory import create_skeleton_bundle
from sitebuild.bundle.models import BuildIssue, utcnow
from sitebuild.core.config import PipelineConfig
from sitebuild.core.constants import (
    PIPELINE_STAGES,
    BuildMode,
    PipelineStage,
    StageStatus,
    TraceLevel,
)
from sitebuild.core.exceptions import StageExecutionError
from sitebuild.intents.catalog import DEFAULT_INTENT_DEFINITIONS, IntentCatalog
from sitebuild.intents.rules import RuleEngine
from sitebuild.intents.wiring import IntentWiringEngine
from sitebuild.pipeline.models import BuildPipelineContext, BuildPipelineState, StageError
from sitebuild.pipeline.stages import STAGE_EXECUTORS, StageRun, add_trace
from sitebuild.providers.base import AIProvider
from sitebuild.storage.base import Storage
from sitebuild.tracing.tracer import Tracer
from sitebuild.utils.async_helpers import run_sync

logger = structlog.get_logger(__name__)


class BuildPipelineOrchestrator:
    """Turns a :class:`BuildPipelineContext` into a persisted :class:`SiteBundle`.

    Stages run strictly in order: ``init``, ``blueprint``, ``brand``,
    ``pages``, ``intents``, ``automations``, ``entitlements``, ``persist``.
    ``blueprint`` is skipped unless the build mode is ``systems_ai``.

    The first stage that raises aborts the run with a
    :class:`StageExecutionError` chained from the original exception; the
    partially built state is available on ``error.state``. Rows written by
    earlier stages are not rolled back.

    Usage::

        orchestrator = BuildPipelineOrchestrator(InMemoryStorage(), MockAIProvider())
        state = await orchestrator.execute(
            BuildPipelineContext(prompt="...", business_id="b1", owner_user_id="u1")
        )
        print(state.statuses())

    Args:
        storage: Durable storage for site, build and bundle rows.
        ai_provider: Content generation and intent inference backend.
        config: Pipeline settings. Defaults to :meth:`PipelineConfig.from_env`.
        catalog: Intent catalog. Defaults to the built-in definitions.
        rule_engine: Deterministic wiring rules. Defaults to the built-in table.
        installer: Automation installer. Defaults to the built-in recipes.
        tracer: Receives one span per executed stage.
    """

    def __init__(
        self,
        storage: Storage,
        ai_provider: AIProvider,
        *,
        config: PipelineConfig | None = None,
        catalog: IntentCatalog | None = None,
        rule_engine: RuleEngine | None = None,
        installer: AutomationInstaller | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self._storage = storage
        self._ai = ai_provider
        self._config = config or PipelineConfig.from_env()
        if catalog is None:
            catalog = IntentCatalog(
                DEFAULT_INTENT_DEFINITIONS, version=self._config.catalog_version
            )
        self._catalog = catalog
        self._rules = rule_engine if rule_engine is not None else RuleEngine()
        self._installer = installer if installer is not None else AutomationInstaller()
        self.tracer = tracer if tracer is not None else Tracer()

    def __repr__(self) -> str:
        return (
            f"BuildPipelineOrchestrator(storage={type(self._storage).__name__}, "
            f"ai_provider={type(self._ai).__name__})"
        )

    @property
    def catalog(self) -> IntentCatalog:
        return self._catalog

    def _new_state(self, context: BuildPipelineContext) -> BuildPipelineState:
        site_id = str(uuid.uuid4())
        build_id = str(uuid.uuid4())
        bundle = create_skeleton_bundle(
            site_id=site_id,
            build_id=build_id,
            business_id=context.business_id,
            owner_user_id=context.owner_user_id,
            mode=context.mode,
            prompt=context.prompt,
            catalog=self._catalog,
            preferred_engine=self._config.preferred_engine,
        )
        return BuildPipelineState(
            build_id=build_id,
            site_id=site_id,
            mode=context.mode,
            bundle=bundle,
            started_at=bundle.build.started_at,
        )

    async def execute(self, context: BuildPipelineContext) -> BuildPipelineState:
        """Run every stage for *context* and return the final state.

        Raises:
            StageExecutionError: A stage failed. Later stages did not run.
        """
        state = self._new_state(context)
        run = StageRun(
            state=state,
            context=context,
            storage=self._storage,
            ai=self._ai,
            wiring=IntentWiringEngine(
                self._ai,
                self._catalog,
                self._rules,
                concurrency=self._config.inference_concurrency,
            ),
            installer=self._installer,
        )
        log = logger.bind(build_id=state.build_id, site_id=state.site_id)
        log.info("pipeline.started", mode=str(context.mode))

        for stage in PIPELINE_STAGES:
            state.current_stage = stage
            if stage is PipelineStage.BLUEPRINT and context.mode != BuildMode.SYSTEMS_AI:
                self._skip(state, stage)
                continue
            await self._run_stage(run, stage)

        state.completed_at = utcnow()
        log.info(
            "pipeline.completed",
            pages=len(state.bundle.pages),
            bindings=len(state.bundle.intents.bindings),
            warnings=len(state.bundle.build.warnings),
        )
        return state

    def execute_sync(self, context: BuildPipelineContext) -> BuildPipelineState:
        """Blocking wrapper around :meth:`execute`."""
        return run_sync(self.execute(context))

    # ------------------------------------------------------------------ #
    # Stage bookkeeping
    # ------------------------------------------------------------------ #

    def _skip(self, state: BuildPipelineState, stage: PipelineStage) -> None:
        state.stages[stage].status = StageStatus.SKIPPED
        add_trace(state, stage, TraceLevel.INFO, f"Skipped stage: {stage}")
        logger.info("pipeline.stage_skipped", stage=str(stage), build_id=state.build_id)

    async def _run_stage(self, run: StageRun, stage: PipelineStage) -> None:
        state = run.state
        result = state.stages[stage]
        result.status = StageStatus.RUNNING
        result.started_at = utcnow()
        add_trace(state, stage, TraceLevel.INFO, f"Starting stage: {stage}")
        span = self.tracer.start_span(f"stage:{stage}", build_id=state.build_id)

        try:
            await STAGE_EXECUTORS[stage](run)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            error = StageError(code=f"{stage.upper()}_FAILED", message=message)
            result.status = StageStatus.FAILED
            result.completed_at = utcnow()
            result.error = error
            add_trace(state, stage, TraceLevel.ERROR, f"Failed stage: {stage} - {message}")
            state.bundle.build.errors.append(
                BuildIssue(code=error.code, message=message, data={"stage": str(stage)})
            )
            span.set_attribute("status", str(StageStatus.FAILED))
            span.set_error(message)
            self.tracer.end_span(span)
            logger.error(
                "pipeline.stage_failed",
                stage=str(stage),
                build_id=state.build_id,
                code=error.code,
                error=message,
            )
            raise StageExecutionError(
                str(stage),
                message,
                state=state,
                details={"build_id": state.build_id, "site_id": state.site_id},
            ) from exc

        result.status = StageStatus.COMPLETED
        result.completed_at = utcnow()
        add_trace(state, stage, TraceLevel.INFO, f"Completed stage: {stage}")
        span.set_attribute("status", str(StageStatus.COMPLETED))
        self.tracer.end_span(span)
        logger.info(
            "pipeline.stage_completed",
            stage=str(stage),
            build_id=state.build_id,
            duration_ms=span.duration_ms,
        )
