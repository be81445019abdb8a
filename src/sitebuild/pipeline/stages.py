"""Stage executors for the build pipeline.

Each executor is an ``async`` callable taking a :class:`StageRun` and
mutating ``run.state.bundle``. Executors raise to fail their stage; the
orchestrator records the outcome.
"""

from __future__ import annotations

import itertools
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

import structlog

from sitebuild.automations.installer import AutomationInstaller
from sitebuild.bundle.factory import HOME_PAGE_ID, default_blueprint, page_id_for
from sitebuild.bundle.models import (
    BuildIssue,
    BuildTraceEvent,
    BusinessBlueprint,
    NavItem,
    PageRoute,
    RouteDef,
    utcnow,
)
from sitebuild.bundle.utils import serialize_bundle
from sitebuild.core.constants import (
    BUNDLE_VERSION,
    BuildStage,
    PipelineStage,
    SiteStatus,
    TraceLevel,
)
from sitebuild.entitlements.plans import apply_constraints, free_tier
from sitebuild.intents.wiring import IntentWiringEngine
from sitebuild.pipeline.models import BuildPipelineContext, BuildPipelineState
from sitebuild.providers.base import AIProvider
from sitebuild.storage.base import Storage
from sitebuild.storage.models import SiteBuildRow, SiteBundleRow, SiteRow

logger = structlog.get_logger(__name__)

# Pipeline stage -> stage label used in the bundle's trace log.
TRACE_STAGES: dict[PipelineStage, BuildStage] = {
    PipelineStage.INIT: BuildStage.BLUEPRINT,
    PipelineStage.BLUEPRINT: BuildStage.BLUEPRINT,
    PipelineStage.BRAND: BuildStage.LAYOUT,
    PipelineStage.PAGES: BuildStage.PAGES,
    PipelineStage.INTENTS: BuildStage.INTENTS,
    PipelineStage.AUTOMATIONS: BuildStage.AUTOMATIONS,
    PipelineStage.ENTITLEMENTS: BuildStage.PREVIEW,
    PipelineStage.PERSIST: BuildStage.PUBLISH,
}


def add_trace(
    state: BuildPipelineState,
    stage: PipelineStage,
    level: TraceLevel,
    message: str,
    data: dict[str, Any] | None = None,
) -> None:
    state.bundle.build.trace.append(
        BuildTraceEvent(stage=TRACE_STAGES[stage], level=level, message=message, data=data)
    )


def add_warning(
    state: BuildPipelineState,
    stage: PipelineStage,
    code: str,
    message: str,
    data: Any = None,
) -> None:
    """Record a build warning on the bundle and on the stage result."""
    logger.warning("pipeline.build_warning", stage=str(stage), code=code, message=message)
    state.bundle.build.warnings.append(BuildIssue(code=code, message=message, data=data))
    state.stages[stage].warnings.append(message)


@dataclass
class StageRun:
    """Everything a stage executor can reach during one run."""

    state: BuildPipelineState
    context: BuildPipelineContext
    storage: Storage
    ai: AIProvider
    wiring: IntentWiringEngine
    installer: AutomationInstaller
    sequence: Iterator[int] = field(default_factory=itertools.count)

    @property
    def blueprint(self) -> BusinessBlueprint:
        """The generated blueprint, or the fixed default when none was generated."""
        return self.state.bundle.blueprint or default_blueprint(self.context.industry)


StageExecutor = Callable[[StageRun], Awaitable[None]]


# ---------------------------------------------------------------------------
# Executors
# ---------------------------------------------------------------------------


async def run_init(run: StageRun) -> None:
    bundle = run.state.bundle
    await run.storage.create_site(
        SiteRow(
            site_id=bundle.site.site_id,
            business_id=bundle.site.business_id,
            owner_user_id=bundle.site.owner_user_id,
            status=bundle.site.status,
            created_at=bundle.site.created_at,
            updated_at=bundle.site.updated_at,
        )
    )
    await run.storage.create_build(
        SiteBuildRow(
            build_id=bundle.build.build_id,
            site_id=bundle.site.site_id,
            mode=bundle.build.build_mode,
            started_at=bundle.build.started_at,
        )
    )
    add_trace(
        run.state,
        PipelineStage.INIT,
        TraceLevel.INFO,
        "Created site and build records",
        {"site_id": bundle.site.site_id, "build_id": bundle.build.build_id},
    )


async def run_blueprint(run: StageRun) -> None:
    blueprint = await run.ai.generate_blueprint(run.context)
    run.state.bundle.blueprint = blueprint
    add_trace(
        run.state,
        PipelineStage.BLUEPRINT,
        TraceLevel.INFO,
        "Generated business blueprint",
        {"primary_goal": blueprint.primary_goal, "pages": len(blueprint.pages)},
    )


async def run_brand(run: StageRun) -> None:
    brand = await run.ai.generate_brand_kit(run.blueprint, run.context)
    run.state.bundle.brand = brand
    add_trace(
        run.state,
        PipelineStage.BRAND,
        TraceLevel.INFO,
        "Generated brand kit",
        {"primary_color": brand.colors.primary, "tone": brand.tone},
    )


async def run_pages(run: StageRun) -> None:
    """Derive routes and nav from the blueprint, then generate each page in order."""
    bundle = run.state.bundle
    blueprint = run.blueprint

    routes = [
        PageRoute(
            page_id=page_id_for(page.title),
            path=page.path,
            title=page.title,
            purpose=page.purpose,
        )
        for page in blueprint.pages
    ]
    bundle.manifest.routes = [
        RouteDef(path=route.path, page_id=route.page_id, is_home=index == 0)
        for index, route in enumerate(routes)
    ]
    bundle.manifest.nav = [
        NavItem(label=route.title, path=route.path, page_id=route.page_id) for route in routes
    ]
    bundle.manifest.metadata.title = blueprint.business_name
    bundle.runtime.entry.page_id = routes[0].page_id if routes else HOME_PAGE_ID

    for route in routes:
        page = await run.ai.generate_page(route, blueprint, bundle.brand, run.context)
        bundle.pages[route.page_id] = page
        add_trace(
            run.state,
            PipelineStage.PAGES,
            TraceLevel.INFO,
            f"Generated page: {route.page_id}",
            {"path": route.path, "source_kind": page.source.kind},
        )


async def run_intents(run: StageRun) -> None:
    """Wire every page's interactive elements to intents."""
    bundle = run.state.bundle
    all_bindings = []

    for page_id, page in bundle.pages.items():
        html = page.output.html or page.source.content
        wiring = await run.wiring.wire_page(page_id, html, run.sequence)
        page.intent_bindings = wiring.bindings
        all_bindings.extend(wiring.bindings)

        for wired in wiring.wired:
            add_trace(
                run.state,
                PipelineStage.INTENTS,
                TraceLevel.INFO,
                f"Wired intent: {wired.binding.intent_id}",
                {
                    "binding_id": wired.binding.binding_id,
                    "source": wired.result.source,
                    "confidence": wired.result.confidence,
                },
            )
        for element, error in wiring.failures:
            add_warning(
                run.state,
                PipelineStage.INTENTS,
                "INTENT_INFERENCE_FAILED",
                f"Intent inference failed for '{element.text}' on page {page_id}",
                {"page_id": page_id, "text": element.text, "error": error},
            )

    bundle.intents.bindings = all_bindings


async def run_automations(run: StageRun) -> None:
    bundle = run.state.bundle
    industry = (
        (bundle.blueprint.industry if bundle.blueprint else None)
        or run.context.industry
        or "general"
    )
    report = run.installer.install(industry)
    bundle.automations = report.automations

    for install in report.automations.installed:
        add_trace(
            run.state,
            PipelineStage.AUTOMATIONS,
            TraceLevel.INFO,
            f"Installed recipe: {install.recipe_id}",
            {
                "enabled": install.enabled,
                "secrets_needed": list(run.installer.secrets_for(install.recipe_id)),
            },
        )
    for recipe, secrets in report.disabled:
        add_warning(
            run.state,
            PipelineStage.AUTOMATIONS,
            "SECRET_REQUIRED",
            f"{recipe.name} is disabled until {', '.join(secrets)} is configured",
            {"recipe_id": recipe.recipe_id, "secrets": list(secrets)},
        )


async def run_entitlements(run: StageRun) -> None:
    bundle = run.state.bundle
    bundle.entitlements = apply_constraints(free_tier(), run.context.constraints)
    add_trace(
        run.state,
        PipelineStage.ENTITLEMENTS,
        TraceLevel.INFO,
        "Set entitlements",
        {"plan": bundle.entitlements.plan, "features": len(bundle.entitlements.features)},
    )
    # the bundle is previewable from here on
    bundle.site.status = SiteStatus.PREVIEW
    bundle.site.updated_at = utcnow()


async def run_persist(run: StageRun) -> None:
    """Write the build summary and the serialized bundle.

    This is the only stage that writes the full bundle. Trace events added
    after serialization are kept on the in-memory bundle only.
    """
    bundle = run.state.bundle
    finished = utcnow()
    bundle.build.finished_at = finished
    bundle.build.duration_ms = int((finished - bundle.build.started_at).total_seconds() * 1000)

    await run.storage.update_build(
        bundle.build.build_id,
        {
            "finished_at": finished,
            "warnings_count": len(bundle.build.warnings),
            "errors_count": len(bundle.build.errors),
        },
    )
    row = SiteBundleRow(
        site_id=bundle.site.site_id,
        build_id=bundle.build.build_id,
        version=BUNDLE_VERSION,
        bundle_json=serialize_bundle(bundle),
        created_at=finished,
    )
    await run.storage.save_bundle(row)
    add_trace(
        run.state,
        PipelineStage.PERSIST,
        TraceLevel.INFO,
        "Persisted bundle",
        {"bundle_size": len(row.bundle_json)},
    )


STAGE_EXECUTORS: dict[PipelineStage, StageExecutor] = {
    PipelineStage.INIT: run_init,
    PipelineStage.BLUEPRINT: run_blueprint,
    PipelineStage.BRAND: run_brand,
    PipelineStage.PAGES: run_pages,
    PipelineStage.INTENTS: run_intents,
    PipelineStage.AUTOMATIONS: run_automations,
    PipelineStage.ENTITLEMENTS: run_entitlements,
    PipelineStage.PERSIST: run_persist,
}
