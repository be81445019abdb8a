"""SiteBundle data models: the generated-site artifact and its parts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sitebuild.core.constants import (
    BUNDLE_VERSION,
    DEFAULT_CATALOG_VERSION,
    BindingStrategy,
    BuildMode,
    BuildStage,
    HandlerKind,
    IntentCategory,
    PlanTier,
    PreviewEngine,
    SiteStatus,
    TraceLevel,
    WiringSource,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Identity & provenance
# ---------------------------------------------------------------------------


class SiteIdentity(BaseModel):
    site_id: str
    business_id: str
    owner_user_id: str
    status: SiteStatus = SiteStatus.DRAFT
    slug: str | None = None
    domain: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class BuildTraceEvent(BaseModel):
    """A single entry in the build's trace log."""

    ts: datetime = Field(default_factory=utcnow)
    stage: BuildStage
    level: TraceLevel = TraceLevel.INFO
    message: str
    data: dict[str, Any] | None = None


class BuildIssue(BaseModel):
    """A build warning or error surfaced to the caller after the run."""

    code: str
    message: str
    data: Any = None


class BuildProvenance(BaseModel):
    """How and when the bundle was built, with the trace that explains it."""

    build_id: str
    build_mode: BuildMode = BuildMode.SYSTEMS_AI
    prompt: str | None = None
    model: str | None = None
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: datetime | None = None
    duration_ms: int | None = None
    trace: list[BuildTraceEvent] = Field(default_factory=list)
    warnings: list[BuildIssue] = Field(default_factory=list)
    errors: list[BuildIssue] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Blueprint & brand
# ---------------------------------------------------------------------------


class BlueprintPage(BaseModel):
    title: str
    path: str
    purpose: str = ""


class BlueprintCta(BaseModel):
    label: str
    intent_id: str
    params: dict[str, Any] = Field(default_factory=dict)


class BusinessBlueprint(BaseModel):
    """Structured business description that drives brand and page generation."""

    industry: str = "general"
    business_name: str = "My Business"
    primary_goal: str = "leads"
    locale: str | None = None
    pages: list[BlueprintPage] = Field(default_factory=list)
    ctas: list[BlueprintCta] = Field(default_factory=list)
    offerings: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    contact: dict[str, str] = Field(default_factory=dict)


class BrandColors(BaseModel):
    primary: str = "#000000"
    secondary: str | None = "#666666"
    accent: str | None = "#0066cc"
    background: str | None = "#ffffff"
    foreground: str | None = None
    muted: str | None = None


class BrandTypography(BaseModel):
    heading_font: str = "Inter"
    body_font: str = "Inter"


class BrandPrimitives(BaseModel):
    name: str = "My Business"
    tagline: str | None = None
    colors: BrandColors = Field(default_factory=BrandColors)
    typography: BrandTypography = Field(default_factory=BrandTypography)
    tone: str | None = "corporate"
    locale: str | None = None


# ---------------------------------------------------------------------------
# Manifest & pages
# ---------------------------------------------------------------------------


class RouteDef(BaseModel):
    path: str
    page_id: str
    is_home: bool = False
    requires_auth: bool = False


class NavItem(BaseModel):
    label: str
    path: str
    page_id: str


class LayoutConfig(BaseModel):
    header: str = "default"
    footer: str = "default"


class ManifestMetadata(BaseModel):
    title: str = "My Business"
    description: str | None = None


class SiteManifest(BaseModel):
    routes: list[RouteDef] = Field(default_factory=list)
    nav: list[NavItem] = Field(default_factory=list)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    metadata: ManifestMetadata = Field(default_factory=ManifestMetadata)


class BindingTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: BindingStrategy = BindingStrategy.DATA_ATTR
    selector: str


class IntentBinding(BaseModel):
    """Association between one page element and one intent."""

    model_config = ConfigDict(frozen=True)

    binding_id: str
    page_id: str
    target: BindingTarget
    intent_id: str
    params: dict[str, Any] = Field(default_factory=dict)
    label: str | None = None
    source: WiringSource = WiringSource.DETERMINISTIC


class PageRoute(BaseModel):
    """The page a provider is asked to generate."""

    page_id: str
    path: str
    title: str
    purpose: str = ""


class PageSource(BaseModel):
    kind: str = "html"
    content: str = ""
    content_hash: str = ""


class PageOutput(BaseModel):
    html: str | None = None
    css: str | None = None
    js: str | None = None


class PageBundle(BaseModel):
    page_id: str
    title: str
    path: str
    source: PageSource = Field(default_factory=PageSource)
    output: PageOutput = Field(default_factory=PageOutput)
    intent_bindings: list[IntentBinding] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------


class EdgeFunctionRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    method: str = "POST"


class IntentHandler(BaseModel):
    """Either a remote-callable endpoint, a client-side action, or both."""

    model_config = ConfigDict(frozen=True)

    kind: HandlerKind
    client_action: dict[str, Any] | None = None
    edge_function: EdgeFunctionRef | None = None


class IntentRequirements(BaseModel):
    model_config = ConfigDict(frozen=True)

    feature_flag: str | None = None
    min_plan: PlanTier | None = None
    integrations: tuple[str, ...] = ()


class IntentDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    intent_id: str
    category: IntentCategory
    description: str
    params_schema: dict[str, Any] = Field(default_factory=dict)
    handler: IntentHandler
    requires: IntentRequirements | None = None


class IntentSystem(BaseModel):
    catalog_version: str = DEFAULT_CATALOG_VERSION
    definitions: dict[str, IntentDefinition] = Field(default_factory=dict)
    bindings: list[IntentBinding] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Automations, integrations, entitlements, runtime
# ---------------------------------------------------------------------------


class AutomationTrigger(BaseModel):
    type: str = "intent"
    intent_id: str | None = None
    event_name: str | None = None
    cron: str | None = None


class AutomationRuntime(BaseModel):
    kind: str = "inngest"
    entrypoint: str


class AutomationInstall(BaseModel):
    install_id: str
    recipe_id: str
    enabled: bool
    triggers: list[AutomationTrigger] = Field(default_factory=list)
    runtime: AutomationRuntime
    config: dict[str, Any] = Field(default_factory=dict)


class SecretRequirement(BaseModel):
    provider: str
    reason: str
    scopes: list[str] = Field(default_factory=list)


class AutomationSystem(BaseModel):
    installed: list[AutomationInstall] = Field(default_factory=list)
    secrets_required: list[SecretRequirement] = Field(default_factory=list)


class IntegrationProvider(BaseModel):
    provider: str
    enabled: bool = False
    public_config: dict[str, Any] = Field(default_factory=dict)


class IntegrationSystem(BaseModel):
    providers: list[IntegrationProvider] = Field(default_factory=list)


class EntitlementSystem(BaseModel):
    plan: PlanTier = PlanTier.FREE
    features: dict[str, bool] = Field(default_factory=dict)
    limits: dict[str, int | float] = Field(default_factory=dict)


class RuntimeEntry(BaseModel):
    type: str = "html"
    page_id: str


class RuntimeConfig(BaseModel):
    preferred_engine: PreviewEngine = PreviewEngine.SIMPLE
    engines_allowed: list[PreviewEngine] = Field(
        default_factory=lambda: [
            PreviewEngine.SIMPLE,
            PreviewEngine.VFS,
            PreviewEngine.WORKER,
        ]
    )
    entry: RuntimeEntry


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


class SiteBundle(BaseModel):
    """The complete generated-site artifact.

    Invariants maintained by the pipeline:

    - ``manifest.routes[0].is_home`` whenever at least one route exists.
    - ``runtime.entry.page_id == manifest.routes[0].page_id``.
    """

    version: str = BUNDLE_VERSION
    site: SiteIdentity
    build: BuildProvenance
    blueprint: BusinessBlueprint | None = None
    brand: BrandPrimitives = Field(default_factory=BrandPrimitives)
    manifest: SiteManifest = Field(default_factory=SiteManifest)
    pages: dict[str, PageBundle] = Field(default_factory=dict)
    assets: dict[str, dict[str, Any]] = Field(default_factory=dict)
    intents: IntentSystem = Field(default_factory=IntentSystem)
    automations: AutomationSystem = Field(default_factory=AutomationSystem)
    integrations: IntegrationSystem = Field(default_factory=IntegrationSystem)
    entitlements: EntitlementSystem = Field(default_factory=EntitlementSystem)
    runtime: RuntimeConfig
