from __future__ import annotations

from enum import StrEnum

BUNDLE_VERSION = "1.0.0"
DEFAULT_CATALOG_VERSION = "2026-02-18"


class PipelineStage(StrEnum):
    INIT = "init"
    BLUEPRINT = "blueprint"
    BRAND = "brand"
    PAGES = "pages"
    INTENTS = "intents"
    AUTOMATIONS = "automations"
    ENTITLEMENTS = "entitlements"
    PERSIST = "persist"


# Fixed execution order of the build pipeline.
PIPELINE_STAGES: tuple[PipelineStage, ...] = (
    PipelineStage.INIT,
    PipelineStage.BLUEPRINT,
    PipelineStage.BRAND,
    PipelineStage.PAGES,
    PipelineStage.INTENTS,
    PipelineStage.AUTOMATIONS,
    PipelineStage.ENTITLEMENTS,
    PipelineStage.PERSIST,
)


class StageStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class BuildMode(StrEnum):
    SYSTEMS_AI = "systems_ai"
    BUILDER_AI = "builder_ai"
    MANUAL = "manual"
    TEMPLATE = "template"


class BuildStage(StrEnum):
    """Coarse build phase recorded on trace events."""

    BLUEPRINT = "blueprint"
    LAYOUT = "layout"
    PAGES = "pages"
    INTENTS = "intents"
    ASSETS = "assets"
    AUTOMATIONS = "automations"
    PREVIEW = "preview"
    PUBLISH = "publish"


class TraceLevel(StrEnum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class SiteStatus(StrEnum):
    DRAFT = "draft"
    PREVIEW = "preview"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class IntentCategory(StrEnum):
    NAV = "nav"
    OVERLAY = "overlay"
    FORM = "form"
    COMMERCE = "commerce"
    AUTH = "auth"
    CRM = "crm"
    AUTOMATION = "automation"
    CTA = "cta"
    SOCIAL = "social"


class HandlerKind(StrEnum):
    CLIENT = "client"
    EDGE = "edge"
    BOTH = "both"


class WiringSource(StrEnum):
    DETERMINISTIC = "deterministic"
    AI = "ai"


class BindingStrategy(StrEnum):
    DATA_ATTR = "data-attr"
    CSS = "css"
    XPATH = "xpath"


class PreviewEngine(StrEnum):
    SIMPLE = "simple"
    VFS = "vfs"
    WORKER = "worker"


class PlanTier(StrEnum):
    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    AGENCY = "agency"
    ENTERPRISE = "enterprise"
