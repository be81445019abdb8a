"""Intent catalog, deterministic rules, element extraction and wiring."""
from sitebuild.intents.catalog import DEFAULT_INTENT_DEFINITIONS, IntentCatalog
from sitebuild.intents.extractor import InteractiveElement, extract_interactive_elements
from sitebuild.intents.rules import DEFAULT_INTENT_RULES, IntentWiringRule, RuleEngine
from sitebuild.intents.wiring import (
    IntentWiringEngine,
    IntentWiringResult,
    PageWiring,
    binding_id_for,
)

__all__ = [
    "DEFAULT_INTENT_DEFINITIONS",
    "DEFAULT_INTENT_RULES",
    "IntentCatalog",
    "IntentWiringEngine",
    "IntentWiringResult",
    "IntentWiringRule",
    "InteractiveElement",
    "PageWiring",
    "RuleEngine",
    "binding_id_for",
    "extract_interactive_elements",
]
