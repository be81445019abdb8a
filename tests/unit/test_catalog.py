"""Tests for intents/catalog.py."""
from __future__ import annotations

import pytest

from sitebuild.bundle.models import IntentDefinition, IntentHandler
from sitebuild.core.constants import HandlerKind, IntentCategory
from sitebuild.intents.catalog import DEFAULT_INTENT_DEFINITIONS, IntentCatalog
from sitebuild.intents.rules import DEFAULT_INTENT_RULES


def _definition(intent_id: str) -> IntentDefinition:
    return IntentDefinition(
        intent_id=intent_id,
        category=IntentCategory.CTA,
        description=f"{intent_id} test intent",
        handler=IntentHandler(kind=HandlerKind.CLIENT, client_action={"type": "NOOP"}),
    )


def test_default_catalog_contains_core_intents() -> None:
    catalog = IntentCatalog()
    assert "lead.submit" in catalog
    assert "nav.go" in catalog
    assert "booking.request" in catalog
    assert "subscribe.email" in catalog


def test_default_catalog_covers_every_rule_target() -> None:
    catalog = IntentCatalog()
    for rule in DEFAULT_INTENT_RULES:
        assert rule.intent_id in catalog, rule.intent_id


def test_lead_submit_requires_email() -> None:
    lead = IntentCatalog().get("lead.submit")
    assert lead is not None
    assert lead.category == IntentCategory.FORM
    assert lead.params_schema["required"] == ["email"]
    assert lead.handler.kind == HandlerKind.EDGE
    assert lead.handler.edge_function is not None
    assert lead.handler.edge_function.name == "handle-lead"


def test_nav_go_is_client_side() -> None:
    nav = IntentCatalog().get("nav.go")
    assert nav is not None
    assert nav.handler.kind == HandlerKind.CLIENT
    assert nav.handler.client_action == {"type": "NAVIGATE", "to": ""}


def test_as_list_preserves_registration_order() -> None:
    catalog = IntentCatalog()
    assert [d.intent_id for d in catalog.as_list()] == [
        d.intent_id for d in DEFAULT_INTENT_DEFINITIONS
    ]
    assert list(catalog) == [d.intent_id for d in DEFAULT_INTENT_DEFINITIONS]


def test_to_dict_returns_independent_copy() -> None:
    catalog = IntentCatalog()
    copy = catalog.to_dict()
    copy.pop("nav.go")
    assert "nav.go" in catalog
    assert len(catalog) == len(DEFAULT_INTENT_DEFINITIONS)


def test_custom_definitions_and_version() -> None:
    catalog = IntentCatalog([_definition("x.one"), _definition("x.two")], version="v2")
    assert len(catalog) == 2
    assert catalog.version == "v2"
    assert catalog.get("lead.submit") is None


def test_duplicate_definitions_rejected() -> None:
    with pytest.raises(ValueError, match="x.one"):
        IntentCatalog([_definition("x.one"), _definition("x.one")])


def test_definitions_are_frozen() -> None:
    lead = IntentCatalog().get("lead.submit")
    assert lead is not None
    with pytest.raises(Exception):
        lead.description = "changed"  # type: ignore[misc]


def test_repr() -> None:
    assert "intents=10" in repr(IntentCatalog())
