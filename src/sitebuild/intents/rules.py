"""Deterministic intent rules: text pattern to intent, no inference calls."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from sitebuild.core.constants import WiringSource


@dataclass(frozen=True)
class IntentWiringRule:
    """Maps element text matching ``pattern`` to ``intent_id``.

    String patterns are compiled case-insensitively. Higher ``priority``
    rules are evaluated first.
    """

    pattern: re.Pattern[str]
    intent_id: str
    priority: int
    source: WiringSource = field(default=WiringSource.DETERMINISTIC)

    @classmethod
    def build(cls, pattern: str, intent_id: str, priority: int) -> IntentWiringRule:
        return cls(re.compile(pattern, re.IGNORECASE), intent_id, priority)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


DEFAULT_INTENT_RULES: tuple[IntentWiringRule, ...] = (
    # contact / lead
    IntentWiringRule.build(r"contact|get\s*in\s*touch|reach\s*out", "lead.submit", 100),
    IntentWiringRule.build(r"request\s*quote|get\s*quote|free\s*quote", "lead.submit", 100),
    IntentWiringRule.build(r"schedule|book|appointment", "booking.request", 100),
    # navigation
    IntentWiringRule.build(r"learn\s*more|read\s*more|see\s*more", "nav.go", 80),
    IntentWiringRule.build(r"view\s*services|our\s*services", "nav.go", 80),
    IntentWiringRule.build(r"about\s*us|who\s*we\s*are", "nav.go", 80),
    # call to action
    IntentWiringRule.build(r"call\s*now|call\s*us|phone", "cta.call", 90),
    IntentWiringRule.build(r"email\s*us|send\s*email", "cta.email", 90),
    IntentWiringRule.build(r"get\s*directions|find\s*us|map", "cta.directions", 90),
    # commerce
    IntentWiringRule.build(r"add\s*to\s*cart|buy\s*now|purchase", "cart.add", 100),
    IntentWiringRule.build(r"checkout|pay\s*now", "checkout.start", 100),
    # social
    IntentWiringRule.build(r"share|facebook|twitter|linkedin", "social.share", 70),
    # subscribe
    IntentWiringRule.build(r"subscribe|newsletter|sign\s*up", "subscribe.email", 90),
)


class RuleEngine:
    """Matches element labels against an immutable, priority-ordered rule table.

    The table is sorted once at construction by descending priority. The
    sort is stable, so among rules of equal priority the one that appears
    first in *rules* wins.

    Args:
        rules: Rule table. Defaults to :data:`DEFAULT_INTENT_RULES`.
    """

    def __init__(self, rules: Iterable[IntentWiringRule] | None = None) -> None:
        table = tuple(rules) if rules is not None else DEFAULT_INTENT_RULES
        self._rules: tuple[IntentWiringRule, ...] = tuple(
            sorted(table, key=lambda rule: rule.priority, reverse=True)
        )

    def __repr__(self) -> str:
        return f"RuleEngine(rules={len(self._rules)})"

    @property
    def rules(self) -> tuple[IntentWiringRule, ...]:
        """Rules in evaluation order."""
        return self._rules

    def match(self, text: str) -> IntentWiringRule | None:
        """Return the first rule whose pattern matches *text*, or ``None``."""
        for rule in self._rules:
            if rule.matches(text):
                return rule
        return None
