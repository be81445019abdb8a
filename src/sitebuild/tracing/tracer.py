"""Tracer -- collects pipeline spans for inspection and export."""

from __future__ import annotations

from typing import Any

from sitebuild.tracing.span import Span


class Tracer:
    """Collects :class:`Span` objects into a flat list for later export.

    The orchestrator opens one span per executed stage, named
    ``stage:{name}`` and carrying the ``build_id`` and final ``status``.

    Usage::

        tracer = Tracer()
        orchestrator = BuildPipelineOrchestrator(storage, provider, tracer=tracer)
        await orchestrator.execute(context)
        for span in tracer.export_json():
            print(span["name"], span["duration_ms"])
    """

    def __init__(self) -> None:
        self._spans: list[Span] = []

    def __len__(self) -> int:
        return len(self._spans)

    def start_span(self, name: str, parent: Span | None = None, **attributes: Any) -> Span:
        """Create and register a new span.

        Args:
            name: Span label, e.g. ``"stage:pages"``.
            parent: Optional enclosing span.
            **attributes: Key/value pairs attached to the span.
        """
        span = Span(name=name, parent_id=parent.span_id if parent is not None else None)
        for key, value in attributes.items():
            span.set_attribute(key, value)
        self._spans.append(span)
        return span

    def end_span(self, span: Span) -> None:
        span.end()

    def get_traces(self) -> list[Span]:
        """All collected spans, including still-open ones."""
        return list(self._spans)

    def find(self, name: str) -> list[Span]:
        return [s for s in self._spans if s.name == name]

    def export_json(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self._spans]

    def clear(self) -> None:
        self._spans.clear()
