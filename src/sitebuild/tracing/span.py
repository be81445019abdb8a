"""Trace span for one timed unit of pipeline work."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

_STAGE_PREFIX = "stage:"


def _new_span_id() -> str:
    return uuid.uuid4().hex[:16]


@dataclass(eq=False)
class Span:
    """A timed unit of work, usually one pipeline stage (``stage:{name}``).

    ``started_at`` is wall-clock for export; ``duration_ms`` is measured on
    the monotonic clock.
    """

    name: str
    parent_id: str | None = None
    span_id: str = field(default_factory=_new_span_id, init=False)
    attributes: dict[str, Any] = field(default_factory=dict, init=False)
    started_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), init=False
    )
    start_time: float = field(default_factory=time.monotonic, init=False, repr=False)
    end_time: float | None = field(default=None, init=False, repr=False)
    status: str = field(default="ok", init=False)
    error: str | None = field(default=None, init=False)

    @property
    def stage(self) -> str | None:
        """Pipeline stage name for ``stage:*`` spans, else ``None``."""
        if self.name.startswith(_STAGE_PREFIX):
            return self.name[len(_STAGE_PREFIX):]
        return None

    @property
    def duration_ms(self) -> int | None:
        if self.end_time is None:
            return None
        return int((self.end_time - self.start_time) * 1000)

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def set_error(self, error: str) -> None:
        self.status = "error"
        self.error = error

    def end(self) -> None:
        # Later calls keep the first end time.
        if self.end_time is None:
            self.end_time = time.monotonic()

    def to_dict(self) -> dict[str, Any]:
        return {
            "span_id": self.span_id,
            "parent_id": self.parent_id,
            "name": self.name,
            "stage": self.stage,
            "started_at": self.started_at.isoformat(),
            "status": self.status,
            "error": self.error,
            "duration_ms": self.duration_ms,
            "attributes": dict(self.attributes),
        }
