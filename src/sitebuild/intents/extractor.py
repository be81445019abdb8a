"""Interactive-element extraction from generated page markup."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

_BUTTON_RE = re.compile(r"<button\b[^>]*>([^<]+)</button>", re.IGNORECASE)
_LINK_RE = re.compile(r"<a\b[^>]*>([^<]+)</a>", re.IGNORECASE)
_SUBMIT_RE = re.compile(
    r"<input\b[^>]*type=[\"']submit[\"'][^>]*value=[\"']([^\"']+)[\"'][^>]*>",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class InteractiveElement:
    """A candidate element for intent wiring.

    ``context`` is the element's role on the page (``"button"``, ``"link"``
    or ``"form-submit"``) and ``tag`` is the source HTML tag.
    """

    text: str
    context: str
    tag: str


def _is_external_link(text: str) -> bool:
    # A bare URL label; the href itself is not inspected.
    return text.startswith("http")


def extract_interactive_elements(html: str) -> Iterator[InteractiveElement]:
    """Yield the interactive elements of *html*.

    Three passes run in a fixed order: ``<button>`` elements, then ``<a>``
    links (bare URL labels excluded), then ``<input type="submit">`` controls.
    Within each pass elements are yielded in document order. Elements with
    no visible text are skipped.
    """
    for match in _BUTTON_RE.finditer(html):
        text = match.group(1).strip()
        if text:
            yield InteractiveElement(text=text, context="button", tag="button")

    for match in _LINK_RE.finditer(html):
        text = match.group(1).strip()
        if text and not _is_external_link(text):
            yield InteractiveElement(text=text, context="link", tag="a")

    for match in _SUBMIT_RE.finditer(html):
        text = match.group(1).strip()
        if text:
            yield InteractiveElement(text=text, context="form-submit", tag="input")
