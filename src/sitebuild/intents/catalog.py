"""Intent catalog: the registry of intents a build may bind elements to."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

from sitebuild.bundle.models import (
    EdgeFunctionRef,
    IntentDefinition,
    IntentHandler,
)
from sitebuild.core.constants import DEFAULT_CATALOG_VERSION, HandlerKind, IntentCategory


def _schema(properties: dict[str, str], required: list[str]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: {"type": kind} for name, kind in properties.items()},
        "required": required,
    }


def _edge(name: str) -> IntentHandler:
    return IntentHandler(
        kind=HandlerKind.EDGE,
        edge_function=EdgeFunctionRef(name=name, path=f"/functions/v1/{name}"),
    )


def _client(action: dict[str, Any]) -> IntentHandler:
    return IntentHandler(kind=HandlerKind.CLIENT, client_action=action)


DEFAULT_INTENT_DEFINITIONS: tuple[IntentDefinition, ...] = (
    IntentDefinition(
        intent_id="lead.submit",
        category=IntentCategory.FORM,
        description="Submit contact/lead form",
        params_schema=_schema(
            {"name": "string", "email": "string", "phone": "string", "message": "string"},
            ["email"],
        ),
        handler=_edge("handle-lead"),
    ),
    IntentDefinition(
        intent_id="nav.go",
        category=IntentCategory.NAV,
        description="Navigate to a page",
        params_schema=_schema({"path": "string"}, ["path"]),
        handler=_client({"type": "NAVIGATE", "to": ""}),
    ),
    IntentDefinition(
        intent_id="booking.request",
        category=IntentCategory.FORM,
        description="Request an appointment/booking",
        params_schema=_schema(
            {"name": "string", "email": "string", "date": "string", "service": "string"},
            ["email"],
        ),
        handler=_edge("handle-booking"),
    ),
    IntentDefinition(
        intent_id="subscribe.email",
        category=IntentCategory.FORM,
        description="Subscribe to newsletter",
        params_schema=_schema({"email": "string"}, ["email"]),
        handler=_edge("handle-subscribe"),
    ),
    IntentDefinition(
        intent_id="cta.call",
        category=IntentCategory.CTA,
        description="Start a phone call to the business",
        params_schema=_schema({"phone": "string"}, []),
        handler=_client({"type": "OPEN_URL", "scheme": "tel"}),
    ),
    IntentDefinition(
        intent_id="cta.email",
        category=IntentCategory.CTA,
        description="Compose an email to the business",
        params_schema=_schema({"email": "string", "subject": "string"}, []),
        handler=_client({"type": "OPEN_URL", "scheme": "mailto"}),
    ),
    IntentDefinition(
        intent_id="cta.directions",
        category=IntentCategory.CTA,
        description="Open directions to the business location",
        params_schema=_schema({"address": "string"}, []),
        handler=_client({"type": "OPEN_URL", "scheme": "maps"}),
    ),
    IntentDefinition(
        intent_id="cart.add",
        category=IntentCategory.COMMERCE,
        description="Add a product to the cart",
        params_schema=_schema(
            {"productId": "string", "quantity": "number"}, ["productId"]
        ),
        handler=IntentHandler(
            kind=HandlerKind.BOTH,
            client_action={"type": "TOAST", "message": "Added to cart"},
            edge_function=EdgeFunctionRef(name="cart-add", path="/functions/v1/cart-add"),
        ),
    ),
    IntentDefinition(
        intent_id="checkout.start",
        category=IntentCategory.COMMERCE,
        description="Begin checkout for the current cart",
        params_schema=_schema({"cartId": "string"}, []),
        handler=_edge("checkout-start"),
    ),
    IntentDefinition(
        intent_id="social.share",
        category=IntentCategory.SOCIAL,
        description="Share the current page on a social network",
        params_schema=_schema({"network": "string", "url": "string"}, []),
        handler=_client({"type": "SHARE"}),
    ),
)


class IntentCatalog:
    """Immutable, ordered registry of :class:`IntentDefinition` objects.

    A catalog is built once per orchestrator and handed to every run; the
    bundle receives its own copy of the definitions mapping.

    Args:
        definitions: Definitions to register, in display order. Defaults to
            :data:`DEFAULT_INTENT_DEFINITIONS`.
        version: Catalog version string recorded on the bundle.

    Raises:
        ValueError: If two definitions share an ``intent_id``.
    """

    def __init__(
        self,
        definitions: Iterable[IntentDefinition] | None = None,
        version: str = DEFAULT_CATALOG_VERSION,
    ) -> None:
        entries: dict[str, IntentDefinition] = {}
        for definition in definitions if definitions is not None else DEFAULT_INTENT_DEFINITIONS:
            if definition.intent_id in entries:
                raise ValueError(f"Duplicate intent definition '{definition.intent_id}'")
            entries[definition.intent_id] = definition
        self._definitions: Mapping[str, IntentDefinition] = MappingProxyType(entries)
        self.version = version

    def __repr__(self) -> str:
        return f"IntentCatalog(version={self.version!r}, intents={len(self._definitions)})"

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, intent_id: object) -> bool:
        return intent_id in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def get(self, intent_id: str) -> IntentDefinition | None:
        return self._definitions.get(intent_id)

    def as_list(self) -> list[IntentDefinition]:
        """Return the definitions in registration order."""
        return list(self._definitions.values())

    def to_dict(self) -> dict[str, IntentDefinition]:
        """Return a fresh ``intent_id -> definition`` dict for a bundle."""
        return dict(self._definitions)
