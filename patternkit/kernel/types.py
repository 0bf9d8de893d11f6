"""
patternkit Kernel — Shared Types

Small value types used across properties, patterns, element tree and the
preview runtime. These are the contracts that bind the kernel together.

PropertyValue is a tagged variant:
- Primitive       — any JSON-like value (str, number, bool, None, dict, list)
- ElementReference — a nested Element used as slot content
- EventHandler    — a callable bound to a UI event

Coercion and serialization switch on the tag, never on runtime shape.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from patternkit.kernel.element import Element

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Built-in node kinds that need no external component bundle
SYNTHETIC_PREFIX = "synthetic:"
SYNTHETIC_TEXT = "synthetic:text"
SYNTHETIC_ASSET = "synthetic:asset"

# Marker for serialized elements nested inside property values
ELEMENT_MARKER = "pattern"

# Reserved slot key for ordered children
DEFAULT_SLOT = "default"


# ---------------------------------------------------------------------------
# PropertyValue variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Primitive:
    """A plain value. Composite values are flattened field by field on serialize."""

    value: Any
    tag: str = "primitive"


@dataclass(frozen=True, eq=False)
class ElementReference:
    """A nested element stored as a property value (slot content)."""

    element: Element
    tag: str = "element"


@dataclass(frozen=True)
class EventHandler:
    """An invocable handler. Never crosses the wire."""

    handler: Callable[..., Any]
    tag: str = "event"


PropertyValue = Primitive | ElementReference | EventHandler


def wrap_value(value: Any) -> PropertyValue:
    """Tag a raw value. Already-tagged values are returned unchanged."""
    from patternkit.kernel.element import Element

    if isinstance(value, Primitive | ElementReference | EventHandler):
        return value
    if isinstance(value, Element):
        return ElementReference(value)
    if callable(value):
        return EventHandler(value)
    return Primitive(value)


def unwrap_value(value: PropertyValue) -> Any:
    """Return the plain payload of a tagged value."""
    if isinstance(value, ElementReference):
        return value.element
    if isinstance(value, EventHandler):
        return value.handler
    return value.value


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def new_id() -> str:
    """Fresh opaque identifier for elements, envelopes and session states."""
    return uuid.uuid4().hex


def is_synthetic(pattern_id: str | None) -> bool:
    """Return True for built-in pattern ids (e.g. 'synthetic:text')."""
    return isinstance(pattern_id, str) and pattern_id.startswith(SYNTHETIC_PREFIX)


def synthetic_kind(pattern_id: str) -> str:
    """'synthetic:text' → 'text'."""
    return pattern_id[len(SYNTHETIC_PREFIX) :]
