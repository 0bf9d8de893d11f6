"""
patternkit Kernel — Element Tree

The in-memory document: a tree of elements bound to patterns, holding
property values and ordered children.

Invariants:
- exactly one root (no parent) per tree
- an element sits in at most one parent's child list
- the parent's child list is authoritative; `parent` is a weak back-reference
  used for traversal only
- children order is significant (render order)
- reparenting detaches from the old parent before inserting at the new one;
  the index is clamped to [0, len]

Serialized shape:

  {
    "_type": "pattern",
    "id": "<element id>",
    "pattern": "<pattern id>",
    "name": "<display name>",
    "properties": {"<property id>": <value>},
    "children": [<serialized element>, ...]
  }

When named slots exist, "children" becomes {"default": [...], "<slot>": [...]}.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable, Iterator
from typing import Any

from patternkit.kernel.patterns import Pattern
from patternkit.kernel.types import (
    DEFAULT_SLOT,
    ELEMENT_MARKER,
    ElementReference,
    EventHandler,
    Primitive,
    PropertyValue,
    new_id,
    unwrap_value,
    wrap_value,
)

logger = logging.getLogger(__name__)

PatternLookup = Callable[[str], Pattern | None]


class Element:
    """One node of the editable document tree."""

    def __init__(
        self,
        pattern: Pattern | None = None,
        *,
        pattern_id: str | None = None,
        element_id: str | None = None,
        name: str | None = None,
    ) -> None:
        self.id = element_id or new_id()
        self.pattern = pattern
        # Kept even when the pattern is unknown so the reference round-trips
        self.pattern_id = pattern.id if pattern is not None else (pattern_id or "")
        self.name = name if name is not None else (pattern.name if pattern is not None else "")
        self._children: list[Element] = []
        self._slots: dict[str, list[Element]] = {}
        self._values: dict[str, PropertyValue] = {}
        self._parent_ref: weakref.ref[Element] | None = None

    def __repr__(self) -> str:
        return f"Element({self.pattern_id!r}, id={self.id!r}, children={len(self._children)})"

    # -- structure --

    @property
    def parent(self) -> Element | None:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def children(self) -> list[Element]:
        """Copy of the default-slot children, in render order."""
        return list(self._children)

    @property
    def slots(self) -> dict[str, list[Element]]:
        """Copy of the named slots (excluding the default slot)."""
        return {name: list(items) for name, items in self._slots.items()}

    def is_root(self) -> bool:
        return self.parent is None

    def index(self) -> int | None:
        """Position in the parent's default slot, None when root or slotted."""
        parent = self.parent
        if parent is None:
            return None
        for i, child in enumerate(parent._children):
            if child is self:
                return i
        return None

    def is_ancestor_of(self, other: Element) -> bool:
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def set_parent(self, parent: Element | None, index: int | None = None) -> None:
        """
        Move this element under `parent` at `index` (append when None).

        No-op when already at that exact parent and index. Otherwise detaches
        from the current parent first, then inserts. `parent=None` detaches.
        """
        if parent is self or (parent is not None and self.is_ancestor_of(parent)):
            logger.warning("element: refusing to move %s under its own subtree", self.id)
            return

        current = self.parent
        if parent is not None and current is parent:
            position = self.index()
            if position is not None:
                last = len(parent._children) - 1
                target = last if index is None else _clamp(index, 0, last)
                if position == target:
                    return

        self._detach()

        if parent is None:
            return

        if index is None or index >= len(parent._children):
            parent._children.append(self)
        else:
            parent._children.insert(max(index, 0), self)
        self._parent_ref = weakref.ref(parent)

    def set_index(self, index: int) -> None:
        self.set_parent(self.parent, index)

    def remove(self) -> None:
        self.set_parent(None)

    def set_slot(self, slot: str, elements: list[Element]) -> None:
        """Replace a named slot's contents."""
        if slot == DEFAULT_SLOT:
            for child in list(self._children):
                child._detach()
            for element in elements:
                element.set_parent(self)
            return

        for old in self._slots.pop(slot, []):
            old._parent_ref = None
        items: list[Element] = []
        for element in elements:
            element._detach()
            element._parent_ref = weakref.ref(self)
            items.append(element)
        if items:
            self._slots[slot] = items

    def _detach(self) -> None:
        parent = self.parent
        self._parent_ref = None
        if parent is None:
            return
        for i, child in enumerate(parent._children):
            if child is self:
                del parent._children[i]
                return
        for name, items in list(parent._slots.items()):
            for i, child in enumerate(items):
                if child is self:
                    del items[i]
                    if not items:
                        del parent._slots[name]
                    return
        for property_id, value in list(parent._values.items()):
            if isinstance(value, ElementReference) and value.element is self:
                del parent._values[property_id]
                return

    # -- traversal --

    def walk(self) -> Iterator[Element]:
        """Depth-first, pre-order over default-slot children and named slots."""
        yield self
        for child in self._children:
            yield from child.walk()
        for items in self._slots.values():
            for child in items:
                yield from child.walk()

    def find(self, element_id: str) -> Element | None:
        for element in self.walk():
            if element.id == element_id:
                return element
            for value in element._values.values():
                if isinstance(value, ElementReference):
                    found = value.element.find(element_id)
                    if found is not None:
                        return found
        return None

    # -- properties --

    def set_property_value(self, property_id: str, value: Any) -> None:
        """
        Store a property value, coerced when the pattern declares the property.

        Unknown pattern or property: the raw value is stored unchanged so
        editors can stage values before a pattern loads.
        """
        if self.pattern is not None:
            prop = self.pattern.get_property(property_id)
            if prop is not None:
                value = prop.coerce(value)

        previous = self._values.get(property_id)
        if isinstance(previous, ElementReference) and previous.element.parent is self:
            previous.element._parent_ref = None

        tagged = wrap_value(value)
        if isinstance(tagged, ElementReference):
            tagged.element._detach()
            tagged.element._parent_ref = weakref.ref(self)
        self._values[property_id] = tagged

    def get_property_value(self, property_id: str) -> Any:
        value = self._values.get(property_id)
        return unwrap_value(value) if value is not None else None

    @property
    def property_values(self) -> dict[str, PropertyValue]:
        return dict(self._values)

    # -- serialization --

    def serialize(self) -> dict[str, Any]:
        return serialize(self)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def is_serialized_element(value: Any) -> bool:
    return isinstance(value, dict) and value.get("_type") == ELEMENT_MARKER


def create_from_serialized(
    doc: dict[str, Any],
    pattern_lookup: PatternLookup,
    parent: Element | None = None,
) -> Element:
    """
    Build an element tree from its serialized form.

    Unknown pattern ids still produce an element (pattern=None) so the tree
    keeps its shape; a warning is logged.
    """
    pattern_id = doc.get("pattern") or ""
    pattern = pattern_lookup(pattern_id) if pattern_id else None
    if pattern is None:
        logger.warning("element: unknown pattern %r, keeping element as pass-through", pattern_id)

    element = Element(
        pattern,
        pattern_id=pattern_id,
        element_id=doc.get("id"),
        name=doc.get("name"),
    )
    if parent is not None:
        element.set_parent(parent)

    properties = doc.get("properties") or {}
    if isinstance(properties, dict):
        for property_id, raw in properties.items():
            element.set_property_value(property_id, _load_value(raw, pattern_lookup))

    default, named = split_children(doc.get("children"))
    for child_doc in default:
        if isinstance(child_doc, dict):
            create_from_serialized(child_doc, pattern_lookup, parent=element)
    for slot, child_docs in named.items():
        element.set_slot(
            slot,
            [create_from_serialized(c, pattern_lookup) for c in child_docs if isinstance(c, dict)],
        )

    return element


def split_children(children: Any) -> tuple[list[Any], dict[str, list[Any]]]:
    """Normalize 'children' (list or slot mapping) into (default, named slots)."""
    if isinstance(children, list):
        return children, {}
    if isinstance(children, dict):
        default = children.get(DEFAULT_SLOT) or []
        named = {k: v for k, v in children.items() if k != DEFAULT_SLOT and isinstance(v, list)}
        return (default if isinstance(default, list) else []), named
    return [], {}


def _load_value(raw: Any, pattern_lookup: PatternLookup) -> Any:
    if is_serialized_element(raw):
        return create_from_serialized(raw, pattern_lookup)
    return raw


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize(element: Element) -> dict[str, Any]:
    """Plain nested structure; depends only on tree contents."""
    properties = {pid: _value_to_json(value) for pid, value in element._values.items()}

    default = [serialize(child) for child in element._children]
    children: list[Any] | dict[str, list[Any]]
    if element._slots:
        children = {DEFAULT_SLOT: default}
        for slot, items in element._slots.items():
            children[slot] = [serialize(child) for child in items]
    else:
        children = default

    return {
        "_type": ELEMENT_MARKER,
        "id": element.id,
        "pattern": element.pattern_id,
        "name": element.name,
        "properties": properties,
        "children": children,
    }


def _value_to_json(value: PropertyValue) -> Any:
    if isinstance(value, ElementReference):
        return serialize(value.element)
    if isinstance(value, EventHandler):
        return None
    if isinstance(value, Primitive):
        return _flatten(value.value)
    return _flatten(value)


def _flatten(value: Any) -> Any:
    """Recursively flatten composite values field by field."""
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Element):
        return serialize(value)
    if isinstance(value, ElementReference | EventHandler | Primitive):
        return _value_to_json(value)
    if isinstance(value, dict):
        return {str(k): _flatten(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_flatten(v) for v in value]
    if callable(value):
        return None
    if hasattr(value, "__dict__"):
        return {k: _flatten(v) for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
