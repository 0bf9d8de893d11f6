"""
patternkit Kernel — Page Document

Editor-side owner of one element tree plus the current selection. Every
mutation goes through a Page method, which applies the element operation and
emits a change event to explicit subscribers. Nothing is observed implicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from patternkit.kernel.element import Element, PatternLookup, create_from_serialized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeChange:
    """The element tree changed. `kind` is one of replace/move/remove/property."""

    kind: str
    element_id: str | None = None
    property_id: str | None = None


@dataclass(frozen=True)
class SelectionChange:
    element_id: str | None


PageChange = TreeChange | SelectionChange
PageListener = Callable[[PageChange], None]


class Page:
    """A named page with one root element."""

    def __init__(self, root: Element | None = None, name: str = "Untitled") -> None:
        self.name = name
        self._root = root
        self._selected: str | None = None
        self._listeners: list[PageListener] = []

    @classmethod
    def from_serialized(
        cls,
        doc: dict[str, Any] | None,
        pattern_lookup: PatternLookup,
        name: str = "Untitled",
    ) -> Page:
        root = create_from_serialized(doc, pattern_lookup) if doc else None
        return cls(root, name=name)

    @property
    def root(self) -> Element | None:
        return self._root

    @property
    def selected_element_id(self) -> str | None:
        return self._selected

    # -- subscriptions --

    def subscribe(self, listener: PageListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, change: PageChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    # -- lookups --

    def find(self, element_id: str) -> Element | None:
        if self._root is None:
            return None
        return self._root.find(element_id)

    def serialize(self) -> dict[str, Any] | None:
        return self._root.serialize() if self._root is not None else None

    # -- mutations --

    def replace_root(self, root: Element | None) -> None:
        if root is not None:
            root.remove()
        self._root = root
        if self._selected is not None and self.find(self._selected) is None:
            self._selected = None
            self._emit(SelectionChange(None))
        self._emit(TreeChange("replace", root.id if root is not None else None))

    def move(self, element: Element, parent: Element, index: int | None = None) -> None:
        if element is self._root:
            logger.warning("page: cannot move the root element %s", element.id)
            return
        before = (element.parent, element.index())
        element.set_parent(parent, index)
        if (element.parent, element.index()) != before:
            self._emit(TreeChange("move", element.id))

    def remove(self, element: Element) -> None:
        if element is self._root:
            self.replace_root(None)
            return
        element.remove()
        if self._selected is not None and (element.id == self._selected or element.find(self._selected)):
            self.select(None)
        self._emit(TreeChange("remove", element.id))

    def set_property_value(self, element: Element, property_id: str, value: Any) -> None:
        element.set_property_value(property_id, value)
        self._emit(TreeChange("property", element.id, property_id))

    def select(self, element_id: str | None) -> None:
        self._selected = element_id
        self._emit(SelectionChange(element_id))
