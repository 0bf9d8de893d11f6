"""
patternkit Preview — Preview Store

The preview's copy of the session state: current page (serialized element
tree), selected element id and the session's state id. Every setter emits a
StoreChange to explicit subscribers. The store never talks to the network.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StoreChange:
    """`fields` names what changed: page, elementId, stateId."""

    fields: frozenset[str]


StoreListener = Callable[[StoreChange], None]


class PreviewStore:
    def __init__(self) -> None:
        self.page: dict[str, Any] | None = None
        self.element_id: str | None = None
        self.state_id: str | None = None
        self._listeners: list[StoreListener] = []

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, *fields: str) -> None:
        change = StoreChange(frozenset(fields))
        for listener in list(self._listeners):
            listener(change)

    def set_state(self, page: dict[str, Any] | None, element_id: str | None, state_id: str | None = None) -> None:
        """Swap page and selection wholesale."""
        self.page = page
        self.element_id = element_id
        if state_id is not None:
            self.state_id = state_id
        self._emit("page", "elementId", "stateId")

    def set_element_id(self, element_id: str | None) -> None:
        """Always emits, so re-selecting the same element restarts its highlight."""
        self.element_id = element_id
        self._emit("elementId")

    def reset(self) -> None:
        self.page = None
        self.element_id = None
        self.state_id = None
        self._emit("page", "elementId", "stateId")
