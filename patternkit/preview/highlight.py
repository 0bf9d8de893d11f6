"""
patternkit Preview — Highlight Coordinator

Reflects the selected element as a one-shot pulse:

  idle ──(rendered element id == selection)──▶ shown ──(timeout)──▶ idle

On timeout the highlight hides and the selection signal in the store is
cleared. Re-selecting while shown restarts the timer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from patternkit.preview.layout import Bounds, Layout
from patternkit.preview.store import PreviewStore

logger = logging.getLogger(__name__)

HIGHLIGHT_DURATION = 0.5  # seconds


class HighlightArea:
    """The shared highlight projection the overlay draws from."""

    def __init__(self) -> None:
        self._bounds: Bounds | None = None
        self.element_id: str | None = None

    @property
    def visible(self) -> bool:
        return self._bounds is not None

    def show(self, bounds: Bounds, element_id: str) -> None:
        self._bounds = bounds
        self.element_id = element_id

    def hide(self) -> None:
        self._bounds = None
        self.element_id = None

    def props(self) -> dict[str, Any]:
        if self._bounds is None:
            return {"top": 0, "left": 0, "width": 0, "height": 0, "opacity": 0}
        b = self._bounds
        return {"top": b.top, "left": b.left, "width": b.width, "height": b.height, "opacity": 1}


class HighlightCoordinator:
    def __init__(
        self,
        store: PreviewStore,
        area: HighlightArea,
        duration: float = HIGHLIGHT_DURATION,
    ) -> None:
        self._store = store
        self._area = area
        self._duration = duration
        self._timer: asyncio.TimerHandle | None = None

    @property
    def state(self) -> str:
        return "shown" if self._timer is not None else "idle"

    def update(self, layout: Layout) -> bool:
        """
        Show the highlight if the current selection is among the rendered boxes.

        Returns True when the highlight was (re)shown.
        """
        element_id = self._store.element_id
        bounds = layout.get(element_id)
        if element_id is None or bounds is None:
            return False

        self._area.show(bounds, element_id)
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self._duration, self._expire)
        logger.debug("highlight: shown %s at %s", element_id, bounds)
        return True

    def _expire(self) -> None:
        self._timer = None
        self._area.hide()
        if self._store.element_id is not None:
            self._store.set_element_id(None)

    def cancel(self) -> None:
        """Drop any pending timer and hide immediately, without touching the store."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._area.hide()
