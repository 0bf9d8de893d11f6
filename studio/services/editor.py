"""
Editor service — editor-side page document kept in sync with the session.

Holds the Page being edited. Tree mutations go through the Page (which emits
TreeChange events); this service collects them and flushes the serialized
page to the session, which broadcasts a full `state` to every preview.
Selection is forwarded as `element-change` without resending the page.
"""

from __future__ import annotations

import logging
from typing import Any

from patternkit.kernel.element import Element, create_from_serialized, is_serialized_element
from patternkit.kernel.page import Page, PageChange, TreeChange
from patternkit.kernel.patterns import PatternRegistry
from studio.services.patterns import pattern_registry
from studio.services.session import Session, session

logger = logging.getLogger(__name__)


class ElementNotFound(Exception):
    """No element with the given id on the current page."""


class EditorService:
    def __init__(self, session: Session, registry: PatternRegistry) -> None:
        self._session = session
        self._registry = registry
        self._dirty = False
        self._unsubscribe_page = lambda: None
        self.page = self._bind(Page())
        self._unsubscribe_selection = self._session.subscribe_selection(self._on_preview_selection)

    def _bind(self, page: Page) -> Page:
        self._unsubscribe_page()
        self._unsubscribe_page = page.subscribe(self._on_page_change)
        return page

    def _on_page_change(self, change: PageChange) -> None:
        if isinstance(change, TreeChange):
            self._dirty = True

    def _on_preview_selection(self, element_id: str | None) -> None:
        if element_id is not None and self.page.find(element_id) is None:
            logger.debug("editor: preview selected unknown element %s", element_id)
        self.page.select(element_id)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def reset(self) -> None:
        """Empty page, reattached to the session. Used by tests."""
        self.page = self._bind(Page())
        self._dirty = False
        self._unsubscribe_selection()
        self._unsubscribe_selection = self._session.subscribe_selection(self._on_preview_selection)

    async def flush(self) -> bool:
        """Push the page to the session if the tree changed. Returns whether it did."""
        if not self._dirty:
            return False
        self._dirty = False
        await self._session.set_page(self.page.serialize())
        return True

    # -- operations --

    async def replace_page(self, doc: dict[str, Any] | None, name: str = "Untitled") -> Page:
        page = Page.from_serialized(doc, self._registry.get, name=name)
        self.page = self._bind(page)
        self._dirty = True
        await self.flush()
        if self._session.state.selected_element_id is not None and page.find(
            self._session.state.selected_element_id
        ) is None:
            await self._session.select(None)
        return page

    def rebuild(self) -> None:
        """Re-resolve the current page against the registry after a styleguide change."""
        selected = self.page.selected_element_id
        page = Page.from_serialized(self.page.serialize(), self._registry.get, name=self.page.name)
        self.page = self._bind(page)
        if selected is not None and page.find(selected) is not None:
            page.select(selected)
        self._session.state.page = page.serialize()

    async def select(self, element_id: str | None) -> None:
        if element_id is not None:
            self._require(element_id)
        self.page.select(element_id)
        await self._session.select(element_id)

    async def set_property(self, element_id: str, property_id: str, value: Any) -> Element:
        element = self._require(element_id)
        if is_serialized_element(value):
            value = create_from_serialized(value, self._registry.get)
        self.page.set_property_value(element, property_id, value)
        await self.flush()
        return element

    async def move(self, element_id: str, parent_id: str, index: int | None = None) -> Element:
        element = self._require(element_id)
        parent = self._require(parent_id)
        self.page.move(element, parent, index)
        await self.flush()
        return element

    async def remove(self, element_id: str) -> None:
        element = self._require(element_id)
        was_selected = self.page.selected_element_id
        self.page.remove(element)
        await self.flush()
        if was_selected is not None and self.page.selected_element_id is None:
            await self._session.select(None)

    def _require(self, element_id: str) -> Element:
        element = self.page.find(element_id)
        if element is None:
            raise ElementNotFound(element_id)
        return element


# Singleton instance
editor = EditorService(session, pattern_registry)
