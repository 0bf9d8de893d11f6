"""
patternkit Preview — Renderer

Turns the store's page (serialized element tree) plus loaded components into
a RenderNode tree.

- no page, or any pattern load in flight → no output (None)
- synthetic patterns render through built-in components
- unknown or unloaded patterns render as pass-through containers
- named slots are rendered and handed to the component as props
"""

from __future__ import annotations

import logging
from typing import Any

from patternkit.kernel.element import is_serialized_element, split_children
from patternkit.kernel.patterns import safe_pattern
from patternkit.kernel.types import is_synthetic, synthetic_kind
from patternkit.preview.nodes import RenderNode
from patternkit.preview.registry import Component, ComponentRegistry
from patternkit.preview.resolver import ComponentResolver
from patternkit.preview.store import PreviewStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Built-in components
# ---------------------------------------------------------------------------


def _text(props: dict[str, Any], children: list[RenderNode]) -> RenderNode:
    text = props.get("text")
    return RenderNode(
        component="synthetic:text",
        tag="span",
        text="" if text is None else str(text),
        children=list(children),
    )


def _asset(props: dict[str, Any], children: list[RenderNode]) -> RenderNode:
    src = props.get("src")
    return RenderNode(
        component="synthetic:asset",
        tag="img",
        props={"src": src if isinstance(src, str) else ""},
    )


SYNTHETIC_COMPONENTS: dict[str, Component] = {
    "text": _text,
    "asset": _asset,
}


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class PreviewRenderer:
    def __init__(self, store: PreviewStore, resolver: ComponentResolver, registry: ComponentRegistry) -> None:
        self._store = store
        self._resolver = resolver
        self._registry = registry

    def render(self) -> RenderNode | None:
        page = self._store.page
        if page is None:
            return None
        if self._resolver.pending:
            logger.debug("preview: render suppressed, %d loads in flight", len(self._resolver.in_flight))
            return None
        return self.render_node(page)

    def render_node(self, node: dict[str, Any]) -> RenderNode:
        pattern_id = node.get("pattern") or ""
        element_id = node.get("id")
        name = node.get("name") or ""

        props = {}
        properties = node.get("properties")
        if isinstance(properties, dict):
            props = {key: self._render_value(value) for key, value in properties.items()}

        default, named = split_children(node.get("children"))
        children = [self.render_node(c) for c in default if isinstance(c, dict)]
        for slot, items in named.items():
            props[slot] = [self.render_node(c) for c in items if isinstance(c, dict)]

        component = self._component_for(pattern_id)
        if component is None:
            # Unknown or not loaded: a transparent container of its children
            rendered = RenderNode(component="", children=children)
        else:
            rendered = component(props, children)

        rendered.element_id = element_id
        rendered.name = name
        return rendered

    def _component_for(self, pattern_id: str) -> Component | None:
        if not pattern_id:
            return None
        if is_synthetic(pattern_id):
            return SYNTHETIC_COMPONENTS.get(synthetic_kind(pattern_id))
        return self._registry.resolve(safe_pattern(pattern_id))

    def _render_value(self, value: Any) -> Any:
        if is_serialized_element(value):
            return self.render_node(value)
        return value
