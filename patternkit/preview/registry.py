"""
patternkit Preview — Component Registry

Explicit process-wide lookup of loaded components, keyed by the pattern's
safe script name. Populated only by the ComponentResolver once a bundle has
loaded; queried only by the renderer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from patternkit.preview.nodes import RenderNode

logger = logging.getLogger(__name__)

Component = Callable[[dict[str, Any], list[RenderNode]], RenderNode]


class ComponentRegistry:
    def __init__(self) -> None:
        self._components: dict[str, Component] = {}

    def register(self, safe_name: str, component: Component) -> None:
        if safe_name in self._components:
            logger.debug("registry: replacing component %s", safe_name)
        self._components[safe_name] = component

    def resolve(self, safe_name: str) -> Component | None:
        return self._components.get(safe_name)

    def clear(self) -> None:
        self._components.clear()

    def __contains__(self, safe_name: object) -> bool:
        return safe_name in self._components

    def __len__(self) -> int:
        return len(self._components)


class BundleComponent:
    """
    A component backed by a delivered script bundle.

    The preview does not execute the bundle; it records it and renders an
    element tagged with the component so exports and highlights stay faithful
    to the document structure.
    """

    def __init__(self, safe_name: str, source: str) -> None:
        self.safe_name = safe_name
        self.source = source

    def __call__(self, props: dict[str, Any], children: list[RenderNode]) -> RenderNode:
        return RenderNode(component=self.safe_name, props=dict(props), children=list(children))

    def __repr__(self) -> str:
        return f"BundleComponent({self.safe_name!r}, {len(self.source)} bytes)"

