"""
patternkit Preview — Render Nodes

The visual tree the preview produces from the page. Components return
RenderNodes; the renderer stamps each with the element id and display name so
highlight, layout and exporters can find it again.
"""

from __future__ import annotations

import html
import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# Elements with no closing tag
_VOID_TAGS = {"img", "br", "hr", "input", "meta", "link"}


@dataclass
class RenderNode:
    component: str  # registered component id, "" for pass-through containers
    tag: str = "div"
    element_id: str | None = None
    name: str = ""
    props: dict[str, Any] = field(default_factory=dict)
    children: list[RenderNode] = field(default_factory=list)
    text: str | None = None

    def walk(self) -> Iterator[RenderNode]:
        yield self
        for child in self.children:
            yield from child.walk()
        for value in self.props.values():
            for nested in _nested_nodes(value):
                yield from nested.walk()

    def to_html(self) -> str:
        attrs = []
        if self.name:
            attrs.append(f'data-sketch-name="{html.escape(self.name)}"')
        if self.element_id:
            attrs.append(f'data-element-id="{html.escape(self.element_id)}"')
        if self.component:
            attrs.append(f'data-component="{html.escape(self.component)}"')
        for key, value in self.props.items():
            attr = _attribute(key, value)
            if attr:
                attrs.append(attr)
        opening = f"<{self.tag}{' ' if attrs else ''}{' '.join(attrs)}>"

        if self.tag in _VOID_TAGS:
            return opening

        inner = html.escape(self.text) if self.text is not None else ""
        inner += "".join(child.to_html() for child in self.children)
        return f"{opening}{inner}</{self.tag}>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "elementId": self.element_id,
            "name": self.name,
            "props": {k: _prop_to_json(v) for k, v in self.props.items()},
            "children": [c.to_dict() for c in self.children],
            "text": self.text,
        }


def _nested_nodes(value: Any) -> list[RenderNode]:
    if isinstance(value, RenderNode):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, RenderNode)]
    return []


def _prop_to_json(value: Any) -> Any:
    if isinstance(value, RenderNode):
        return value.to_dict()
    if isinstance(value, list):
        return [_prop_to_json(v) for v in value]
    if callable(value):
        return None
    return value


def _attribute(key: str, value: Any) -> str | None:
    """Scalar props become data attributes; nested nodes and handlers are skipped."""
    if value is None or callable(value) or _nested_nodes(value):
        return None
    if key == "src" and isinstance(value, str):
        return f'src="{html.escape(value)}"'
    if isinstance(value, bool):
        return f'data-prop-{html.escape(key)}="{"true" if value else "false"}"'
    if isinstance(value, str | int | float):
        return f'data-prop-{html.escape(key)}="{html.escape(str(value))}"'
    return f'data-prop-{html.escape(key)}="{html.escape(json.dumps(value, default=str))}"'
