"""
patternkit Preview — Exporters

Builds the payloads the preview answers export requests with:

  content_snapshot → content-response {document, location, width, height}
  sketch_page      → sketch-response  {page: <design-tool page document>}

The sketch document follows the page → artboard → group layer structure of
the Sketch file format. Groups are named after the element's display name
(data-sketch-name), or "(<tag>)" when it has none; every group carries a
"background" rectangle.
"""

from __future__ import annotations

import html
from typing import Any

from patternkit.kernel.types import new_id
from patternkit.preview.layout import Bounds, Layout
from patternkit.preview.nodes import RenderNode


def content_snapshot(
    tree: RenderNode | None,
    layout: Layout,
    location: str,
    title: str = "Preview",
) -> dict[str, Any]:
    body = tree.to_html() if tree is not None else ""
    document = (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="UTF-8">\n'
        f"<title>{html.escape(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f'<div id="preview">{body}</div>\n'
        "</body>\n"
        "</html>"
    )
    return {
        "document": document,
        "location": location,
        "width": layout.width,
        "height": layout.height,
    }


def sketch_page(
    tree: RenderNode | None,
    layout: Layout,
    page_name: str,
    artboard_name: str,
) -> dict[str, Any]:
    artboard_frame = Bounds(top=0, left=0, width=layout.width, height=layout.height)
    layers = [_group(tree, layout, artboard_frame)] if tree is not None else []
    artboard = {
        "_class": "artboard",
        "do_objectID": new_id(),
        "name": artboard_name,
        "frame": _frame(artboard_frame, None),
        "hasBackgroundColor": False,
        "layers": layers,
    }
    return {
        "_class": "page",
        "do_objectID": new_id(),
        "name": page_name,
        "frame": _frame(artboard_frame, None),
        "layers": [artboard],
    }


def _group(node: RenderNode, layout: Layout, parent: Bounds) -> dict[str, Any]:
    bounds = layout.get(node.element_id) or parent
    layers: list[dict[str, Any]] = [
        {
            "_class": "rectangle",
            "do_objectID": new_id(),
            "name": "background",
            "frame": _frame(Bounds(0, 0, bounds.width, bounds.height), None),
        }
    ]
    if node.text:
        layers.append(
            {
                "_class": "text",
                "do_objectID": new_id(),
                "name": node.text[:40],
                "frame": _frame(Bounds(0, 0, bounds.width, bounds.height), None),
                "attributedString": {"_class": "attributedString", "string": node.text},
            }
        )
    layers.extend(_group(child, layout, bounds) for child in node.children)

    return {
        "_class": "group",
        "do_objectID": new_id(),
        "name": node.name or f"({node.tag})",
        "frame": _frame(bounds, parent),
        "layers": layers,
    }


def _frame(bounds: Bounds, parent: Bounds | None) -> dict[str, Any]:
    """Sketch frames are relative to the enclosing layer."""
    x = bounds.left - (parent.left if parent else 0)
    y = bounds.top - (parent.top if parent else 0)
    return {"_class": "rect", "x": x, "y": y, "width": bounds.width, "height": bounds.height}
