"""
patternkit Preview — Layout

A deterministic stacking layout for the render tree. It does not try to be
CSS: it only gives every rendered element a box so highlights and content
exports have coordinates to report.

Children stack vertically inside their parent, inset by PADDING on every
side. Leaves are ROW_HEIGHT tall. Pass-through containers take no padding.
"""

from __future__ import annotations

from dataclasses import dataclass

from patternkit.preview.nodes import RenderNode

ROW_HEIGHT = 24
PADDING = 8
DEFAULT_VIEWPORT_WIDTH = 1024


@dataclass(frozen=True)
class Bounds:
    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width


@dataclass
class Layout:
    width: float
    height: float
    boxes: dict[str, Bounds]

    def get(self, element_id: str | None) -> Bounds | None:
        if element_id is None:
            return None
        return self.boxes.get(element_id)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self.boxes


def compute_layout(root: RenderNode | None, viewport_width: float = DEFAULT_VIEWPORT_WIDTH) -> Layout:
    boxes: dict[str, Bounds] = {}
    if root is None:
        return Layout(width=viewport_width, height=0, boxes=boxes)
    height = _place(root, 0, 0, viewport_width, boxes)
    return Layout(width=viewport_width, height=height, boxes=boxes)


def _place(node: RenderNode, top: float, left: float, width: float, boxes: dict[str, Bounds]) -> float:
    """Lay out `node` at (top, left) with the given width; return its height."""
    if not node.children:
        height: float = ROW_HEIGHT
    else:
        inset = 0 if node.component == "" else PADDING
        cursor = top + inset
        inner_width = max(width - 2 * inset, 0)
        for child in node.children:
            cursor += _place(child, cursor, left + inset, inner_width, boxes)
        height = cursor - top + inset

    if node.element_id and node.element_id not in boxes:
        boxes[node.element_id] = Bounds(top=top, left=left, width=width, height=height)
    return height
