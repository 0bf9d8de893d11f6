"""Session models for the editor-facing HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ReplacePageRequest(BaseModel):
    """What the editor sends to PUT /api/session/page."""

    model_config = {"extra": "forbid"}

    page: dict[str, Any] | None = None  # serialized root element, None clears the page
    name: str = Field(default="Untitled", max_length=200)


class SelectionRequest(BaseModel):
    """What the editor sends to PUT /api/session/selection."""

    model_config = {"extra": "forbid"}

    element_id: str | None = None


class SessionStateResponse(BaseModel):
    """Current session state, as a connecting preview would receive it."""

    state_id: str
    page: dict[str, Any] | None
    element_id: str | None
    connections: int


class SetPropertyRequest(BaseModel):
    """New raw value for one property; the element's pattern coerces it."""

    model_config = {"extra": "forbid"}

    value: Any = None


class MoveElementRequest(BaseModel):
    model_config = {"extra": "forbid"}

    parent_id: str
    index: int | None = None  # None appends; out-of-range values are clamped
