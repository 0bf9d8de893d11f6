"""Export models: payloads previews answer with, and the HTTP shapes around them."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ContentResponsePayload(BaseModel):
    """Payload of a content-response envelope."""

    document: str
    location: str
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class SketchResponsePayload(BaseModel):
    """Payload of a sketch-response envelope."""

    page: dict[str, Any]


class ContentExportResponse(BaseModel):
    """What POST /api/export/content returns."""

    document: str
    location: str
    width: float
    height: float


class SketchExportRequest(BaseModel):
    """What the editor sends to POST /api/export/sketch."""

    model_config = {"extra": "forbid"}

    page_name: str = Field(default="Page", min_length=1, max_length=200)
    artboard_name: str = Field(default="Artboard", min_length=1, max_length=200)
