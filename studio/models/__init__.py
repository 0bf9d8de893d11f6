"""
Pydantic models for the studio API.

All data shapes defined here. No imports from services or routes.
"""

from studio.models.export import (
    ContentExportResponse,
    ContentResponsePayload,
    SketchExportRequest,
    SketchResponsePayload,
)
from studio.models.pattern import (
    PatternDescriptor,
    PatternListResponse,
    PropertyDescriptor,
    ReplacePatternsRequest,
)
from studio.models.session import (
    MoveElementRequest,
    ReplacePageRequest,
    SelectionRequest,
    SessionStateResponse,
    SetPropertyRequest,
)

__all__ = [
    # Session models
    "ReplacePageRequest",
    "SelectionRequest",
    "SessionStateResponse",
    "SetPropertyRequest",
    "MoveElementRequest",
    # Pattern models
    "PropertyDescriptor",
    "PatternDescriptor",
    "ReplacePatternsRequest",
    "PatternListResponse",
    # Export models
    "ContentResponsePayload",
    "ContentExportResponse",
    "SketchExportRequest",
    "SketchResponsePayload",
]
