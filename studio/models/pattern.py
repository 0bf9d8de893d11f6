"""Pattern models: styleguide replacement and listing."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

PropertyType = Literal["boolean", "string", "number", "enum", "event", "asset", "element"]


class PropertyDescriptor(BaseModel):
    """One declared property of a pattern."""

    model_config = {"extra": "forbid"}

    id: str = Field(min_length=1)
    type: PropertyType
    name: str | None = None
    required: bool = False
    default_value: Any = None
    options: list[str | dict[str, str]] | None = None  # enum only


class PatternDescriptor(BaseModel):
    """
    A pattern to register.

    Properties come either from an explicit list or from a TypeScript props
    interface (the pattern's .d.ts); explicit properties win when both are given.
    """

    model_config = {"extra": "forbid"}

    id: str = Field(min_length=1)
    name: str | None = None
    path: str | None = None  # source file, relative to the styleguide
    properties: list[PropertyDescriptor] | None = None
    interface: str | None = None  # TypeScript source containing the props interface
    interface_name: str | None = None

    @model_validator(mode="after")
    def _not_synthetic(self) -> PatternDescriptor:
        if self.id.startswith("synthetic:"):
            raise ValueError("synthetic pattern ids are reserved")
        return self


class ReplacePatternsRequest(BaseModel):
    """What the editor sends to PUT /api/patterns."""

    model_config = {"extra": "forbid"}

    styleguide: str | None = None
    patterns: list[PatternDescriptor] = Field(default_factory=list)


class PatternListResponse(BaseModel):
    styleguide: str | None
    patterns: list[dict[str, Any]]
