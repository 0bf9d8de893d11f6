"""Pattern routes — list the registry, replace the styleguide."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from studio.models.pattern import PatternListResponse, ReplacePatternsRequest
from studio.services.compiler import compiler
from studio.services.editor import editor
from studio.services.patterns import pattern_registry, replace_styleguide
from studio.services.session import session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/patterns", tags=["patterns"])


def _listing() -> PatternListResponse:
    return PatternListResponse(
        styleguide=pattern_registry.styleguide,
        patterns=[p.describe() for p in pattern_registry],
    )


@router.get("", response_model=PatternListResponse)
async def list_patterns() -> PatternListResponse:
    """Every registered pattern, synthetics included."""
    return _listing()


@router.put("", response_model=PatternListResponse)
async def replace_patterns(req: ReplacePatternsRequest) -> PatternListResponse:
    """
    Replace the styleguide and its patterns.

    Cached bundles are dropped, the current page is re-resolved against the
    new patterns and every preview is told to reload.
    """
    try:
        replace_styleguide(pattern_registry, req.styleguide, req.patterns)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    compiler.invalidate()
    editor.rebuild()
    await session.reload()
    return _listing()
