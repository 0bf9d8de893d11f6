"""Script delivery — GET /scripts/{safe_name}.js serves a pattern's component bundle."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from patternkit.kernel.patterns import PatternNotFound
from studio.services.compiler import CompileError, compiler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scripts"])


@router.get("/scripts/{safe_name}.js")
async def serve_script(safe_name: str) -> Response:
    """
    Serve the bundle for the pattern whose safe script name is `safe_name`.

    Waits for a compile already in progress for the same pattern. Returns 404
    for an unknown pattern and 500 with compiler diagnostics when the bundle
    cannot be built.
    """
    try:
        bundle = await compiler.compile(safe_name)
    except PatternNotFound:
        raise HTTPException(status_code=404, detail=f"No pattern for script {safe_name}") from None
    except CompileError as e:
        logger.warning("scripts: compile of %s failed: %s", safe_name, e.message)
        raise HTTPException(
            status_code=500,
            detail={"error": e.message, "diagnostics": e.diagnostics},
        ) from e

    return Response(
        content=bundle,
        media_type="application/javascript",
        headers={"Cache-Control": "no-cache"},
    )
