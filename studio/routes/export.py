"""Export routes — content snapshot and Sketch document from a connected preview."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from studio.models.export import ContentExportResponse, SketchExportRequest
from studio.services.exporter import ExportFailed, export_service
from studio.services.session import NoPreviewConnected

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])


@router.post("/content", response_model=ContentExportResponse)
async def export_content() -> ContentExportResponse:
    """
    Rendered document of the current page.

    409 when no preview is connected, 504 when none answers in time,
    502 when the answer is not a valid snapshot.
    """
    try:
        payload = await export_service.export_content()
    except NoPreviewConnected:
        raise HTTPException(status_code=409, detail="No preview connected") from None
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Preview did not answer in time") from None
    except ExportFailed as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return ContentExportResponse(**payload.model_dump())


@router.post("/sketch")
async def export_sketch(req: SketchExportRequest) -> Response:
    """Sketch page document as JSON."""
    try:
        document = await export_service.export_sketch(req.page_name, req.artboard_name)
    except NoPreviewConnected:
        raise HTTPException(status_code=409, detail="No preview connected") from None
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Preview did not answer in time") from None
    except ExportFailed as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    logger.info("export: sketch document for page=%s (%d bytes)", req.page_name, len(document))
    return Response(content=document, media_type="application/json")
