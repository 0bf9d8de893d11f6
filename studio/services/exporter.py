"""
Export service — pulls rendered output back from a connected preview.

Both exports are correlated request/response exchanges through the session.
The session itself never times out; this service bounds the wait with
EXPORT_TIMEOUT_SECONDS and validates the reply.
"""

from __future__ import annotations

import asyncio
import json
import logging

from pydantic import ValidationError

from patternkit.kernel.messages import MessageType
from studio.config import settings
from studio.models.export import ContentResponsePayload, SketchResponsePayload
from studio.services.session import Session, session

logger = logging.getLogger(__name__)


class ExportFailed(Exception):
    """The preview answered with something that is not a valid export."""


class ExportService:
    def __init__(self, session: Session, timeout: float | None = None) -> None:
        self._session = session
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else settings.EXPORT_TIMEOUT_SECONDS

    async def export_content(self) -> ContentResponsePayload:
        """
        Snapshot of the rendered document.

        Raises NoPreviewConnected, asyncio.TimeoutError or ExportFailed.
        """
        reply = await asyncio.wait_for(
            self._session.request(MessageType.CONTENT_REQUEST, {}),
            self.timeout,
        )
        try:
            return ContentResponsePayload.model_validate(reply.payload)
        except ValidationError as e:
            logger.warning("export: invalid content-response %s: %s", reply.id, e)
            raise ExportFailed("invalid content-response") from e

    async def export_sketch(self, page_name: str, artboard_name: str) -> str:
        """Sketch page document as tab-indented JSON."""
        reply = await asyncio.wait_for(
            self._session.request(
                MessageType.SKETCH_REQUEST,
                {"pageName": page_name, "artboardName": artboard_name},
            ),
            self.timeout,
        )
        try:
            payload = SketchResponsePayload.model_validate(reply.payload)
        except ValidationError as e:
            logger.warning("export: invalid sketch-response %s: %s", reply.id, e)
            raise ExportFailed("invalid sketch-response") from e
        return json.dumps(payload.page, indent="\t", ensure_ascii=False)


# Singleton instance
export_service = ExportService(session)
