"""
WebSocket endpoint for preview synchronization.

Accepts connections at /ws/preview. On connect the preview receives the full
current session state; afterwards it receives every broadcast and may send
element-change (selection) and content/sketch responses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from studio.services.session import session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


@router.websocket("/ws/preview")
async def preview_ws(websocket: WebSocket) -> None:
    """
    Preview synchronization channel.

    Malformed or unknown messages are logged and ignored; the connection
    stays open. On disconnect the channel leaves the session; pending
    requests keep waiting for another preview to answer.
    """
    await websocket.accept()
    connection_id = await session.connect(websocket)
    logger.info("ws: preview connected connection_id=%s", connection_id)

    try:
        while True:
            raw = await websocket.receive_text()
            await session.handle_text(raw, connection_id)
    except WebSocketDisconnect:
        logger.info("ws: preview disconnected connection_id=%s", connection_id)
    finally:
        session.disconnect(connection_id)
