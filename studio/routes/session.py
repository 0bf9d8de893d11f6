"""Session routes — the editor's view of, and edits to, the shared page."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from studio.models.session import (
    MoveElementRequest,
    ReplacePageRequest,
    SelectionRequest,
    SessionStateResponse,
    SetPropertyRequest,
)
from studio.services.editor import ElementNotFound, editor
from studio.services.session import session

router = APIRouter(prefix="/api/session", tags=["session"])


def _state() -> SessionStateResponse:
    return SessionStateResponse(
        state_id=session.state.state_id,
        page=session.state.page,
        element_id=session.state.selected_element_id,
        connections=session.connection_count,
    )


@router.get("", response_model=SessionStateResponse)
async def get_session() -> SessionStateResponse:
    """Current session state."""
    return _state()


@router.put("/page", response_model=SessionStateResponse)
async def replace_page(req: ReplacePageRequest) -> SessionStateResponse:
    """Replace the page and broadcast it to every preview."""
    await editor.replace_page(req.page, req.name)
    return _state()


@router.put("/selection", response_model=SessionStateResponse)
async def set_selection(req: SelectionRequest) -> SessionStateResponse:
    try:
        await editor.select(req.element_id)
    except ElementNotFound:
        raise HTTPException(status_code=404, detail="Element not found") from None
    return _state()


@router.post("/reload", response_model=SessionStateResponse)
async def reload() -> SessionStateResponse:
    """New stateId; previews drop all component bundles and resync."""
    await session.reload()
    return _state()


@router.put("/elements/{element_id}/properties/{property_id}", response_model=SessionStateResponse)
async def set_property(element_id: str, property_id: str, req: SetPropertyRequest) -> SessionStateResponse:
    try:
        await editor.set_property(element_id, property_id, req.value)
    except ElementNotFound:
        raise HTTPException(status_code=404, detail="Element not found") from None
    return _state()


@router.post("/elements/{element_id}/move", response_model=SessionStateResponse)
async def move_element(element_id: str, req: MoveElementRequest) -> SessionStateResponse:
    """Reparent an element. Out-of-range indices are clamped; cycles are refused."""
    try:
        await editor.move(element_id, req.parent_id, req.index)
    except ElementNotFound:
        raise HTTPException(status_code=404, detail="Element not found") from None
    return _state()


@router.delete("/elements/{element_id}", response_model=SessionStateResponse)
async def remove_element(element_id: str) -> SessionStateResponse:
    try:
        await editor.remove(element_id)
    except ElementNotFound:
        raise HTTPException(status_code=404, detail="Element not found") from None
    return _state()
