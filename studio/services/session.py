"""
Preview session — the authoritative session state and its broadcast channel.

The session owns exactly one SessionState {stateId, page, selectedElementId}.
Editor-side changes update it in place and are broadcast to every connected
preview. A preview that connects (or reconnects) first receives the full
current state, never a diff.

Request/response exchanges (content, sketch) are correlated by envelope id.
There is no built-in timeout; callers that need one wrap `request` in
asyncio.wait_for.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from patternkit.kernel.messages import (
    RESPONSE_TYPES,
    Envelope,
    MessageType,
    make_element_change,
    make_reload,
    make_state,
    parse_envelope,
)
from patternkit.kernel.types import new_id

logger = logging.getLogger(__name__)

SelectionListener = Callable[[str | None], None]


class NoPreviewConnected(Exception):
    """A request needs a preview to answer but none is connected."""


class Channel(Protocol):
    async def send_text(self, data: str) -> None: ...


@dataclass
class SessionState:
    state_id: str = field(default_factory=new_id)
    page: dict[str, Any] | None = None
    selected_element_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stateId": self.state_id,
            "page": self.page,
            "elementId": self.selected_element_id,
        }


class Session:
    def __init__(self) -> None:
        self.state = SessionState()
        self._channels: dict[str, Channel] = {}
        # envelope id → (expected response type, future)
        self._pending: dict[str, tuple[str, asyncio.Future[Envelope]]] = {}
        self._selection_listeners: list[SelectionListener] = []

    @property
    def connection_count(self) -> int:
        return len(self._channels)

    def reset(self) -> None:
        """Fresh state, no connections, pending requests abandoned. Used by tests."""
        self.close()
        self.state = SessionState()

    def close(self) -> None:
        """Drop every connection and abandon pending requests. State is kept."""
        for _, future in self._pending.values():
            if not future.done():
                future.cancel()
        self._pending.clear()
        self._channels.clear()

    # -- connections --

    async def connect(self, channel: Channel) -> str:
        """Register a preview channel and send it the current state snapshot."""
        connection_id = new_id()
        self._channels[connection_id] = channel
        try:
            await channel.send_text(self._state_envelope().to_json())
        except Exception:
            self._channels.pop(connection_id, None)
            raise
        logger.info("session: preview connected %s (%d total)", connection_id, len(self._channels))
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        if self._channels.pop(connection_id, None) is not None:
            logger.info("session: preview disconnected %s (%d left)", connection_id, len(self._channels))

    async def broadcast(self, envelope: Envelope, exclude: str | None = None) -> int:
        """Send to every connected preview in order. Returns how many received it."""
        text = envelope.to_json()
        delivered = 0
        for connection_id, channel in list(self._channels.items()):
            if connection_id == exclude:
                continue
            try:
                await channel.send_text(text)
                delivered += 1
            except Exception as e:
                # A dead socket must not stop the broadcast; reconnect resyncs it
                logger.warning("session: send to %s failed, dropping: %s", connection_id, e)
                self.disconnect(connection_id)
        return delivered

    # -- state transitions --

    def _state_envelope(self) -> Envelope:
        return make_state(self.state.page, self.state.selected_element_id, self.state.state_id)

    async def set_page(self, page: dict[str, Any] | None) -> None:
        self.state.page = page
        await self.broadcast(self._state_envelope())

    async def select(self, element_id: str | None) -> None:
        self.state.selected_element_id = element_id
        await self.broadcast(make_element_change(element_id))

    async def reload(self) -> str:
        """New stateId: previews discard all component bundles and resync."""
        self.state.state_id = new_id()
        logger.info("session: reload, new state id %s", self.state.state_id)
        await self.broadcast(make_reload())
        await self.broadcast(self._state_envelope())
        return self.state.state_id

    def subscribe_selection(self, listener: SelectionListener) -> Callable[[], None]:
        """Called when a preview reports a selection."""
        self._selection_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._selection_listeners:
                self._selection_listeners.remove(listener)

        return unsubscribe

    # -- request / response --

    async def request(self, msg_type: MessageType | str, payload: Any = None) -> Envelope:
        """Broadcast a request and wait for the first matching response."""
        if not self._channels:
            raise NoPreviewConnected(str(msg_type))

        envelope = Envelope(msg_type, payload if payload is not None else {})
        expected = RESPONSE_TYPES.get(envelope.type)
        if expected is None:
            raise ValueError(f"{envelope.type!r} is not a request type")

        future: asyncio.Future[Envelope] = asyncio.get_running_loop().create_future()
        self._pending[envelope.id] = (expected, future)
        try:
            await self.broadcast(envelope)
            return await future
        finally:
            self._pending.pop(envelope.id, None)

    # -- inbound --

    async def handle_text(self, raw: str, connection_id: str | None = None) -> None:
        envelope = parse_envelope(raw)
        if envelope is None:
            logger.debug("session: dropping malformed message from %s", connection_id)
            return

        msg_type = envelope.type

        if msg_type in (MessageType.CONTENT_RESPONSE, MessageType.SKETCH_RESPONSE):
            pending = self._pending.get(envelope.id)
            if pending is None:
                logger.debug("session: no pending request for %s %s", msg_type, envelope.id)
                return
            expected, future = pending
            if msg_type != expected:
                logger.warning("session: %s answered with %s, ignoring", envelope.id, msg_type)
                return
            if not future.done():
                future.set_result(envelope)
            return

        if msg_type == MessageType.ELEMENT_CHANGE:
            payload = envelope.payload
            element_id = payload if isinstance(payload, str) and payload else None
            self.state.selected_element_id = element_id
            for listener in list(self._selection_listeners):
                listener(element_id)
            await self.broadcast(make_element_change(element_id), exclude=connection_id)
            return

        if envelope.known:
            logger.warning("session: %s is not accepted from previews, ignoring", msg_type)
        else:
            logger.warning("session: unknown message type %r, ignoring", msg_type)


# Singleton instance
session = Session()
