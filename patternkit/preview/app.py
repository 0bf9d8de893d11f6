"""
patternkit Preview — Preview Application

Composition root of the preview context. Wires the store, component
resolver, renderer, layout and highlight coordinator together and speaks the
envelope protocol over one channel to the studio session.

Protocol:
  Session → Preview:  state | reload | element-change | content-request | sketch-request
  Preview → Session:  element-change | content-response | sketch-response

Every store change triggers a refresh; a refresh that yields a tree (no loads
in flight, a page present) is laid out, handed to the render sink and checked
against the current selection for highlighting.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from patternkit.kernel.messages import (
    Envelope,
    MessageType,
    make_content_response,
    make_element_change,
    make_sketch_response,
    parse_envelope,
)
from patternkit.preview.exporters import content_snapshot, sketch_page
from patternkit.preview.highlight import HIGHLIGHT_DURATION, HighlightArea, HighlightCoordinator
from patternkit.preview.layout import DEFAULT_VIEWPORT_WIDTH, Layout, compute_layout
from patternkit.preview.nodes import RenderNode
from patternkit.preview.registry import ComponentRegistry
from patternkit.preview.renderer import PreviewRenderer
from patternkit.preview.resolver import ComponentResolver, ScriptLoader
from patternkit.preview.store import PreviewStore, StoreChange

logger = logging.getLogger(__name__)

RenderSink = Callable[[RenderNode], None]
Send = Callable[[str], Awaitable[None]]


class ChannelClosed(Exception):
    """Raised by a channel's receive_text once the connection is gone."""


class Channel(Protocol):
    async def receive_text(self) -> str: ...

    async def send_text(self, data: str) -> None: ...


@dataclass
class PreviewConfig:
    server_url: str = "http://localhost:1880"
    viewport_width: float = DEFAULT_VIEWPORT_WIDTH
    highlight_duration: float = HIGHLIGHT_DURATION

    @classmethod
    def from_env(cls) -> PreviewConfig:
        return cls(
            server_url=os.environ.get("PATTERNKIT_SERVER_URL", cls.server_url),
            viewport_width=float(os.environ.get("PATTERNKIT_VIEWPORT_WIDTH", cls.viewport_width)),
            highlight_duration=float(os.environ.get("PATTERNKIT_HIGHLIGHT_DURATION", cls.highlight_duration)),
        )

    @property
    def location(self) -> str:
        return f"{self.server_url.rstrip('/')}/"


class PreviewApp:
    def __init__(
        self,
        loader: ScriptLoader,
        config: PreviewConfig | None = None,
        sink: RenderSink | None = None,
    ) -> None:
        self.config = config or PreviewConfig()
        self.store = PreviewStore()
        self.registry = ComponentRegistry()
        self.highlight = HighlightArea()
        self.resolver = ComponentResolver(self.registry, loader, on_loaded=self._on_loaded)
        self.renderer = PreviewRenderer(self.store, self.resolver, self.registry)
        self.coordinator = HighlightCoordinator(self.store, self.highlight, self.config.highlight_duration)
        self.tree: RenderNode | None = None
        self.layout: Layout = compute_layout(None, self.config.viewport_width)
        self._sink = sink
        self._send: Send | None = None
        self._unsubscribe = self.store.subscribe(self._on_store_change)

    # -- rendering --

    def _on_store_change(self, change: StoreChange) -> None:
        self.refresh()

    def _on_loaded(self, pattern_id: str) -> None:
        self.refresh()

    def refresh(self) -> RenderNode | None:
        tree = self.renderer.render()
        if tree is None:
            # Nothing on screen: exports and highlight must not see the last render
            self.tree = None
            self.layout = compute_layout(None, self.config.viewport_width)
            self.coordinator.cancel()
            return None
        self.tree = tree
        self.layout = compute_layout(tree, self.config.viewport_width)
        if self._sink is not None:
            self._sink(tree)
        self.coordinator.update(self.layout)
        return tree

    # -- inbound --

    async def handle_text(self, raw: str) -> None:
        envelope = parse_envelope(raw)
        if envelope is None:
            logger.debug("preview: dropping malformed message %r", raw[:200])
            return
        await self.handle(envelope)

    async def handle(self, envelope: Envelope) -> None:
        msg_type = envelope.type
        payload = envelope.payload

        if msg_type == MessageType.STATE:
            self._apply_state(payload if isinstance(payload, dict) else {})
        elif msg_type == MessageType.RELOAD:
            logger.info("preview: reload requested, discarding all components")
            self.coordinator.cancel()
            self.resolver.reset()
            self.tree = None
            self.store.reset()
        elif msg_type == MessageType.ELEMENT_CHANGE:
            self.store.set_element_id(payload if isinstance(payload, str) and payload else None)
        elif msg_type == MessageType.CONTENT_REQUEST:
            await self._respond_content(envelope.id)
        elif msg_type == MessageType.SKETCH_REQUEST:
            await self._respond_sketch(envelope.id, payload if isinstance(payload, dict) else {})
        else:
            logger.warning("preview: ignoring message type %r", msg_type)

    def _apply_state(self, payload: dict[str, Any]) -> None:
        state_id = payload.get("stateId")
        if state_id is not None and self.store.state_id is not None and state_id != self.store.state_id:
            logger.info("preview: state id changed %s → %s, discarding components", self.store.state_id, state_id)
            self.resolver.reset()

        page = payload.get("page")
        page = page if isinstance(page, dict) else None
        element_id = payload.get("elementId")

        # Mark loads in flight before the store notifies, so no partial render slips out
        self.resolver.schedule(page)
        self.store.set_state(page, element_id if isinstance(element_id, str) else None, state_id)

    # -- outbound --

    async def _respond_content(self, envelope_id: str) -> None:
        snapshot = content_snapshot(self.tree, self.layout, self.config.location)
        await self._emit(make_content_response(envelope_id, **snapshot))

    async def _respond_sketch(self, envelope_id: str, payload: dict[str, Any]) -> None:
        page = sketch_page(
            self.tree,
            self.layout,
            page_name=str(payload.get("pageName") or "Page"),
            artboard_name=str(payload.get("artboardName") or "Artboard"),
        )
        await self._emit(make_sketch_response(envelope_id, page))

    async def select(self, element_id: str | None) -> None:
        """A click in the preview: select locally and tell the session."""
        self.store.set_element_id(element_id)
        await self._emit(make_element_change(element_id))

    async def _emit(self, envelope: Envelope) -> None:
        if self._send is None:
            logger.warning("preview: not connected, dropping %s", envelope.type)
            return
        await self._send(envelope.to_json())

    # -- connection --

    async def run(self, channel: Channel) -> None:
        """Serve one connection until it closes, then clean up local subscriptions."""
        self._send = channel.send_text
        logger.info("preview: connected")
        try:
            while True:
                raw = await channel.receive_text()
                await self.handle_text(raw)
        except ChannelClosed:
            logger.info("preview: channel closed")
        finally:
            self._send = None
            self.coordinator.cancel()

    def close(self) -> None:
        self.coordinator.cancel()
        self._unsubscribe()
