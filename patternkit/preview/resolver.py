"""
patternkit Preview — Component Resolver

Maps the patterns a page references to loaded components, fetching missing
bundles on demand:

  1. derive the required pattern set (default-slot children, depth first,
     synthetic patterns excluded)
  2. for each pattern neither loaded nor in flight: mark in flight, fetch
     /scripts/<safe name>.js
  3. on success: move to loaded, register the component, notify
  4. on failure: stay in flight for the rest of the session and log

While anything is in flight the renderer produces nothing. The loaded and
in-flight sets belong to this class; nothing else mutates them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from patternkit.kernel.element import split_children
from patternkit.kernel.patterns import safe_pattern, script_path
from patternkit.kernel.types import is_synthetic
from patternkit.preview.registry import BundleComponent, Component, ComponentRegistry

logger = logging.getLogger(__name__)

ComponentFactory = Callable[[str, str], Component]
LoadedCallback = Callable[[str], None]


class ScriptLoader(Protocol):
    async def load(self, path: str) -> str:
        """Fetch the bundle at `path` ('/scripts/<name>.js'). Raise on failure."""
        ...


class HttpScriptLoader:
    """Fetches bundles from the studio's delivery endpoint."""

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None, timeout: float = 60.0):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def load(self, path: str) -> str:
        res = await self._client.get(f"{self.base_url}{path}")
        res.raise_for_status()
        return res.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def required_patterns(tree: dict[str, Any] | None) -> list[str]:
    """
    Every non-synthetic pattern id referenced in the tree's default slots.

    Depth-first, first-seen order, no duplicates.
    """
    found: dict[str, None] = {}
    if tree is not None:
        _collect(tree, found)
    return list(found)


def _collect(node: dict[str, Any], found: dict[str, None]) -> None:
    pattern_id = node.get("pattern")
    if isinstance(pattern_id, str) and pattern_id and not is_synthetic(pattern_id):
        found.setdefault(pattern_id, None)
    default, _ = split_children(node.get("children"))
    for child in default:
        if isinstance(child, dict):
            _collect(child, found)


class ComponentResolver:
    def __init__(
        self,
        registry: ComponentRegistry,
        loader: ScriptLoader,
        on_loaded: LoadedCallback | None = None,
        component_factory: ComponentFactory = BundleComponent,
    ) -> None:
        self._registry = registry
        self._loader = loader
        self._on_loaded = on_loaded
        self._factory = component_factory
        self._loaded: set[str] = set()
        self._in_flight: set[str] = set()
        self._generation = 0
        # Strong refs so running loads are not garbage collected
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def loaded(self) -> frozenset[str]:
        return frozenset(self._loaded)

    @property
    def in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    @property
    def pending(self) -> bool:
        return bool(self._in_flight)

    def schedule(self, tree: dict[str, Any] | None) -> list[str]:
        """
        Start loads for every required pattern not yet loaded or in flight.

        Must be called from a running event loop. Returns the pattern ids
        requested by this call.
        """
        requested = []
        for pattern_id in required_patterns(tree):
            if pattern_id in self._loaded or pattern_id in self._in_flight:
                continue
            self._in_flight.add(pattern_id)
            requested.append(pattern_id)
            task = asyncio.get_running_loop().create_task(self._load(pattern_id, self._generation))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        if requested:
            logger.info("resolver: requested %d bundles: %s", len(requested), ", ".join(requested))
        return requested

    def reset(self) -> None:
        """Forget every loaded and in-flight pattern. Late completions are ignored."""
        logger.info(
            "resolver: reset (loaded=%d in_flight=%d)",
            len(self._loaded),
            len(self._in_flight),
        )
        self._generation += 1
        self._loaded.clear()
        self._in_flight.clear()
        self._registry.clear()

    async def _load(self, pattern_id: str, generation: int) -> None:
        path = script_path(pattern_id)
        try:
            source = await self._loader.load(path)
        except Exception as e:
            # Fail soft: the pattern stays in flight, the rest of the preview lives on
            logger.error("resolver: failed to load %s from %s: %s", pattern_id, path, e)
            return

        if generation != self._generation:
            logger.debug("resolver: dropping stale bundle for %s", pattern_id)
            return

        safe_name = safe_pattern(pattern_id)
        self._registry.register(safe_name, self._factory(safe_name, source))
        self._in_flight.discard(pattern_id)
        self._loaded.add(pattern_id)
        logger.info("resolver: loaded %s (%d in flight)", pattern_id, len(self._in_flight))

        if self._on_loaded is not None:
            self._on_loaded(pattern_id)

    async def wait_idle(self) -> None:
        """Wait until every load started so far has finished (success or failure)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
