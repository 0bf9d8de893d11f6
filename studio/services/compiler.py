"""
Bundle compiler — turns a registered pattern into a loadable script.

GET /scripts/{safe}.js asks the compiler for the bundle of one pattern. The
bundle registers the pattern's implementation under its safe script name:

  window.components["components-button"] = <module exports>

Compiles are cached until the styleguide changes. A per-pattern lock makes a
request that arrives while the same pattern is compiling wait for that
compile rather than start a second one.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from patternkit.kernel.patterns import PatternNotFound, PatternRegistry, safe_pattern
from studio.services.patterns import pattern_registry

logger = logging.getLogger(__name__)


class CompileError(Exception):
    """A pattern's bundle could not be produced."""

    def __init__(self, message: str, diagnostics: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.diagnostics = diagnostics or []


class BundleCompiler:
    """Contract: produce the bundle source for a safe script name."""

    async def compile(self, safe_name: str) -> str:
        raise NotImplementedError

    def invalidate(self) -> None:
        """Forget cached bundles (styleguide changed)."""


class SourceBundleCompiler(BundleCompiler):
    """Wraps a pattern's source file in a registration shim."""

    def __init__(self, registry: PatternRegistry) -> None:
        self._registry = registry
        self._cache: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._generation = 0
        self.compile_count = 0

    def invalidate(self) -> None:
        logger.info("compiler: dropping %d cached bundles", len(self._cache))
        self._generation += 1
        self._cache.clear()
        self._locks.clear()

    async def compile(self, safe_name: str) -> str:
        pattern = self._registry.find_by_safe_name(safe_name)
        if pattern is None:
            raise PatternNotFound(safe_name)

        name = safe_pattern(pattern.id)
        lock = self._locks.setdefault(name, asyncio.Lock())
        async with lock:
            cached = self._cache.get(name)
            if cached is not None:
                return cached

            generation = self._generation
            source_path = self._registry.resolve_path(pattern)
            if not source_path:
                raise CompileError(f"pattern {pattern.id} has no source file", [f"{pattern.id}: path is not set"])

            try:
                source = await self._read_source(source_path)
            except OSError as e:
                raise CompileError(f"cannot read source of {pattern.id}", [f"{source_path}: {e}"]) from e

            if not source.strip():
                raise CompileError(f"source of {pattern.id} is empty", [f"{source_path}: empty file"])

            bundle = wrap_bundle(name, source)
            self.compile_count += 1
            if generation != self._generation:
                logger.info("compiler: styleguide changed while building %s, not caching", name)
                return bundle
            self._cache[name] = bundle
            logger.info("compiler: built %s (%d bytes)", name, len(bundle))
            return bundle

    async def _read_source(self, path: str) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


def wrap_bundle(safe_name: str, source: str) -> str:
    """CommonJS-style wrapper that publishes the module's default export."""
    key = json.dumps(safe_name)
    return (
        "(function () {\n"
        "  var module = { exports: {} };\n"
        "  var exports = module.exports;\n"
        f"{source}\n"
        "  window.components = window.components || {};\n"
        f"  window.components[{key}] = module.exports.default || module.exports;\n"
        "})();\n"
    )


# Singleton instance
compiler = SourceBundleCompiler(pattern_registry)
