"""
patternkit Kernel — Patterns and the Pattern Registry

A Pattern is a registered component definition: its id is the resolved
source path ('components/button'), it declares typed properties, and its
implementation is resolved lazily by the preview (see preview.resolver).

The registry is process-wide and bound to one styleguide (pattern source
tree). Selecting another styleguide drops every non-synthetic pattern.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import quote, unquote

from patternkit.kernel.properties import AssetProperty, Property, StringProperty
from patternkit.kernel.types import SYNTHETIC_ASSET, SYNTHETIC_TEXT, is_synthetic

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone beyond alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


class PatternNotFound(Exception):
    """Raised when a pattern id (or its safe script name) is not registered."""


@dataclass(frozen=True, eq=False)
class Pattern:
    """Immutable once registered."""

    id: str
    name: str
    properties: Mapping[str, Property] = field(default_factory=dict)
    path: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @classmethod
    def create(
        cls,
        id: str,
        properties: Iterable[Property] = (),
        *,
        name: str | None = None,
        path: str | None = None,
    ) -> Pattern:
        return cls(
            id=id,
            name=name or _default_name(id),
            properties={p.id: p for p in properties},
            path=path,
        )

    @property
    def synthetic(self) -> bool:
        return is_synthetic(self.id)

    def get_property(self, property_id: str) -> Property | None:
        return self.properties.get(property_id)

    def describe(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "synthetic": self.synthetic,
            "properties": [p.describe() for p in self.properties.values()],
        }

    def __repr__(self) -> str:
        return f"Pattern({self.id!r})"


# ---------------------------------------------------------------------------
# Built-in patterns
# ---------------------------------------------------------------------------


def synthetic_patterns() -> list[Pattern]:
    """Built-in primitives that render without an external bundle."""
    return [
        Pattern.create(SYNTHETIC_TEXT, [StringProperty("text")], name="Text"),
        Pattern.create(SYNTHETIC_ASSET, [AssetProperty("src", "Source")], name="Asset"),
    ]


# ---------------------------------------------------------------------------
# Script naming
# ---------------------------------------------------------------------------


def safe_pattern(pattern_id: str) -> str:
    """
    Deterministic script name for a pattern id.

    Strips any package-version suffix after '@', replaces path separators with
    '-' and percent-encodes the rest like encodeURIComponent.

      'components/button'          → 'components-button'
      'lib/patterns/image@1.2.0'   → 'lib-patterns-image'
    """
    base = pattern_id.split("@")[0]
    base = base.replace(os.sep, "/").replace("/", "-")
    return quote(base, safe=_URI_COMPONENT_SAFE)


def script_path(pattern_id: str) -> str:
    """URL path of the pattern's bundle on the delivery endpoint."""
    return f"/scripts/{safe_pattern(pattern_id)}.js"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class PatternRegistry:
    """Process-wide pattern registry, scoped to the selected styleguide."""

    def __init__(self, styleguide: str | None = None) -> None:
        self._styleguide = styleguide
        self._patterns: dict[str, Pattern] = {}
        self._install_synthetics()

    def _install_synthetics(self) -> None:
        for pattern in synthetic_patterns():
            self._patterns[pattern.id] = pattern

    @property
    def styleguide(self) -> str | None:
        return self._styleguide

    def set_styleguide(self, path: str | None) -> None:
        """Bind to a new pattern source tree. Drops every loaded pattern."""
        logger.info("patterns: styleguide %s → %s, dropping %d patterns", self._styleguide, path, len(self))
        self._styleguide = path
        self._patterns.clear()
        self._install_synthetics()

    def add(self, pattern: Pattern) -> None:
        if pattern.id in self._patterns:
            logger.debug("patterns: replacing %s", pattern.id)
        self._patterns[pattern.id] = pattern

    def get(self, pattern_id: str) -> Pattern | None:
        return self._patterns.get(pattern_id)

    def find_by_safe_name(self, safe_name: str) -> Pattern | None:
        """Look up a pattern by its script name (encoded or already decoded)."""
        wanted = unquote(safe_name)
        for pattern in self._patterns.values():
            if pattern.synthetic:
                continue
            if unquote(safe_pattern(pattern.id)) == wanted:
                return pattern
        return None

    def resolve_path(self, pattern: Pattern) -> str | None:
        """Absolute source path of a pattern, relative paths joined to the styleguide."""
        if pattern.path is None:
            return None
        if os.path.isabs(pattern.path) or self._styleguide is None:
            return pattern.path
        return os.path.join(self._styleguide, pattern.path)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns

    def __iter__(self) -> Iterator[Pattern]:
        return iter(list(self._patterns.values()))

    def __len__(self) -> int:
        return len(self._patterns)


def _default_name(pattern_id: str) -> str:
    """'components/primary-button' → 'Primary Button'."""
    last = pattern_id.split("@")[0].rstrip("/").split("/")[-1]
    if last == "index":
        parts = pattern_id.split("@")[0].rstrip("/").split("/")
        last = parts[-2] if len(parts) > 1 else last
    return " ".join(w[:1].upper() + w[1:] for w in last.replace("_", "-").split("-") if w)
