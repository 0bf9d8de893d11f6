"""
patternkit Kernel — the pure document model.

Components:
  properties  — total, pure coercion per declared property type
  patterns    — Pattern definitions and the styleguide-bound registry
  element     — the element tree: reparenting, property values, serialization
  page        — editor-side document emitting explicit change events
  messages    — the envelope wire format shared by studio and preview
  ts_parser   — props interface (.d.ts) → property declarations
"""

from patternkit.kernel.element import Element, create_from_serialized, serialize
from patternkit.kernel.messages import Envelope, MessageType, parse_envelope
from patternkit.kernel.page import Page, SelectionChange, TreeChange
from patternkit.kernel.patterns import Pattern, PatternNotFound, PatternRegistry, safe_pattern
from patternkit.kernel.properties import create_property

__all__ = [
    "Element",
    "create_from_serialized",
    "serialize",
    "Envelope",
    "MessageType",
    "parse_envelope",
    "Page",
    "SelectionChange",
    "TreeChange",
    "Pattern",
    "PatternNotFound",
    "PatternRegistry",
    "safe_pattern",
    "create_property",
]
