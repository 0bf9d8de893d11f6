"""
patternkit Preview — the out-of-process renderer runtime.

Components:
  store      — preview copy of session state, explicit change events
  registry   — loaded components keyed by safe script name
  resolver   — required pattern set + on-demand bundle loading
  renderer   — page + components → RenderNode tree (gated on pending loads)
  layout     — stacking boxes for highlight and exports
  highlight  — one-shot selection pulse (idle → shown → idle)
  exporters  — content and sketch response payloads
  app        — composition root and protocol loop
"""

from patternkit.preview.app import ChannelClosed, PreviewApp, PreviewConfig
from patternkit.preview.resolver import ComponentResolver, HttpScriptLoader, required_patterns

__all__ = [
    "ChannelClosed",
    "PreviewApp",
    "PreviewConfig",
    "ComponentResolver",
    "HttpScriptLoader",
    "required_patterns",
]
