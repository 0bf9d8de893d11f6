"""
Pattern service — the process-wide registry and styleguide replacement.

A styleguide is replaced as a whole: the registry is rebound (dropping every
non-synthetic pattern) and the given descriptors are registered. Properties
come from explicit descriptors or from a TypeScript props interface.
"""

from __future__ import annotations

import logging

from patternkit.kernel.patterns import Pattern, PatternRegistry
from patternkit.kernel.properties import Property, create_property
from patternkit.kernel.ts_parser import properties_from_interface
from studio.config import settings
from studio.models.pattern import PatternDescriptor

logger = logging.getLogger(__name__)


def build_pattern(descriptor: PatternDescriptor) -> Pattern:
    """Pattern from a descriptor. Raises ValueError for invalid property declarations."""
    properties: list[Property]
    if descriptor.properties is not None:
        properties = [
            create_property(
                p.type,
                p.id,
                p.name,
                options=p.options,
                required=p.required,
                default_value=p.default_value,
            )
            for p in descriptor.properties
        ]
    elif descriptor.interface:
        properties = properties_from_interface(descriptor.interface, descriptor.interface_name)
    else:
        properties = []

    return Pattern.create(descriptor.id, properties, name=descriptor.name, path=descriptor.path)


def replace_styleguide(
    registry: PatternRegistry,
    styleguide: str | None,
    descriptors: list[PatternDescriptor],
) -> list[Pattern]:
    """Rebind the registry to `styleguide` and register `descriptors` in order."""
    # Build everything first so a bad descriptor leaves the registry untouched
    patterns = [build_pattern(d) for d in descriptors]
    registry.set_styleguide(styleguide)
    for pattern in patterns:
        registry.add(pattern)
    logger.info("patterns: styleguide %s loaded with %d patterns", styleguide, len(patterns))
    return patterns


# Singleton instance
pattern_registry = PatternRegistry(settings.STYLEGUIDE_PATH or None)
