"""
Kernel test fixtures.

A small registry with a container, a card (named slot + element property) and
a button (every scalar property type).
"""

import pytest

from patternkit.kernel.patterns import Pattern, PatternRegistry
from patternkit.kernel.properties import (
    AssetProperty,
    BooleanProperty,
    ElementProperty,
    EnumProperty,
    EventProperty,
    NumberProperty,
    StringProperty,
)


@pytest.fixture
def registry():
    reg = PatternRegistry("/styleguide")
    reg.add(Pattern.create("components/box", path="components/box.js"))
    reg.add(
        Pattern.create(
            "components/card",
            [StringProperty("title"), ElementProperty("footer")],
            path="components/card.js",
        )
    )
    reg.add(
        Pattern.create(
            "components/button",
            [
                StringProperty("label"),
                BooleanProperty("disabled"),
                NumberProperty("width"),
                EnumProperty("size", ["small", "medium", "large"]),
                EventProperty("onClick"),
                AssetProperty("icon"),
            ],
            path="components/button.js",
        )
    )
    return reg
