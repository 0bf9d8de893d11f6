"""
patternkit Kernel -- Props Interface Parser Tests

TypeScript props interfaces (as found in a pattern's .d.ts) map to property
declarations via tree-sitter.
"""

from patternkit.kernel.properties import (
    AssetProperty,
    BooleanProperty,
    ElementProperty,
    EnumProperty,
    EventProperty,
    NumberProperty,
    StringProperty,
)
from patternkit.kernel.ts_parser import parse_interface, properties_from_interface

BUTTON_PROPS = """
import * as React from 'react';

export interface ButtonProps {
    /** @name Caption */
    label: string;
    disabled?: boolean;
    width?: number;
    size: 'small' | 'medium' | 'large';
    onClick?: (event: React.MouseEvent) => void;
    /** @asset */
    icon?: string;
    children?: React.ReactNode;
    /** @ignore */
    internalRef?: string;
    style?: React.CSSProperties;
}
"""


def _by_id(properties):
    return {p.id: p for p in properties}


class TestParseInterface:
    def test_finds_exported_interface(self):
        interface = parse_interface(BUTTON_PROPS)
        assert interface is not None
        assert interface.name == "ButtonProps"
        assert list(interface.fields)[:3] == ["label", "disabled", "width"]

    def test_optional_flag(self):
        fields = parse_interface(BUTTON_PROPS).fields
        assert fields["label"].optional is False
        assert fields["disabled"].optional is True

    def test_union_values(self):
        fields = parse_interface(BUTTON_PROPS).fields
        assert fields["size"].kind == "enum"
        assert fields["size"].union_values == ["small", "medium", "large"]

    def test_select_by_name(self):
        code = "interface A { a: string }\ninterface B { b: number }"
        assert parse_interface(code, "B").name == "B"
        assert parse_interface(code, "C") is None

    def test_no_interface(self):
        assert parse_interface("const x = 1;") is None
        assert properties_from_interface("const x = 1;") == []


class TestPropertiesFromInterface:
    def test_kinds(self):
        props = _by_id(properties_from_interface(BUTTON_PROPS))
        assert isinstance(props["label"], StringProperty)
        assert isinstance(props["disabled"], BooleanProperty)
        assert isinstance(props["width"], NumberProperty)
        assert isinstance(props["size"], EnumProperty)
        assert isinstance(props["onClick"], EventProperty)
        assert isinstance(props["icon"], AssetProperty)
        assert isinstance(props["children"], ElementProperty)

    def test_skipped_members(self):
        props = _by_id(properties_from_interface(BUTTON_PROPS))
        assert "internalRef" not in props
        assert "style" not in props

    def test_labels_and_required(self):
        props = _by_id(properties_from_interface(BUTTON_PROPS))
        assert props["label"].name == "Caption"
        assert props["label"].required is True
        assert props["onClick"].name == "On Click"
        assert props["onClick"].required is False

    def test_enum_options(self):
        props = _by_id(properties_from_interface(BUTTON_PROPS))
        assert [o.id for o in props["size"].options] == ["small", "medium", "large"]

    def test_nullable_union(self):
        props = _by_id(properties_from_interface("interface P { title: string | undefined; }"))
        assert isinstance(props["title"], StringProperty)
