"""
patternkit Kernel — Props Interface Parser

Uses tree-sitter to read a pattern's TypeScript props interface (as shipped
in its .d.ts typings) into property declarations.

  boolean                      → BooleanProperty
  string                       → StringProperty (AssetProperty with @asset)
  number                       → NumberProperty
  "a" | "b" | "c"              → EnumProperty
  (event: X) => void           → EventProperty
  React.ReactNode, JSX.Element → ElementProperty

Doc comment tags on a member: `@name <label>` overrides the display name,
`@asset` marks a string as an asset location, `@ignore` skips the member.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

import tree_sitter_typescript as _ts_mod
from tree_sitter import Language, Parser

from patternkit.kernel.properties import (
    AssetProperty,
    BooleanProperty,
    ElementProperty,
    EnumProperty,
    EventProperty,
    NumberProperty,
    Property,
    StringProperty,
)

_LANG = Language(_ts_mod.language_typescript())
_PARSER = Parser(_LANG)

_ELEMENT_TYPES = {"ReactNode", "React.ReactNode", "JSX.Element", "React.ReactElement", "ReactElement"}
_NAME_TAG_RE = re.compile(r"@name\s+([^\n*]+)")


# ---------------------------------------------------------------------------
# Public types
# ---------------------------------------------------------------------------


class ParsedField:
    """A parsed member of a props interface."""

    __slots__ = ("name", "optional", "ts_type", "kind", "union_values", "tags", "label")

    def __init__(
        self,
        name: str,
        optional: bool,
        ts_type: str,
        kind: str,
        union_values: list[str] | None = None,
        tags: set[str] | None = None,
        label: str | None = None,
    ) -> None:
        self.name = name
        self.optional = optional
        self.ts_type = ts_type  # raw TypeScript type string
        self.kind = kind  # boolean/string/number/enum/event/element/unknown
        self.union_values = union_values  # for "a" | "b" → ["a", "b"]
        self.tags = tags or set()  # doc comment tags without '@'
        self.label = label  # @name override

    def __repr__(self) -> str:
        return f"ParsedField({self.name!r}, optional={self.optional}, kind={self.kind!r}, ts_type={self.ts_type!r})"


class ParsedInterface:
    """Result of parsing a TypeScript interface declaration."""

    __slots__ = ("name", "fields")

    def __init__(self, name: str, fields: dict[str, ParsedField]) -> None:
        self.name = name
        self.fields = fields  # member name → ParsedField

    def __repr__(self) -> str:
        return f"ParsedInterface({self.name!r}, fields={list(self.fields.keys())})"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_interface(code: str, name: str | None = None) -> ParsedInterface | None:
    """
    Parse the first interface declaration in `code` (or the one called `name`).

    Handles both bare and `export`ed declarations. Returns None when no
    interface is found.
    """
    tree = _PARSER.parse(code.encode())
    for node in _interface_nodes(tree.root_node):
        parsed = _extract_interface(node)
        if name is None or parsed.name == name:
            return parsed
    return None


@lru_cache(maxsize=256)
def parse_interface_cached(code: str) -> ParsedInterface | None:
    """Cached version of parse_interface, keyed by the exact source string."""
    return parse_interface(code)


def properties_from_interface(code: str, name: str | None = None) -> list[Property]:
    """Declared properties of a props interface, in declaration order."""
    interface = parse_interface_cached(code) if name is None else parse_interface(code, name)
    if interface is None:
        return []
    properties: list[Property] = []
    for f in interface.fields.values():
        prop = field_to_property(f)
        if prop is not None:
            properties.append(prop)
    return properties


def field_to_property(f: ParsedField) -> Property | None:
    """Map a parsed member to a property. Unknown kinds and @ignore'd members yield None."""
    if "ignore" in f.tags:
        return None
    required = not f.optional

    if f.kind == "boolean":
        return BooleanProperty(f.name, f.label, required=required)
    if f.kind == "string":
        if "asset" in f.tags:
            return AssetProperty(f.name, f.label, required=required)
        return StringProperty(f.name, f.label, required=required)
    if f.kind == "number":
        return NumberProperty(f.name, f.label, required=required)
    if f.kind == "enum":
        return EnumProperty(f.name, list(f.union_values or []), f.label, required=required)
    if f.kind == "event":
        return EventProperty(f.name, f.label, required=required)
    if f.kind == "element":
        return ElementProperty(f.name, f.label, required=required)
    return None


# ---------------------------------------------------------------------------
# Tree-sitter extraction
# ---------------------------------------------------------------------------


def _interface_nodes(root: Any) -> list[Any]:
    found = []
    for node in root.children:
        if node.type == "interface_declaration":
            found.append(node)
        elif node.type == "export_statement":
            found.extend(c for c in node.children if c.type == "interface_declaration")
    return found


def _extract_interface(node: Any) -> ParsedInterface:
    """Extract interface name and members from an interface_declaration node."""
    name = ""
    fields: dict[str, ParsedField] = {}

    for child in node.children:
        if child.type == "type_identifier":
            name = child.text.decode()
        elif child.type in ("interface_body", "object_type"):
            comment: str | None = None
            for member in child.children:
                if member.type == "comment":
                    comment = member.text.decode()
                elif member.type == "property_signature":
                    f = _extract_property(member, comment)
                    if f:
                        fields[f.name] = f
                    comment = None
                elif member.type not in (";", ",", "{", "}"):
                    comment = None

    return ParsedInterface(name=name, fields=fields)


def _extract_property(node: Any, comment: str | None) -> ParsedField | None:
    """Extract a ParsedField from a property_signature node."""
    name = None
    optional = False
    type_node = None

    for child in node.children:
        if child.type == "property_identifier":
            name = child.text.decode()
        elif child.type == "?":
            optional = True
        elif child.type == "comment":
            # Inline comments (`/** @asset */ src?: string`) precede the name
            comment = child.text.decode()
        elif child.type == "type_annotation":
            # Children: ":", <type_node>
            for tc in child.children:
                if tc.type != ":":
                    type_node = tc

    if name is None or type_node is None:
        return None

    kind, union_vals = _classify_type_node(type_node)
    tags, label = _parse_doc_comment(comment)

    return ParsedField(
        name=name,
        optional=optional,
        ts_type=type_node.text.decode(),
        kind=kind,
        union_values=union_vals,
        tags=tags,
        label=label,
    )


def _classify_type_node(node: Any) -> tuple[str, list[str] | None]:
    """Classify a type node into (kind, union_values)."""
    t = node.type
    text = node.text.decode()

    if t == "parenthesized_type":
        inner = [c for c in node.children if c.type not in ("(", ")")]
        return _classify_type_node(inner[0]) if inner else ("unknown", None)

    if t == "predefined_type":
        if text in ("boolean", "string", "number"):
            return text, None
        return "unknown", None

    if t == "function_type":
        return "event", None

    if t in ("type_identifier", "nested_type_identifier", "generic_type"):
        base = text.split("<")[0].strip()
        if base in _ELEMENT_TYPES:
            return "element", None
        return "unknown", None

    if t == "literal_type":
        value = _string_literal(node)
        if value is not None:
            return "enum", [value]
        if text in ("true", "false"):
            return "boolean", None
        return "unknown", None

    if t == "union_type":
        members = _flatten_union(node)
        literals = [_string_literal(m) for m in members if m.type == "literal_type"]
        if literals and all(v is not None for v in literals) and len(literals) == len(members):
            return "enum", [v for v in literals if v is not None]
        # string | undefined, boolean | null → classify the first meaningful member
        meaningful = [m for m in members if m.text.decode() not in ("null", "undefined")]
        if len(meaningful) == 1:
            return _classify_type_node(meaningful[0])
        if meaningful and all(m.text.decode() in ("true", "false", "boolean") for m in meaningful):
            return "boolean", None
        return "unknown", None

    return "unknown", None


def _flatten_union(node: Any) -> list[Any]:
    """'a' | 'b' | 'c' nests left-recursively; return the leaf members in order."""
    members = []
    for child in node.children:
        if child.type == "|":
            continue
        if child.type == "union_type":
            members.extend(_flatten_union(child))
        else:
            members.append(child)
    return members


def _string_literal(node: Any) -> str | None:
    for sub in node.children:
        if sub.type == "string":
            text = sub.text.decode()
            if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
                return text[1:-1]
    return None


def _parse_doc_comment(comment: str | None) -> tuple[set[str], str | None]:
    if not comment:
        return set(), None
    tags = {m.group(1) for m in re.finditer(r"@(\w+)", comment)}
    label_match = _NAME_TAG_RE.search(comment)
    label = label_match.group(1).strip() if label_match else None
    return tags, label
