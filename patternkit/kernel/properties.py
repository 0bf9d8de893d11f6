"""
patternkit Kernel — Property Coercion

One property class per declared type. Every `coerce` is pure and total:
given any input it returns a value of the declared type or the type's empty
value. It never raises.

  boolean  → bool           (empty: False)
  string   → str            (empty: "")
  number   → int | float    (empty: 0)
  enum     → option id      (empty: first option id, None without options)
  event    → EventHandler   (empty: None)
  asset    → str            (empty: "")
  element  → ElementReference (empty: None)
"""

from __future__ import annotations

import math
from typing import Any

from patternkit.kernel.types import ElementReference, EventHandler

_TRUE_STRINGS = {"true", "1", "yes", "on"}


class Property:
    """A declared property of a pattern. Subclasses implement `coerce`."""

    __slots__ = ("id", "name", "required", "default_value")

    type_name = "unknown"

    def __init__(
        self,
        id: str,
        name: str | None = None,
        *,
        required: bool = False,
        default_value: Any = None,
    ) -> None:
        self.id = id
        self.name = name or _title(id)
        self.required = required
        self.default_value = default_value

    def coerce(self, value: Any) -> Any:
        raise NotImplementedError

    def describe(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type_name,
            "required": self.required,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"


class BooleanProperty(Property):
    __slots__ = ()
    type_name = "boolean"

    def coerce(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return value != 0
        if isinstance(value, float):
            return not math.isnan(value) and value != 0
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return False


class StringProperty(Property):
    __slots__ = ()
    type_name = "string"

    def coerce(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        if value is None:
            return ""
        try:
            return str(value)
        except Exception:
            return ""


class NumberProperty(Property):
    __slots__ = ()
    type_name = "number"

    def coerce(self, value: Any) -> int | float:
        if isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else 0
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text)
            except ValueError:
                pass
            try:
                parsed = float(text)
            except ValueError:
                return 0
            return parsed if math.isfinite(parsed) else 0
        return 0


class EnumOption:
    """One value of an enum property."""

    __slots__ = ("id", "name")

    def __init__(self, id: str, name: str | None = None) -> None:
        self.id = id
        self.name = name or id

    def __repr__(self) -> str:
        return f"EnumOption({self.id!r})"


class EnumProperty(Property):
    __slots__ = ("options",)
    type_name = "enum"

    def __init__(
        self,
        id: str,
        options: list[EnumOption | str],
        name: str | None = None,
        *,
        required: bool = False,
        default_value: Any = None,
    ) -> None:
        super().__init__(id, name, required=required, default_value=default_value)
        self.options = [o if isinstance(o, EnumOption) else EnumOption(o) for o in options]

    def coerce(self, value: Any) -> str | None:
        if not self.options:
            return None
        for option in self.options:
            # Unhashable or odd inputs compare unequal, never raise
            if _safe_eq(option.id, value):
                return option.id
        for option in self.options:
            if _safe_eq(option.name, value):
                return option.id
        return self.options[0].id

    def describe(self) -> dict[str, Any]:
        d = super().describe()
        d["options"] = [{"id": o.id, "name": o.name} for o in self.options]
        return d


class EventProperty(Property):
    """Takes a handler function for a UI event. Non-callables mean 'unset'."""

    __slots__ = ()
    type_name = "event"

    def coerce(self, value: Any) -> EventHandler | None:
        if isinstance(value, EventHandler):
            return value
        if callable(value):
            return EventHandler(value)
        return None


class AssetProperty(Property):
    """An asset location (URL, data URI or path)."""

    __slots__ = ()
    type_name = "asset"

    def coerce(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        return ""


class ElementProperty(Property):
    """Slot content: a nested element."""

    __slots__ = ()
    type_name = "element"

    def coerce(self, value: Any) -> ElementReference | None:
        from patternkit.kernel.element import Element

        if isinstance(value, ElementReference):
            return value
        if isinstance(value, Element):
            return ElementReference(value)
        return None


PROPERTY_TYPES: dict[str, type[Property]] = {
    cls.type_name: cls
    for cls in (
        BooleanProperty,
        StringProperty,
        NumberProperty,
        EnumProperty,
        EventProperty,
        AssetProperty,
        ElementProperty,
    )
}


def create_property(
    type_name: str,
    id: str,
    name: str | None = None,
    *,
    options: list[Any] | None = None,
    required: bool = False,
    default_value: Any = None,
) -> Property:
    """
    Build a property from a declaration.

    Raises ValueError for an unknown type name. Enum options may be strings or
    {"id", "name"} mappings.
    """
    cls = PROPERTY_TYPES.get(type_name)
    if cls is None:
        raise ValueError(f"Unknown property type: {type_name!r}")

    if cls is EnumProperty:
        parsed: list[EnumOption | str] = []
        for option in options or []:
            if isinstance(option, dict):
                parsed.append(EnumOption(str(option["id"]), option.get("name")))
            else:
                parsed.append(str(option))
        return EnumProperty(id, parsed, name, required=required, default_value=default_value)

    return cls(id, name, required=required, default_value=default_value)


def _safe_eq(a: Any, b: Any) -> bool:
    try:
        return bool(a == b)
    except Exception:
        return False


def _title(identifier: str) -> str:
    """'backgroundColor' → 'Background Color', 'is_active' → 'Is Active'."""
    words: list[str] = []
    current = ""
    for ch in identifier.replace("-", "_"):
        if ch == "_":
            if current:
                words.append(current)
            current = ""
        elif ch.isupper() and current and not current[-1].isupper():
            words.append(current)
            current = ch
        else:
            current += ch
    if current:
        words.append(current)
    return " ".join(w[:1].upper() + w[1:] for w in words)
