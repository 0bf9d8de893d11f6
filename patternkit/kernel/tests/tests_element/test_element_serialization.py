"""
patternkit Kernel -- Serialization Round-Trip Tests

serialize(create_from_serialized(doc)) == doc for documents produced by
serialize, including nested element properties, named slots and unknown
patterns. Event handlers never reach the wire.
"""

import json

from patternkit.kernel.element import (
    Element,
    create_from_serialized,
    is_serialized_element,
    serialize,
    split_children,
)


def _page(registry):
    root = Element(registry.get("components/box"), element_id="root")

    card = Element(registry.get("components/card"), element_id="card", name="Promo card")
    card.set_parent(root)
    card.set_property_value("title", "Hello")
    footer = Element(registry.get("components/button"), element_id="footer")
    footer.set_property_value("label", "More")
    card.set_property_value("footer", footer)

    header = Element(registry.get("synthetic:text"), element_id="header")
    header.set_property_value("text", "Header")
    card.set_slot("header", [header])

    button = Element(registry.get("components/button"), element_id="button")
    button.set_parent(root)
    button.set_property_value("label", "Go")
    button.set_property_value("disabled", True)
    button.set_property_value("width", 120)
    button.set_property_value("size", "large")
    button.set_property_value("icon", "/assets/go.svg")
    return root


class TestSerializedShape:
    def test_root_shape(self, registry):
        doc = serialize(_page(registry))
        assert doc["_type"] == "pattern"
        assert doc["id"] == "root"
        assert doc["pattern"] == "components/box"
        assert doc["name"] == "Box"
        assert doc["properties"] == {}
        assert [c["id"] for c in doc["children"]] == ["card", "button"]

    def test_named_slots_use_mapping(self, registry):
        doc = serialize(_page(registry))
        card = doc["children"][0]
        assert card["children"] == {
            "default": [],
            "header": [
                {
                    "_type": "pattern",
                    "id": "header",
                    "pattern": "synthetic:text",
                    "name": "Text",
                    "properties": {"text": "Header"},
                    "children": [],
                }
            ],
        }

    def test_element_property_is_nested_document(self, registry):
        doc = serialize(_page(registry))
        footer = doc["children"][0]["properties"]["footer"]
        assert is_serialized_element(footer)
        assert footer["id"] == "footer"
        assert footer["properties"] == {"label": "More"}

    def test_is_json_serializable(self, registry):
        doc = serialize(_page(registry))
        assert json.loads(json.dumps(doc)) == doc

    def test_event_handler_not_serialized(self, registry):
        button = Element(registry.get("components/button"), element_id="b")
        button.set_property_value("onClick", lambda event: None)
        assert callable(button.get_property_value("onClick"))
        assert serialize(button)["properties"]["onClick"] is None

    def test_composite_values_flattened(self, registry):
        class Point:
            def __init__(self):
                self.x = 1
                self.y = 2
                self._hidden = 3

        box = Element(registry.get("components/box"), element_id="box")
        box.set_property_value("origin", Point())
        box.set_property_value("tags", ("a", "b"))
        props = serialize(box)["properties"]
        assert props["origin"] == {"x": 1, "y": 2}
        assert props["tags"] == ["a", "b"]


class TestRoundTrip:
    def test_round_trip(self, registry):
        doc = serialize(_page(registry))
        rebuilt = create_from_serialized(doc, registry.get)
        assert serialize(rebuilt) == doc

    def test_round_trip_twice_is_stable(self, registry):
        doc = serialize(_page(registry))
        once = serialize(create_from_serialized(doc, registry.get))
        twice = serialize(create_from_serialized(once, registry.get))
        assert twice == doc

    def test_round_trip_restores_structure(self, registry):
        doc = serialize(_page(registry))
        root = create_from_serialized(doc, registry.get)
        card = root.find("card")
        assert card.parent is root
        assert card.slots["header"][0].get_property_value("text") == "Header"
        assert card.get_property_value("footer").id == "footer"
        assert root.find("button").get_property_value("size") == "large"

    def test_unknown_pattern_kept(self, registry):
        doc = {
            "_type": "pattern",
            "id": "x",
            "pattern": "lib/not-registered",
            "name": "Mystery",
            "properties": {"color": "red"},
            "children": [],
        }
        element = create_from_serialized(doc, registry.get)
        assert element.pattern is None
        assert serialize(element) == doc

    def test_loaded_values_are_coerced(self, registry):
        doc = {
            "_type": "pattern",
            "id": "b",
            "pattern": "components/button",
            "name": "Button",
            "properties": {"width": "12.5", "disabled": 1},
            "children": [],
        }
        element = create_from_serialized(doc, registry.get)
        assert element.get_property_value("width") == 12.5
        assert element.get_property_value("disabled") is True


class TestSplitChildren:
    def test_list(self):
        assert split_children([1, 2]) == ([1, 2], {})

    def test_mapping(self):
        assert split_children({"default": [1], "header": [2]}) == ([1], {"header": [2]})

    def test_garbage(self):
        assert split_children("nope") == ([], {})
        assert split_children(None) == ([], {})
