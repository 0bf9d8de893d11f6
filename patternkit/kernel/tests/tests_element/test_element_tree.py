"""
patternkit Kernel -- Element Tree Tests

Covers:
  - reparenting detaches before inserting, indices clamp to [0, len]
  - moving to the exact same parent and index is a no-op
  - moves into the element's own subtree are refused
  - the parent back-reference never keeps a detached parent alive
  - named slots and element-valued properties take part in lookups
"""

import gc

from patternkit.kernel.element import Element


def _tree(registry):
    root = Element(registry.get("components/box"), element_id="root")
    a = Element(registry.get("components/button"), element_id="a")
    b = Element(registry.get("components/button"), element_id="b")
    c = Element(registry.get("components/button"), element_id="c")
    for child in (a, b, c):
        child.set_parent(root)
    return root, a, b, c


def _ids(element):
    return [child.id for child in element.children]


# ============================================================================
# Reparenting
# ============================================================================


class TestSetParent:
    def test_append_keeps_order(self, registry):
        root, a, b, c = _tree(registry)
        assert _ids(root) == ["a", "b", "c"]
        assert a.parent is root
        assert root.is_root()
        assert not a.is_root()

    def test_same_parent_same_index_is_noop(self, registry):
        root, a, b, c = _tree(registry)
        b.set_parent(root, 1)
        assert _ids(root) == ["a", "b", "c"]
        assert b.index() == 1

    def test_same_parent_append_when_already_last_is_noop(self, registry):
        root, a, b, c = _tree(registry)
        c.set_parent(root)
        assert _ids(root) == ["a", "b", "c"]

    def test_move_within_parent(self, registry):
        root, a, b, c = _tree(registry)
        c.set_parent(root, 0)
        assert _ids(root) == ["c", "a", "b"]

    def test_index_past_end_is_clamped(self, registry):
        root, a, b, c = _tree(registry)
        a.set_parent(root, 99)
        assert _ids(root) == ["b", "c", "a"]

    def test_negative_index_is_clamped(self, registry):
        root, a, b, c = _tree(registry)
        c.set_parent(root, -5)
        assert _ids(root) == ["c", "a", "b"]

    def test_same_parent_clamped_index_noop(self, registry):
        root, a, b, c = _tree(registry)
        c.set_parent(root, 10)
        assert _ids(root) == ["a", "b", "c"]

    def test_move_to_other_parent_detaches_first(self, registry):
        root, a, b, c = _tree(registry)
        b.set_parent(a)
        assert _ids(root) == ["a", "c"]
        assert _ids(a) == ["b"]
        assert b.parent is a

    def test_element_in_one_child_list_only(self, registry):
        root, a, b, c = _tree(registry)
        c.set_parent(a, 0)
        c.set_parent(b, 0)
        occurrences = [e for e in root.walk() if e is c]
        assert len(occurrences) == 1
        assert c.parent is b

    def test_refuses_cycle(self, registry):
        root, a, b, c = _tree(registry)
        b.set_parent(a)
        a.set_parent(b)
        assert a.parent is root
        assert b.parent is a

    def test_refuses_self_parent(self, registry):
        root, a, b, c = _tree(registry)
        a.set_parent(a)
        assert a.parent is root

    def test_remove_detaches(self, registry):
        root, a, b, c = _tree(registry)
        b.remove()
        assert _ids(root) == ["a", "c"]
        assert b.parent is None
        assert b.index() is None

    def test_set_index(self, registry):
        root, a, b, c = _tree(registry)
        a.set_index(2)
        assert _ids(root) == ["b", "c", "a"]


class TestParentReference:
    def test_parent_is_weak(self, registry):
        root, a, b, c = _tree(registry)
        del root, b, c
        gc.collect()
        assert a.parent is None

    def test_children_returns_copy(self, registry):
        root, a, b, c = _tree(registry)
        root.children.clear()
        assert _ids(root) == ["a", "b", "c"]


# ============================================================================
# Slots and lookups
# ============================================================================


class TestSlots:
    def test_named_slot_holds_elements(self, registry):
        card = Element(registry.get("components/card"), element_id="card")
        header = Element(registry.get("components/button"), element_id="header")
        card.set_slot("header", [header])

        assert card.slots == {"header": [header]}
        assert header.parent is card
        assert header.index() is None
        assert card.children == []

    def test_moving_out_of_slot_clears_it(self, registry):
        root = Element(registry.get("components/box"), element_id="root")
        card = Element(registry.get("components/card"), element_id="card")
        header = Element(registry.get("components/button"), element_id="header")
        card.set_slot("header", [header])

        header.set_parent(root)
        assert card.slots == {}
        assert _ids(root) == ["header"]

    def test_default_slot_replaces_children(self, registry):
        root, a, b, c = _tree(registry)
        d = Element(registry.get("components/button"), element_id="d")
        root.set_slot("default", [d, a])
        assert _ids(root) == ["d", "a"]
        assert b.parent is None


class TestLookup:
    def test_walk_is_preorder(self, registry):
        root, a, b, c = _tree(registry)
        b.set_parent(a)
        assert [e.id for e in root.walk()] == ["root", "a", "b", "c"]

    def test_find_in_element_property(self, registry):
        card = Element(registry.get("components/card"), element_id="card")
        footer = Element(registry.get("components/button"), element_id="footer")
        card.set_property_value("footer", footer)

        assert card.find("footer") is footer
        assert card.get_property_value("footer") is footer
        assert footer.parent is card

    def test_find_missing(self, registry):
        root, *_ = _tree(registry)
        assert root.find("nope") is None


class TestElementValuedProperties:
    def test_moving_out_of_property_clears_it(self, registry):
        root, a, _, _ = _tree(registry)
        card = Element(registry.get("components/card"), element_id="card")
        footer = Element(registry.get("components/button"), element_id="footer")
        card.set_property_value("footer", footer)

        footer.set_parent(a)
        assert footer.parent is a
        assert card.get_property_value("footer") is None
        assert "footer" not in card.property_values
        assert card.find("footer") is None

    def test_property_to_property_has_one_owner(self, registry):
        first = Element(registry.get("components/card"), element_id="first")
        second = Element(registry.get("components/card"), element_id="second")
        footer = Element(registry.get("components/button"), element_id="footer")
        first.set_property_value("footer", footer)

        second.set_property_value("footer", footer)
        assert footer.parent is second
        assert first.find("footer") is None
        assert second.find("footer") is footer

    def test_overwritten_reference_is_released(self, registry):
        card = Element(registry.get("components/card"), element_id="card")
        old = Element(registry.get("components/button"), element_id="old")
        new = Element(registry.get("components/button"), element_id="new")
        card.set_property_value("footer", old)

        card.set_property_value("footer", new)
        assert old.parent is None
        assert new.parent is card
        assert card.find("old") is None


class TestProperties:
    def test_declared_property_is_coerced(self, registry):
        button = Element(registry.get("components/button"))
        button.set_property_value("width", "42")
        button.set_property_value("disabled", "yes")
        button.set_property_value("size", "huge")

        assert button.get_property_value("width") == 42
        assert button.get_property_value("disabled") is True
        assert button.get_property_value("size") == "small"

    def test_undeclared_property_kept_raw(self, registry):
        button = Element(registry.get("components/button"))
        button.set_property_value("data", {"x": 1})
        assert button.get_property_value("data") == {"x": 1}

    def test_unknown_pattern_keeps_values(self):
        element = Element(pattern_id="lib/missing")
        element.set_property_value("anything", 3)
        assert element.pattern is None
        assert element.pattern_id == "lib/missing"
        assert element.get_property_value("anything") == 3

    def test_unset_property_is_none(self, registry):
        button = Element(registry.get("components/button"))
        assert button.get_property_value("label") is None

    def test_name_defaults_to_pattern_name(self, registry):
        button = Element(registry.get("components/button"))
        assert button.name == "Button"
