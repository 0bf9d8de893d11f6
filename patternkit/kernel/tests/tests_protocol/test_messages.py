"""
patternkit Kernel -- Message Envelope Tests

parse_envelope never raises; malformed input is dropped (None) and unknown
types parse with known=False so receivers can log and ignore them.
"""

import json

import pytest

from patternkit.kernel.messages import (
    MESSAGE_TYPES,
    RESPONSE_TYPES,
    Envelope,
    MessageType,
    make_content_request,
    make_content_response,
    make_element_change,
    make_reload,
    make_sketch_request,
    make_sketch_response,
    make_state,
    parse_envelope,
)


def test_closed_type_set():
    assert MESSAGE_TYPES == {
        "state",
        "reload",
        "element-change",
        "content-request",
        "content-response",
        "sketch-request",
        "sketch-response",
    }
    assert RESPONSE_TYPES == {
        "content-request": "content-response",
        "sketch-request": "sketch-response",
    }


class TestParse:
    @pytest.mark.parametrize(
        "raw",
        ["", "not json", "{", "[]", "42", "null", '"state"', '{"payload": 1}', '{"type": 7}', b"\xff\xfe"],
    )
    def test_malformed_is_none(self, raw):
        assert parse_envelope(raw) is None

    def test_deeply_nested_is_none(self):
        assert parse_envelope("[" * 200000) is None
        assert parse_envelope('{"type": "state", "payload": ' + "[" * 200000) is None

    def test_unknown_type_parses_but_is_not_known(self):
        envelope = parse_envelope('{"type": "telemetry", "id": "x", "payload": {}}')
        assert envelope is not None
        assert envelope.type == "telemetry"
        assert not envelope.known

    def test_known_type(self):
        envelope = parse_envelope('{"type": "reload", "id": "abc", "payload": {}}')
        assert envelope.known
        assert envelope.type == MessageType.RELOAD
        assert envelope.id == "abc"

    def test_missing_fields_default(self):
        envelope = parse_envelope('{"type": "reload"}')
        assert envelope.id == ""
        assert envelope.payload is None


class TestFactories:
    def test_state(self):
        page = {"_type": "pattern", "id": "root"}
        envelope = make_state(page, "root", "s1")
        assert envelope.type == "state"
        assert envelope.payload == {"page": page, "elementId": "root", "stateId": "s1"}

    def test_state_without_state_id(self):
        assert "stateId" not in make_state(None).payload

    def test_reload(self):
        assert make_reload().to_dict()["type"] == "reload"

    def test_element_change(self):
        assert make_element_change("e1").payload == "e1"
        assert make_element_change(None).payload is None

    def test_ids_are_unique(self):
        assert make_reload().id != make_reload().id

    def test_content_pair_shares_id(self):
        request = make_content_request()
        response = make_content_response(request.id, "<html/>", "http://localhost/", 100, 50)
        assert response.id == request.id
        assert response.payload == {"document": "<html/>", "location": "http://localhost/", "width": 100, "height": 50}

    def test_sketch_pair_shares_id(self):
        request = make_sketch_request("Page 1", "Desktop", envelope_id="fixed")
        assert request.id == "fixed"
        assert request.payload == {"pageName": "Page 1", "artboardName": "Desktop"}
        response = make_sketch_response(request.id, {"_class": "page"})
        assert response.id == "fixed"
        assert response.payload == {"page": {"_class": "page"}}

    def test_wire_format(self):
        envelope = Envelope(MessageType.ELEMENT_CHANGE, "e1", id="abc")
        assert json.loads(envelope.to_json()) == {"id": "abc", "type": "element-change", "payload": "e1"}
        assert parse_envelope(envelope.to_json()) == envelope
