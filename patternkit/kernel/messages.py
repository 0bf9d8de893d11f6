"""
patternkit Kernel — Message Envelopes

The wire format of every cross-process exchange between the studio session
and preview clients:

  {"id": "<correlation id>", "type": "<message type>", "payload": <any>}

Factory functions build well-formed envelopes so senders never hand-assemble
dicts. `parse_envelope` never raises: malformed input yields None.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from patternkit.kernel.types import new_id


class MessageType(str, Enum):
    """The closed set of message types."""

    STATE = "state"
    RELOAD = "reload"
    ELEMENT_CHANGE = "element-change"
    CONTENT_REQUEST = "content-request"
    CONTENT_RESPONSE = "content-response"
    SKETCH_REQUEST = "sketch-request"
    SKETCH_RESPONSE = "sketch-response"


MESSAGE_TYPES: set[str] = {t.value for t in MessageType}

# request type → the response type that answers it
RESPONSE_TYPES: dict[str, str] = {
    MessageType.CONTENT_REQUEST.value: MessageType.CONTENT_RESPONSE.value,
    MessageType.SKETCH_REQUEST.value: MessageType.SKETCH_RESPONSE.value,
}


@dataclass
class Envelope:
    type: str
    payload: Any = None
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if isinstance(self.type, MessageType):
            self.type = self.type.value

    @property
    def known(self) -> bool:
        return self.type in MESSAGE_TYPES

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, "payload": self.payload}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Envelope:
        return cls(
            type=str(d.get("type", "")),
            payload=d.get("payload"),
            id=str(d.get("id") or ""),
        )


def parse_envelope(raw: str | bytes) -> Envelope | None:
    """Decode one envelope. Returns None for malformed JSON or a non-object body."""
    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; deep nesting raises RecursionError
        return None
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        return None
    return Envelope.from_dict(data)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_state(
    page: dict[str, Any] | None,
    element_id: str | None = None,
    state_id: str | None = None,
) -> Envelope:
    payload: dict[str, Any] = {"page": page, "elementId": element_id}
    if state_id is not None:
        payload["stateId"] = state_id
    return Envelope(MessageType.STATE, payload)


def make_reload() -> Envelope:
    return Envelope(MessageType.RELOAD, {})


def make_element_change(element_id: str | None) -> Envelope:
    return Envelope(MessageType.ELEMENT_CHANGE, element_id)


def make_content_request(*, envelope_id: str | None = None) -> Envelope:
    return Envelope(MessageType.CONTENT_REQUEST, {}, id=envelope_id or new_id())


def make_content_response(
    envelope_id: str,
    document: str,
    location: str,
    width: float,
    height: float,
) -> Envelope:
    return Envelope(
        MessageType.CONTENT_RESPONSE,
        {"document": document, "location": location, "width": width, "height": height},
        id=envelope_id,
    )


def make_sketch_request(page_name: str, artboard_name: str, *, envelope_id: str | None = None) -> Envelope:
    return Envelope(
        MessageType.SKETCH_REQUEST,
        {"pageName": page_name, "artboardName": artboard_name},
        id=envelope_id or new_id(),
    )


def make_sketch_response(envelope_id: str, page: dict[str, Any]) -> Envelope:
    return Envelope(MessageType.SKETCH_RESPONSE, {"page": page}, id=envelope_id)
