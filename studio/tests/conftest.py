"""
Pytest configuration and fixtures for studio tests.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from studio.main import app
from studio.services.compiler import compiler
from studio.services.editor import editor
from studio.services.patterns import pattern_registry
from studio.services.session import session


class RecordingChannel:
    """Session-side channel that records everything sent to it."""

    def __init__(self, fail: bool = False):
        self.sent: list[dict] = []
        self.fail = fail

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent.append(json.loads(data))

    def types(self) -> list[str]:
        return [m["type"] for m in self.sent]


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test starts with an empty session, page and registry."""
    session.reset()
    pattern_registry.set_styleguide(None)
    compiler.invalidate()
    editor.reset()
    yield
    session.reset()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def channel_factory():
    return RecordingChannel


@pytest.fixture
def styleguide(tmp_path):
    """A styleguide on disk with a button (with props typings) and a card."""
    components = tmp_path / "components"
    components.mkdir()
    (components / "button.js").write_text("module.exports.default = function Button(props) { return props.label; };\n")
    (components / "card.js").write_text("module.exports.default = function Card(props) { return props.children; };\n")
    (components / "empty.js").write_text("   \n")
    return tmp_path


BUTTON_TYPINGS = """
export interface ButtonProps {
    label: string;
    disabled?: boolean;
    size?: 'small' | 'large';
    onClick?: () => void;
}
"""


@pytest.fixture
def patterns_request(styleguide):
    """Body for PUT /api/patterns registering the styleguide's patterns."""
    return {
        "styleguide": str(styleguide),
        "patterns": [
            {"id": "components/button", "path": "components/button.js", "interface": BUTTON_TYPINGS},
            {
                "id": "components/card",
                "path": "components/card.js",
                "properties": [{"id": "title", "type": "string"}, {"id": "footer", "type": "element"}],
            },
            {"id": "components/empty", "path": "components/empty.js"},
            {"id": "components/missing", "path": "components/missing.js"},
        ],
    }


@pytest.fixture
def page_doc():
    return {
        "_type": "pattern",
        "id": "root",
        "pattern": "components/card",
        "name": "Card",
        "properties": {"title": "Welcome"},
        "children": [
            {
                "_type": "pattern",
                "id": "b1",
                "pattern": "components/button",
                "name": "Button",
                "properties": {"label": "Go"},
                "children": [],
            },
            {
                "_type": "pattern",
                "id": "b2",
                "pattern": "components/button",
                "name": "Button",
                "properties": {"label": "Stop"},
                "children": [],
            },
        ],
    }
