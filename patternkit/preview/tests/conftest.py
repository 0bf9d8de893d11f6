"""
Preview test fixtures.

FakeLoader hands out one pending future per requested script so tests decide
when (and in which order) bundles arrive.
"""

import asyncio

import pytest

from patternkit.kernel.types import new_id


class FakeLoader:
    def __init__(self):
        self.requests: list[str] = []
        self._futures: dict[str, asyncio.Future] = {}

    async def load(self, path: str) -> str:
        self.requests.append(path)
        future = asyncio.get_running_loop().create_future()
        self._futures[path] = future
        return await future

    def resolve(self, path: str, source: str = "module.exports = {};") -> None:
        self._futures.pop(path).set_result(source)

    def fail(self, path: str, error: Exception | None = None) -> None:
        self._futures.pop(path).set_exception(error or OSError("connection refused"))


def element(pattern, element_id=None, children=None, properties=None, name=""):
    return {
        "_type": "pattern",
        "id": element_id or new_id(),
        "pattern": pattern,
        "name": name,
        "properties": properties or {},
        "children": children or [],
    }


@pytest.fixture
def loader():
    return FakeLoader()


@pytest.fixture
def page():
    """Root card with a button, a text node and a second button (repeat)."""
    return element(
        "components/card",
        "root",
        name="Card",
        children=[
            element("components/button", "b1", name="Button", properties={"label": "One"}),
            element("synthetic:text", "t1", name="Text", properties={"text": "hello"}),
            element("components/button", "b2", name="Button", properties={"label": "Two"}),
        ],
    )


@pytest.fixture
def make_element():
    return element
