"""Tests for the browser snapshot tool adapter."""

import json
from types import SimpleNamespace

import pytest

from tinyshot_core.cache import SnapshotCache
from tinyshot_core.config import Config
from tinyshot_core.exceptions import InputTooLarge, SnapshotToolError
from tinyshot_core.extractor import Tinyshot
from tinyshot_core.tool import exec_snapshot_tool, extract_html, snapshot_page


PAGE = (
    "<html><head><title>Shop</title></head><body>"
    + "".join(f'<a href="/p/{i}">Product {i}</a>' for i in range(60))
    + "</body></html>"
)


def text_result(text):
    return {"content": [{"type": "text", "text": text}]}


class FakeClient:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def call_tool(self, name, arguments):
        self.calls.append((name, arguments))
        if self.error:
            raise self.error
        return self.result


class FakePage:
    async def content(self):
        return PAGE


@pytest.fixture
def tinyshot():
    return Tinyshot(cache=SnapshotCache())


class TestExtractHtml:

    def test_json_html_key(self):
        assert extract_html(text_result(json.dumps({"html": "<p>x</p>"}))) == "<p>x</p>"

    def test_json_content_key(self):
        assert extract_html(text_result(json.dumps({"content": "<p>y</p>"}))) == "<p>y</p>"

    def test_raw_text(self):
        assert extract_html(text_result("<p>raw</p>")) == "<p>raw</p>"

    def test_json_without_html_returns_text(self):
        payload = json.dumps([1, 2, 3])
        assert extract_html(text_result(payload)) == payload

    def test_non_text_content(self):
        assert extract_html({"content": [{"type": "image", "data": "..."}]}) == ""

    def test_empty_result(self):
        assert extract_html({"content": []}) == ""
        assert extract_html({}) == ""

    def test_attribute_style_result(self):
        result = SimpleNamespace(content=[SimpleNamespace(type="text", text="<b>ok</b>")])
        assert extract_html(result) == "<b>ok</b>"


@pytest.mark.asyncio
async def test_exec_uses_tool_defaults(tinyshot):
    client = FakeClient(text_result(json.dumps({"html": PAGE})))

    result = await exec_snapshot_tool(client, tinyshot=tinyshot)

    assert client.calls == [("browser_snapshot", {})]
    snapshot = json.loads(result["content"][0]["text"])
    assert snapshot["title"] == "Shop"
    assert len(snapshot["elems"]) == 50
    assert snapshot["elems"][0] == {
        "type": "link", "text": "Product 0", "sel": "a", "context": "page link"
    }


@pytest.mark.asyncio
async def test_exec_respects_args(tinyshot):
    client = FakeClient(text_result(PAGE))

    result = await exec_snapshot_tool(client, {"maxText": 5, "maxElems": 3}, tinyshot=tinyshot)

    snapshot = json.loads(result["content"][0]["text"])
    assert len(snapshot["text"]) == 5
    assert len(snapshot["elems"]) == 3


@pytest.mark.asyncio
async def test_exec_without_html_fails(tinyshot):
    client = FakeClient({"content": []})

    with pytest.raises(SnapshotToolError, match="HTML extraction failed"):
        await exec_snapshot_tool(client, tinyshot=tinyshot)


@pytest.mark.asyncio
async def test_exec_wraps_client_errors(tinyshot):
    client = FakeClient(error=RuntimeError("browser closed"))

    with pytest.raises(SnapshotToolError, match="browser closed") as exc_info:
        await exec_snapshot_tool(client, tinyshot=tinyshot)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_exec_wraps_size_guard():
    tinyshot = Tinyshot(cache=SnapshotCache(), config=Config(max_html_chars=10))
    client = FakeClient(text_result(PAGE))

    with pytest.raises(SnapshotToolError) as exc_info:
        await exec_snapshot_tool(client, tinyshot=tinyshot)
    assert isinstance(exc_info.value.__cause__, InputTooLarge)


@pytest.mark.asyncio
async def test_snapshot_page(tinyshot):
    snapshot = await snapshot_page(FakePage(), {"maxElems": 2}, tinyshot=tinyshot)

    assert snapshot.title == "Shop"
    assert [e.label for e in snapshot.elements] == ["Product 0", "Product 1"]


@pytest.mark.asyncio
async def test_exec_zero_args_fall_back_to_tool_defaults(tinyshot):
    client = FakeClient(text_result(PAGE))

    result = await exec_snapshot_tool(client, {"maxText": 0, "maxElems": None}, tinyshot=tinyshot)

    snapshot = json.loads(result["content"][0]["text"])
    assert len(snapshot["elems"]) == 50
    assert snapshot["text"].startswith("Shop Product 0")


@pytest.mark.asyncio
async def test_exec_negative_limit_fails(tinyshot):
    client = FakeClient(text_result(PAGE))

    with pytest.raises(SnapshotToolError, match="positive integer"):
        await exec_snapshot_tool(client, {"maxElems": -1}, tinyshot=tinyshot)
