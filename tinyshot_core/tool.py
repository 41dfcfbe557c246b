"""
Browser snapshot tool adapter

Wraps a browser automation tool server's ``browser_snapshot`` call so the
model receives a compressed snapshot instead of the full page.

Usage:
    from tinyshot_core.tool import exec_snapshot_tool

    result = await exec_snapshot_tool(mcp_client, {"maxText": 2000})
    # {"content": [{"type": "text", "text": "{\n  \"title\": ..."}]}
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from .exceptions import SnapshotToolError
from .extractor import Tinyshot, get_default_tinyshot
from .snapshot_types import CompactSnapshot, CompressionOptions

logger = logging.getLogger(__name__)

SNAPSHOT_TOOL_NAME = "browser_snapshot"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a dict or an attribute-style result object."""
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def extract_html(result: Any) -> str:
    """
    Pull HTML out of a tool-call result.

    Uses the first content item if it is text. JSON payloads are searched
    for ``html`` then ``content``; anything else is taken as raw HTML.
    """
    content = _field(result, "content") or []
    if not content:
        return ""

    first = content[0]
    if _field(first, "type") != "text":
        return ""

    text = _field(first, "text") or ""
    try:
        data = json.loads(text)
    except ValueError:
        return text

    if isinstance(data, Mapping):
        return data.get("html") or data.get("content") or text
    return text


def tool_options(args: Optional[Mapping[str, Any]], tinyshot: Tinyshot) -> CompressionOptions:
    """
    Options for a model-issued snapshot call.

    Zero or empty overrides (``{"maxText": 0}``) fall back to the tool
    defaults instead of failing the call; negative values still raise.
    """
    defaults = CompressionOptions(
        max_text_length=tinyshot.config.tool_max_text,
        max_element_count=tinyshot.config.tool_max_elems,
    )
    overrides = {key: value for key, value in (args or {}).items() if value}
    return CompressionOptions.from_mapping(overrides, defaults=defaults)


async def exec_snapshot_tool(
    client: Any,
    args: Optional[Mapping[str, Any]] = None,
    tinyshot: Optional[Tinyshot] = None,
) -> Dict[str, Any]:
    """
    Take a browser snapshot through ``client`` and return it compressed.

    Args:
        client: Tool client exposing ``async call_tool(name=..., arguments=...)``
        args: Optional ``maxText`` / ``maxElems`` overrides
        tinyshot: Compressor to use (default: process-wide instance)

    Returns:
        Tool result dict with the snapshot JSON as its only text item

    Raises:
        SnapshotToolError: snapshot call failed, carried no HTML, or was too large
    """
    tinyshot = tinyshot or get_default_tinyshot()
    try:
        result = await client.call_tool(name=SNAPSHOT_TOOL_NAME, arguments={})
        html = extract_html(result)
        if not html:
            raise SnapshotToolError("HTML extraction failed")

        snapshot = tinyshot.compress(html, tool_options(args, tinyshot))
    except SnapshotToolError:
        raise
    except Exception as e:
        raise SnapshotToolError(f"Snapshot tool failed: {e}") from e

    logger.debug(f"Snapshot tool: {len(html)} chars → {len(snapshot.elements)} elements")
    return {"content": [{"type": "text", "text": snapshot.to_json(indent=2)}]}


async def snapshot_page(
    page: Any,
    options: Optional[Mapping[str, Any]] = None,
    tinyshot: Optional[Tinyshot] = None,
) -> CompactSnapshot:
    """Compress the current HTML of a Playwright page."""
    tinyshot = tinyshot or get_default_tinyshot()
    html = await page.content()
    return tinyshot.compress(html, options)
