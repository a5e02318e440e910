"""Turn whatever a fetcher returned into a list of MCP text items.

The tool layer never hands raw payloads to the client: every result goes
through ``normalize_response`` so the client always receives at least one
``TextContent`` item, error payloads stay recognisable and known shapes
(projects, milestones, issues) get a compact one-line rendering.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mcp.types import TextContent

from .exceptions import ResolutionError
from .github.batch import BatchOutcome, BatchResult
from .github.constants import NO_DATA_TEXT
from .models import ApiModel

logger = logging.getLogger("mcp-github-projects.normalizer")


def text_item(text: str) -> TextContent:
    return TextContent(type="text", text=text)


def _plain(value: Any) -> Any:
    """Convert library objects into JSON-friendly structures."""
    if isinstance(value, ApiModel):
        return value.to_simplified_dict()
    if isinstance(value, BatchResult | BatchOutcome | ResolutionError):
        return value.to_dict()
    if isinstance(value, TextContent):
        return value
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(v) for v in value]
    return value


def _dumps(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def convert_to_text_item(node: Any) -> TextContent:
    """
    Render one node as a text item.

    Nodes with a ``title`` become ``"{title} (ID: {id}, Status: {status})"``
    followed by their description or body; other mappings are dumped as
    indented JSON and primitives are rendered with ``str``.
    """
    node = _plain(node)
    if node is None:
        return text_item("No data")
    if isinstance(node, TextContent):
        return node
    if isinstance(node, str):
        return text_item(node)
    if isinstance(node, Mapping):
        if node.get("type") == "text" and isinstance(node.get("text"), str):
            return text_item(node["text"])
        if "title" in node:
            title = node.get("title") or "Untitled"
            identifier = node.get("id") or node.get("number") or ""
            status = node.get("state") or ("closed" if node.get("closed") else "open")
            text = f"{title} (ID: {identifier}, Status: {status})"
            description = node.get("description") or node.get("body")
            if description:
                text += f"\n\n{description}"
            return text_item(text)
        return text_item(_dumps(node))
    if isinstance(node, list):
        return text_item(_dumps(node))
    return text_item(str(node))


def _error_item(raw: Mapping[str, Any]) -> TextContent:
    """The sole item for an error mapping.

    An ``error`` that is already a text item is returned as is. Any other
    error mapping is dumped whole as JSON, so ``success`` and ``details``
    travel with the message and ``is_error_envelope`` can recognise it.
    """
    error = raw.get("error")
    if isinstance(error, TextContent):
        return error
    return text_item(_dumps(_plain(raw)))


def _has_data(mapping: Mapping[str, Any]) -> bool:
    return any(key not in ("error", "details") for key in mapping)


def _normalize(raw: Any) -> list[TextContent]:
    raw = _plain(raw)

    if isinstance(raw, Mapping):
        if "error" in raw:
            return [_error_item(raw)]
        content = raw.get("content")
        if isinstance(content, list):
            items = [convert_to_text_item(node) for node in content]
        elif _has_data(raw):
            items = [convert_to_text_item(raw)]
        else:
            items = []
    elif isinstance(raw, list):
        items = [convert_to_text_item(node) for node in raw]
    elif raw is None:
        items = []
    else:
        items = [convert_to_text_item(raw)]

    return items or [text_item(NO_DATA_TEXT)]


def normalize_response(raw: Any) -> list[TextContent]:
    """
    Normalize a fetcher result into the tool envelope's content list.

    Rules, in order: a mapping with an ``error`` key becomes a single error
    item; a mapping with a ``content`` list is converted element-wise; a bare
    list is converted element-wise; any other mapping or value becomes one
    item; ``None`` and empty collections become the "No data available"
    sentinel. The result is never empty and this function never raises.

    Args:
        raw: Mapping, list, model, batch result, text item or primitive

    Returns:
        At least one text item
    """
    try:
        return _normalize(raw)
    except Exception as e:  # noqa: BLE001 - the envelope must always be produced
        logger.error(f"Failed to normalize response: {e}")
        logger.debug("Full exception details:", exc_info=True)
        return [
            text_item(
                _dumps(
                    {
                        "success": False,
                        "error": f"Failed to format response: {e}",
                        "rawType": type(raw).__name__,
                    }
                )
            )
        ]


def _is_error_text(text: str) -> bool:
    try:
        parsed = json.loads(text)
    except ValueError:
        return False
    return isinstance(parsed, dict) and (
        "error" in parsed or parsed.get("success") is False
    )


def is_error_envelope(items: Sequence[TextContent]) -> bool:
    """Tell whether normalized items carry an error payload."""
    return any(_is_error_text(item.text) for item in items)
