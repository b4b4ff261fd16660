"""
JSON helpers shared by the MCP server and the gateway.
Model/payload serialization plus event-stream payload extraction.
"""

import asyncio
import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from logging_config import get_logger

logger = get_logger(__name__)


def to_serializable(obj: Any) -> Any:
    """Recursively turn models, dates and containers into plain JSON values.

    Models are dumped by alias so the wire names (``isError``,
    ``structuredContent``) survive.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {key: to_serializable(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    return obj


def convert_to_serializable(obj: Any) -> Any:
    """``to_serializable`` plus a dry-run encode; raises ValueError when it cannot be JSON."""
    payload = to_serializable(obj)
    try:
        json.dumps(payload)
    except (TypeError, OverflowError, ValueError) as e:
        raise ValueError(f"Object is not JSON serializable: {e}") from e
    return payload


async def to_json_string_async(data_obj: Any, indent: Optional[int] = None) -> str:
    """Encode ``data_obj`` off the event loop; compact unless ``indent`` is given."""
    separators = None if indent is not None else (",", ":")
    return await asyncio.to_thread(
        json.dumps, data_obj, indent=indent, ensure_ascii=False, separators=separators
    )


def parse_event_stream(body: str) -> List[Dict[str, Any]]:
    """
    Extract JSON messages from a text/event-stream body.

    Multi-line ``data:`` fields of one event are joined before decoding;
    events whose data is not JSON are skipped.
    """
    messages: List[Dict[str, Any]] = []
    data_lines: List[str] = []

    def flush():
        if data_lines:
            raw = "\n".join(data_lines)
            data_lines.clear()
            try:
                messages.append(json.loads(raw))
            except json.JSONDecodeError:
                logger.debug(f"Skipping non-JSON event data: {raw[:80]}")

    for line in body.splitlines():
        if not line.strip():
            flush()
        elif line.startswith("data:"):
            data_lines.append(line[5:].lstrip())
    flush()
    return messages
