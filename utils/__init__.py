"""Utility functions for the weather MCP server and gateway."""

from .json_handler import (
    convert_to_serializable,
    parse_event_stream,
    to_json_string_async,
)

__all__ = ["convert_to_serializable", "parse_event_stream", "to_json_string_async"]
