"""
MCP client for the chat gateway.

``McpHttpTransport`` speaks JSON-RPC over the streamable HTTP transport and maps
HTTP failures onto the error taxonomy. ``McpToolClient`` runs tool calls through
a SessionManager so every request carries a live session id.
"""

import asyncio
import itertools
from typing import Any, Dict, List, Mapping, Optional, Tuple

import aiohttp
from mcp.types import LATEST_PROTOCOL_VERSION

from core.errors import ProviderError, SessionRejectedError, TransportError
from logging_config import get_logger
from models import SessionInfo, TextContent, ToolResult, ToolSummary
from utils import parse_event_stream, to_json_string_async

logger = get_logger(__name__)

SESSION_HEADER = "mcp-session-id"
PROTOCOL_HEADER = "mcp-protocol-version"

# Status codes the streamable HTTP server uses for a missing or unknown session
SESSION_REJECTION_STATUSES = (400, 404)


class McpHttpTransport:
    """JSON-RPC over HTTP POST to ``<base_url>/mcp``."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        client_name: str = "weather-chat-client",
        client_version: str = "1.0.0",
        protocol_version: str = LATEST_PROTOCOL_VERSION,
    ):
        self.base_url = base_url.rstrip("/")
        self.endpoint = self.base_url + "/mcp"
        self.client_info = {"name": client_name, "version": client_version}
        self.protocol_version = protocol_version
        self._negotiated_version: Optional[str] = None
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._request_ids = itertools.count(1)

    def initialize_params(self) -> Dict[str, Any]:
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": {},
            "clientInfo": self.client_info,
        }

    async def initialize(self) -> SessionInfo:
        """Run the initialize handshake and return the server-assigned session."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": "initialize",
            "params": self.initialize_params(),
        }
        headers, message = await self._post(payload, session_id=None)

        if "error" in message:
            raise ProviderError(
                f"MCP initialize failed: {message['error'].get('message', 'unknown error')}"
            )
        session_id = headers.get(SESSION_HEADER)
        if not session_id:
            raise ProviderError("MCP server did not assign a session id")

        result = message.get("result", {})
        self._negotiated_version = result.get("protocolVersion", self.protocol_version)

        await self._post(
            {"jsonrpc": "2.0", "method": "notifications/initialized"}, session_id=session_id
        )

        return SessionInfo(
            session_id=session_id,
            protocol_version=self._negotiated_version,
            server_info=result.get("serverInfo", {}),
            capabilities=result.get("capabilities", {}),
        )

    async def send(self, request: Mapping[str, Any], session_id: str) -> Dict[str, Any]:
        """Send ``{method, params}`` on an existing session and return the JSON-RPC result."""
        payload = {"jsonrpc": "2.0", "id": next(self._request_ids), **request}
        _, message = await self._post(payload, session_id=session_id)

        if "error" in message:
            raise ProviderError(message["error"].get("message", "MCP request failed"))
        return message.get("result", {})

    async def terminate(self, session_id: str) -> None:
        """Ask the server to drop a session."""
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as http_session:
                async with http_session.delete(
                    self.endpoint, headers={SESSION_HEADER: session_id}
                ) as response:
                    logger.info(f"Session {session_id} terminated (status {response.status})")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"Could not terminate MCP session: {e}") from e

    async def health(self) -> Optional[Dict[str, Any]]:
        """Return the MCP server's /health body, or None when unreachable."""
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as http_session:
                async with http_session.get(self.base_url + "/health") as response:
                    if response.status != 200:
                        return None
                    return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"MCP health check failed: {e}")
            return None

    async def _post(
        self, payload: Dict[str, Any], session_id: Optional[str]
    ) -> Tuple[Mapping[str, str], Dict[str, Any]]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json, text/event-stream",
        }
        if session_id:
            headers[SESSION_HEADER] = session_id
            if self._negotiated_version:
                headers[PROTOCOL_HEADER] = self._negotiated_version

        body = await to_json_string_async(payload)
        method = payload.get("method")

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as http_session:
                async with http_session.post(
                    self.endpoint, data=body, headers=headers
                ) as response:
                    if session_id and response.status in SESSION_REJECTION_STATUSES:
                        error_text = await response.text()
                        raise SessionRejectedError(
                            f"MCP server rejected session {session_id} "
                            f"({response.status}): {error_text[:200]}",
                            session_id=session_id,
                        )
                    if response.status >= 400:
                        error_text = await response.text()
                        raise ProviderError(
                            f"MCP server error {response.status} on {method}: {error_text[:200]}"
                        )
                    if response.status == 202 or "id" not in payload:
                        return response.headers, {}

                    content_type = response.headers.get("Content-Type", "")
                    if "text/event-stream" in content_type:
                        message = self._match_response(
                            parse_event_stream(await response.text()), payload["id"]
                        )
                    else:
                        message = await response.json()
                    return response.headers, message

        except aiohttp.ClientConnectionError as e:
            raise TransportError(
                f"MCP server is not reachable at {self.endpoint}: {e}"
            ) from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"MCP request {method} timed out") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"Malformed MCP response for {method}: {e}") from e

    @staticmethod
    def _match_response(messages: List[Dict[str, Any]], request_id: Any) -> Dict[str, Any]:
        for message in messages:
            if message.get("id") == request_id:
                return message
        raise ProviderError("Could not parse SSE response data from MCP server")


def parse_tool_result(result: Mapping[str, Any]) -> ToolResult:
    """Build a ToolResult from a ``tools/call`` result, keeping only text blocks."""
    blocks = [
        TextContent(text=block.get("text", ""))
        for block in result.get("content") or []
        if block.get("type") == "text"
    ]
    if not blocks:
        blocks = [TextContent(text="The MCP server returned no text content.")]
    return ToolResult(
        content=blocks,
        is_error=bool(result.get("isError", False)),
        structured_content=result.get("structuredContent"),
    )


class McpToolClient:
    """Tool-call surface used by the gateway."""

    def __init__(self, session_manager):
        self.session_manager = session_manager

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> ToolResult:
        result = await self.session_manager.call_with_session(
            {"method": "tools/call", "params": {"name": name, "arguments": arguments}}
        )
        logger.info(f"🔧 MCP tool {name} answered (isError={result.get('isError', False)})")
        return parse_tool_result(result)

    async def list_tools(self) -> List[ToolSummary]:
        result = await self.session_manager.call_with_session(
            {"method": "tools/list", "params": {}}
        )
        return [ToolSummary.model_validate(tool) for tool in result.get("tools", [])]

    async def server_info(self) -> Optional[Dict[str, Any]]:
        return await self.session_manager.transport.health()

    async def close(self) -> None:
        await self.session_manager.close()
