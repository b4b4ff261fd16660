"""
Session management for the MCP client side.
Handles session creation, reuse, invalidation and the single retry on rejection.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional

from core.errors import SessionFatalError, SessionRejectedError, WeatherChatError
from logging_config import get_logger, setup_session_logging, end_session_logging
from models import SessionInfo

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    INVALIDATING = "invalidating"


class SessionManager:
    """Holds at most one MCP session id for a client context.

    A stored id is assumed valid until the server rejects it. The transport
    must provide ``initialize() -> SessionInfo``, ``send(request, session_id)``
    and ``terminate(session_id)``.
    """

    def __init__(self, transport):
        self.transport = transport
        self.current_session: Optional[SessionInfo] = None
        self.state = SessionState.UNINITIALIZED
        self.handshake_count = 0
        logger.info(
            "Session manager initialized for %s", getattr(transport, "endpoint", transport)
        )

    async def create_session(self) -> SessionInfo:
        """Perform the initialize handshake and store the new session."""
        logger.info("🔌 Initializing MCP session...")
        session_info = await self.transport.initialize()
        self.handshake_count += 1

        self.current_session = session_info
        self.state = SessionState.ACTIVE
        setup_session_logging(session_info.session_id)

        logger.info(
            f"✅ Created new session: {session_info.session_id} "
            f"(protocol {session_info.protocol_version}, "
            f"server {session_info.server_info.get('name', 'unknown')})"
        )
        return session_info

    async def ensure_session(self) -> str:
        """Return a currently-believed-valid session id, initializing if needed."""
        if self.current_session and self.current_session.is_active:
            self.state = SessionState.ACTIVE
            return self.current_session.session_id

        session_info = await self.create_session()
        return session_info.session_id

    def invalidate(self, session_id: Optional[str] = None) -> bool:
        """Discard the stored session.

        With ``session_id`` given, only that session is discarded; a session
        renewed meanwhile by another call is kept.
        """
        session = self.current_session
        if session is None:
            return False
        if session_id is not None and session.session_id != session_id:
            return False

        session.is_active = False
        self.current_session = None
        self.state = SessionState.UNINITIALIZED
        end_session_logging(session.session_id)
        logger.info(f"Invalidated session: {session.session_id}")
        return True

    async def call_with_session(self, request: Mapping[str, Any]) -> Dict[str, Any]:
        """Send ``request`` on the current session, re-initializing once on rejection."""
        session_id = await self.ensure_session()
        try:
            return await self.transport.send(request, session_id)
        except SessionRejectedError as e:
            logger.warning(f"🔄 Session {session_id} rejected ({e.message}); retrying with a new session")

        self.invalidate(session_id)
        self.state = SessionState.INVALIDATING

        try:
            session_id = await self.ensure_session()
        except WeatherChatError as e:
            self.state = SessionState.UNINITIALIZED
            raise SessionFatalError(f"Could not re-initialize MCP session: {e.message}") from e

        try:
            return await self.transport.send(request, session_id)
        except SessionRejectedError as e:
            self.invalidate(session_id)
            logger.error(f"Fresh session {session_id} rejected as well; giving up")
            raise SessionFatalError(
                f"MCP server rejected a freshly initialized session: {e.message}"
            ) from e

    async def close(self) -> None:
        """Terminate the server-side session, if any, and forget it."""
        session = self.current_session
        if session is None:
            return
        try:
            await self.transport.terminate(session.session_id)
        except WeatherChatError as e:
            logger.warning(f"Could not terminate session {session.session_id}: {e.message}")
        self.invalidate(session.session_id)
