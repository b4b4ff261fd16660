"""
Logging configuration for the weather MCP server and chat gateway.
Provides global logging plus session tagging of log records.
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional

# Global state
main_logger = None
current_session_id: Optional[str] = None


class SessionContextFilter(logging.Filter):
    """Stamp every record with the active MCP session id (or '-')."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = current_session_id or "-"
        return True


def setup_main_logging() -> logging.Logger:
    """Setup main logging (startup, global events)"""
    global main_logger

    if main_logger is not None:
        return main_logger

    formatter = logging.Formatter(
        "%(asctime)s - [%(session_id)s] - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    session_filter = SessionContextFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    # STDERR Handler
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(session_filter)
    root_logger.addHandler(stderr_handler)

    # Optional log file
    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        main_log_file = logs_dir / f"weather_mcp_{timestamp}.log"

        file_handler = logging.FileHandler(main_log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(session_filter)
        root_logger.addHandler(file_handler)

    # Quiet libraries
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)

    main_logger = logging.getLogger("weather_mcp")
    main_logger.info("🔧 Main logging initialized")

    return main_logger


def setup_session_logging(session_id: str):
    """Tag subsequent log records with the given session id"""
    global current_session_id

    current_session_id = session_id
    get_logger().info(f"🎯 Session {session_id} logging started")


def end_session_logging(session_id: str):
    """Stop tagging log records with the given session id"""
    global current_session_id

    get_logger().info(f"🔚 Session {session_id} logging ended")
    if current_session_id == session_id:
        current_session_id = None


def get_logger(name: str = "weather_mcp") -> logging.Logger:
    """Module logger; configures main logging on first use."""
    global main_logger
    if main_logger is None:
        main_logger = setup_main_logging()
    return logging.getLogger(name)


# Initialize
logger = setup_main_logging()
