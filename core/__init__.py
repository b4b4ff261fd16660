"""
Core package initialization
"""
from .response_cache import CacheKey, CacheKind, ResponseCache
from .session_manager import SessionManager, SessionState
from .tool_registry import ToolArgs, ToolDescriptor, ToolRegistry

__all__ = [
    'CacheKey',
    'CacheKind',
    'ResponseCache',
    'SessionManager',
    'SessionState',
    'ToolArgs',
    'ToolDescriptor',
    'ToolRegistry',
]
