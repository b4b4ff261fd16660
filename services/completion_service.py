"""
Text-completion service backed by the Anthropic API.
Prompt in, text out; failures come back as Err so callers can fall back.
"""

from typing import Optional

import anthropic

from all_types.internal_types import Err, Ok, Result
from config import LLMConfig, llm_config
from core.errors import ErrorKind
from logging_config import get_logger

logger = get_logger(__name__)


class CompletionService:
    """Interface for prompt -> text providers."""

    async def complete(self, prompt: str) -> Result[str]:
        raise NotImplementedError


class AnthropicCompletionService(CompletionService):
    """Claude via ``anthropic.AsyncAnthropic``. No client-side retries."""

    def __init__(self, api_key: str, model: str, max_tokens: int = 1000, timeout_seconds: float = 30.0):
        self.model = model
        self.max_tokens = max_tokens
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key, timeout=timeout_seconds, max_retries=0
        )

    async def complete(self, prompt: str) -> Result[str]:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIConnectionError as e:
            logger.error(f"Claude API unreachable: {e}")
            return Err(ErrorKind.TRANSPORT_FAILURE, f"Text completion unavailable: {e}")
        except anthropic.APIError as e:
            logger.error(f"Claude API error: {e}")
            return Err(ErrorKind.PROVIDER_FAILURE, f"Text completion failed: {e}")

        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text
        if not text.strip():
            return Err(ErrorKind.PROVIDER_FAILURE, "Text completion returned no text")
        return Ok(text.strip())


def build_completion_service(settings: LLMConfig = llm_config) -> Optional[CompletionService]:
    """Return the configured completion service, or None when no API key is set."""
    if not settings.enabled:
        logger.warning("⚠️  Claude service not available: CLAUDE_API_KEY is not set")
        return None

    logger.info(f"🤖 Claude AI service initialized ({settings.model})")
    return AnthropicCompletionService(
        api_key=settings.api_key,
        model=settings.model,
        max_tokens=settings.max_tokens,
        timeout_seconds=settings.timeout_seconds,
    )
