# nextwatch/clients/llm.py
import logging

from openai import AsyncOpenAI
from nextwatch.core.config import get_settings

logger = logging.getLogger(__name__)

_client: AsyncOpenAI | None = None


def connect():
    """
    Build the process-wide OpenAI client.
    Retries are disabled: a failed completion surfaces to the caller as is.
    """
    global _client
    settings = get_settings()
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set, recommendation requests will fail upstream")
    _client = AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        timeout=settings.openai_timeout_s,
        max_retries=0,
    )


async def disconnect():
    global _client
    if _client:
        await _client.close()
    _client = None


def get_llm() -> AsyncOpenAI:
    assert _client is not None, "OpenAI client not initialized"
    return _client
