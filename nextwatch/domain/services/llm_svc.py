# nextwatch/domain/services/llm_svc.py
from __future__ import annotations
import logging
from time import monotonic as _now

from openai import AsyncOpenAI, OpenAIError

from nextwatch.core.config import Settings
from nextwatch.core.errors import UpstreamError
from nextwatch.domain.services.prompts import build_messages

logger = logging.getLogger(__name__)


async def ask_for_movies(client: AsyncOpenAI, user_query: str, settings: Settings) -> str | None:
    """
    Send the recommendation prompt and return the raw reply text.
    Any provider, network or timeout error becomes UpstreamError carrying
    the provider's message.
    """
    t0 = _now()
    try:
        resp = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=build_messages(user_query),
            temperature=settings.OPENAI_TEMPERATURE,
            timeout=settings.openai_timeout_s,
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logger.error("LLM call failed model=%s after %.3fs: %s", settings.OPENAI_MODEL, _now() - t0, e)
        raise UpstreamError(str(e)) from e

    dt = _now() - t0
    u = getattr(resp, "usage", None)
    logger.info(
        "LLM call model=%s duration=%.3fs tokens(prompt=%s, completion=%s, total=%s)",
        getattr(resp, "model", settings.OPENAI_MODEL), dt,
        getattr(u, "prompt_tokens", None), getattr(u, "completion_tokens", None), getattr(u, "total_tokens", None),
    )
    if not resp.choices:
        raise UpstreamError("LLM returned no choices")
    content = resp.choices[0].message.content
    logger.debug("LLM raw reply: %s", content)
    return content
