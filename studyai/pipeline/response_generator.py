"""
Pipeline stage 3: Generation dispatch.

1. Resolve the tier to a concrete model id
2. Build the message list: system, last N history turns, user
3. Pick the sampling temperature from the intent
4. Call the provider; any failure is fatal for the request
"""

from __future__ import annotations

import logging
from typing import Sequence

from studyai.core.config import settings
from studyai.pipeline.model_selector import resolve_model
from studyai.schemas.intent import Intent, ModelTier
from studyai.schemas.response import ChatMessage
from studyai.services.llm import LLMCallError, complete_chat, count_message_tokens
from studyai.utils.logging import get_logger

logger = get_logger("studyai.pipeline.response_generator")

PRECISE_INTENTS = frozenset({Intent.MATH, Intent.CODE})
# Conversation turns forwarded to generation, however many the caller sends
HISTORY_WINDOW = 4


class GenerationError(Exception):
    """The generation call failed; the request cannot produce an answer."""

    def __init__(self, message: str, *, model: str, status_code: int | None = None):
        super().__init__(message)
        self.model = model
        self.status_code = status_code


def select_temperature(intent: Intent) -> float:
    if intent in PRECISE_INTENTS:
        return settings.precise_temperature
    return settings.creative_temperature


def build_messages(
    system_prompt: str,
    user_prompt: str,
    history: Sequence[ChatMessage],
    window: int = HISTORY_WINDOW,
) -> list[dict[str, str]]:
    """``[system, *history[-window:], user]``; the window is always applied."""
    recent = list(history)[-window:] if window > 0 else []

    messages = [{"role": "system", "content": system_prompt}]
    messages.extend({"role": m.role, "content": m.content} for m in recent)
    messages.append({"role": "user", "content": user_prompt})
    return messages


async def generate_answer(
    *,
    system_prompt: str,
    user_prompt: str,
    history: Sequence[ChatMessage],
    tier: ModelTier,
    intent: Intent,
) -> tuple[str, str]:
    """
    Run the generation call.

    Returns:
        (raw reply text, model id used)

    Raises:
        GenerationError: provider failure or an empty reply.
    """
    model = resolve_model(tier)
    temperature = select_temperature(intent)
    messages = build_messages(system_prompt, user_prompt, history)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("[GENERATE] Prompt ~%d tokens", count_message_tokens(messages))

    try:
        reply = await complete_chat(
            model=model,
            messages=messages,
            max_tokens=settings.generation_max_tokens,
            temperature=temperature,
            timeout=settings.generation_timeout_seconds,
        )
    except LLMCallError as e:
        raise GenerationError(str(e), model=model, status_code=e.status_code) from e

    if not reply.strip():
        raise GenerationError("LLM returned an empty reply", model=model)

    logger.info(
        "[GENERATE] %d chars from %s (temp=%.1f, history=%d)",
        len(reply), model, temperature, len(messages) - 2,
    )
    return reply, model
