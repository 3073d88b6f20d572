"""
LLM provider client singleton, chat completion call, and token counting.

The classifier and the generation dispatcher both go through
``complete_chat``; they differ only in model id, prompt and sampling.
"""

from __future__ import annotations

import threading
from typing import Any

import openai
import tiktoken

from studyai.core.config import settings
from studyai.utils.logging import get_logger

logger = get_logger("studyai.services.llm")


class LLMCallError(RuntimeError):
    """A chat completion call failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


# ── Singleton client ────────────────────────────────────────────────
_client_lock = threading.Lock()
_client_instance: openai.AsyncOpenAI | None = None


def get_llm_client() -> openai.AsyncOpenAI:
    """
    Return a module-level async client singleton.

    Raises LLMCallError when the API key is missing so callers handle a
    misconfigured provider the same way as an unreachable one.
    """
    global _client_instance
    if _client_instance is not None:
        return _client_instance

    with _client_lock:
        if _client_instance is not None:
            return _client_instance

        if not settings.llm_api_key:
            raise LLMCallError("LLM API key not configured (LLM_API_KEY).")

        _client_instance = openai.AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            max_retries=settings.llm_max_retries,
        )
        logger.info("LLM client singleton initialized (base_url=%s).", settings.llm_base_url)
        return _client_instance


async def complete_chat(
    *,
    model: str,
    messages: list[dict[str, str]],
    max_tokens: int,
    temperature: float,
    timeout: float,
) -> str:
    """
    Run one chat completion and return the generated text.

    Raises:
        LLMCallError: non-success status, network error, timeout, or a
            response without a text choice.
    """
    client = get_llm_client()
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=timeout,
        )
    except openai.APIStatusError as e:
        raise LLMCallError(f"LLM API error: {e.status_code}", status_code=e.status_code) from e
    except openai.APITimeoutError as e:
        raise LLMCallError(f"LLM call timed out after {timeout:.0f}s") from e
    except openai.OpenAIError as e:
        raise LLMCallError(f"LLM call failed: {e}") from e

    # The client does not validate the body; read it field by field
    try:
        choices = getattr(response, "choices", None)
        if not choices:
            raise LLMCallError("LLM response contained no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
    except (AttributeError, TypeError, IndexError, KeyError) as e:
        raise LLMCallError(f"Malformed LLM response: {type(e).__name__}") from e

    if not isinstance(content, str):
        raise LLMCallError("LLM response contained no text content")
    return content


# ── Token counting ──────────────────────────────────────────────────
_encoder_lock = threading.Lock()
_encoder: Any | None = None


def _get_encoder() -> Any:
    global _encoder
    if _encoder is not None:
        return _encoder
    with _encoder_lock:
        if _encoder is None:
            _encoder = tiktoken.get_encoding("cl100k_base")
        return _encoder


def count_tokens(text: str) -> int:
    """Approximate prompt size with the cl100k_base encoding."""
    return len(_get_encoder().encode(text))


def count_message_tokens(messages: list[dict[str, str]]) -> int:
    return sum(count_tokens(m.get("content", "")) for m in messages)
