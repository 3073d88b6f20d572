"""
HTTP client for the external retrieval service.

Request:  POST {query, subjectId, limit}
Response: {"sources": [{title, url, content, ...}, ...]}
"""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from studyai.core.config import settings
from studyai.schemas.retrieval import RetrievalPayload, Source
from studyai.utils.logging import get_logger

logger = get_logger("studyai.services.knowledge_base")


RETRIEVAL_LIMIT = 5


class RetrievalError(Exception):
    """The retrieval service could not produce a usable source list."""


async def fetch_sources(
    query: str,
    subject_id: str | None,
    *,
    limit: int = RETRIEVAL_LIMIT,
    timeout: float | None = None,
) -> list[Source]:
    """
    Ask the retrieval service for ranked passages, preserving its order.

    Raises:
        RetrievalError: service not configured, timeout, non-2xx status,
            or a payload that does not match ``{"sources": [...]}``.
    """
    if not settings.retrieval_url:
        raise RetrievalError("Retrieval service URL not configured (RETRIEVAL_URL).")

    headers = {"Content-Type": "application/json"}
    if settings.retrieval_api_key:
        headers["Authorization"] = f"Bearer {settings.retrieval_api_key}"

    body = {
        "query": query,
        "subjectId": subject_id,
        "limit": limit,
    }

    try:
        async with httpx.AsyncClient(timeout=timeout or settings.retrieval_timeout_seconds) as client:
            response = await client.post(settings.retrieval_url, json=body, headers=headers)
            response.raise_for_status()
            data = response.json()
    except httpx.TimeoutException as e:
        raise RetrievalError("Retrieval request timed out") from e
    except httpx.HTTPStatusError as e:
        raise RetrievalError(f"Retrieval service returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise RetrievalError(f"Retrieval request failed: {e}") from e
    except ValueError as e:
        raise RetrievalError("Retrieval service returned invalid JSON") from e

    if not isinstance(data, dict):
        raise RetrievalError("Retrieval payload was not a JSON object")
    try:
        payload = RetrievalPayload.model_validate(data)
    except ValidationError as e:
        raise RetrievalError(f"Malformed retrieval payload: {e.error_count()} error(s)") from e

    return payload.sources
