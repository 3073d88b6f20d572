"""
Pipeline stage 2: Retrieval gate.

Calls the retrieval service only when the classifier asked for it.
Any retrieval failure degrades to an empty source list; it never changes
the control flow of the rest of the pipeline.
"""

from __future__ import annotations

from studyai.core.config import settings
from studyai.schemas.intent import ClassificationResult
from studyai.schemas.retrieval import Source
from studyai.services.knowledge_base import RETRIEVAL_LIMIT, RetrievalError, fetch_sources
from studyai.utils.logging import get_logger

logger = get_logger("studyai.pipeline.retrieval")


async def gather_sources(
    query: str,
    subject_id: str | None,
    classification: ClassificationResult,
) -> list[Source]:
    """Return the ordered source list for the prompt (possibly empty)."""
    if not classification.needs_retrieval:
        logger.info("[RETRIEVAL] Skipped (needsRetrieval=False)")
        return []

    try:
        sources = await fetch_sources(
            query,
            subject_id,
            limit=RETRIEVAL_LIMIT,
            timeout=settings.retrieval_timeout_seconds,
        )
    except RetrievalError as e:
        logger.warning("[RETRIEVAL] Failed, continuing without sources: %s", e)
        return []

    logger.info("[RETRIEVAL] %d source(s) for subject=%s", len(sources), subject_id or "-")
    return sources
