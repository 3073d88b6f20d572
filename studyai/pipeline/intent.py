"""
Pipeline stage 1: LLM intent classification.

One cheap model call labels the query.  The reply is parsed with an
explicit fallible step; whenever that step (or the call itself) fails,
the fixed DEFAULT record is used instead.  This stage never raises.
"""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from studyai.core.config import settings
from studyai.pipeline.model_selector import CLASSIFIER_MODEL, route
from studyai.prompts.classifier import build_classifier_prompt
from studyai.schemas.intent import ClassificationResult, Intent
from studyai.services.llm import LLMCallError, complete_chat
from studyai.utils.logging import get_logger
from studyai.utils.text import extract_json_object, preview

logger = get_logger("studyai.pipeline.intent")


class ClassificationError(Exception):
    """The classifier reply could not be turned into a classification."""


class _ClassifierPayload(BaseModel):
    """What the classifier model is asked to return."""
    model_config = ConfigDict(extra="ignore")

    intent: Intent
    confidence: float = Field(ge=0.0, le=1.0)
    needsRetrieval: bool
    needsComputation: bool
    needsVisualization: bool

    @field_validator("intent", mode="before")
    @classmethod
    def _normalize_intent(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


def default_classification() -> ClassificationResult:
    """The fixed record used whenever classification fails."""
    intent, confidence = Intent.CONCEPTUAL, 0.5
    return ClassificationResult(
        intent=intent,
        confidence=confidence,
        needs_retrieval=True,
        needs_computation=False,
        needs_visualization=False,
        tier=route(intent, confidence),
        fallback=True,
    )


def parse_classification(reply: str) -> ClassificationResult | None:
    """
    Parse the first balanced JSON object in ``reply``.

    Returns None on no object, invalid JSON, a missing field, an unknown
    intent or an out-of-range confidence.
    """
    blob = extract_json_object(reply)
    if blob is None:
        logger.warning("[INTENT] No JSON object in classifier reply: %s", preview(reply))
        return None

    try:
        data = json.loads(blob)
        payload = _ClassifierPayload.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("[INTENT] Unusable classifier payload (%s): %s", type(e).__name__, preview(blob))
        return None

    return ClassificationResult(
        intent=payload.intent,
        confidence=payload.confidence,
        needs_retrieval=payload.needsRetrieval,
        needs_computation=payload.needsComputation,
        needs_visualization=payload.needsVisualization,
        tier=route(payload.intent, payload.confidence),
    )


async def _request_classification(query: str, subject: str | None) -> str:
    try:
        return await complete_chat(
            model=CLASSIFIER_MODEL,
            messages=[{"role": "user", "content": build_classifier_prompt(query, subject)}],
            max_tokens=settings.classifier_max_tokens,
            temperature=settings.classifier_temperature,
            timeout=settings.classifier_timeout_seconds,
        )
    except LLMCallError as e:
        raise ClassificationError(str(e)) from e


async def classify_intent(query: str, subject: str | None = None) -> ClassificationResult:
    """Label ``query`` with an intent and tier; falls back to the default record."""
    try:
        reply = await _request_classification(query, subject)
    except ClassificationError as e:
        logger.warning("[INTENT] Classifier call failed: %s. Using default.", e)
        return default_classification()

    result = parse_classification(reply)
    if result is None:
        return default_classification()

    logger.info(
        "[INTENT] Classified: intent=%s | confidence=%.2f | tier=%s | retrieval=%s",
        result.intent.value, result.confidence, result.tier.value, result.needs_retrieval,
    )
    return result
