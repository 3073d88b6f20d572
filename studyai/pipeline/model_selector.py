"""
Model tier routing.

``route`` maps a classification to a cost/quality tier and
``resolve_model`` maps the tier to a concrete model id.  Pure functions,
no I/O.  The routing table is built once from settings and is read-only.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from studyai.core.config import Settings, settings
from studyai.schemas.intent import Intent, ModelTier

# Intents that always need the strongest model, whatever the confidence
COMPLEX_INTENTS = frozenset({Intent.MATH, Intent.CODE, Intent.MIXED})
FAST_CONFIDENCE_THRESHOLD = 0.9


def build_routing_table(cfg: Settings) -> Mapping[ModelTier, str]:
    """Freeze the tier -> model id mapping from configuration."""
    return MappingProxyType({
        ModelTier.FAST: cfg.fast_model,
        ModelTier.DEFAULT: cfg.default_model,
        ModelTier.COMPLEX: cfg.complex_model,
    })


MODEL_ROUTING: Mapping[ModelTier, str] = build_routing_table(settings)
CLASSIFIER_MODEL: str = settings.classifier_model


def route(intent: Intent, confidence: float) -> ModelTier:
    """
    MATH / CODE / MIXED -> complex, unconditionally.
    Otherwise confidence > 0.9 -> fast, else default.
    """
    if intent in COMPLEX_INTENTS:
        return ModelTier.COMPLEX
    if confidence > FAST_CONFIDENCE_THRESHOLD:
        return ModelTier.FAST
    return ModelTier.DEFAULT


def resolve_model(
    tier: ModelTier,
    routing: Mapping[ModelTier, str] = MODEL_ROUTING,
) -> str:
    return routing[tier]
