"""
Schema for the classification stage output.

ClassificationResult is always fully populated: a failed classification
is replaced by DEFAULT_CLASSIFICATION, never by a partial record.
"""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field

from studyai.schemas.base import CamelModel


class Intent(str, Enum):
    FACTUAL = "FACTUAL"
    CONCEPTUAL = "CONCEPTUAL"
    MATH = "MATH"
    CODE = "CODE"
    GRAPH = "GRAPH"
    MIXED = "MIXED"


class ModelTier(str, Enum):
    """Cost/quality bucket resolved to a concrete model id by the router."""
    FAST = "fast"
    DEFAULT = "default"
    COMPLEX = "complex"


class ClassificationResult(CamelModel):
    """Complete decision object produced by the intent classifier."""
    intent: Intent
    confidence: float = Field(ge=0.0, le=1.0)
    needs_retrieval: bool
    needs_computation: bool
    needs_visualization: bool
    tier: ModelTier
    # True when the record is the fixed default rather than a model answer
    fallback: bool = False

    model_config = ConfigDict(frozen=True)
