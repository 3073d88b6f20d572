"""
Pydantic schemas for every pipeline boundary.
Each module covers one pipeline stage or cross-cutting concern.
"""

from studyai.schemas.intent import (
    ClassificationResult,
    Intent,
    ModelTier,
)
from studyai.schemas.retrieval import (
    Citation,
    RetrievalPayload,
    Source,
)
from studyai.schemas.segments import (
    CitationRef,
    CodeSegment,
    GraphSegment,
    MathSegment,
    ParsedResponse,
    Segment,
    TextSegment,
)
from studyai.schemas.response import (
    ChatMessage,
    OrchestratorRequest,
    OrchestratorResponse,
    RequestType,
    error_response,
)
from studyai.schemas.pipeline import PipelineContext

__all__ = [
    # Intent
    "ClassificationResult",
    "Intent",
    "ModelTier",
    # Retrieval
    "Citation",
    "RetrievalPayload",
    "Source",
    # Segments
    "CitationRef",
    "CodeSegment",
    "GraphSegment",
    "MathSegment",
    "ParsedResponse",
    "Segment",
    "TextSegment",
    # Request / response
    "ChatMessage",
    "OrchestratorRequest",
    "OrchestratorResponse",
    "RequestType",
    "error_response",
    # Pipeline
    "PipelineContext",
]
