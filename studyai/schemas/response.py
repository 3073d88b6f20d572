"""
External API schemas.

OrchestratorRequest is what the client sends; OrchestratorResponse is
returned for every outcome, including recovered and fatal failures,
so the client never has to parse an unstructured error body.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field, field_validator

from studyai.schemas.base import CamelModel
from studyai.schemas.intent import Intent
from studyai.schemas.retrieval import Citation
from studyai.schemas.segments import CodeSegment, GraphSegment, MathSegment, Segment


class RequestType(str, Enum):
    ASK = "ask"
    NOTES = "notes"
    QUIZ = "quiz"
    CODE = "code"


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class OrchestratorRequest(CamelModel):
    query: str
    type: RequestType = RequestType.ASK
    subject: str | None = None
    subject_id: str | None = None
    context: str | None = None
    conversation_history: list[ChatMessage] = Field(default_factory=list)

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value):
        # Clients send null as often as they omit the key
        return RequestType.ASK if value is None else value

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _null_history(cls, value):
        return [] if value is None else value


class OrchestratorResponse(CamelModel):
    """
    Public response.  ``content`` is always the untouched model reply;
    ``math`` / ``code`` / ``graph`` are the first segment of each kind.
    """
    success: bool = True
    content: str = ""
    citations: list[Citation] = Field(default_factory=list)
    math: MathSegment | None = None
    code: CodeSegment | None = None
    graph: GraphSegment | None = None
    intent: Intent = Intent.CONCEPTUAL
    confidence: float = 0.0
    model_used: str = "none"
    processing_time: int = 0  # milliseconds
    error: str | None = None
    # Only populated when the caller asks for the segment view
    segments: list[Segment] | None = None


def error_response(
    message: str,
    *,
    intent: Intent = Intent.CONCEPTUAL,
    confidence: float = 0.0,
    model_used: str = "none",
    processing_time: int = 0,
) -> OrchestratorResponse:
    """Structured failure body: empty content and citations plus an apology."""
    return OrchestratorResponse(
        success=False,
        content="",
        citations=[],
        intent=intent,
        confidence=confidence,
        model_used=model_used,
        processing_time=processing_time,
        error=message,
    )
