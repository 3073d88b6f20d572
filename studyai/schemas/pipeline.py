"""
PipelineContext carries per-request state between the pipeline stages.

Created fresh for each request and discarded once the response is built;
nothing in it outlives the request.
"""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from studyai.schemas.intent import ClassificationResult
from studyai.schemas.response import OrchestratorRequest
from studyai.schemas.retrieval import Source


class PipelineContext(BaseModel):
    """
    Shared context object threaded through the stages.

    Each stage fills in its own output field; later stages read the
    earlier ones.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # ── Inputs ───────────────────────────────────────────────────────
    request: OrchestratorRequest
    caller_id: str | None = None

    # ── Stage outputs (populated progressively) ─────────────────────
    classification: ClassificationResult | None = None
    model_id: str = ""
    sources: list[Source] = Field(default_factory=list)
    system_prompt: str = ""
    user_prompt: str = ""
    raw_reply: str = ""

    # ── Timing ──────────────────────────────────────────────────────
    start_time: float = Field(default_factory=time.perf_counter)
    stage_timings: dict[str, float] = Field(default_factory=dict)

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.start_time) * 1000)
