"""
Pipeline Orchestrator: top-level entry point.

Runs Classify -> Route -> Retrieve -> Assemble -> Generate -> Segment ->
Resolve citations, strictly in sequence.  Each stage is independently
callable; this module only threads their outputs together.

Only two failures reach the caller: PreconditionError (raised before any
stage runs) and a generation failure (returned as a structured response
with ``success=False``).  Everything else degrades inside its stage.
"""

from __future__ import annotations

from studyai.pipeline.citations import resolve_citations
from studyai.pipeline.intent import classify_intent
from studyai.pipeline.model_selector import resolve_model
from studyai.pipeline.response_generator import GenerationError, generate_answer
from studyai.pipeline.retrieval import gather_sources
from studyai.pipeline.segmenter import segment_response
from studyai.prompts.answer_generator import build_system_prompt, build_user_prompt
from studyai.schemas.pipeline import PipelineContext
from studyai.schemas.response import OrchestratorRequest, OrchestratorResponse, error_response
from studyai.utils.logging import get_logger
from studyai.utils.text import preview
from studyai.utils.timing import Timer

logger = get_logger("studyai.pipeline.orchestrator")

GENERATION_APOLOGY = "Sorry, I couldn't generate an answer right now. Please try again in a moment."
_STATUS_APOLOGIES = {
    429: "Rate limit exceeded. Please try again later.",
    402: "AI credits exhausted. Please add funds to continue.",
}


class PreconditionError(Exception):
    """The request cannot enter the pipeline (blank query, no verified caller)."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


async def run_pipeline(
    request: OrchestratorRequest,
    *,
    caller_id: str | None = None,
    include_segments: bool = False,
) -> OrchestratorResponse:
    """
    Execute the full pipeline for one request.

    Raises:
        PreconditionError: the query is empty or whitespace.
    """
    if not request.query or not request.query.strip():
        raise PreconditionError("Please provide a question.", status_code=400)

    ctx = PipelineContext(request=request, caller_id=caller_id)
    logger.info(
        "[PIPELINE] Started | caller=%s | type=%s | query: %s",
        caller_id or "-", request.type.value, preview(request.query),
    )

    # ── Stage 1: Classification + routing ───────────────────────────
    with Timer("classify") as t:
        ctx.classification = await classify_intent(request.query, request.subject)
        ctx.model_id = resolve_model(ctx.classification.tier)
    ctx.stage_timings["classify"] = t.elapsed_s
    classification = ctx.classification

    # ── Stage 2: Retrieval ───────────────────────────────────────────
    with Timer("retrieve") as t:
        ctx.sources = await gather_sources(request.query, request.subject_id, classification)
    ctx.stage_timings["retrieve"] = t.elapsed_s

    # ── Stage 3: Prompt assembly + generation ────────────────────────
    ctx.system_prompt = build_system_prompt(
        intent=classification.intent,
        request_type=request.type,
        sources=ctx.sources,
        subject=request.subject,
        context=request.context,
    )
    ctx.user_prompt = build_user_prompt(request.query, request.type)

    try:
        with Timer("generate") as t:
            ctx.raw_reply, ctx.model_id = await generate_answer(
                system_prompt=ctx.system_prompt,
                user_prompt=ctx.user_prompt,
                history=request.conversation_history,
                tier=classification.tier,
                intent=classification.intent,
            )
    except GenerationError as e:
        logger.error("[PIPELINE] Generation failed on %s: %s", e.model, e)
        return error_response(
            _STATUS_APOLOGIES.get(e.status_code, GENERATION_APOLOGY),
            intent=classification.intent,
            confidence=classification.confidence,
            model_used="error",
            processing_time=ctx.elapsed_ms,
        )
    ctx.stage_timings["generate"] = t.elapsed_s

    # ── Stage 4: Segmentation + citations ────────────────────────────
    parsed = segment_response(ctx.raw_reply)
    citations = resolve_citations(parsed, ctx.sources)

    response = OrchestratorResponse(
        success=True,
        content=ctx.raw_reply,
        citations=citations,
        math=parsed.primary_math,
        code=parsed.primary_code,
        graph=parsed.primary_graph,
        intent=classification.intent,
        confidence=classification.confidence,
        model_used=ctx.model_id,
        processing_time=ctx.elapsed_ms,
        segments=parsed.segments if include_segments else None,
    )

    logger.info(
        "[PIPELINE] Done in %dms | intent=%s | model=%s | sources=%d | citations=%d | segments=%d | timings=%s",
        response.processing_time, classification.intent.value, ctx.model_id,
        len(ctx.sources), len(citations), len(parsed.segments),
        {k: round(v, 2) for k, v in ctx.stage_timings.items()},
    )
    return response
