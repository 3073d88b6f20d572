"""
Thin API route for the orchestrator.

No business logic: verifies the caller, runs the pipeline, and maps the
outcome to an HTTP status.  All heavy lifting lives in the pipeline
modules.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from studyai.core.config import settings
from studyai.core.security import Caller, get_current_caller
from studyai.pipeline.orchestrator import run_pipeline
from studyai.schemas.response import OrchestratorRequest, OrchestratorResponse
from studyai.utils.logging import get_logger

logger = get_logger("studyai.api.ask")

router = APIRouter(tags=["Orchestrator"])

CLIENT_CLOSED_REQUEST = 499


async def run_until_disconnected(request: Request, task: asyncio.Task, poll_seconds: float):
    """
    Wait for ``task`` while watching the client connection.

    Returns the task result, or None after cancelling the task because the
    client went away (which also aborts any in-flight provider call).
    """
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_seconds)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
                return None
    except asyncio.CancelledError:
        task.cancel()
        raise


@router.post("/orchestrate", response_model=OrchestratorResponse)
async def orchestrate(
    body: OrchestratorRequest,
    request: Request,
    include_segments: bool = False,
    caller: Caller = Depends(get_current_caller),
):
    """
    Answer a study question.

    200 for every answered request (including ones where retrieval or
    classification quietly fell back), 502 with the same response shape
    when generation failed.
    """
    task = asyncio.ensure_future(
        run_pipeline(body, caller_id=caller.id, include_segments=include_segments)
    )
    result = await run_until_disconnected(request, task, settings.disconnect_poll_seconds)

    if result is None:
        logger.info("[API] Client disconnected; pipeline cancelled (caller=%s)", caller.id)
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=result.model_dump(mode="json", by_alias=True),
        )
    return result
