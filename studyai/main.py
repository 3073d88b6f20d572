import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studyai.core.config import settings
from studyai.pipeline.orchestrator import PreconditionError
from studyai.schemas.response import error_response
from studyai.utils.logging import get_logger, setup_logging

from studyai.api.ask import router as ask_router
from studyai.api.health import router as health_router

setup_logging()
logger = get_logger("studyai.main")

app = FastAPI(
    title=settings.app_name,
    description="Study assistant orchestration API: classify, retrieve, generate, segment",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ask_router, prefix="/api/v1")   # /api/v1/orchestrate
app.include_router(health_router, prefix="/api")    # /api/health


@app.exception_handler(PreconditionError)
async def precondition_error_handler(request: Request, exc: PreconditionError):
    """Rejected before any pipeline stage ran; same body shape as an answer."""
    logger.info("[API] Rejected %s: %s (%d)", request.url.path, exc.message, exc.status_code)
    body = error_response(exc.message, model_used="none")
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )


@app.on_event("startup")
async def on_startup():
    logger.info("Starting %s (%s)...", settings.app_name, settings.environment)
    if not settings.llm_api_key:
        logger.warning("LLM_API_KEY not set - every generation call will fail")
    if not settings.retrieval_url:
        logger.warning("RETRIEVAL_URL not set - answers will be generated without sources")
    if not settings.auth_verify_url:
        logger.warning("AUTH_VERIFY_URL not set - every caller will be rejected")
    if logging.getLogger("studyai").isEnabledFor(logging.DEBUG):
        logger.debug("Model routing: %s", {
            "classifier": settings.classifier_model,
            "fast": settings.fast_model,
            "default": settings.default_model,
            "complex": settings.complex_model,
        })
    logger.info("[OK] %s started", settings.app_name)
