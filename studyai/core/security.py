"""
Caller verification.

Identity is owned by the external authentication service; this module
only forwards the bearer token and accepts the caller when the service
answers with a user id.
"""

from __future__ import annotations

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from studyai.core.config import settings
from studyai.pipeline.orchestrator import PreconditionError
from studyai.utils.logging import get_logger

logger = get_logger("studyai.core.security")

SIGN_IN_MESSAGE = "Please sign in to use the AI assistant."

bearer_scheme = HTTPBearer(auto_error=False)


class Caller(BaseModel):
    id: str
    email: str | None = None


async def verify_token(token: str) -> Caller:
    """Ask the authentication service who owns ``token``."""
    if not settings.auth_verify_url:
        logger.error("[AUTH] AUTH_VERIFY_URL not configured; rejecting caller")
        raise PreconditionError(SIGN_IN_MESSAGE, status_code=401)

    headers = {"Authorization": f"Bearer {token}"}
    if settings.auth_api_key:
        headers["apikey"] = settings.auth_api_key

    try:
        async with httpx.AsyncClient(timeout=settings.auth_timeout_seconds) as client:
            response = await client.get(settings.auth_verify_url, headers=headers)
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("[AUTH] Token verification failed: %s", e)
        raise PreconditionError(SIGN_IN_MESSAGE, status_code=401) from e

    user_id = data.get("id") if isinstance(data, dict) else None
    if not user_id:
        logger.warning("[AUTH] Verification response carried no user id")
        raise PreconditionError(SIGN_IN_MESSAGE, status_code=401)

    email = data.get("email")
    return Caller(id=str(user_id), email=str(email) if email is not None else None)


async def get_current_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Caller:
    """FastAPI dependency: a verified caller, or a 401 before any pipeline work."""
    if credentials is None or not credentials.credentials:
        raise PreconditionError(SIGN_IN_MESSAGE, status_code=401)
    return await verify_token(credentials.credentials)
