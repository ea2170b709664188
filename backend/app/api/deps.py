import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import AppError
from app.core.security import TokenError, decode_access_token, subject_from_claims
from app.services.uploads import UploadOrchestrator

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_orchestrator(request: Request) -> UploadOrchestrator:
    return request.app.state.orchestrator


async def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    if credentials is None:
        return None
    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError:
        logger.debug("Ignoring invalid bearer token on optional-auth route")
        return None
    return subject_from_claims(claims)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise AppError.unauthorized("Missing or invalid authorization header")
    try:
        claims = decode_access_token(credentials.credentials)
    except TokenError:
        raise AppError.unauthorized("Invalid or expired token") from None

    user_id = subject_from_claims(claims)
    if not user_id:
        raise AppError.unauthorized("Invalid token payload")
    return user_id
