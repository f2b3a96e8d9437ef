"""
moviebase.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal` (401 on any token rejection).
- Enforce ownership of `/users/{username}` resources (403 on mismatch).
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from moviebase.api.deps import db_session, settings_dep
from moviebase.auth.jwt import JwtConfig
from moviebase.auth.models import Principal, Rejected
from moviebase.auth.service import TokenVerifier, authorize
from moviebase.db.repositories.users import SqlCredentialStore, UserRepo
from moviebase.observability.logging import get_logger
from moviebase.settings import Settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


def token_verifier(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> TokenVerifier:
    return TokenVerifier(JwtConfig.from_settings(settings), SqlCredentialStore(UserRepo(session)))


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: TokenVerifier = Depends(token_verifier),
) -> Principal:
    result = await verifier.verify(creds.credentials if creds is not None else None)
    if isinstance(result, Rejected):
        # The reason is for logs only; every token rejection looks the same to callers.
        log.info("token_rejected", reason=result.reason.value)
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.principal


def require_owner(username: str, principal: Principal = Depends(get_principal)) -> Principal:
    # `username` is the `{username}` path parameter of the protected route.
    if not authorize(principal, username):
        log.info("permission_denied", principal=principal.username, requested=username)
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Permission denied")
    return principal
