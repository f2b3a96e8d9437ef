"""
moviebase.api.routers.login

Login endpoint: credentials in, signed token out.

Responsibilities:
- Authenticate `Username`/`Password` query parameters against the user store.
- Issue a 7-day JWT for the authenticated user.
- Collapse every credential rejection into one generic 400 response.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_400_BAD_REQUEST

from moviebase.api.deps import db_session, settings_dep
from moviebase.api.routers.users import UserResponse
from moviebase.auth.jwt import JwtConfig
from moviebase.auth.models import Rejected
from moviebase.auth.service import CredentialAuthenticator, TokenIssuer
from moviebase.db.repositories.users import SqlCredentialStore, UserRepo
from moviebase.observability.logging import get_logger
from moviebase.settings import Settings

log = get_logger(__name__)

router = APIRouter(tags=["auth"])

LOGIN_FAILED_MESSAGE = "Something is not right"


class LoginResponse(BaseModel):
    user: UserResponse
    token: str


class LoginFailedResponse(BaseModel):
    message: str
    user: None = None


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={HTTP_400_BAD_REQUEST: {"model": LoginFailedResponse}},
)
async def login(
    username: str | None = Query(default=None, alias="Username"),
    password: str | None = Query(default=None, alias="Password"),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> LoginResponse | JSONResponse:
    authenticator = CredentialAuthenticator(SqlCredentialStore(UserRepo(session)))
    result = await authenticator.authenticate(username, password)
    if isinstance(result, Rejected):
        # Unknown user and wrong password must be indistinguishable to the caller.
        log.info("login_rejected", username=username, reason=result.reason.value)
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content=LoginFailedResponse(message=LOGIN_FAILED_MESSAGE).model_dump(),
        )

    token = TokenIssuer(JwtConfig.from_settings(settings)).issue(result.principal)
    log.info("login_succeeded", username=result.principal.username)
    return LoginResponse(user=UserResponse.of(result.principal), token=token)
