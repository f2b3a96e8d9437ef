"""
moviebase.auth.service

Authentication and authorization core.

Responsibilities:
- Verify submitted credentials against the credential store (`CredentialAuthenticator`).
- Issue tokens for authenticated principals (`TokenIssuer`).
- Resolve a presented token back into a principal (`TokenVerifier`).
- Enforce one-to-one resource ownership (`authorize`).

Every outcome except a store failure is returned as an `AuthResult`; store errors
propagate untouched so infrastructure faults are never mistaken for "unknown user".
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from moviebase.auth.jwt import (
    JwtConfig,
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
    decode_and_validate,
    issue_token,
)
from moviebase.auth.models import (
    Authenticated,
    AuthResult,
    Principal,
    Rejected,
    RejectionReason,
)
from moviebase.auth.passwords import verify_password
from moviebase.observability.logging import get_logger

log = get_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class CredentialStore(Protocol):
    async def find_by_username(self, username: str) -> Principal | None: ...


class CredentialAuthenticator:
    def __init__(self, store: CredentialStore) -> None:
        self._store = store

    async def authenticate(self, username: str | None, plaintext: str | None) -> AuthResult:
        if not username or not plaintext:
            return Rejected(RejectionReason.malformed_credential)

        principal = await self._store.find_by_username(username)
        if principal is None:
            return Rejected(RejectionReason.unknown_username)

        if not verify_password(plaintext, principal.password_hash):
            return Rejected(RejectionReason.wrong_password)
        return Authenticated(principal)


class TokenIssuer:
    def __init__(self, cfg: JwtConfig, *, clock: Clock = _utcnow) -> None:
        self._cfg = cfg
        self._clock = clock

    def issue(self, principal: Principal) -> str:
        return issue_token(cfg=self._cfg, subject=principal.username, now=self._clock())


class TokenVerifier:
    """
    Gate run before every protected operation.

    The token only vouches for identity; the principal itself is re-read from
    the store so a user deleted after issuance is rejected.
    """

    def __init__(self, cfg: JwtConfig, store: CredentialStore, *, clock: Clock = _utcnow) -> None:
        self._cfg = cfg
        self._store = store
        self._clock = clock

    async def verify(self, token: str | None) -> AuthResult:
        if not token:
            return Rejected(RejectionReason.missing_credentials)

        try:
            payload = decode_and_validate(cfg=self._cfg, token=token, now=self._clock())
        except TokenMalformedError:
            return Rejected(RejectionReason.missing_credentials)
        except TokenExpiredError:
            return Rejected(RejectionReason.expired)
        except TokenInvalidError:
            return Rejected(RejectionReason.invalid_token)

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return Rejected(RejectionReason.missing_credentials)

        principal = await self._store.find_by_username(subject)
        if principal is None:
            log.info("token_subject_gone", username=subject)
            return Rejected(RejectionReason.unknown_principal)
        return Authenticated(principal)


def authorize(principal: Principal, requested_username: str) -> bool:
    # Ownership is strictly one-to-one; no roles, no admin override.
    return principal.username == requested_username


# --- Module Notes -----------------------------------------------------------
# Order of operations for login is fixed: store lookup -> hash comparison -> token
# issuance (the last step lives in `api.routers.login`).
