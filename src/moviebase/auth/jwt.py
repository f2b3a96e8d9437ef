"""
moviebase.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Issue signed, time-limited JWTs whose subject is the username.
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub).
- Classify failures (malformed / bad signature / expired) for the token gate.

Note:
- HS256 with a single process-wide secret; there is no key rotation or revocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt
from jwt import DecodeError, InvalidSignatureError, InvalidTokenError

if TYPE_CHECKING:
    from moviebase.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta = timedelta(days=7)

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            ttl=settings.jwt_ttl,
        )


class JwtValidationError(Exception):
    pass


class TokenMalformedError(JwtValidationError):
    pass


class TokenInvalidError(JwtValidationError):
    pass


class TokenExpiredError(JwtValidationError):
    pass


def issue_token(*, cfg: JwtConfig, subject: str, now: datetime | None = None) -> str:
    now = now or datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + cfg.ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(
    *, cfg: JwtConfig, token: str, now: datetime | None = None
) -> dict[str, Any]:
    """
    Verify signature and registered claims, then check expiry against `now`.

    Expiry is checked here rather than inside PyJWT so callers can supply the clock.
    """

    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
                "verify_exp": False,
                "verify_iat": False,
            },
        )
    except InvalidSignatureError as e:
        # Subclass of DecodeError; must be matched first.
        raise TokenInvalidError(str(e)) from e
    except DecodeError as e:
        raise TokenMalformedError(str(e)) from e
    except InvalidTokenError as e:
        raise TokenInvalidError(str(e)) from e

    try:
        exp = int(payload["exp"])
    except (TypeError, ValueError) as e:
        raise TokenMalformedError("Expiration Time claim (exp) must be an integer") from e

    now = now or datetime.now(tz=UTC)
    if exp <= int(now.timestamp()):
        raise TokenExpiredError("Signature has expired")
    return payload


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `auth.service.TokenIssuer` (login); decoding by
# `auth.service.TokenVerifier` (every protected request).
