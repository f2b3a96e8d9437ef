"""
tests.test_tokens

Token issuance and verification with a controllable clock.
"""

from __future__ import annotations

import base64
import dataclasses
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from conftest import TEST_SECRET, FailingCredentialStore, InMemoryCredentialStore, make_principal

from moviebase.auth.jwt import JwtConfig
from moviebase.auth.models import Authenticated, Rejected, RejectionReason
from moviebase.auth.service import TokenIssuer, TokenVerifier

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _flip_signature_bit(token: str) -> str:
    header, payload, sig = token.split(".")
    raw = bytearray(base64.urlsafe_b64decode(sig + "=" * (-len(sig) % 4)))
    raw[0] ^= 0x01
    flipped = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode("ascii")
    return ".".join([header, payload, flipped])


@pytest.fixture
def alice():
    return make_principal("alice5")


@pytest.fixture
def store(alice) -> InMemoryCredentialStore:
    return InMemoryCredentialStore(alice)


@pytest.mark.asyncio
async def test_round_trip_resolves_the_same_principal(jwt_cfg, store, alice) -> None:
    token = TokenIssuer(jwt_cfg).issue(alice)
    assert await TokenVerifier(jwt_cfg, store).verify(token) == Authenticated(alice)


def test_claims_carry_username_and_seven_day_expiry(jwt_cfg, alice) -> None:
    token = TokenIssuer(jwt_cfg, clock=FakeClock(T0)).issue(alice)
    claims = jwt.decode(token, options={"verify_signature": False})
    assert claims["sub"] == "alice5"
    assert claims["iat"] == int(T0.timestamp())
    assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())
    assert jwt.get_unverified_header(token)["alg"] == "HS256"
    # Identity only; nothing from the stored record leaks into the token.
    assert "password_hash" not in claims and "email" not in claims


@pytest.mark.asyncio
async def test_token_valid_until_expiry_boundary(jwt_cfg, store, alice) -> None:
    clock = FakeClock(T0)
    token = TokenIssuer(jwt_cfg, clock=clock).issue(alice)
    verifier = TokenVerifier(jwt_cfg, store, clock=clock)

    clock.now = T0 + timedelta(days=7) - timedelta(seconds=1)
    assert isinstance(await verifier.verify(token), Authenticated)

    clock.now = T0 + timedelta(days=7, seconds=1)
    assert await verifier.verify(token) == Rejected(RejectionReason.expired)


@pytest.mark.asyncio
async def test_flipped_signature_is_invalid(jwt_cfg, store, alice) -> None:
    token = TokenIssuer(jwt_cfg).issue(alice)
    result = await TokenVerifier(jwt_cfg, store).verify(_flip_signature_bit(token))
    assert result == Rejected(RejectionReason.invalid_token)


@pytest.mark.asyncio
async def test_token_signed_with_another_secret_is_invalid(jwt_cfg, store, alice) -> None:
    other = dataclasses.replace(jwt_cfg, secret="another-secret-0123456789abcdef0123456789")
    token = TokenIssuer(other).issue(alice)
    result = await TokenVerifier(jwt_cfg, store).verify(token)
    assert result == Rejected(RejectionReason.invalid_token)


@pytest.mark.asyncio
async def test_foreign_audience_is_invalid(jwt_cfg, store, alice) -> None:
    other = dataclasses.replace(jwt_cfg, audience="some-other-api")
    token = TokenIssuer(other).issue(alice)
    result = await TokenVerifier(jwt_cfg, store).verify(token)
    assert result == Rejected(RejectionReason.invalid_token)


@pytest.mark.asyncio
async def test_unsigned_token_is_invalid(jwt_cfg, store) -> None:
    now = int(datetime.now(tz=UTC).timestamp())
    token = jwt.encode(
        {"sub": "alice5", "iss": "moviebase", "aud": "moviebase-api", "iat": now, "exp": now + 60},
        None,
        algorithm="none",
    )
    result = await TokenVerifier(jwt_cfg, store).verify(token)
    assert result == Rejected(RejectionReason.invalid_token)


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c", "...."])
async def test_missing_or_malformed_token(jwt_cfg, store, token) -> None:
    result = await TokenVerifier(jwt_cfg, store).verify(token)
    assert result == Rejected(RejectionReason.missing_credentials)


@pytest.mark.asyncio
async def test_token_without_subject_is_rejected(jwt_cfg, store) -> None:
    now = int(datetime.now(tz=UTC).timestamp())
    token = jwt.encode(
        {"iss": "moviebase", "aud": "moviebase-api", "iat": now, "exp": now + 60},
        TEST_SECRET,
        algorithm="HS256",
    )
    result = await TokenVerifier(jwt_cfg, store).verify(token)
    assert result == Rejected(RejectionReason.invalid_token)


@pytest.mark.asyncio
async def test_deleted_principal_is_rejected(jwt_cfg, store, alice) -> None:
    token = TokenIssuer(jwt_cfg).issue(alice)
    store.remove("alice5")
    result = await TokenVerifier(jwt_cfg, store).verify(token)
    assert result == Rejected(RejectionReason.unknown_principal)


@pytest.mark.asyncio
async def test_password_change_does_not_revoke_token(jwt_cfg, alice) -> None:
    token = TokenIssuer(jwt_cfg).issue(alice)
    changed = make_principal("alice5", password="n3w-Secr3t")
    result = await TokenVerifier(jwt_cfg, InMemoryCredentialStore(changed)).verify(token)
    assert result == Authenticated(changed)


@pytest.mark.asyncio
async def test_store_failure_during_verification_propagates(jwt_cfg, alice) -> None:
    token = TokenIssuer(jwt_cfg).issue(alice)
    with pytest.raises(ConnectionError):
        await TokenVerifier(jwt_cfg, FailingCredentialStore()).verify(token)


def test_config_from_settings(settings) -> None:
    cfg = JwtConfig.from_settings(settings)
    assert cfg.secret == TEST_SECRET
    assert cfg.ttl == timedelta(days=7)
    assert cfg.alg == "HS256"
