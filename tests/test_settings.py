"""
tests.test_settings

Startup configuration checks and credential redaction in logs.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from moviebase.observability.logging import redact_sensitive
from moviebase.settings import Settings


@pytest.mark.parametrize("secret", ["", "   "])
def test_blank_signing_secret_is_rejected_at_startup(secret: str) -> None:
    with pytest.raises(ValidationError):
        Settings(jwt_secret=secret)


def test_secret_is_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MOVIEBASE_JWT_SECRET", "from-the-environment-0123456789abcdef")
    monkeypatch.setenv("MOVIEBASE_ENV", "prod")
    settings = Settings()
    assert settings.jwt_secret == "from-the-environment-0123456789abcdef"
    assert settings.env == "prod"
    assert "from-the-environment" not in repr(settings)


def test_defaults() -> None:
    settings = Settings(jwt_secret="x" * 32)
    assert settings.jwt_alg == "HS256"
    assert settings.jwt_ttl == timedelta(days=7)
    assert "http://localhost:4200" in settings.cors_allowed_origins


def test_credential_fields_are_redacted_from_logs() -> None:
    event = redact_sensitive(
        None, "info", {"event": "login", "username": "alice5", "password": "Secr3t!", "token": "abc"}
    )
    assert event == {"event": "login", "username": "alice5", "password": "***", "token": "***"}


def test_prod_refuses_the_builtin_dev_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MOVIEBASE_JWT_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(env="prod")
    assert Settings(env="prod", jwt_secret="y" * 40).env == "prod"
