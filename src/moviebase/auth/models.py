"""
moviebase.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
- Define the `AuthResult` contract shared by credential and token checks.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar


class RejectionReason(enum.StrEnum):
    # Internal only; the HTTP layer never echoes these to callers.
    unknown_username = "unknown username"
    wrong_password = "wrong password"
    malformed_credential = "malformed credential"
    missing_credentials = "missing credentials"
    invalid_token = "invalid token"
    expired = "expired"
    unknown_principal = "unknown principal"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity, as read from the credential store.
    """

    username: str
    email: str
    password_hash: str = field(repr=False)
    birthday: date | None = None
    id: uuid.UUID | None = None
    favorite_movies: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Authenticated:
    principal: Principal

    ok: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: RejectionReason

    ok: ClassVar[bool] = False


AuthResult = Authenticated | Rejected
