"""
moviebase.db.models

Persistence schema for MovieBase users.

Responsibilities:
- Define the `User` record: credentials, profile fields, and favorites list.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import JSON, Date, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from moviebase.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no timezone-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Uniqueness is enforced here, at write time; the auth core only reads.
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Movie ids in insertion order, without duplicates.
    favorite_movies: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Movie ids are opaque strings; the catalog itself is not stored by this service.
