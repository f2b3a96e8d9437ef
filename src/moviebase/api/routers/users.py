"""
moviebase.api.routers.users

User account and favorites endpoints.

Responsibilities:
- Register a user (public).
- Read, update and delete the caller's own account (token + ownership).
- Add/remove movies on the caller's favorites list (token + ownership).
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from moviebase.api.deps import db_session, settings_dep
from moviebase.auth.deps import require_owner
from moviebase.auth.models import Principal
from moviebase.auth.passwords import BCRYPT_MAX_BYTES, hash_password
from moviebase.db.repositories.users import UserRepo
from moviebase.observability.logging import get_logger
from moviebase.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


class UserWriteRequest(BaseModel):
    # Wire names follow the public API (PascalCase); Python names stay snake_case.
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(
        alias="Username",
        min_length=5,
        max_length=64,
        pattern=r"^[A-Za-z0-9]+$",
        description="Alphanumeric, at least 5 characters",
    )
    password: str = Field(alias="Password", min_length=1, repr=False)
    email: EmailStr = Field(alias="Email")
    birthday: date | None = Field(default=None, alias="Birthday")

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID | None = None
    username: str = Field(alias="Username")
    email: str = Field(alias="Email")
    birthday: date | None = Field(default=None, alias="Birthday")
    favorite_movies: list[str] = Field(default_factory=list, alias="FavoriteMovies")

    @classmethod
    def of(cls, obj: Any) -> UserResponse:
        # Accepts both ORM `User` rows and auth `Principal`s; never reads the hash.
        return cls(
            id=obj.id,
            username=obj.username,
            email=obj.email,
            birthday=obj.birthday,
            favorite_movies=list(obj.favorite_movies or ()),
        )


class FavoritesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(alias="Username")
    favorite_movies: list[str] = Field(alias="FavoriteMovies")


class MessageResponse(BaseModel):
    message: str


@router.post("", response_model=UserResponse, status_code=HTTP_201_CREATED)
async def register_user(
    body: UserWriteRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserResponse:
    users = UserRepo(session)
    if await users.get_by_username(body.username) is not None:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=f"{body.username} already exists")

    try:
        user = await users.create(
            username=body.username,
            password_hash=hash_password(body.password, rounds=settings.bcrypt_rounds),
            email=str(body.email),
            birthday=body.birthday,
        )
        await session.commit()
    except IntegrityError as e:
        # A concurrent registration claimed the name between the check and the insert.
        await session.rollback()
        raise HTTPException(
            status_code=HTTP_409_CONFLICT, detail=f"{body.username} already exists"
        ) from e
    log.info("user_registered", username=user.username)
    return UserResponse.of(user)


@router.get("/{username}", response_model=UserResponse)
async def get_user(
    username: str,
    principal: Principal = Depends(require_owner),
) -> UserResponse:
    # The token gate already re-read this record from the store.
    return UserResponse.of(principal)


@router.put("/{username}", response_model=UserResponse)
async def update_user(
    username: str,
    body: UserWriteRequest,
    principal: Principal = Depends(require_owner),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserResponse:
    users = UserRepo(session)
    if body.username != username:
        taken = await users.get_by_username(body.username)
        if taken is not None:
            raise HTTPException(
                status_code=HTTP_409_CONFLICT,
                detail=f'The username "{body.username}" is already taken.',
            )

    user = await users.get_by_username(username)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"{username} was not found")

    try:
        await users.update(
            user,
            username=body.username,
            password_hash=hash_password(body.password, rounds=settings.bcrypt_rounds),
            email=str(body.email),
            birthday=body.birthday,
        )
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise HTTPException(
            status_code=HTTP_409_CONFLICT,
            detail=f'The username "{body.username}" is already taken.',
        ) from e
    log.info("user_updated", username=username, new_username=body.username)
    return UserResponse.of(user)


@router.delete("/{username}", response_model=MessageResponse)
async def delete_user(
    username: str,
    principal: Principal = Depends(require_owner),
    session: AsyncSession = Depends(db_session),
) -> MessageResponse:
    if not await UserRepo(session).delete(username):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"{username} was not found")
    await session.commit()
    log.info("user_deleted", username=username)
    return MessageResponse(message=f"{username} was deleted.")


@router.post("/{username}/movies/{movie_id}", response_model=FavoritesResponse)
async def add_favorite_movie(
    username: str,
    movie_id: str,
    principal: Principal = Depends(require_owner),
    session: AsyncSession = Depends(db_session),
) -> FavoritesResponse:
    user = await UserRepo(session).add_favorite(username, movie_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"{username} was not found")
    await session.commit()
    return FavoritesResponse(username=user.username, favorite_movies=list(user.favorite_movies))


@router.delete("/{username}/movies/{movie_id}", response_model=FavoritesResponse)
async def remove_favorite_movie(
    username: str,
    movie_id: str,
    principal: Principal = Depends(require_owner),
    session: AsyncSession = Depends(db_session),
) -> FavoritesResponse:
    user = await UserRepo(session).remove_favorite(username, movie_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"{username} was not found")
    await session.commit()
    return FavoritesResponse(username=user.username, favorite_movies=list(user.favorite_movies))


# --- Module Notes -----------------------------------------------------------
# Renaming a user (PUT with a new Username) leaves the caller's token pointing at
# the old name; the next request with it is rejected as an unknown principal.
