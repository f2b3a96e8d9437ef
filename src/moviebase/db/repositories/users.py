"""
moviebase.db.repositories.users

Repository for `User` entities.

Responsibilities:
- CRUD for user records and their favorites list.
- Adapt user records to the auth layer's credential store protocol.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moviebase.auth.models import Principal
from moviebase.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        username: str,
        password_hash: str,
        email: str,
        birthday: date | None = None,
    ) -> User:
        user = User(
            username=username,
            password_hash=password_hash,
            email=email,
            birthday=birthday,
            favorite_movies=[],
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def update(
        self,
        user: User,
        *,
        username: str,
        password_hash: str,
        email: str,
        birthday: date | None,
    ) -> User:
        user.username = username
        user.password_hash = password_hash
        user.email = email
        user.birthday = birthday
        await self._session.flush()
        return user

    async def delete(self, username: str) -> bool:
        user = await self.get_by_username(username)
        if user is None:
            return False
        await self._session.delete(user)
        await self._session.flush()
        return True

    async def add_favorite(self, username: str, movie_id: str) -> User | None:
        user = await self.get_by_username(username)
        if user is None:
            return None
        if movie_id not in user.favorite_movies:
            # Reassign rather than mutate so the JSON column is marked dirty.
            user.favorite_movies = [*user.favorite_movies, movie_id]
            await self._session.flush()
        return user

    async def remove_favorite(self, username: str, movie_id: str) -> User | None:
        user = await self.get_by_username(username)
        if user is None:
            return None
        if movie_id in user.favorite_movies:
            user.favorite_movies = [m for m in user.favorite_movies if m != movie_id]
            await self._session.flush()
        return user


def to_principal(user: User) -> Principal:
    return Principal(
        username=user.username,
        email=user.email,
        password_hash=user.password_hash,
        birthday=user.birthday,
        id=user.id,
        favorite_movies=tuple(user.favorite_movies or ()),
    )


class SqlCredentialStore:
    """
    `auth.service.CredentialStore` backed by the users table.
    """

    def __init__(self, repo: UserRepo) -> None:
        self._repo = repo

    async def find_by_username(self, username: str) -> Principal | None:
        user = await self._repo.get_by_username(username)
        return to_principal(user) if user is not None else None


# --- Module Notes -----------------------------------------------------------
# Database errors are not caught here; callers see them as server faults.
