"""
tests.conftest

Shared fixtures: an app bound to a throwaway SQLite file, an HTTP client, and an
in-memory credential store for exercising the auth core without a database.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from moviebase.api.app import create_app
from moviebase.auth.jwt import JwtConfig
from moviebase.auth.models import Principal
from moviebase.auth.passwords import hash_password
from moviebase.settings import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


class InMemoryCredentialStore:
    def __init__(self, *principals: Principal) -> None:
        self._by_username = {p.username: p for p in principals}

    async def find_by_username(self, username: str) -> Principal | None:
        return self._by_username.get(username)

    def remove(self, username: str) -> None:
        self._by_username.pop(username, None)


class FailingCredentialStore:
    async def find_by_username(self, username: str) -> Principal | None:
        raise ConnectionError("credential store unavailable")


def make_principal(username: str, password: str = "Secr3t!") -> Principal:
    return Principal(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password, rounds=4),
    )


@pytest.fixture
def jwt_cfg() -> JwtConfig:
    return JwtConfig(alg="HS256", issuer="moviebase", audience="moviebase-api", secret=TEST_SECRET)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'moviebase.db'}",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def register(
    client: httpx.AsyncClient,
    username: str,
    password: str = "Secr3t!",
    email: str = "a@b.com",
) -> httpx.Response:
    return await client.post(
        "/users", json={"Username": username, "Password": password, "Email": email}
    )


async def login_token(client: httpx.AsyncClient, username: str, password: str = "Secr3t!") -> str:
    r = await client.post("/login", params={"Username": username, "Password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
