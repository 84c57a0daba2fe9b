"""
tests/helpers.py

Small builders shared by the API tests.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.db.models import Poem as PoemModel, Stanza as StanzaModel
from app.db.repositories.user_repository import UserRepository

PASSWORD = "Secret123"


@dataclass
class Account:
    id: uuid.UUID
    username: str
    token: str

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}


async def register(client: AsyncClient, username: str) -> Account:
    """Sign up and log in; returns the id and a bearer token."""
    rv = await client.post(
        "/auth/signup",
        json={
            "email": f"{username}@poit.app",
            "username": username,
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
        },
    )
    assert rv.status_code == 201, rv.text

    rv = await client.post("/auth/login", json={"usernameOrEmail": username, "password": PASSWORD})
    assert rv.status_code == 200, rv.text
    body = rv.json()
    return Account(id=uuid.UUID(body["user"]["id"]), username=username, token=body["accessToken"])


async def write_poem(
    client: AsyncClient,
    author: Account,
    title: str | None = None,
    stanzas: Iterable[str] = (),
    publish: bool = True,
) -> dict:
    """Create a poem through the API, add stanzas, optionally publish it."""
    rv = await client.post("/poems", json={"title": title}, headers=author.headers)
    assert rv.status_code == 201, rv.text
    poem_id = rv.json()["id"]

    for body in stanzas:
        rv = await client.post("/stanzas", json={"poemId": poem_id, "body": body}, headers=author.headers)
        assert rv.status_code == 201, rv.text

    if publish:
        rv = await client.put(f"/poems/{poem_id}/publish", headers=author.headers)
        assert rv.status_code == 200, rv.text

    rv = await client.get(f"/poems/{poem_id}", headers=author.headers)
    return rv.json()


async def seed_poems(
    session_factory: async_sessionmaker,
    owner_id: uuid.UUID,
    count: int,
    *,
    title: str = "Poem",
    is_draft: bool = False,
    updated_at: datetime | None = None,
    spacing: timedelta = timedelta(seconds=1),
    stanza: str | None = None,
) -> list[uuid.UUID]:
    """
    Bulk insert poems straight into the DB. With ``spacing=timedelta(0)``
    every poem shares one ``updated_at``.
    """
    base = updated_at or datetime(2030, 1, 1)
    ids = []
    async with session_factory() as session:
        for i in range(count):
            poem_id = uuid.uuid4()
            session.add(
                PoemModel(
                    id=poem_id,
                    owner_id=owner_id,
                    title=f"{title} {i}",
                    is_draft=is_draft,
                    created_at=base,
                    updated_at=base + spacing * i,
                )
            )
            if stanza is not None:
                session.add(StanzaModel(poem_id=poem_id, body=stanza, position=0))
            ids.append(poem_id)
        await session.commit()
    return ids


async def follow(session_factory: async_sessionmaker, follower: Account, following: Account) -> None:
    async with session_factory() as session:
        await UserRepository(session).add_following(follower.id, following.id)


async def collect_all(client: AsyncClient, url: str, headers: dict | None = None, **params) -> tuple[list[dict], list[dict]]:
    """Walk every page of a listing; returns (poems, raw pages)."""
    poems, pages = [], []
    cursor = None
    while True:
        query = dict(params)
        if cursor:
            query["cursor"] = cursor
        rv = await client.get(url, params=query, headers=headers)
        assert rv.status_code == 200, rv.text
        page = rv.json()
        pages.append(page)
        poems.extend(page["poems"])
        cursor = page["nextCursor"]
        if cursor is None:
            return poems, pages
