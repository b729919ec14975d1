"""Tests for album catalogue endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from swapmatch.db.database import get_session
from swapmatch.db.operations import add_card, create_album
from swapmatch.main import app
from swapmatch.models.db import Base


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def album_id(async_engine) -> int:
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        album = await create_album(
            session, "Calciatori 2024/25", total_cards=2, year=2024, publisher="Panini"
        )
        await add_card(session, album.id, "B20", "Later", sort_order=1)
        await add_card(session, album.id, "A1", "Earlier", team="Inter", sort_order=0)
        await session.commit()
        return album.id


@pytest.fixture
async def client(async_engine):
    """Provide an async test client with overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestAlbums:
    async def test_list_albums(self, client: AsyncClient, album_id: int) -> None:
        response = await client.get("/albums")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == album_id
        assert data[0]["publisher"] == "Panini"

    async def test_list_cards_in_order(self, client: AsyncClient, album_id: int) -> None:
        response = await client.get(f"/albums/{album_id}/cards")

        assert response.status_code == 200
        assert [c["code"] for c in response.json()] == ["A1", "B20"]
        assert response.json()[0]["team"] == "Inter"

    async def test_unknown_album(self, client: AsyncClient, album_id: int) -> None:
        response = await client.get("/albums/999/cards")

        assert response.status_code == 404
