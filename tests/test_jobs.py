"""Tests for the album seeding job."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from swapmatch.db.database import session_scope
from swapmatch.db.operations import get_album_by_name, list_album_cards, list_albums
from swapmatch.jobs.seed_album import (
    AlbumCatalogue,
    CatalogueCard,
    CatalogueError,
    load_catalogue,
    run_seed,
    seed_album,
)
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
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def catalogue() -> AlbumCatalogue:
    return AlbumCatalogue(
        name="Calciatori 2024/25",
        year=2024,
        publisher="Panini",
        cards=[
            CatalogueCard(code="A1", name="Scudetto Inter", team="Inter"),
            CatalogueCard(code="A2", name="Lautaro Martinez", team="Inter"),
            CatalogueCard(code="B1", name="Scudetto Milan", team="Milan"),
        ],
    )


def write_catalogue(directory: Path, filename: str, payload: dict) -> Path:
    path = directory / filename
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadCatalogue:
    def test_load_valid(self, tmp_path: Path) -> None:
        path = write_catalogue(
            tmp_path,
            "album.json",
            {"name": "Album", "cards": [{"code": "A1", "name": "First"}]},
        )

        catalogue = load_catalogue(path)

        assert catalogue.name == "Album"
        assert catalogue.cards[0].code == "A1"
        assert catalogue.cards[0].team is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogueError, match="Cannot read"):
            load_catalogue(tmp_path / "missing.json")

    def test_not_json(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogueError, match="Invalid catalogue"):
            load_catalogue(path)

    def test_card_without_name(self, tmp_path: Path) -> None:
        path = write_catalogue(tmp_path, "album.json", {"name": "Album", "cards": [{"code": "A1"}]})

        with pytest.raises(CatalogueError):
            load_catalogue(path)


class TestSeedAlbum:
    async def test_creates_album_and_cards(
        self, session_factory: async_sessionmaker[AsyncSession], catalogue: AlbumCatalogue
    ) -> None:
        async with session_factory() as session:
            created = await seed_album(session, catalogue)
            await session.commit()

            album = await get_album_by_name(session, catalogue.name)
            assert album is not None
            cards = await list_album_cards(session, album.id)

        assert created == 3
        assert album.total_cards == 3
        assert [c.code for c in cards] == ["A1", "A2", "B1"]

    async def test_existing_album_skipped(
        self, session_factory: async_sessionmaker[AsyncSession], catalogue: AlbumCatalogue
    ) -> None:
        async with session_factory() as session:
            await seed_album(session, catalogue)
            await session.commit()

            assert await seed_album(session, catalogue) == 0
            assert len(await list_albums(session)) == 1

    async def test_duplicate_codes_rejected(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        catalogue = AlbumCatalogue(
            name="Broken",
            cards=[CatalogueCard(code="A1", name="One"), CatalogueCard(code="A1", name="Two")],
        )

        async with session_factory() as session:
            with pytest.raises(CatalogueError, match="Duplicate card codes"):
                await seed_album(session, catalogue)


class TestRunSeed:
    async def test_bad_file_does_not_stop_others(
        self, tmp_path: Path, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        good = write_catalogue(
            tmp_path,
            "good.json",
            {"name": "Good", "cards": [{"code": "A1", "name": "One"}, {"code": "A2", "name": "Two"}]},
        )
        bad = tmp_path / "bad.json"
        bad.write_text("[]", encoding="utf-8")

        with patch(
            "swapmatch.jobs.seed_album.session_scope",
            lambda: session_scope(session_factory),
        ):
            results = await run_seed([bad, good])

        assert results == {"Good": 2}
        async with session_factory() as session:
            assert [a.name for a in await list_albums(session)] == ["Good"]

    async def test_duplicate_codes_roll_back(
        self, tmp_path: Path, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        path = write_catalogue(
            tmp_path,
            "dupes.json",
            {"name": "Dupes", "cards": [{"code": "A1", "name": "One"}, {"code": "A1", "name": "Two"}]},
        )

        with patch(
            "swapmatch.jobs.seed_album.session_scope",
            lambda: session_scope(session_factory),
        ):
            results = await run_seed([path])

        assert results == {}
        async with session_factory() as session:
            assert await list_albums(session) == []
