"""Tests for match persistence."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from swapmatch.db.operations import create_user
from swapmatch.models.db import Base
from swapmatch.models.failure import FailureKind, KnownError, NotFoundError
from swapmatch.models.match import MatchStatus
from swapmatch.services.matchmaking import accept_candidate, list_matches, set_match_status


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
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def users(session: AsyncSession) -> tuple[int, int]:
    ugo = await create_user(session, "ugo")
    vera = await create_user(session, "vera")
    await session.commit()
    return ugo.id, vera.id


class TestAcceptCandidate:
    async def test_creates_pending_match(self, session: AsyncSession, users) -> None:
        ugo, vera = users

        match = await accept_candidate(session, ugo, vera, 75)

        assert match.status is MatchStatus.PENDING
        assert match.compatibility == 75
        assert match.user_1 is not None
        assert match.user_1.nickname == "ugo"
        assert match.user_2 is not None
        assert match.user_2.nickname == "vera"

    async def test_self_match(self, session: AsyncSession, users) -> None:
        ugo, _ = users

        with pytest.raises(KnownError) as exc_info:
            await accept_candidate(session, ugo, ugo, 50)

        assert exc_info.value.kind == FailureKind.INVALID_INPUT

    @pytest.mark.parametrize("compatibility", [-1, 101])
    async def test_out_of_range(self, session: AsyncSession, users, compatibility: int) -> None:
        ugo, vera = users

        with pytest.raises(KnownError):
            await accept_candidate(session, ugo, vera, compatibility)

    async def test_unknown_candidate(self, session: AsyncSession, users) -> None:
        ugo, _ = users

        with pytest.raises(NotFoundError):
            await accept_candidate(session, ugo, 999, 50)


class TestMatchLifecycle:
    async def test_list_and_decline(self, session: AsyncSession, users) -> None:
        ugo, vera = users
        created = await accept_candidate(session, ugo, vera, 60)
        await session.commit()

        declined = await set_match_status(session, created.id, MatchStatus.DECLINED)

        assert declined.status is MatchStatus.DECLINED
        assert [m.id for m in await list_matches(session, vera)] == [created.id]

    async def test_list_unknown_user(self, session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await list_matches(session, 999)

    async def test_status_unknown_match(self, session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await set_match_status(session, 999, MatchStatus.ACCEPTED)
