"""
Database CRUD operations.

Provides async functions for users, albums, cards, possession records and
persisted matches, plus converters from ORM rows to domain models.
"""

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.models.card import Album, Card
from swapmatch.models.collection import PossessionRecord
from swapmatch.models.db import AlbumDB, CardDB, MatchDB, UserCardDB, UserDB
from swapmatch.models.match import Match, MatchStatus, UserRef

# --- User Operations ---


async def get_user(session: AsyncSession, user_id: int) -> UserDB | None:
    """Get a user by id. Returns None if not found."""
    return await session.get(UserDB, user_id)


async def get_user_by_nickname(session: AsyncSession, nickname: str) -> UserDB | None:
    """Get a user by nickname. Returns None if not found."""
    result = await session.execute(select(UserDB).where(UserDB.nickname == nickname))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, nickname: str, location: str | None = None) -> UserDB:
    """
    Create a new user.

    Raises IntegrityError if the nickname is already taken.
    """
    user = UserDB(nickname=nickname, location=location)
    session.add(user)
    await session.flush()
    return user


async def list_users_except(session: AsyncSession, user_id: int) -> list[UserDB]:
    """All users other than `user_id`, ordered by id."""
    result = await session.execute(select(UserDB).where(UserDB.id != user_id).order_by(UserDB.id))
    return list(result.scalars().all())


def user_to_ref(user: UserDB) -> UserRef:
    """Convert a database user to its public view."""
    return UserRef(id=user.id, nickname=user.nickname, location=user.location)


# --- Album and Card Operations ---


async def get_album(session: AsyncSession, album_id: int) -> AlbumDB | None:
    """Get an album by id. Returns None if not found."""
    return await session.get(AlbumDB, album_id)


async def get_album_by_name(session: AsyncSession, name: str) -> AlbumDB | None:
    """Get an album by its unique name."""
    result = await session.execute(select(AlbumDB).where(AlbumDB.name == name))
    return result.scalar_one_or_none()


async def list_albums(session: AsyncSession) -> list[AlbumDB]:
    """All albums, ordered by id."""
    result = await session.execute(select(AlbumDB).order_by(AlbumDB.id))
    return list(result.scalars().all())


async def create_album(
    session: AsyncSession,
    name: str,
    total_cards: int = 0,
    description: str | None = None,
    year: int | None = None,
    publisher: str | None = None,
) -> AlbumDB:
    """
    Create a new album.

    Raises IntegrityError if an album with this name already exists.
    """
    album = AlbumDB(
        name=name,
        total_cards=total_cards,
        description=description,
        year=year,
        publisher=publisher,
    )
    session.add(album)
    await session.flush()
    return album


async def add_card(
    session: AsyncSession,
    album_id: int,
    code: str,
    name: str,
    team: str | None = None,
    category: str | None = None,
    sort_order: int = 0,
) -> CardDB:
    """Add a card to an album."""
    card = CardDB(
        album_id=album_id,
        code=code,
        name=name,
        team=team,
        category=category,
        sort_order=sort_order,
    )
    session.add(card)
    await session.flush()
    return card


async def get_card(session: AsyncSession, card_id: int) -> CardDB | None:
    """Get a card by id. Returns None if not found."""
    return await session.get(CardDB, card_id)


async def list_album_cards(session: AsyncSession, album_id: int) -> list[CardDB]:
    """Cards of an album in display order."""
    result = await session.execute(
        select(CardDB).where(CardDB.album_id == album_id).order_by(CardDB.sort_order, CardDB.id)
    )
    return list(result.scalars().all())


async def get_album_card_ids(session: AsyncSession, album_id: int) -> set[int]:
    """Ids of every card in an album."""
    result = await session.execute(select(CardDB.id).where(CardDB.album_id == album_id))
    return set(result.scalars().all())


def album_to_model(album: AlbumDB) -> Album:
    """Convert a database album to a domain model."""
    return Album(
        id=album.id,
        name=album.name,
        total_cards=album.total_cards,
        description=album.description,
        year=album.year,
        publisher=album.publisher,
    )


def card_to_model(card: CardDB) -> Card:
    """Convert a database card to a domain model."""
    return Card(
        id=card.id,
        album_id=card.album_id,
        code=card.code,
        name=card.name,
        team=card.team,
        category=card.category,
    )


# --- Possession Operations ---


async def get_user_cards(
    session: AsyncSession, user_id: int, album_id: int | None = None
) -> list[UserCardDB]:
    """
    Get a user's possession records.

    When `album_id` is given, only records for cards of that album are returned.
    """
    query = select(UserCardDB).where(UserCardDB.user_id == user_id)
    if album_id is not None:
        query = query.join(CardDB, UserCardDB.card_id == CardDB.id).where(
            CardDB.album_id == album_id
        )
    result = await session.execute(query.order_by(UserCardDB.card_id))
    return list(result.scalars().all())


async def get_user_card(session: AsyncSession, user_id: int, card_id: int) -> UserCardDB | None:
    """Get the possession record for one (user, card) pair."""
    result = await session.execute(
        select(UserCardDB).where(UserCardDB.user_id == user_id, UserCardDB.card_id == card_id)
    )
    return result.scalar_one_or_none()


async def upsert_user_card(
    session: AsyncSession,
    user_id: int,
    card_id: int,
    owned: bool,
    is_duplicate: bool,
) -> UserCardDB:
    """
    Insert or update a possession record.

    Flags are stored exactly as given.
    """
    existing = await get_user_card(session, user_id, card_id)

    if existing:
        existing.owned = owned
        existing.is_duplicate = is_duplicate
        await session.flush()
        return existing

    record = UserCardDB(user_id=user_id, card_id=card_id, owned=owned, is_duplicate=is_duplicate)
    session.add(record)
    await session.flush()
    return record


async def delete_user_card(session: AsyncSession, user_id: int, card_id: int) -> bool:
    """
    Forget a possession record.

    Returns True if deleted, False if not found.
    """
    result = await session.execute(
        delete(UserCardDB).where(UserCardDB.user_id == user_id, UserCardDB.card_id == card_id)
    )
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount) > 0  # type: ignore[attr-defined]


def user_card_to_record(user_card: UserCardDB) -> PossessionRecord:
    """Convert a database possession row to a domain record."""
    return PossessionRecord(
        user_id=user_card.user_id,
        card_id=user_card.card_id,
        owned=user_card.owned,
        is_duplicate=user_card.is_duplicate,
    )


# --- Match Operations ---


async def create_match(
    session: AsyncSession, user_id_1: int, user_id_2: int, compatibility: int
) -> MatchDB:
    """Persist a pending match with a snapshot of the compatibility score."""
    match = MatchDB(
        user_id_1=user_id_1,
        user_id_2=user_id_2,
        compatibility=compatibility,
        status=MatchStatus.PENDING.value,
    )
    session.add(match)
    await session.flush()
    return match


async def get_match(session: AsyncSession, match_id: int) -> MatchDB | None:
    """Get a match by id. Returns None if not found."""
    return await session.get(MatchDB, match_id)


async def get_matches_for_user(session: AsyncSession, user_id: int) -> list[MatchDB]:
    """Matches where the user is either party, newest first."""
    result = await session.execute(
        select(MatchDB)
        .where(or_(MatchDB.user_id_1 == user_id, MatchDB.user_id_2 == user_id))
        .order_by(MatchDB.id.desc())
    )
    return list(result.scalars().all())


async def update_match_status(
    session: AsyncSession, match_id: int, status: MatchStatus
) -> MatchDB | None:
    """
    Change a match's status.

    Returns None if the match does not exist.
    """
    match = await get_match(session, match_id)
    if match is None:
        return None

    match.status = status.value
    await session.flush()
    return match


def match_to_model(match: MatchDB) -> Match:
    """Convert a database match to a domain model."""
    return Match(
        id=match.id,
        user_id_1=match.user_id_1,
        user_id_2=match.user_id_2,
        compatibility=match.compatibility,
        status=MatchStatus(match.status),
    )
