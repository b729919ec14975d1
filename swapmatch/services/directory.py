"""
User directory.

The compatibility engine reads users and collection snapshots only through
the `Directory` protocol. `SqlDirectory` is the database-backed
implementation; tests substitute an in-memory one.

Storage errors are re-raised as DirectoryUnavailableError so an outage is
never reported as "no matches".
"""

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.db.operations import (
    get_album_card_ids,
    get_user,
    get_user_cards,
    list_users_except,
    user_card_to_record,
    user_to_ref,
)
from swapmatch.models.collection import CollectionSnapshot
from swapmatch.models.failure import DirectoryUnavailableError
from swapmatch.models.match import UserRef

logger = logging.getLogger(__name__)


class Directory(Protocol):
    """Read access to users and their collections."""

    async def get_user(self, user_id: int) -> UserRef | None: ...

    async def list_other_users(self, excluding_user_id: int) -> list[UserRef]: ...

    async def get_snapshot(self, user_id: int, album_id: int) -> CollectionSnapshot: ...


class SqlDirectory:
    """Directory backed by the relational store."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._album_cards: dict[int, frozenset[int]] = {}

    async def get_user(self, user_id: int) -> UserRef | None:
        try:
            user = await get_user(self._session, user_id)
        except SQLAlchemyError as e:
            raise self._unavailable("get_user", e) from e
        return None if user is None else user_to_ref(user)

    async def list_other_users(self, excluding_user_id: int) -> list[UserRef]:
        try:
            users = await list_users_except(self._session, excluding_user_id)
        except SQLAlchemyError as e:
            raise self._unavailable("list_other_users", e) from e
        return [user_to_ref(u) for u in users]

    async def get_snapshot(self, user_id: int, album_id: int) -> CollectionSnapshot:
        try:
            card_ids = await self._get_album_cards(album_id)
            rows = await get_user_cards(self._session, user_id, album_id)
        except SQLAlchemyError as e:
            raise self._unavailable("get_snapshot", e) from e

        return CollectionSnapshot.from_records(
            user_id=user_id,
            album_id=album_id,
            album_card_ids=card_ids,
            records=[user_card_to_record(row) for row in rows],
        )

    async def _get_album_cards(self, album_id: int) -> frozenset[int]:
        # Card catalogue is immutable, so it is read once per directory.
        if album_id not in self._album_cards:
            self._album_cards[album_id] = frozenset(
                await get_album_card_ids(self._session, album_id)
            )
        return self._album_cards[album_id]

    @staticmethod
    def _unavailable(operation: str, error: SQLAlchemyError) -> DirectoryUnavailableError:
        logger.error("Directory %s failed: %s", operation, error)
        return DirectoryUnavailableError(detail=type(error).__name__)
