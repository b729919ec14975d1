"""
Collection API endpoints.

Reads and edits a user's possession records. A card with no record is
implicitly wanted.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.db import (
    delete_user_card,
    get_album,
    get_card,
    get_user,
    upsert_user_card,
    user_card_to_record,
)
from swapmatch.db.database import get_session
from swapmatch.models.failure import NotFoundError
from swapmatch.services.directory import SqlDirectory

router = APIRouter(prefix="/collection", tags=["collection"])


class PossessionResponse(BaseModel):
    """A single possession record."""

    card_id: int
    owned: bool
    is_duplicate: bool


class CollectionResponse(BaseModel):
    """A user's collection state for one album."""

    user_id: int
    album_id: int
    records: list[PossessionResponse] = Field(default_factory=list)
    owned_count: int = 0
    wanted_count: int = Field(
        default=0,
        description="Album cards not owned, including cards with no record",
    )
    duplicate_count: int = 0


class PossessionUpdateRequest(BaseModel):
    """Request model for setting a possession record."""

    owned: bool = False
    is_duplicate: bool = Field(
        default=False,
        description="Surplus copy available for trade. Not tied to 'owned'.",
    )


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    user_id: int
    card_id: int
    deleted: bool


async def _require_user(session: AsyncSession, user_id: int) -> None:
    if await get_user(session, user_id) is None:
        raise NotFoundError("User", user_id)


@router.get("/{user_id}", response_model=CollectionResponse)
async def get_user_collection(
    user_id: int,
    album_id: Annotated[int, Query(description="Album to scope the collection to")],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionResponse:
    """Get a user's possession records and derived counts for an album."""
    await _require_user(session, user_id)
    if await get_album(session, album_id) is None:
        raise NotFoundError("Album", album_id)

    snapshot = await SqlDirectory(session).get_snapshot(user_id, album_id)

    return CollectionResponse(
        user_id=user_id,
        album_id=album_id,
        records=[
            PossessionResponse(card_id=r.card_id, owned=r.owned, is_duplicate=r.is_duplicate)
            for r in snapshot.records
        ],
        owned_count=len(snapshot.owned),
        wanted_count=len(snapshot.wanted),
        duplicate_count=len(snapshot.duplicates),
    )


@router.put("/{user_id}/cards/{card_id}", response_model=PossessionResponse)
async def set_possession(
    user_id: int,
    card_id: int,
    request: PossessionUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> PossessionResponse:
    """Create or replace the record for one card."""
    await _require_user(session, user_id)
    if await get_card(session, card_id) is None:
        raise NotFoundError("Card", card_id)

    row = await upsert_user_card(session, user_id, card_id, request.owned, request.is_duplicate)
    record = user_card_to_record(row)
    return PossessionResponse(
        card_id=record.card_id,
        owned=record.owned,
        is_duplicate=record.is_duplicate,
    )


@router.delete("/{user_id}/cards/{card_id}", response_model=DeleteResponse)
async def forget_possession(
    user_id: int,
    card_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Remove the record for one card. The card becomes wanted again."""
    await _require_user(session, user_id)
    deleted = await delete_user_card(session, user_id, card_id)
    return DeleteResponse(user_id=user_id, card_id=card_id, deleted=deleted)
