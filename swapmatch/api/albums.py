"""
Album catalogue endpoints.

Read-only listing of albums and the cards they contain.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.db import (
    album_to_model,
    card_to_model,
    get_album,
    list_album_cards,
    list_albums,
)
from swapmatch.db.database import get_session
from swapmatch.models.failure import NotFoundError

router = APIRouter(prefix="/albums", tags=["albums"])


class AlbumResponse(BaseModel):
    """An album in the catalogue."""

    id: int
    name: str
    total_cards: int = 0
    description: str | None = None
    year: int | None = None
    publisher: str | None = None


class CardResponse(BaseModel):
    """A card within an album."""

    id: int
    album_id: int
    code: str = Field(..., description="Printed code, e.g. 'A1'")
    name: str
    team: str | None = None
    category: str | None = None


@router.get("", response_model=list[AlbumResponse])
async def get_albums(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[AlbumResponse]:
    """List every album."""
    albums = [album_to_model(a) for a in await list_albums(session)]
    return [
        AlbumResponse(
            id=a.id,
            name=a.name,
            total_cards=a.total_cards,
            description=a.description,
            year=a.year,
            publisher=a.publisher,
        )
        for a in albums
    ]


@router.get("/{album_id}/cards", response_model=list[CardResponse])
async def get_album_cards(
    album_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[CardResponse]:
    """List the cards of an album in display order."""
    if await get_album(session, album_id) is None:
        raise NotFoundError("Album", album_id)

    cards = [card_to_model(c) for c in await list_album_cards(session, album_id)]
    return [
        CardResponse(
            id=c.id,
            album_id=c.album_id,
            code=c.code,
            name=c.name,
            team=c.team,
            category=c.category,
        )
        for c in cards
    ]
