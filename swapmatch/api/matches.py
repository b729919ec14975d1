"""
Match API endpoints.

Potential matches are computed on demand by the compatibility engine.
Accepting one stores a match with the compatibility seen at that moment.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.analysis.compatibility import compute_potential_matches, propose_trades
from swapmatch.config import MAX_COMPATIBILITY, MIN_COMPATIBILITY
from swapmatch.db.database import get_session
from swapmatch.models.match import Match, MatchStatus, UserRef
from swapmatch.services.directory import SqlDirectory
from swapmatch.services.matchmaking import accept_candidate, list_matches, set_match_status

router = APIRouter(prefix="/matches", tags=["matches"])


class PublicUser(BaseModel):
    """Public user fields. Credentials are never exposed."""

    id: int
    nickname: str
    location: str | None = None


class CandidateMatchResponse(BaseModel):
    """A potential trading partner."""

    model_config = ConfigDict(populate_by_name=True)

    user: PublicUser
    compatibility: int = Field(ge=MIN_COMPATIBILITY, le=MAX_COMPATIBILITY)
    possible_trades: int = Field(ge=0, alias="possibleTrades")


class AcceptMatchRequest(BaseModel):
    """Request model for accepting a candidate."""

    user_id_2: int = Field(..., description="The chosen candidate")
    compatibility: int = Field(
        ...,
        ge=MIN_COMPATIBILITY,
        le=MAX_COMPATIBILITY,
        description="Compatibility shown to the user when accepting",
    )


class MatchResponse(BaseModel):
    """A stored match."""

    id: int
    user_id_1: int
    user_id_2: int
    compatibility: int
    status: MatchStatus
    user_1: PublicUser | None = None
    user_2: PublicUser | None = None


class TradePairResponse(BaseModel):
    """One concrete 1:1 swap from the requestor's side."""

    receive_card_id: int
    give_card_id: int


class MatchStatusRequest(BaseModel):
    """Request model for changing a match status."""

    status: MatchStatus


def _public_user(user: UserRef) -> PublicUser:
    return PublicUser(id=user.id, nickname=user.nickname, location=user.location)


def _match_response(match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        user_id_1=match.user_id_1,
        user_id_2=match.user_id_2,
        compatibility=match.compatibility,
        status=match.status,
        user_1=None if match.user_1 is None else _public_user(match.user_1),
        user_2=None if match.user_2 is None else _public_user(match.user_2),
    )


@router.get("/{user_id}/potential", response_model=list[CandidateMatchResponse])
async def get_potential_matches(
    user_id: int,
    album_id: Annotated[int, Query(description="Album whose cards are compared")],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[CandidateMatchResponse]:
    """
    Rank users the requestor can trade with.

    Sorted by compatibility descending, then user id ascending.
    An unknown user or a user with no records in the album gets an empty list.
    Storage failures surface as 503, never as an empty list.
    """
    candidates = await compute_potential_matches(user_id, album_id, SqlDirectory(session))
    return [
        CandidateMatchResponse(
            user=_public_user(c.user),
            compatibility=c.compatibility,
            possible_trades=c.possible_trades,
        )
        for c in candidates
    ]


@router.get(
    "/{user_id}/potential/{candidate_id}/trades",
    response_model=list[TradePairResponse],
)
async def get_trade_pairs(
    user_id: int,
    candidate_id: int,
    album_id: Annotated[int, Query(description="Album whose cards are compared")],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[TradePairResponse]:
    """
    List every swap the two users could make, ordered by card id.

    Empty when no mutually beneficial swap exists.
    """
    pairs = await propose_trades(user_id, candidate_id, album_id, SqlDirectory(session))
    return [TradePairResponse(receive_card_id=a, give_card_id=b) for a, b in pairs]


@router.post("/{user_id}", response_model=MatchResponse, status_code=status.HTTP_201_CREATED)
async def create_user_match(
    user_id: int,
    request: AcceptMatchRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MatchResponse:
    """Store a pending match with a chosen candidate."""
    match = await accept_candidate(session, user_id, request.user_id_2, request.compatibility)
    return _match_response(match)


@router.get("/{user_id}", response_model=list[MatchResponse])
async def get_user_matches(
    user_id: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[MatchResponse]:
    """List stored matches involving the user, newest first."""
    return [_match_response(m) for m in await list_matches(session, user_id)]


@router.patch("/{match_id}/status", response_model=MatchResponse)
async def update_status(
    match_id: int,
    request: MatchStatusRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MatchResponse:
    """Accept or decline a stored match."""
    match = await set_match_status(session, match_id, request.status)
    return _match_response(match)
