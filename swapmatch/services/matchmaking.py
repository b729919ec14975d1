"""
Match persistence.

Turns a candidate the user picked from the engine's output into a stored
match. The compatibility value is stored as given and never recomputed.
"""

import logging
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.config import MAX_COMPATIBILITY, MIN_COMPATIBILITY
from swapmatch.db.operations import (
    create_match,
    get_matches_for_user,
    get_user,
    match_to_model,
    update_match_status,
    user_to_ref,
)
from swapmatch.models.db import MatchDB
from swapmatch.models.failure import FailureKind, KnownError, NotFoundError
from swapmatch.models.match import Match, MatchStatus

logger = logging.getLogger(__name__)


async def _with_users(session: AsyncSession, db_match: MatchDB) -> Match:
    """Attach the public view of both parties."""
    user_1 = await get_user(session, db_match.user_id_1)
    user_2 = await get_user(session, db_match.user_id_2)
    return replace(
        match_to_model(db_match),
        user_1=None if user_1 is None else user_to_ref(user_1),
        user_2=None if user_2 is None else user_to_ref(user_2),
    )


async def accept_candidate(
    session: AsyncSession,
    requestor_id: int,
    candidate_id: int,
    compatibility: int,
) -> Match:
    """
    Persist a pending match between the requestor and a chosen candidate.

    Raises:
        KnownError: Self-match or compatibility out of range
        NotFoundError: Either user does not exist
    """
    if requestor_id == candidate_id:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="A user cannot match with themselves.",
        )
    if not MIN_COMPATIBILITY <= compatibility <= MAX_COMPATIBILITY:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Compatibility must be between {MIN_COMPATIBILITY} and {MAX_COMPATIBILITY}.",
        )

    for user_id in (requestor_id, candidate_id):
        if await get_user(session, user_id) is None:
            raise NotFoundError("User", user_id)

    db_match = await create_match(session, requestor_id, candidate_id, compatibility)
    logger.info(
        "Match %d created: %d -> %d at %d%%",
        db_match.id,
        requestor_id,
        candidate_id,
        compatibility,
    )
    return await _with_users(session, db_match)


async def list_matches(session: AsyncSession, user_id: int) -> list[Match]:
    """Stored matches where the user is either party."""
    if await get_user(session, user_id) is None:
        raise NotFoundError("User", user_id)
    matches = await get_matches_for_user(session, user_id)
    return [await _with_users(session, m) for m in matches]


async def set_match_status(session: AsyncSession, match_id: int, status: MatchStatus) -> Match:
    """Accept or decline a stored match."""
    db_match = await update_match_status(session, match_id, status)
    if db_match is None:
        raise NotFoundError("Match", match_id)
    logger.info("Match %d is now %s", match_id, status.value)
    return await _with_users(session, db_match)
