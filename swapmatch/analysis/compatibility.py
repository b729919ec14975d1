"""
Match compatibility engine.

Given a requesting user's collection snapshot and those of every other
user, finds the users with whom a one-for-one trade would benefit both
sides, scores them and ranks them.

A feasible trade is a card pair (a, b) where:
- the requestor wants a and the candidate has a as a duplicate, and
- the candidate wants b and the requestor has b as a duplicate.

Two counting rules are available:
- existence: each card the requestor wants and the candidate can supply
  counts once, provided the requestor can give back at least one card the
  candidate wants. This is the default.
- maximum: the number of disjoint 1:1 trades that can happen at the same
  time (a maximum bipartite matching over the feasible pairs).

The engine is a pure computation over directory reads. It never writes.
"""

import logging
import math

from swapmatch.config import MAX_COMPATIBILITY, MIN_COMPATIBILITY, TradeCountMode, settings
from swapmatch.models.collection import CollectionSnapshot
from swapmatch.models.failure import (
    FailureKind,
    KnownError,
    NotFoundError,
    RequestorNotFoundError,
)
from swapmatch.models.match import CandidateMatch, UserRef
from swapmatch.services.directory import Directory

logger = logging.getLogger(__name__)


def obtainable_cards(receiver: CollectionSnapshot, giver: CollectionSnapshot) -> frozenset[int]:
    """Cards the receiver wants that the giver holds as duplicates."""
    return receiver.wanted & giver.duplicates


def trade_pairs(
    requestor: CollectionSnapshot, candidate: CollectionSnapshot
) -> list[tuple[int, int]]:
    """
    Every feasible (receive, give) card pair from the requestor's side.

    Ordered by card id so callers get a stable listing.
    """
    receive = sorted(obtainable_cards(requestor, candidate))
    give = sorted(obtainable_cards(candidate, requestor))
    return [(a, b) for a in receive for b in give]


def count_possible_trades(requestor: CollectionSnapshot, candidate: CollectionSnapshot) -> int:
    """
    Existence count of feasible trades.

    Each obtainable card contributes at most one, and only if some
    reciprocal card exists. Many reciprocal cards do not multiply the count.
    """
    if not obtainable_cards(candidate, requestor):
        return 0
    return len(obtainable_cards(requestor, candidate))


def max_simultaneous_trades(requestor: CollectionSnapshot, candidate: CollectionSnapshot) -> int:
    """
    Maximum number of disjoint 1:1 trades.

    Every obtainable card pairs feasibly with every reciprocal card, so the
    trade graph is complete bipartite and its maximum matching is the
    smaller side.
    """
    return min(
        len(obtainable_cards(requestor, candidate)),
        len(obtainable_cards(candidate, requestor)),
    )


def compatibility_score(possible_trades: int, requestor_wanted: int, candidate_wanted: int) -> int:
    """
    Normalize a trade count into a 0-100 score.

    score = round(min(100, trades / max(requestor_wanted, candidate_wanted, 1) * 100))

    Halves round up. The result is clamped to [0, 100].
    """
    denominator = max(requestor_wanted, candidate_wanted, 1)
    raw = min(float(MAX_COMPATIBILITY), possible_trades / denominator * 100)
    score = math.floor(raw + 0.5)
    return max(MIN_COMPATIBILITY, min(MAX_COMPATIBILITY, score))


def evaluate_candidate(
    requestor: CollectionSnapshot,
    candidate_user: UserRef,
    candidate: CollectionSnapshot,
    mode: TradeCountMode = "existence",
) -> CandidateMatch | None:
    """
    Score one candidate against the requestor.

    Returns None when no trade is possible.
    """
    if mode == "maximum":
        possible_trades = max_simultaneous_trades(requestor, candidate)
    else:
        possible_trades = count_possible_trades(requestor, candidate)

    logger.debug(
        "Candidate %d: %d possible trades (%s)", candidate_user.id, possible_trades, mode
    )

    if possible_trades <= 0:
        return None

    compatibility = compatibility_score(
        possible_trades, len(requestor.wanted), len(candidate.wanted)
    )
    return CandidateMatch(
        user=candidate_user,
        compatibility=compatibility,
        possible_trades=possible_trades,
    )


def rank_candidates(candidates: list[CandidateMatch]) -> list[CandidateMatch]:
    """
    Order candidates by compatibility, best first.

    Equal compatibility falls back to ascending user id.
    """
    return sorted(candidates, key=lambda c: (-c.compatibility, c.user.id))


async def compute_potential_matches(
    requestor_id: int,
    album_id: int,
    directory: Directory,
    mode: TradeCountMode | None = None,
    strict_requestor: bool | None = None,
) -> list[CandidateMatch]:
    """
    Find and rank every user the requestor can trade with in an album.

    Args:
        requestor_id: User asking for matches
        album_id: Album whose cards are compared
        directory: Source of users and snapshots
        mode: Trade counting rule, defaults to settings.trade_count_mode
        strict_requestor: Raise for an unknown requestor instead of
            returning no matches, defaults to settings.strict_requestor_lookup

    Returns:
        Candidates with at least one possible trade, ranked

    Raises:
        RequestorNotFoundError: Unknown requestor in strict mode
        DirectoryUnavailableError: The directory failed (propagated as-is)
    """
    if mode is None:
        mode = settings.trade_count_mode
    if strict_requestor is None:
        strict_requestor = settings.strict_requestor_lookup

    requestor_user = await directory.get_user(requestor_id)
    if requestor_user is None:
        if strict_requestor:
            raise RequestorNotFoundError(requestor_id)
        logger.warning("Match request for unknown user %d", requestor_id)
        return []

    requestor = await directory.get_snapshot(requestor_id, album_id)
    if not requestor.has_records:
        logger.info("User %d has no records in album %d", requestor_id, album_id)
        return []

    others = await directory.list_other_users(requestor_id)

    candidates: list[CandidateMatch] = []
    for other in others:
        if other.id == requestor_id:
            continue
        snapshot = await directory.get_snapshot(other.id, album_id)
        match = evaluate_candidate(requestor, other, snapshot, mode)
        if match is not None:
            candidates.append(match)

    logger.info(
        "User %d, album %d: %d of %d users are tradeable",
        requestor_id,
        album_id,
        len(candidates),
        len(others),
    )
    return rank_candidates(candidates)


async def propose_trades(
    requestor_id: int,
    candidate_id: int,
    album_id: int,
    directory: Directory,
) -> list[tuple[int, int]]:
    """
    List the concrete (receive, give) card pairs two users could swap.

    Raises:
        KnownError: Requestor and candidate are the same user
        NotFoundError: Either user does not exist
        DirectoryUnavailableError: The directory failed (propagated as-is)
    """
    if requestor_id == candidate_id:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="A user cannot trade with themselves.",
        )
    for user_id in (requestor_id, candidate_id):
        if await directory.get_user(user_id) is None:
            raise NotFoundError("User", user_id)

    requestor = await directory.get_snapshot(requestor_id, album_id)
    candidate = await directory.get_snapshot(candidate_id, album_id)
    pairs = trade_pairs(requestor, candidate)
    logger.debug(
        "Users %d and %d, album %d: %d trade pairs",
        requestor_id,
        candidate_id,
        album_id,
        len(pairs),
    )
    return pairs
