from dataclasses import dataclass
from enum import Enum


class MatchStatus(str, Enum):
    """Lifecycle of a persisted match."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


@dataclass(frozen=True, slots=True)
class UserRef:
    """
    Public view of a user.

    Never carries credentials. Only these fields are serialized to clients.
    """

    id: int
    nickname: str
    location: str | None = None


@dataclass(frozen=True, slots=True)
class CandidateMatch:
    """
    A user with whom at least one mutually beneficial trade is possible.

    Attributes:
        user: The candidate trading partner
        compatibility: Normalized score in (0, 100]
        possible_trades: Number of feasible trades, always > 0 when emitted
    """

    user: UserRef
    compatibility: int
    possible_trades: int


@dataclass
class Match:
    """
    A persisted match between two users.

    `compatibility` is the value seen when the match was accepted. It is
    never recomputed, so it can drift from a fresh engine result.
    `user_1` and `user_2` are the public views of both parties, when loaded.
    """

    id: int
    user_id_1: int
    user_id_2: int
    compatibility: int
    status: MatchStatus = MatchStatus.PENDING
    user_1: UserRef | None = None
    user_2: UserRef | None = None
