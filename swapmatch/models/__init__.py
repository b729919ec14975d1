from swapmatch.models.card import Album, Card
from swapmatch.models.collection import CollectionSnapshot, PossessionRecord
from swapmatch.models.failure import (
    DirectoryUnavailableError,
    FailureDetail,
    FailureKind,
    KnownError,
    NotFoundError,
    RequestorNotFoundError,
)
from swapmatch.models.match import CandidateMatch, Match, MatchStatus, UserRef

__all__ = [
    "Album",
    "CandidateMatch",
    "Card",
    "CollectionSnapshot",
    "DirectoryUnavailableError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "Match",
    "MatchStatus",
    "NotFoundError",
    "PossessionRecord",
    "RequestorNotFoundError",
    "UserRef",
]
