from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PossessionRecord:
    """
    A user's stated possession of one card.

    `is_duplicate` is independent of `owned`: a card can be flagged as a
    duplicate without being flagged as owned, and both flags are honored as
    stored.

    Attributes:
        user_id: Owner of the record
        card_id: Card the record refers to
        owned: User holds at least one copy
        is_duplicate: User holds a surplus copy available for trade
    """

    user_id: int
    card_id: int
    owned: bool = False
    is_duplicate: bool = False


@dataclass(frozen=True)
class CollectionSnapshot:
    """
    Point-in-time view of one user's possession records for one album.

    Cards of the album without a record are implicitly wanted. Records for
    cards outside the album, or belonging to another user, are dropped by
    `from_records` and never reach the derived sets.
    """

    user_id: int
    album_id: int
    album_card_ids: frozenset[int] = field(default_factory=frozenset)
    records: tuple[PossessionRecord, ...] = ()

    @classmethod
    def from_records(
        cls,
        user_id: int,
        album_id: int,
        album_card_ids: Iterable[int],
        records: Iterable[PossessionRecord],
    ) -> "CollectionSnapshot":
        """Build a snapshot, keeping only this user's records within the album."""
        card_ids = frozenset(album_card_ids)
        scoped = tuple(r for r in records if r.card_id in card_ids and r.user_id == user_id)
        return cls(
            user_id=user_id,
            album_id=album_id,
            album_card_ids=card_ids,
            records=scoped,
        )

    @property
    def has_records(self) -> bool:
        """True if the user expressed an opinion about any card of the album."""
        return bool(self.records)

    @property
    def owned(self) -> frozenset[int]:
        """Cards with a record marked as owned."""
        return frozenset(r.card_id for r in self.records if r.owned)

    @property
    def wanted(self) -> frozenset[int]:
        """Album cards with no record, or with a record not marked as owned."""
        return self.album_card_ids - self.owned

    @property
    def duplicates(self) -> frozenset[int]:
        """Cards with a record flagged as duplicate, regardless of `owned`."""
        return frozenset(r.card_id for r in self.records if r.is_duplicate)
