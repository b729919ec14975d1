from collections.abc import Callable, Iterable

import pytest

from swapmatch.models.collection import CollectionSnapshot, PossessionRecord
from swapmatch.models.failure import DirectoryUnavailableError
from swapmatch.models.match import UserRef

# Album X from the reference scenario: cards A, B, C
ALBUM_ID = 1
CARD_A, CARD_B, CARD_C = 101, 102, 103
ALBUM_CARDS = frozenset({CARD_A, CARD_B, CARD_C})

SnapshotFactory = Callable[..., CollectionSnapshot]


def make_snapshot(
    user_id: int,
    owned: Iterable[int] = (),
    duplicates: Iterable[int] = (),
    not_owned: Iterable[int] = (),
    album_cards: Iterable[int] = ALBUM_CARDS,
    album_id: int = ALBUM_ID,
) -> CollectionSnapshot:
    """
    Build a snapshot from card id lists.

    Cards in `duplicates` are recorded as owned unless also listed in
    `not_owned`. Cards in `not_owned` get an explicit owned=False record.
    """
    owned_set = set(owned) | set(duplicates)
    owned_set -= set(not_owned)
    dup_set = set(duplicates)
    card_ids = owned_set | dup_set | set(not_owned)
    records = [
        PossessionRecord(
            user_id=user_id,
            card_id=card_id,
            owned=card_id in owned_set,
            is_duplicate=card_id in dup_set,
        )
        for card_id in sorted(card_ids)
    ]
    return CollectionSnapshot.from_records(user_id, album_id, album_cards, records)


class InMemoryDirectory:
    """Directory over pre-built snapshots."""

    def __init__(self) -> None:
        self.users: dict[int, UserRef] = {}
        self.snapshots: dict[tuple[int, int], CollectionSnapshot] = {}
        self.snapshot_calls = 0

    def add(self, user: UserRef, snapshot: CollectionSnapshot | None = None) -> None:
        self.users[user.id] = user
        if snapshot is not None:
            self.snapshots[(user.id, snapshot.album_id)] = snapshot

    async def get_user(self, user_id: int) -> UserRef | None:
        return self.users.get(user_id)

    async def list_other_users(self, excluding_user_id: int) -> list[UserRef]:
        return [u for uid, u in self.users.items() if uid != excluding_user_id]

    async def get_snapshot(self, user_id: int, album_id: int) -> CollectionSnapshot:
        self.snapshot_calls += 1
        return self.snapshots.get(
            (user_id, album_id),
            CollectionSnapshot(user_id=user_id, album_id=album_id, album_card_ids=ALBUM_CARDS),
        )


class FailingDirectory(InMemoryDirectory):
    """Directory that breaks after a number of successful snapshot reads."""

    def __init__(self, fail_after: int = 0) -> None:
        super().__init__()
        self.fail_after = fail_after

    async def get_snapshot(self, user_id: int, album_id: int) -> CollectionSnapshot:
        if self.snapshot_calls >= self.fail_after:
            raise DirectoryUnavailableError(detail="OperationalError")
        return await super().get_snapshot(user_id, album_id)


@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory()


@pytest.fixture
def snapshot() -> SnapshotFactory:
    return make_snapshot


@pytest.fixture
def failing_directory() -> Callable[[int], FailingDirectory]:
    return FailingDirectory
