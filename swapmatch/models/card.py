from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Album:
    """
    A sticker/card album that scopes a set of collectible cards.

    Attributes:
        id: Album primary key
        name: Display name (e.g., "Calciatori Panini 2024/25")
        total_cards: Number of cards the album is designed to hold
    """

    id: int
    name: str
    total_cards: int = 0
    description: str | None = None
    year: int | None = None
    publisher: str | None = None


@dataclass(frozen=True, slots=True)
class Card:
    """
    A card identity within an album.

    Only `id` and `album_id` matter for matching. The remaining fields are
    display metadata.

    Attributes:
        id: Opaque card key
        album_id: Album the card belongs to
        code: Printed code within the album (e.g., "A1", "B20")
        name: Player or character name
        team: Team name, if any
        category: Album section (e.g., "Serie A", "Allenatori")
    """

    id: int
    album_id: int
    code: str
    name: str
    team: str | None = None
    category: str | None = None
