"""
Job to load album catalogues into the database.

Reads one or more catalogue JSON files and creates the album and its cards.
Albums that already exist (by name) are left untouched, so the job can be
re-run safely. Can be run as a standalone script or from a deploy hook.

Catalogue format:
    {
        "name": "Calciatori Panini 2024/25",
        "description": "...",
        "year": 2024,
        "publisher": "Panini",
        "cards": [{"code": "A1", "name": "...", "team": "Inter", "category": "Serie A"}]
    }
"""

import argparse
import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from swapmatch.db.database import session_scope
from swapmatch.db.operations import add_card, create_album, get_album_by_name

logger = logging.getLogger(__name__)


class CatalogueError(Exception):
    """Raised when a catalogue file cannot be read or is malformed."""


class CatalogueCard(BaseModel):
    """One card entry in a catalogue file."""

    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    team: str | None = None
    category: str | None = None


class AlbumCatalogue(BaseModel):
    """Contents of a catalogue file."""

    name: str = Field(..., min_length=1)
    description: str | None = None
    year: int | None = None
    publisher: str | None = None
    cards: list[CatalogueCard] = Field(default_factory=list)


def load_catalogue(path: Path) -> AlbumCatalogue:
    """
    Read and validate a catalogue file.

    Raises:
        CatalogueError: File missing, not JSON, or failing validation
    """
    try:
        return AlbumCatalogue.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogueError(f"Cannot read catalogue {path}: {e}") from e
    except ValidationError as e:
        raise CatalogueError(f"Invalid catalogue {path}: {e}") from e


async def seed_album(session: AsyncSession, catalogue: AlbumCatalogue) -> int:
    """
    Create an album and its cards.

    Returns:
        Number of cards created (0 if the album already existed)
    """
    if await get_album_by_name(session, catalogue.name) is not None:
        logger.info("Album %r already exists, skipping", catalogue.name)
        return 0

    codes = [c.code for c in catalogue.cards]
    if len(codes) != len(set(codes)):
        raise CatalogueError(f"Duplicate card codes in album {catalogue.name!r}")

    album = await create_album(
        session,
        name=catalogue.name,
        total_cards=len(catalogue.cards),
        description=catalogue.description,
        year=catalogue.year,
        publisher=catalogue.publisher,
    )
    for position, card in enumerate(catalogue.cards):
        await add_card(
            session,
            album_id=album.id,
            code=card.code,
            name=card.name,
            team=card.team,
            category=card.category,
            sort_order=position,
        )

    logger.info("Created album %r with %d cards", catalogue.name, len(catalogue.cards))
    return len(catalogue.cards)


async def run_seed(paths: list[Path]) -> dict[str, int]:
    """
    Seed every catalogue file, each in its own transaction.

    A malformed file is logged and skipped; the others still load.

    Returns:
        Dict mapping album name to number of cards created
    """
    results: dict[str, int] = {}

    for path in paths:
        try:
            catalogue = load_catalogue(path)
            async with session_scope() as session:
                results[catalogue.name] = await seed_album(session, catalogue)
        except CatalogueError as e:
            logger.error("%s", e)

    total = sum(results.values())
    logger.info("Seed complete. Total cards created: %d", total)
    return results


def main() -> None:
    """CLI entry point for seeding albums."""
    parser = argparse.ArgumentParser(description="Load album catalogues into the database")
    parser.add_argument(
        "catalogues",
        type=Path,
        nargs="+",
        help="Path(s) to catalogue JSON files",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_seed(args.catalogues))


if __name__ == "__main__":
    main()
