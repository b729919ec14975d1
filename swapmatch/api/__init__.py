from swapmatch.api.albums import router as albums_router
from swapmatch.api.collection import router as collection_router
from swapmatch.api.health import router as health_router
from swapmatch.api.matches import router as matches_router

__all__ = [
    "albums_router",
    "collection_router",
    "health_router",
    "matches_router",
]
