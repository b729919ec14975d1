from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from swapmatch.api import (
    albums_router,
    collection_router,
    health_router,
    matches_router,
)
from swapmatch.config import settings
from swapmatch.db.database import init_db
from swapmatch.models.failure import KnownError


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    yield


def _app_version() -> str:
    try:
        return pkg_version("swapmatch")
    except PackageNotFoundError:
        return "0.0.0"


app = FastAPI(
    title=settings.app_name,
    version=_app_version(),
    lifespan=lifespan,
)

app.include_router(albums_router)
app.include_router(collection_router)
app.include_router(health_router)
app.include_router(matches_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render classified failures with their status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"failure": exc.to_detail().model_dump(mode="json")},
    )
