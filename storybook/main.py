"""
Storybook Studio - FastAPI application
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from sqlalchemy.engine import make_url
import logging
import os

from storybook.core.config import settings
from storybook.core.database import engine, Base, check_db_connection
from storybook.core.errors import StorybookError
from storybook.core.paths import get_upload_dir
import storybook.models  # noqa: F401  registers every table on Base.metadata

from storybook.api.auth import router as auth_router
from storybook.api.characters import router as characters_router
from storybook.api.stories import router as stories_router
from storybook.api.scrapbooks import router as scrapbooks_router
from storybook.api.images import router as images_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _ensure_sqlite_dir(database_url: str) -> None:
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite") or not url.database or url.database == ":memory:":
        return
    directory = os.path.dirname(os.path.abspath(url.database))
    os.makedirs(directory, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown"""
    logger.info("Storybook Studio API starting")

    _ensure_sqlite_dir(settings.DATABASE_URL)
    # tables are created here for development; production schemas are managed outside the app
    async with engine.begin() as conn:
        if settings.ENVIRONMENT == "development":
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables ready")

    yield

    await engine.dispose()
    logger.info("Storybook Studio API stopped")


app = FastAPI(
    title="Storybook Studio API",
    description="Characters, illustrated stories and scrapbooks for young authors",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan,
)

if (settings.STORAGE_BACKEND or "local").lower() == "local":
    app.mount("/static", StaticFiles(directory=get_upload_dir()), name="static")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorybookError)
async def storybook_error_handler(request: Request, exc: StorybookError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(characters_router, prefix="/characters", tags=["characters"])
app.include_router(stories_router, prefix="/stories", tags=["stories"])
app.include_router(scrapbooks_router, prefix="/scrapbooks", tags=["scrapbooks"])
app.include_router(images_router, prefix="/images", tags=["images"])


@app.get("/")
async def root():
    return {
        "message": "Storybook Studio API",
        "version": "1.0.0",
        "docs": "/docs" if settings.ENVIRONMENT == "development" else None,
    }


@app.get("/health")
async def health_check():
    """Liveness and database reachability"""
    db_ok = await check_db_connection()
    return {"status": "healthy" if db_ok else "degraded", "database": "ok" if db_ok else "unreachable"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "storybook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
    )
