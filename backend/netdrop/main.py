"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from netdrop.config import settings
from netdrop.database import async_session, engine
from netdrop.exceptions import NetdropError
from netdrop.models import Base

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create data dirs and tables, then reconcile blobs against metadata."""
    Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
    settings.upload_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.RECONCILE_ON_STARTUP:
        from netdrop.services.blob_store import blob_store
        from netdrop.services.reconcile import reconcile_storage
        async with async_session() as session:
            await reconcile_storage(session, blob_store, settings.RECONCILE_MIN_AGE_SECONDS)

    logger.info(f"netdrop ready, storing uploads in {settings.upload_dir}")

    yield

    await engine.dispose()


app = FastAPI(
    title="netdrop",
    version="0.1.0",
    description="Drop a file, get a hash-keyed download link.",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NetdropError)
async def netdrop_error_handler(request: Request, exc: NetdropError):
    logger.info(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


@app.get("/api/health")
async def health_check():
    """Verify API and database connectivity."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {"status": "error", "database": "unavailable"}
    return {"status": "ok", "database": "connected"}


# Register routers
from netdrop.routes.files import router as files_router
app.include_router(files_router)

# The bundled web client is served last so API routes take precedence
if settings.STATIC_DIR and Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "netdrop.main:app",
        host="0.0.0.0",
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
