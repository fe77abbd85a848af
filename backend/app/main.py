import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.database import async_session
from app.core.errors import VialsError
from app.api.routes.drafts import router as drafts_router
from app.api.routes.generate import router as generate_router
from app.api.routes.ipfs import router as ipfs_router
from app.api.routes.marketplace import router as marketplace_router
from app.api.routes.nfts import router as nfts_router
from app.services.cache import CacheService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Shutdown: release the Redis connection
    await CacheService.close()


app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(drafts_router, prefix="/api/v1")
app.include_router(marketplace_router, prefix="/api/v1")
app.include_router(nfts_router, prefix="/api/v1")
app.include_router(generate_router, prefix="/api/v1")
app.include_router(ipfs_router, prefix="/api/v1")


@app.exception_handler(VialsError)
async def vials_error_handler(request: Request, exc: VialsError):
    if exc.status_code >= 500:
        # Cause stays in the logs; the client gets the generic message
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        content = {"success": False, "error": exc.public_message}
    else:
        content = {"success": False, "error": exc.message}
        if exc.details is not None:
            content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Validation error",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


@app.get("/health")
async def health():
    try:
        async with async_session() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {e}"

    return {
        "success": db_status == "connected",
        "status": "ok" if db_status == "connected" else "degraded",
        "db": db_status,
        "cache": "connected" if await CacheService.health_check() else "unavailable",
    }


@app.get("/migrate")
def run_migrations():
    """Run Alembic migrations - use this to initialize database on Render.

    Sync on purpose: alembic/env.py drives its own event loop, so this runs
    in the threadpool.
    """
    try:
        # Import here to avoid startup issues
        from alembic.config import Config
        from alembic import command
        import os

        backend_dir = os.getcwd()
        alembic_cfg_path = os.path.join(backend_dir, "alembic.ini")

        alembic_cfg = Config(alembic_cfg_path)
        command.upgrade(alembic_cfg, "head")

        return {
            "success": True,
            "message": "Migrations completed successfully",
            "cwd": backend_dir,
        }
    except Exception as e:
        logger.exception("Migration failed")
        return {
            "success": False,
            "error": str(e),
        }
