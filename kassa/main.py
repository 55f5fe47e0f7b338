"""
kassa/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes and exception handlers
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from kassa.core.config import settings, validate_settings
from kassa.core.errors import add_exception_handlers
from kassa.core.logging import setup_logging, get_logger
from kassa.db.mongo import connect_to_mongo, close_mongo_connection, check_database_health
from kassa.db.indexes import create_indexes
from kassa.api import admin, auth, chat, products, reports, transactions, users

APP_VERSION = "1.0.0"

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.STORE_NAME} API...")

    try:
        logger.info("Validating configuration...")
        validate_settings()

        logger.info("Connecting to MongoDB...")
        await connect_to_mongo()

        logger.info("Creating database indexes...")
        await create_indexes()

        is_healthy = await check_database_health()
        if not is_healthy:
            logger.warning("Database health check failed during startup")
        else:
            logger.info("Database health check passed")

        logger.info(f"{settings.STORE_NAME} API started (environment={settings.ENVIRONMENT}, debug={settings.DEBUG})")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info(f"Shutting down {settings.STORE_NAME} API...")

    try:
        await close_mongo_connection()
        logger.info("Shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title=f"{settings.STORE_NAME} POS API",
    description="Point-of-sale backend: catalog, sales, reports and chat",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


# Requests slower than this are logged as warnings
SLOW_REQUEST_SECONDS = 5.0


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"

    if elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(
            f"Slow request: {request.method} {request.url.path} took {elapsed:.1f}s",
            extra={"process_time": elapsed}
        )
    return response


add_exception_handlers(app)

for module in (auth, users, admin, products, transactions, reports, chat):
    app.include_router(module.router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Health"])
async def root():
    return {
        "name": f"{settings.STORE_NAME} API",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Service status with a database ping. 503 when MongoDB does not answer.
    """
    database_ok = await check_database_health()
    body = {
        "status": "healthy" if database_ok else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": time.time(),
        "checks": {"database": "healthy" if database_ok else "unhealthy"},
    }
    return JSONResponse(content=body, status_code=200 if database_ok else 503)


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """Readiness probe: traffic only once MongoDB answers."""
    if await check_database_health():
        return {"status": "ready"}
    return JSONResponse(status_code=503, content={"status": "not_ready", "reason": "database_unavailable"})


@app.get("/live", tags=["Health"])
async def liveness_check():
    """Liveness probe: the process is up."""
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kassa.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
