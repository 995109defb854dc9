import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi import Request as FastAPIRequest
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from venue_votes.api import api_router
from venue_votes.core.config import get_settings
from venue_votes.core.rate_limit import limiter, rate_limit_exceeded_handler
from venue_votes.core.time import utcnow
from venue_votes.db.migrate import run_migrations
from venue_votes.db.session import open_database
from venue_votes.services.vote import StorageError, ValidationError

settings = get_settings()

logging.getLogger("venue_votes").setLevel(settings.log_level.upper())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the vote store and migrate it before serving; close it on shutdown."""
    database = open_database(settings.resolved_database_url)
    run_migrations(database)
    app.state.database = database
    try:
        yield
    finally:
        database.dispose()
        logger.info("Vote store closed")


app = FastAPI(
    title="Venue Votes API",
    description="Vote tally for trip venues",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: FastAPIRequest, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_body_error_handler(
    request: FastAPIRequest, exc: RequestValidationError
) -> JSONResponse:
    """Malformed vote bodies get the same 400 {error} as missing fields."""
    if any(tuple(error.get("loc", ()))[:1] == ("body",) for error in exc.errors()):
        return JSONResponse(status_code=400, content={"error": "Missing required fields"})
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(StorageError)
async def storage_error_handler(request: FastAPIRequest, exc: StorageError) -> JSONResponse:
    # Details were logged where the failure happened
    return JSONResponse(status_code=500, content={"error": "Database error"})


@app.exception_handler(Exception)
async def global_exception_handler(request: FastAPIRequest, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a generic 500 response."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    content = {"error": "Internal server error"}
    if not settings.is_production:
        content["debug"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# CORS
if settings.cors_origins.strip() == "*":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

app.include_router(api_router, prefix="/api")


@app.get("/health")
def health_check():
    return {"status": "healthy", "timestamp": utcnow().isoformat() + "Z"}


# Frontend, if present. Mounted last so API routes take precedence.
static_dir = Path(settings.resolved_static_dir)
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
