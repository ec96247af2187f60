"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from files_manager.auth.cache import TokenCache, create_redis_client
from files_manager.config import get_settings
from files_manager.db.session import Database
from files_manager.errors import (
    FilesManagerError,
    InvalidInput,
    NotFound,
    Unauthorized,
    UnsupportedForFolder,
)
from files_manager.files.directory import count_files
from files_manager.files.routes import router as files_router
from files_manager.users.routes import router as users_router
from files_manager.users.service import count_users, ensure_bootstrap_user

log = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Configure logging from settings (stderr always; optional file)."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    root = logging.getLogger("files_manager")
    root.setLevel(level)
    root.handlers.clear()
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(fmt)
    root.addHandler(sh)
    if settings.log_file and str(settings.log_file).strip():
        try:
            fh = logging.FileHandler(settings.log_file, encoding="utf-8")
            fh.setLevel(level)
            fh.setFormatter(fmt)
            root.addHandler(fh)
            root.info("Logging to file %s", settings.log_file)
        except OSError as e:
            root.warning("Could not open log file %s: %s", settings.log_file, e)
    else:
        root.debug("Logging to stderr only (no log_file set)")


_setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the metadata store and token cache, seed the bootstrap user; close both on shutdown."""
    settings = get_settings()
    log.info("Startup: initializing database and token cache")
    database = Database.from_settings(settings)
    await database.init()
    async with database.session() as session:
        await ensure_bootstrap_user(session)
    token_cache = TokenCache(create_redis_client(settings))
    app.state.database = database
    app.state.token_cache = token_cache
    log.info("Startup complete")
    try:
        yield
    finally:
        log.info("Shutdown")
        await token_cache.close()
        await database.dispose()


app = FastAPI(title="Files Manager API", version="0.1.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    return response


# Error kind -> HTTP status; anything unlisted is a 500
_ERROR_STATUS = (
    (Unauthorized, 401),
    (NotFound, 404),
    (InvalidInput, 400),
    (UnsupportedForFolder, 400),
)


def status_for_error(exc: FilesManagerError) -> int:
    for kind, status_code in _ERROR_STATUS:
        if isinstance(exc, kind):
            return status_code
    return 500


@app.exception_handler(FilesManagerError)
async def files_manager_error_handler(request: Request, exc: FilesManagerError):
    """Map an error kind to its status code and an ``{"error": message}`` body."""
    status_code = status_for_error(exc)
    if status_code == 500:
        log.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})
    if status_code == 401:
        log.debug("Unauthorized (%s) on %s %s", type(exc).__name__, request.method, request.url.path)
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Return generic 500 without leaking stack trace or internals."""
    log.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )

from files_manager.limiter import limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(users_router)
app.include_router(files_router)


@app.get("/status")
@limiter.exempt
async def get_status(request: Request) -> JSONResponse:
    """Whether the token cache and the metadata store are reachable."""
    redis_ok = await request.app.state.token_cache.is_alive()
    db_ok = await request.app.state.database.is_alive()
    return JSONResponse(content={"redis": redis_ok, "db": db_ok})


@app.get("/stats")
@limiter.exempt
async def get_stats(request: Request) -> JSONResponse:
    """Number of users and file records."""
    async with request.app.state.database.session() as session:
        users = await count_users(session)
        files = await count_files(session)
    return JSONResponse(content={"users": users, "files": files})
