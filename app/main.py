"""Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import APP_VERSION, get_settings
from .database import SessionLocal, engine, init_database
from .errors import BirthdayTrackerError, InternalFailure
from .routes import auth, birthdays, categories, users
from .storage import seed_categories

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.is_release else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def prepare_database():
    """Create tables and seed the default categories."""
    init_database()
    session = SessionLocal()
    try:
        seed_categories(session)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run on application startup and shutdown."""
    prepare_database()
    logger.info(f"Birthday Tracker {APP_VERSION} started in {settings.mode} mode")
    yield
    engine.dispose()
    logger.info("Birthday Tracker stopped")


# Create app
app = FastAPI(
    title="Birthday Tracker",
    description="Track birthdays of the people you care about",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url=None if settings.is_release else "/docs",
    redoc_url=None if settings.is_release else "/redoc",
)

# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(users.admin_router)
app.include_router(birthdays.router)
app.include_router(categories.router)


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(BirthdayTrackerError)
async def handle_app_error(request: Request, exc: BirthdayTrackerError):
    if isinstance(exc, InternalFailure):
        logger.error(f"Internal failure on {request.method} {request.url.path}: {exc.message}")
        return error_response(500, "Internal server error")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return error_response(400, "Invalid request: " + "; ".join(problems))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(500, "Internal server error")


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(500, "Internal server error")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    if request.url.path == "/health":
        return await call_next(request)

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f} ms)"
    )
    return response


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": APP_VERSION}


def run():
    """Serve the app with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.server_port,
        log_level="info" if settings.is_release else "debug",
    )


if __name__ == "__main__":
    run()
