"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from trade_journal.config.settings import get_settings
from trade_journal.config.logging_config import setup_logging
from trade_journal.repositories.sqlalchemy.database import init_db
from trade_journal.api.routers import journal_router
from trade_journal.core.exceptions import AppError

# Status codes for error codes that are not plain bad requests
_ERROR_STATUS = {
    "FETCH_FAILED": 502,
    "INGESTION_IN_PROGRESS": 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Realised and unrealised profit journal for brokerage trades",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(journal_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=_ERROR_STATUS.get(exc.code, 400),
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
