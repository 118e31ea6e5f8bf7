"""Country API - FastAPI Application Entry Point.

Country metadata joined with USD exchange rates, cached in a relational store.
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from country_api.api.country_routes import router as country_router
from country_api.api.status_routes import router as status_router
from country_api.config import settings
from country_api.core.errors import (
    CountryAPIError,
    NotFound,
    StorageFailure,
    UpstreamUnavailable,
    ValidationFailed,
)
from country_api.core.logging import configure_server_logging, get_logger
from country_api.database import init_db, test_connection

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("Country API starting up...")
    if not test_connection():
        raise RuntimeError("Database not reachable")
    init_db()
    yield
    logger.info("Country API shut down")


app = FastAPI(
    title="Country Currency & Exchange API",
    description="Country data joined with exchange rates, with an estimated GDP per country.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "endpoint": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        },
    )
    return response


# ── Error taxonomy → HTTP ──


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    logger.warning(
        f"Upstream {exc.source} unavailable: {exc.reason}", extra={"source": exc.source}
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "External data source unavailable", "details": exc.message},
    )


@app.exception_handler(StorageFailure)
async def storage_failure_handler(request: Request, exc: StorageFailure):
    return JSONResponse(
        status_code=exc.status_code, content={"error": "Internal server error"}
    )


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": exc.details},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = {
        str(err["loc"][-1]) if err.get("loc") else "request": err.get("msg", "is invalid")
        for err in exc.errors()
    }
    return JSONResponse(
        status_code=400, content={"error": "Validation failed", "details": details}
    )


@app.exception_handler(CountryAPIError)
async def country_api_error_handler(request: Request, exc: CountryAPIError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"endpoint": request.url.path},
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Routers
app.include_router(country_router)
app.include_router(status_router)


@app.get("/", tags=["System"])
async def root():
    """Liveness check."""
    return {"message": "Country Currency & Exchange API", "status": "running"}


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "country-api",
        "version": "1.0.0",
    }


def run() -> None:
    """Console entry point: serve on the configured port."""
    configure_server_logging()
    uvicorn.run(
        "country_api.main:app", host="0.0.0.0", port=settings.port, log_config=None
    )


if __name__ == "__main__":
    run()
