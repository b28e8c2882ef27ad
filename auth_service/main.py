"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth_service.config import settings
from auth_service.database import create_db_and_tables
from auth_service.services.errors import ErrorKind
from auth_service.utils.logging import setup_logging
from auth_service.api import auth, system, two_factor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    logger.info(f"{system.SERVICE_NAME} started")
    yield


app = FastAPI(
    title="Auth Service",
    description="Session credentials and two-factor authentication for the Pong platform",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Reject malformed bodies with 400 and no field internals."""
    if request.url.path.startswith(two_factor.router.prefix):
        detail = ErrorKind.INVALID_REQUEST_FORMAT.message
    else:
        detail = "Validation failed"
    return JSONResponse(status_code=ErrorKind.INVALID_REQUEST_FORMAT.status_code, content={"detail": detail})


# Mount routers
app.include_router(auth.router)
app.include_router(two_factor.router)
app.include_router(system.router)
