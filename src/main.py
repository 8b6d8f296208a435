"""FastAPI application entry point for the todo API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.api import todos, users
from src.api.dependencies import AUTH_HEADER
from src.config import get_settings
from src.database import init_db
from src.errors import AuthenticationError, InvalidTokenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    init_db()
    yield


app = FastAPI(
    title="Todo API",
    description="Per-user todo lists with token authentication",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[AUTH_HEADER],
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Malformed input, including duplicate emails."""
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Request bodies that fail schema validation are plain 400s."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(exc)},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    """Missing, foreign and malformed ids all look the same."""
    return Response(status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(AuthenticationError)
@app.exception_handler(InvalidTokenError)
async def unauthorized_handler(request: Request, exc: Exception):
    """No detail is given to avoid user enumeration."""
    return Response(status_code=status.HTTP_401_UNAUTHORIZED)


@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
    """Storage failures are reported as bad requests, not server errors."""
    logger.error(f"Persistence error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Unable to process request"},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Strip non-serializable context from pydantic errors."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type")}
        for error in exc.errors()
    ]


# Register routers
app.include_router(users.router)
app.include_router(todos.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
