from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import comment, hoot
from app.api.auth import get_current_user
from app.db import DatabaseManager
from app.logger import configure_logging
from app.models.user import User
from app.schemas.responses import HealthCheckResponseSchema

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    this_db = DatabaseManager()
    this_db.ensure_constraints()
    app.state.driver = this_db.driver
    logger.info("Hoots API started")
    yield
    this_db.close()
    logger.info("Hoots API stopped")


app = FastAPI(title="Hoots API", lifespan=lifespan)
app.include_router(hoot.router)
app.include_router(comment.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render every HTTP error as ``{"err": message}``."""
    return JSONResponse(
        {"err": str(exc.detail)},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed bodies and path parameters with a 400."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}")
    return JSONResponse(
        {"err": "; ".join(messages)},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        {"err": str(exc)},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.get("/api/health", response_model=HealthCheckResponseSchema)
async def health_check() -> HealthCheckResponseSchema:
    return HealthCheckResponseSchema(success=True)


@app.get("/api/me", response_model=User)
async def get_current_user_profile(
    current_user: User = Depends(get_current_user),
) -> User:
    """Get the current user's profile.

    This is a protected endpoint that requires authentication.

    Args:
        current_user: Injected by the auth dependency

    Returns:
        The current user's profile
    """
    return current_user
