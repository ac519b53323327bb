# tasktimetracker/server/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from tasktimetracker import create_client
from tasktimetracker.config import TimeTrackerConfig
from tasktimetracker.exceptions import (
    DatabaseError,
    ForeignKeyViolationError,
    NotFoundError,
    NotNullViolationError,
    UniqueViolationError,
)
from . import bookings, tags
from .dependencies import ClientDep

logger = logging.getLogger(__name__)

# Most specific classes first; lookup walks this list in order.
_ERROR_STATUS = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UniqueViolationError, status.HTTP_409_CONFLICT),
    (ForeignKeyViolationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotNullViolationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DatabaseError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def _status_for(exc: Exception) -> int:
    for exc_type, code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _handle_error(request: Request, exc: Exception) -> JSONResponse:
    code = _status_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({code}): {exc}")
    detail = exc.errors(include_url=False, include_context=False) if isinstance(exc, ValidationError) else str(exc)
    return JSONResponse(status_code=code, content={"detail": detail})


def create_app(config: Optional[TimeTrackerConfig] = None) -> FastAPI:
    """
    Builds the HTTP application. Both stores are migrated on startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = create_client(config)
        await client.migrate()
        app.state.client = client
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="tasktimetracker", lifespan=lifespan)
    app.include_router(bookings.router)
    app.include_router(tags.router)

    for exc_type, _ in _ERROR_STATUS:
        app.add_exception_handler(exc_type, _handle_error)

    @app.get("/health")
    async def health(client: ClientDep):
        statuses = await client.check_connections()
        ok = all(s == "ok" for s in statuses.values())
        return JSONResponse(
            status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=statuses,
        )

    return app
