import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from database.exceptions import StoreError
from models import GolfValidationError, MissingFieldsError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors that escape a router to JSON responses."""

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(
            "Store failure on %s: %s", request.url.path, exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(MissingFieldsError)
    async def missing_fields_handler(request: Request, exc: MissingFieldsError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "fields": exc.fields},
        )

    @app.exception_handler(GolfValidationError)
    async def validation_handler(request: Request, exc: GolfValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc)},
        )
