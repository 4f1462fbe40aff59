# medicamp_api/errors.py
"""
HTTP error taxonomy and application-wide exception handlers.

Controllers raise these directly; FastAPI turns them into responses the same
way it does for a plain HTTPException.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class MediCampError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class UnauthorizedError(MediCampError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "unauthorized access"

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(detail)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(MediCampError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "forbidden access"


class NotFoundError(MediCampError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class ConflictError(MediCampError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class ValidationError(MediCampError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> FastAPI:
    """Attach the 400 and 500 handlers to an application"""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    return app
