from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class AppError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(code="not_found", message=message, status_code=404)


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(code="bad_request", message=message, status_code=400)


class NoMatchingSlabError(AppError):
    def __init__(self, achieved_count: int) -> None:
        super().__init__(
            code="no_matching_slab",
            message=f"No matching slab found for count {achieved_count}",
            status_code=400,
        )
        self.achieved_count = achieved_count


class SlabNotConfiguredError(AppError):
    def __init__(self, range_label: str) -> None:
        super().__init__(
            code="slab_not_configured",
            message=f"No amount configured for slab {range_label}",
            status_code=400,
        )
        self.range_label = range_label


class StorageError(AppError):
    def __init__(self, message: str = "Could not read from data store") -> None:
        super().__init__(code="storage_error", message=message, status_code=500)


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorDetail


def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    envelope = ErrorEnvelope(error=ErrorDetail(code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=ErrorDetail(
            code="validation_error",
            message="Validation error",
            details={"errors": jsonable_encoder(exc.errors())},
        )
    )
    return JSONResponse(status_code=422, content=envelope.model_dump())


def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    envelope = ErrorEnvelope(
        error=ErrorDetail(code="unexpected_error", message="An unexpected error occurred")
    )
    return JSONResponse(status_code=500, content=envelope.model_dump())
