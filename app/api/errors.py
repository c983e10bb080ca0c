"""Translate engine error kinds into HTTP responses."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import ErrorKind, ReviewError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.INVALID_INPUT: 400,
}


async def review_error_handler(request: Request, exc: ReviewError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, 400)
    logger.info("Request rejected: path=%s kind=%s", request.url.path, exc.kind)
    return JSONResponse(status_code=status_code, content={"message": exc.message, "kind": str(exc.kind)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ReviewError, review_error_handler)
