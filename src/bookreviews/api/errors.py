"""
Maps the error taxonomy onto HTTP responses.

- ValidationError and framework request-parsing errors -> 400 `{"errors": [...]}`
- ConflictError -> 400, NotFoundError -> 404, InternalError -> 500, all `{"error": message}`
- anything else -> 500 with the message surfaced for diagnostics
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookreviews.core.exceptions import BookReviewsError

logger = logging.getLogger(__name__)

# Prefixes FastAPI adds to error locations
_LOCATION_PREFIXES = {"body", "query", "path"}


def _request_errors(exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"]]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        errors.append({"field": ".".join(loc) or "body", "message": error["msg"]})
    return errors


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(BookReviewsError)
    async def handle_book_reviews_error(request: Request, exc: BookReviewsError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": _request_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Something went wrong!", "message": str(exc)},
        )
