"""
Error taxonomy shared by the repositories and the HTTP layer.

Every failure the repositories report is one of these classes; the API maps
each class to a status code through its `status_code` attribute.
"""

from typing import Any, Dict, List, Optional


class BookReviewsError(Exception):
    """Base class for all errors raised by the Book Reviews core."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(BookReviewsError):
    """
    Malformed, missing or out-of-range input.

    Attributes:
        errors (List[Dict[str, str]]): One entry per offending field, each with
            the keys `field` and `message`. All errors found are reported together.
    """

    status_code = 400

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message or "Validation failed")
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}], message)

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class NotFoundError(BookReviewsError):
    """The referenced book or review does not exist."""

    status_code = 404


class ConflictError(BookReviewsError):
    """A unique constraint was violated (e.g. duplicate ISBN)."""

    status_code = 400


class InternalError(BookReviewsError):
    """The document store failed; the underlying message is kept for diagnostics."""

    status_code = 500
