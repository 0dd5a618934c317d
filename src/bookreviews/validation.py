"""
Validation layer: turns raw request data into normalized records.

Each function either returns a validated Pydantic model or raises
`bookreviews.core.exceptions.ValidationError` listing every offending field at
once. Nothing here touches the database, so validation always runs before
any write.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Tuple, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bookreviews.core.exceptions import ValidationError
from bookreviews.core.ids import is_object_id
from bookreviews.schemas.book import BookCreate
from bookreviews.schemas.review import ReviewCreate

ModelT = TypeVar("ModelT", bound=BaseModel)


def field_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    """Flattens Pydantic errors into `{"field", "message"}` entries."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.append({"field": field, "message": error["msg"]})
    return errors


def _validate(model: Type[ModelT], data: Any) -> ModelT:
    if not isinstance(data, Mapping):
        raise ValidationError.single("body", "Request body must be a JSON object")
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(field_errors(exc)) from exc


def validate_book(data: Any) -> BookCreate:
    return _validate(BookCreate, data)


def validate_review(data: Any) -> ReviewCreate:
    return _validate(ReviewCreate, data)


def validate_object_id(value: Any, entity: str = "book", field: str = "id") -> str:
    """
    Checks that `value` is shaped like a document id and returns it lower-cased.

    Args:
        value: Candidate id, usually a path parameter.
        entity (str): Entity name used in the error message ("book", "review").
        field (str): Field reported in the error entry.

    Raises:
        ValidationError: If the value is not 24 hexadecimal characters.
    """
    if not is_object_id(value):
        raise ValidationError.single(field, f"Invalid {entity} ID")
    return value.lower()


def validate_replacement(
    object_id: Any,
    entity: str,
    data: Any,
    validate: Callable[[Any], ModelT],
) -> Tuple[str, ModelT]:
    """
    Validates a path id and a replacement body together.

    Raises:
        ValidationError: With the id error and the body errors in one list.
    """
    errors: List[Dict[str, str]] = []
    normalized_id = record = None
    try:
        normalized_id = validate_object_id(object_id, entity)
    except ValidationError as exc:
        errors.extend(exc.errors)
    try:
        record = validate(data)
    except ValidationError as exc:
        errors.extend(exc.errors)
    if errors:
        raise ValidationError(errors)
    return normalized_id, record
