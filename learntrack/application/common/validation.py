"""Conversion of input validation failures into per-field messages."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from learntrack.application.common.result import Failure, FieldErrors, Result, Success

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_ERROR_KEY = "form"


def field_errors_from(exc: PydanticValidationError) -> FieldErrors:
    """Collapse pydantic errors to the first message per top-level field."""
    errors: FieldErrors = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else FORM_ERROR_KEY
        message = error["msg"].removeprefix("Value error, ")
        errors.setdefault(field, message)
    return errors


def validate_form(
    model: type[ModelT], form: Mapping[str, Any], context: dict[str, Any] | None = None
) -> Result[ModelT, FieldErrors]:
    """Validate a raw form payload into a typed input, returning field errors on failure."""
    try:
        return Success(model.model_validate(dict(form), context=context))
    except PydanticValidationError as e:
        return Failure(field_errors_from(e))
