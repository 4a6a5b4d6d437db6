"""Form validation helpers shared by all core services.

Forms are pydantic models. Validation errors are flattened to a mapping of
field name to messages so the presentation layer can show them next to
the offending inputs.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from inkwell.core.results import ErrorKind, Failure

FormT = TypeVar("FormT", bound=BaseModel)

VALIDATION_MESSAGE = "Please fix the errors above."


def flatten_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by top-level field name.

    Errors not attached to a field are collected under ``"_form"``.
    """
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        key = str(loc[0]) if loc else "_form"
        errors.setdefault(key, []).append(error["msg"])
    return errors


def validate_form(
    form: type[FormT],
    data: dict[str, Any],
    message: str = VALIDATION_MESSAGE,
) -> FormT | Failure:
    """Validate raw input against a form model.

    Args:
        form: The pydantic form class.
        data: Raw field values.
        message: Summary message used on failure.

    Returns:
        The validated form, or a VALIDATION failure with field errors.
    """
    try:
        return form.model_validate(data)
    except ValidationError as e:
        return Failure(ErrorKind.VALIDATION, message, flatten_errors(e))
