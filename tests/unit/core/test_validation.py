"""Tests for form validation helpers."""

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from inkwell.core.results import ErrorKind, Failure
from inkwell.core.validation import VALIDATION_MESSAGE, validate_form


class _Form(BaseModel):
    name: str
    age: int

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        if len(v) < 2:
            raise PydanticCustomError("short", "Name is too short.")
        return v


class TestValidateForm:
    """Test validate_form."""

    def test_valid_input_returns_form(self) -> None:
        """Should return the parsed form."""
        form = validate_form(_Form, {"name": "Ada", "age": "36"})

        assert isinstance(form, _Form)
        assert form.age == 36

    def test_errors_grouped_by_field(self) -> None:
        """Should flatten pydantic errors to field messages."""
        result = validate_form(_Form, {"name": "A", "age": "old"})

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.VALIDATION
        assert result.message == VALIDATION_MESSAGE
        assert result.errors["name"] == ["Name is too short."]
        assert "age" in result.errors

    def test_custom_summary_message(self) -> None:
        """Should use the given summary message."""
        result = validate_form(_Form, {}, message="Validation failed")

        assert isinstance(result, Failure)
        assert result.message == "Validation failed"
        assert set(result.errors) == {"name", "age"}
