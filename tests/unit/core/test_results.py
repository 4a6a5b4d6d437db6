"""Tests for discriminated results."""

from inkwell.core.results import (
    ErrorKind,
    Failure,
    Success,
    not_found,
    permission_denied,
    store_failure,
    unauthenticated,
)


class TestResults:
    """Test Success and Failure."""

    def test_success_is_ok(self) -> None:
        """Success should report ok and carry its value."""
        result = Success([1, 2])

        assert result.ok is True
        assert result.value == [1, 2]

    def test_failure_payload(self) -> None:
        """Failure should serialize to the HTTP error shape."""
        failure = Failure(ErrorKind.VALIDATION, "Please fix the errors above.", {"name": ["x"]})

        assert failure.ok is False
        assert failure.to_dict() == {
            "success": False,
            "error": "validation",
            "message": "Please fix the errors above.",
            "errors": {"name": ["x"]},
        }

    def test_failure_errors_default_empty(self) -> None:
        """Failures without field errors should carry an empty mapping."""
        assert Failure(ErrorKind.STORE, "boom").errors == {}

    def test_helpers(self) -> None:
        """Helper constructors should pick the right kind."""
        assert unauthenticated().kind == ErrorKind.UNAUTHENTICATED
        assert permission_denied().message == "Permission denied"
        assert permission_denied("No.").message == "No."
        assert not_found("Post not found").kind == ErrorKind.NOT_FOUND
        assert store_failure("Failed").kind == ErrorKind.STORE
