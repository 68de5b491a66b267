"""Tests for the mockstore exception hierarchy.

Tests cover:
- Base error formatting with error codes and details
- Validation error family and default codes
- Unsupported feature and invariant violation families
"""

import pytest

from mockstore.core.exceptions import (
    CursorOrderMismatchError,
    CursorWithoutOrderError,
    DocumentNotFoundError,
    FieldValueError,
    IllegalFieldPathError,
    InvalidFieldPathError,
    InvalidLimitError,
    InvalidPathError,
    InvariantViolationError,
    MockStoreBaseError,
    MockStoreValidationError,
    NotImplementedYetError,
    QueryValidationError,
    ReadAfterWriteError,
    TransactionClosedError,
    UnexpectedChangeTypeError,
    UnsupportedOperatorError,
)


class TestMockStoreBaseError:
    """Test the root exception."""

    def test_message_without_code(self):
        """Test a plain message without an error code."""
        error = MockStoreBaseError("something happened")
        assert str(error) == "something happened"
        assert error.error_code is None
        assert error.details == {}

    def test_message_with_code_and_details(self):
        """Test formatting when an error code is present."""
        error = MockStoreBaseError("bad", error_code="E1", details={"k": "v"})
        assert str(error) == "[E1] bad"
        assert error.details == {"k": "v"}


class TestValidationErrors:
    """Test the validation error family."""

    @pytest.mark.parametrize(
        "error",
        [
            InvalidLimitError(0),
            CursorWithoutOrderError("start_at"),
            CursorOrderMismatchError("end_at", 2, 1),
            UnsupportedOperatorError("~="),
            QueryValidationError("bad query"),
            InvalidFieldPathError("bad path", field_path="a..b"),
            IllegalFieldPathError("a", "int"),
            FieldValueError("bad sentinel"),
            ReadAfterWriteError(),
            TransactionClosedError("committed"),
            InvalidPathError("a/b/c", "document"),
            DocumentNotFoundError("cities/XX"),
        ],
    )
    def test_validation_errors_share_base_and_code(self, error):
        """Test that every validation error carries the validation code."""
        assert isinstance(error, MockStoreValidationError)
        assert isinstance(error, MockStoreBaseError)
        assert error.error_code == "VALIDATION_ERROR"

    def test_cursor_without_order_message(self):
        """Test the message for a cursor on an unordered query."""
        error = CursorWithoutOrderError("start_after")
        assert "start_after needs to match with query order" in str(error)
        assert error.details == {"method": "start_after"}

    def test_read_after_write_message(self):
        """Test the read-after-write message."""
        assert "Read operations can only be done before write operations." in str(
            ReadAfterWriteError()
        )

    def test_illegal_field_path_details(self):
        """Test the details of an illegal descent."""
        error = IllegalFieldPathError("age", "int")
        assert error.segment == "age"
        assert error.value_type == "int"
        assert "Illegal path" in str(error)

    def test_invalid_limit_keeps_value(self):
        """Test that the rejected limit is kept on the error."""
        error = InvalidLimitError(-1)
        assert error.limit == -1
        assert error.details == {"limit": -1}


class TestFatalAndUnsupportedErrors:
    """Test the non-validation families."""

    def test_not_implemented_yet(self):
        """Test unsupported feature errors."""
        error = NotImplementedYetError("Query.limit_to_last")
        assert error.error_code == "NOT_IMPLEMENTED"
        assert error.feature == "Query.limit_to_last"
        assert not isinstance(error, MockStoreValidationError)

    def test_unexpected_change_type_is_invariant_violation(self):
        """Test that an unknown change kind is an invariant violation."""
        error = UnexpectedChangeTypeError("renamed")
        assert isinstance(error, InvariantViolationError)
        assert error.error_code == "INVARIANT_VIOLATION"
        assert error.change_type == "renamed"
