"""Custom exception hierarchy for the mockstore document store emulator.

Errors fall into three families:

- Validation errors: the caller misused the query or transaction surface
  (bad limit, cursor without ordering, illegal field path, read after write).
- Unsupported features: parts of the document store API that the emulator
  deliberately does not implement. These are permanent, never transient.
- Invariant violations: programming errors inside the emulator itself. They
  are always propagated and never swallowed.
"""

from typing import Any


class MockStoreBaseError(Exception):
    """Base exception for all mockstore specific errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {super().__str__()}"
        return super().__str__()


# ==============================================================================
# Validation Exceptions
# ==============================================================================


class MockStoreValidationError(MockStoreBaseError):
    """Raised when a query or write is used incorrectly by the caller."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)


class InvalidLimitError(MockStoreValidationError):
    """Raised when a query limit is not a positive integer."""

    def __init__(self, limit: Any) -> None:
        super().__init__(
            "Query limit value must be greater than zero",
            details={"limit": limit},
        )
        self.limit = limit


class CursorWithoutOrderError(MockStoreValidationError):
    """Raised when a start/end cursor is evaluated on an unordered query."""

    def __init__(self, method_name: str) -> None:
        message = (
            f"{method_name} needs to match with query order "
            "but order is not defined."
        )
        super().__init__(message, details={"method": method_name})
        self.method_name = method_name


class CursorOrderMismatchError(MockStoreValidationError):
    """Raised when a cursor holds a different number of values than order rules."""

    def __init__(self, method_name: str, value_count: int, order_count: int) -> None:
        message = (
            f"{method_name} got {value_count} cursor value(s) "
            f"but the query is ordered by {order_count} field(s)."
        )
        super().__init__(
            message,
            details={
                "method": method_name,
                "value_count": value_count,
                "order_count": order_count,
            },
        )
        self.method_name = method_name
        self.value_count = value_count
        self.order_count = order_count


class UnsupportedOperatorError(MockStoreValidationError):
    """Raised when a where rule uses an operator the filter engine does not know."""

    def __init__(self, op: Any) -> None:
        super().__init__(f"Unsupported query operator: {op!r}", details={"op": op})
        self.op = op


class QueryValidationError(MockStoreValidationError):
    """Raised when a query rule holds an argument of the wrong shape."""


class InvalidFieldPathError(MockStoreValidationError):
    """Raised when a field path cannot be parsed."""

    def __init__(self, message: str, *, field_path: Any = None) -> None:
        super().__init__(message, details={"field_path": repr(field_path)})
        self.field_path = field_path


class IllegalFieldPathError(MockStoreValidationError):
    """Raised when a write would have to descend through a non-mapping value."""

    def __init__(self, segment: str, value_type: str) -> None:
        message = (
            f"Illegal path. Can not add value under field '{segment}' "
            f"of type {value_type}"
        )
        super().__init__(message, details={"segment": segment, "type": value_type})
        self.segment = segment
        self.value_type = value_type


class FieldValueError(MockStoreValidationError):
    """Raised when a sentinel field value is used where it is not allowed."""


class ReadAfterWriteError(MockStoreValidationError):
    """Raised when a transaction is read from after it has been written to."""

    def __init__(self) -> None:
        super().__init__(
            "Read operations can only be done before write operations."
        )


class TransactionClosedError(MockStoreValidationError):
    """Raised when a committed or rolled back transaction is used again."""

    def __init__(self, state: str) -> None:
        super().__init__(f"Transaction is already {state}", details={"state": state})
        self.state = state


class InvalidPathError(MockStoreValidationError):
    """Raised when a document or collection path is malformed."""

    def __init__(self, path: str, expected: str) -> None:
        super().__init__(
            f"Invalid {expected} path: {path!r}",
            details={"path": path, "expected": expected},
        )
        self.path = path
        self.expected = expected


class DocumentNotFoundError(MockStoreValidationError):
    """Raised when an update targets a document that does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No document to update: {path}", details={"path": path})
        self.path = path


# ==============================================================================
# Unsupported Feature Exceptions
# ==============================================================================


class NotImplementedYetError(MockStoreBaseError):
    """Raised by API methods the emulator does not implement."""

    def __init__(self, feature: str) -> None:
        super().__init__(
            f"{feature} is not implemented by mockstore",
            error_code="NOT_IMPLEMENTED",
            details={"feature": feature},
        )
        self.feature = feature


# ==============================================================================
# Invariant Violations
# ==============================================================================


class InvariantViolationError(MockStoreBaseError):
    """Raised when the emulator reaches a state that should be impossible."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "INVARIANT_VIOLATION")
        super().__init__(message, **kwargs)


class UnexpectedChangeTypeError(InvariantViolationError):
    """Raised when an upstream change carries an unknown change kind."""

    def __init__(self, change_type: Any) -> None:
        super().__init__(
            f"Unexpected change type: {change_type}",
            details={"change_type": repr(change_type)},
        )
        self.change_type = change_type
