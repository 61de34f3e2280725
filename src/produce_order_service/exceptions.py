"""Domain exceptions for the ordering service.

Validation failures are raised before any write is attempted and are safe to
correct and resubmit. Storage failures are operational and carry no detail
that should reach a customer.
"""


class OrderingError(Exception):
    """Base class for all ordering service errors."""

    code = "ordering_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailure(OrderingError):
    """Base class for errors the caller can fix by resubmitting."""

    code = "validation_failed"


class MissingFieldError(ValidationFailure):
    """A required field is absent or blank."""

    code = "missing_field"

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class InvalidPriceError(ValidationFailure):
    """A price is negative."""

    code = "invalid_price"


class PriceMismatchError(InvalidPriceError):
    """A submitted line price differs from the current catalog price."""

    code = "price_mismatch"


class InvalidTotalError(ValidationFailure):
    """Submitted totals diverge from the recomputed totals."""

    code = "invalid_total"


class DuplicateIdError(ValidationFailure):
    """An item with the same id already exists."""

    code = "duplicate_id"

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Item ID '{item_id}' already exists")


class NotFoundError(OrderingError):
    """The addressed record does not exist."""

    code = "not_found"


class UnauthorizedError(OrderingError):
    """The admin token is missing or does not match."""

    code = "unauthorized"


class InvalidCredentialsError(OrderingError):
    """The admin login password is wrong."""

    code = "invalid_credentials"


class StorageUnavailableError(OrderingError):
    """The backing store could not be read or written."""

    code = "storage_unavailable"
