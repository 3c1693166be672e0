"""Exception types shared by the store and the API layer."""


class MarketError(Exception):
    """Base class for marketdb errors."""


class StoreError(MarketError):
    """A caller defect detected by the table store."""


class ParameterCountError(StoreError, ValueError):
    """The positional parameters do not line up with the statement."""


class ApiError(MarketError):
    """A business-rule failure a handler turns into an error response."""

    status = 400

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ValidationError(ApiError):
    """The request payload is missing or carries invalid fields."""

    status = 400


class NotFoundError(ApiError):
    """The requested record does not exist."""

    status = 404
