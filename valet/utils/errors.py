"""
Application errors and their HTTP status mapping
"""


class ValetError(Exception):
    """Base class for application errors."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


class NotFoundError(ValetError):
    """Ticket or job lookup failed."""

    status_code = 404

    def __init__(self, message: str = "Ticket not found"):
        super().__init__(message)


class InvalidInputError(ValetError):
    """Missing or malformed request field."""

    status_code = 400


class InvalidAmountError(ValetError):
    """Computed charge is zero or negative."""

    status_code = 400

    def __init__(self, message: str = "Amount must be greater than 0"):
        super().__init__(message)


class UnauthorizedError(ValetError):
    """Webhook signature failed verification."""

    status_code = 400


class InvalidTransitionError(ValetError):
    """Guest-initiated status change is not legal from the current status."""

    status_code = 409


class ProviderFailureError(ValetError):
    """Payment provider call failed."""

    status_code = 500


class StoreFailureError(ValetError):
    """Data store read or write failed."""

    status_code = 500
