"""Error taxonomy shared by the services and the HTTP layer."""

from fastapi import status


class TicketingError(Exception):
    """Base error; carries the HTTP status and the detail shown to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(TicketingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "All fields are required"


class AuthenticationError(TicketingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"


class MissingCredentialsError(AuthenticationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Token not provided"


class InvalidCredentialsError(AuthenticationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Incorrect Token"

    def __init__(self, detail: str | None = None, status_code: int | None = None):
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code


class AuthorizationError(TicketingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You don't have permission to use this endpoint"


class NotFoundError(TicketingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class StoreError(TicketingError):
    """Any persistence failure. The detail is never the driver message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"
