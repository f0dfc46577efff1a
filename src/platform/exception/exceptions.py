from typing import Optional


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(
        self, message: str, status_code: int, *, upstream_message: Optional[str] = None
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.upstream_message = upstream_message
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class HoldSupersededError(DomainError):
    """The view a hold was requested for was torn down before the backend answered"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str, *, upstream_message: Optional[str] = None) -> None:
        super().__init__(message, 404, upstream_message=upstream_message)


class ConflictError(CustomBaseError):
    def __init__(self, message: str, *, upstream_message: Optional[str] = None) -> None:
        super().__init__(message, 409, upstream_message=upstream_message)


class UpstreamError(CustomBaseError):
    """Backend answered with an unexpected HTTP status"""

    def __init__(
        self, message: str, status_code: int, *, upstream_message: Optional[str] = None
    ) -> None:
        super().__init__(message, status_code, upstream_message=upstream_message)


class TransportError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class StreamExhaustedError(CustomBaseError):
    def __init__(self, message: str, *, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message, 503)


class InvalidStateTransitionError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 500)
