class CustomBaseError(Exception):
    """
    Base class for all custom exceptions - controls logging behavior in @Logger.io

    ``code`` is a stable machine-readable name sent next to the message, so
    clients can tell apart errors sharing a status code.
    """

    code: str = 'error'

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    """Request violates a business rule (bad request)."""

    code = 'bad_request'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    code = 'forbidden'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    code = 'not_found'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    code = 'conflict'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    code = 'unauthorized'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)
