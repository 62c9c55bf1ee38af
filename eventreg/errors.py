"""Error taxonomy shared by the services and rendered by ``main``."""


class AppError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400
    code = "BAD_REQUEST_ERROR"


class AuthError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 400
    code = "EMAIL_IN_USE"


class GatewayError(AppError):
    """A payment, identity or storage provider call failed."""

    status_code = 500
    code = "GATEWAY_ERROR"
