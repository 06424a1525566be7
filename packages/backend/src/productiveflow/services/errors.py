"""Domain errors raised by services.

Each carries the HTTP status it maps to; create_app() registers one
handler that turns any ServiceError into {"detail": message}.
Cross-organization access is reported as NotFound, never as Forbidden,
so ids from other tenants are indistinguishable from missing ones.
"""


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailedError(ServiceError):
    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409
