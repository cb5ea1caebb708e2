"""Service-level exceptions, translated to HTTP statuses in main.py."""


class JobBoardError(Exception):
    """Base for expected, client-facing failures."""

    status_code = 400

    def __init__(self, message: str, detail: str = ""):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NotFoundError(JobBoardError):
    status_code = 404


class ConflictError(JobBoardError):
    status_code = 409


class AuthenticationError(JobBoardError):
    status_code = 401


class PermissionDeniedError(JobBoardError):
    status_code = 403
