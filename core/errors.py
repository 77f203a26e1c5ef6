"""
core/errors.py -- Domain error taxonomy shared by auth/ and posts/.

Services raise these; api/main.py turns them into the ErrorResponse envelope.
Each class carries the HTTP status it maps to and a status-class code, so the
service layer never imports FastAPI.

  AuthenticationError  401  bad/missing/expired token, bad credentials
  AuthorizationError   401  caller is not the owner of the resource
  BadRequestError      400  malformed id, malformed input, hashing failure
  NotFoundError        404  no such post
  StorageError         500  persistence failure not translated elsewhere
"""


class AppError(Exception):
    """Base class for every error the API reports with a specific status."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(AppError):
    status_code = 401
    code = "unauthorized"


class AuthorizationError(AppError):
    # Ownership failures share 401 with authentication failures.
    status_code = 401
    code = "unauthorized"


class BadRequestError(AppError):
    status_code = 400
    code = "bad_request"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class StorageError(AppError):
    status_code = 500
    code = "storage_error"
