"""Domain errors raised by the services.

Each error carries the HTTP status the routes answer with and a default
message suitable for showing to the user.
"""


class CampusError(Exception):
    status_code = 400
    message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidEmailDomain(CampusError):
    status_code = 400

    def __init__(self, domain: str):
        super().__init__(f"Only institutional email addresses (@{domain}) are allowed")
        self.domain = domain


class AccountNotFound(CampusError):
    status_code = 404
    message = "Account not found. Please sign up first."


class AccountAlreadyExists(CampusError):
    status_code = 400
    message = "An account with this email already exists"


class IncorrectPassword(CampusError):
    status_code = 401
    message = "Incorrect email or password"


class ValidationError(CampusError):
    status_code = 422
    message = "A required field is empty"


class NotAuthorized(CampusError):
    status_code = 403
    message = "You are not allowed to do that"


class PostNotFound(CampusError):
    status_code = 404
    message = "Post not found"


class StorageWriteFailure(CampusError):
    status_code = 507
    message = "Could not save your changes. Please try again."


class StaleRevision(StorageWriteFailure):
    """Someone else wrote the key since we last read it."""
    status_code = 409

    def __init__(self, key: str, expected: int, actual: int):
        super().__init__(f"'{key}' was changed elsewhere (expected revision {expected}, found {actual}). Reload and retry.")
        self.key = key
        self.expected = expected
        self.actual = actual
