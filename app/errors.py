class JournalError(Exception):
    """Base class for failures raised below the HTTP layer."""

    message = "Journal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class UnauthenticatedError(JournalError):
    message = "Unauthorized"


class ValidationError(JournalError):
    message = "Invalid request"


class NotFoundError(JournalError):
    # Raised for missing ids and for ids owned by someone else alike.
    message = "Entry not found"


class StoreUnavailableError(JournalError):
    message = "Database is unavailable"
