"""Custom exception classes for the application."""

class BaseGraderException(Exception):
    """Base exception for all application-specific errors."""
    pass

class ConfigError(BaseGraderException):
    """Error related to configuration loading or values."""
    pass

class AuthenticationError(BaseGraderException):
    """The Canvas access token was rejected."""
    pass

class APIError(BaseGraderException):
    """Error interacting with the Canvas API or fetching an attachment over the network."""
    def __init__(self, message: str, status_code: int | None = None, service: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.service = service

    def __str__(self) -> str:
        base = super().__str__()
        details = []
        if self.service:
            details.append(f"Service: {self.service}")
        if self.status_code:
            details.append(f"Status Code: {self.status_code}")
        if details:
            return f"{base} ({', '.join(details)})"
        return base

class AttachmentNotFoundError(BaseGraderException):
    """A submission has no downloadable attachment."""
    pass

class InvalidSelectionError(BaseGraderException):
    """A roster slot, portion or division count outside the valid range, or a slot already consumed."""
    pass

class MissingUserIdError(BaseGraderException):
    """A submission does not name the user who owns it."""
    def __init__(self, message: str, submission_id: int | str | None = None):
        super().__init__(message)
        self.submission_id = submission_id

class ArchiveExtractionError(BaseGraderException):
    """A downloaded attachment could not be read as an archive."""
    pass

class FilesystemError(BaseGraderException):
    """Error reading or writing the local extraction directory."""
    pass

class ExternalToolError(BaseGraderException):
    """The editor or shell used for review could not be started."""
    pass

class UserCancelledError(BaseGraderException):
    """Error raised when the user cancels an operation."""
    pass
