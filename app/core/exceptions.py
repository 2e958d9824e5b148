class AdminError(Exception):
    """
    Base class for errors raised by the admin services
    """
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AdminError):
    """
    Exception raised when input is missing or references unknown entities
    """
    default_message = "Invalid input"


class NotFoundError(AdminError):
    """
    Exception raised when an entity id does not resolve
    """
    default_message = "Not found"


class ConflictError(AdminError):
    """
    Exception raised when a write would break a referential rule
    """
    default_message = "Conflicting state"


class UpstreamFailure(AdminError):
    """
    Exception raised when the storage gateway or the database fails.
    The message is fixed; the cause stays in the logs.
    """
    default_message = "An upstream service failed"


class UploadFailure(UpstreamFailure):
    """
    Exception raised when an image could not be uploaded
    """
    default_message = "Failed to upload image"


class DocumentDecodeError(UpstreamFailure):
    """
    Exception raised when a stored JSON field does not match its schema
    """
    default_message = "Stored document is malformed"
