"""Exceptions shared by the gateway and the web client."""


class UploadValidationError(Exception):
    """Raised when an audio upload violates the upload policy.

    Carries the HTTP status the gateway answers with, so the client and the
    server report the same rejection the same way.
    """

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StorageUploadError(Exception):
    """Raised when uploading a file to object storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to upload '{object_name}' to storage")


class StorageDeleteError(Exception):
    """Raised when removing an object from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to delete '{object_name}' from storage")
