class UploadError(Exception):
    """Base exception for upload collaborator errors."""


class UploadNetworkError(UploadError):
    """Raised when the backend cannot be reached or answers with a server error."""
