class ExtractionError(Exception):
    """Base exception for all text extraction errors."""


class TextExtractionError(ExtractionError):
    """Raised when an extractor cannot read text from a file."""


class UnsupportedFileTypeError(ExtractionError):
    """Raised when no extractor handles the file's content type."""


class FileReadError(ExtractionError):
    """Raised when a stored file cannot be read from disk."""
