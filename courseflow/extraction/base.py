from abc import ABC, abstractmethod

from courseflow.extraction.models import ExtractedText


class BaseTextExtractor(ABC):
    """Contract for all text extraction adapters."""

    @abstractmethod
    def extract(self, data: bytes) -> ExtractedText:
        """Extract plain text from raw file bytes.

        Args:
            data: Raw file content.

        Returns:
            Extracted text as a single normalized string plus its page count.

        Raises:
            TextExtractionError: if extraction fails for any reason.
        """
