import io

import pdfplumber

from courseflow.extraction.base import BaseTextExtractor
from courseflow.extraction.exceptions import TextExtractionError
from courseflow.extraction.models import ExtractedText


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, data: bytes) -> ExtractedText:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise TextExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return ExtractedText(text="\n".join(pages).strip(), page_count=len(pages))
