from courseflow.extraction.base import BaseTextExtractor
from courseflow.extraction.models import ExtractedText


class PlainTextAdapter(BaseTextExtractor):
    """Decodes UTF-8 text, replacing undecodable bytes."""

    def extract(self, data: bytes) -> ExtractedText:
        text = data.decode("utf-8-sig", errors="replace")
        return ExtractedText(text=text.strip(), page_count=1)
