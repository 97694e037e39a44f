import io
import zipfile
from xml.etree import ElementTree

from courseflow.extraction.base import BaseTextExtractor
from courseflow.extraction.exceptions import TextExtractionError
from courseflow.extraction.models import ExtractedText

_W_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"
_DOCUMENT_PART = "word/document.xml"


class DocxAdapter(BaseTextExtractor):
    """Reads paragraph text straight from the OOXML document part."""

    def extract(self, data: bytes) -> ExtractedText:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                xml_bytes = archive.read(_DOCUMENT_PART)
            root = ElementTree.fromstring(xml_bytes)
        except (zipfile.BadZipFile, KeyError, ElementTree.ParseError) as exc:
            raise TextExtractionError(f"docx extraction failed: {exc}") from exc

        paragraphs = []
        for paragraph in root.iter(f"{_W_NS}p"):
            runs = [node.text or "" for node in paragraph.iter(f"{_W_NS}t")]
            paragraphs.append("".join(runs))
        # Word does not store pagination; explicit page breaks are the best signal.
        page_breaks = sum(
            1
            for node in root.iter(f"{_W_NS}br")
            if node.get(f"{_W_NS}type") == "page"
        )
        return ExtractedText(text="\n".join(paragraphs).strip(), page_count=page_breaks + 1)
