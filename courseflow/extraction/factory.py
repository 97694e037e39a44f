from courseflow.config.settings import Settings
from courseflow.extraction.base import BaseTextExtractor
from courseflow.extraction.docx_adapter import DocxAdapter
from courseflow.extraction.exceptions import UnsupportedFileTypeError
from courseflow.extraction.pdfplumber_adapter import PdfPlumberAdapter
from courseflow.extraction.plain_text_adapter import PlainTextAdapter
from courseflow.extraction.pymupdf_adapter import PyMuPdfAdapter

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TextExtractorFactory:
    """Creates the correct text extractor for a file's content type."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    def __init__(self, pdf_engine: str = "pdfplumber") -> None:
        engine = pdf_engine.lower()
        adapter_cls = self.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(self.PDF_ADAPTERS)}"
            )
        self._pdf = adapter_cls()
        self._docx = DocxAdapter()
        self._plain = PlainTextAdapter()

    @classmethod
    def create(cls, settings: Settings) -> "TextExtractorFactory":
        return cls(settings.pdf_engine)

    def for_content_type(self, content_type: str) -> BaseTextExtractor:
        """Pick the extractor for *content_type*.

        Raises:
            UnsupportedFileTypeError: for images, spreadsheets and other binaries.
        """
        lowered = content_type.lower().split(";", 1)[0].strip()
        if lowered == "application/pdf":
            return self._pdf
        if lowered == DOCX_CONTENT_TYPE:
            return self._docx
        if lowered.startswith("text/"):
            return self._plain
        raise UnsupportedFileTypeError(f"No text extractor for content type '{content_type}'")
