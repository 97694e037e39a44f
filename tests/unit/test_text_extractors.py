from unittest.mock import MagicMock

import pytest

from courseflow.extraction.docx_adapter import DocxAdapter
from courseflow.extraction.exceptions import TextExtractionError, UnsupportedFileTypeError
from courseflow.extraction.factory import DOCX_CONTENT_TYPE, TextExtractorFactory
from courseflow.extraction.models import ExtractedText
from courseflow.extraction.pdfplumber_adapter import PdfPlumberAdapter
from courseflow.extraction.plain_text_adapter import PlainTextAdapter
from courseflow.extraction.pymupdf_adapter import PyMuPdfAdapter


@pytest.mark.parametrize("adapter_cls", [PdfPlumberAdapter, PyMuPdfAdapter])
class TestPdfAdapters:
    def test_extract_returns_text(self, adapter_cls: type, sample_pdf_bytes: bytes) -> None:
        result = adapter_cls().extract(sample_pdf_bytes)
        assert isinstance(result, ExtractedText)
        assert "CS101 Lecture 3 Sorting" in result.text
        assert result.page_count == 1

    def test_extract_multi_page(self, adapter_cls: type, multi_page_pdf_bytes: bytes) -> None:
        result = adapter_cls().extract(multi_page_pdf_bytes)
        assert "Page one content" in result.text
        assert "Page two content" in result.text
        assert result.page_count == 2

    def test_extract_empty_pdf(self, adapter_cls: type, empty_pdf_bytes: bytes) -> None:
        result = adapter_cls().extract(empty_pdf_bytes)
        assert result.text == ""
        assert result.word_count == 0

    def test_extract_invalid_bytes_raises(self, adapter_cls: type) -> None:
        with pytest.raises(TextExtractionError):
            adapter_cls().extract(b"not a pdf")


class TestDocxAdapter:
    def test_extracts_paragraphs(self, sample_docx_bytes: bytes) -> None:
        result = DocxAdapter().extract(sample_docx_bytes)
        assert result.text.splitlines()[0] == "Intro to Computer Science"
        assert "Week 3: Sorting algorithms" in result.text
        assert "Homework is due Friday" in result.text

    def test_counts_explicit_page_breaks(self, sample_docx_bytes: bytes) -> None:
        assert DocxAdapter().extract(sample_docx_bytes).page_count == 2

    def test_not_a_zip_raises(self) -> None:
        with pytest.raises(TextExtractionError, match="docx"):
            DocxAdapter().extract(b"plain bytes")


class TestPlainTextAdapter:
    def test_decodes_utf8_and_strips_bom(self) -> None:
        result = PlainTextAdapter().extract("\ufeffNotas de clase\n".encode())
        assert result.text == "Notas de clase"
        assert result.word_count == 3

    def test_replaces_undecodable_bytes(self) -> None:
        result = PlainTextAdapter().extract(b"ok \xff end")
        assert result.text.startswith("ok ")
        assert result.text.endswith(" end")


class TestTextExtractorFactory:
    def test_pdf_uses_configured_engine(self) -> None:
        factory = TextExtractorFactory.create(MagicMock(pdf_engine="PyMuPDF"))
        assert isinstance(factory.for_content_type("application/pdf"), PyMuPdfAdapter)

    def test_defaults_to_pdfplumber(self) -> None:
        factory = TextExtractorFactory()
        assert isinstance(factory.for_content_type("application/pdf"), PdfPlumberAdapter)

    def test_docx(self) -> None:
        assert isinstance(TextExtractorFactory().for_content_type(DOCX_CONTENT_TYPE), DocxAdapter)

    def test_text_types_ignore_parameters(self) -> None:
        extractor = TextExtractorFactory().for_content_type("text/markdown; charset=utf-8")
        assert isinstance(extractor, PlainTextAdapter)

    def test_images_are_unsupported(self) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="image/png"):
            TextExtractorFactory().for_content_type("image/png")

    def test_unknown_engine_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            TextExtractorFactory("tesseract")
