import io
import zipfile

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24

_DOCX_DOCUMENT = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>"
    "<w:p><w:r><w:t>Intro to Computer Science</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>Week 3: </w:t></w:r><w:r><w:t>Sorting algorithms</w:t></w:r></w:p>"
    '<w:p><w:r><w:br w:type="page"/></w:r></w:p>'
    "<w:p><w:r><w:t>Homework is due Friday</w:t></w:r></w:p>"
    "</w:body>"
    "</w:document>"
)


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "CS101 Lecture 3 Sorting")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Build a minimal DOCX archive holding only the main document part."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr("word/document.xml", _DOCX_DOCUMENT)
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_HEADER
