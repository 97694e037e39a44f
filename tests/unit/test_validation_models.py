from datetime import datetime, timezone
from pathlib import Path

from courseflow.validation.models import FileCandidate, IntakeSource


class TestFileCandidate:
    def test_size_defaults_to_data_length(self) -> None:
        candidate = FileCandidate(name="a.txt", content_type="text/plain", data=b"hello")
        assert candidate.size == 5

    def test_local_ids_are_unique(self) -> None:
        first = FileCandidate(name="a.txt", content_type="text/plain", data=b"")
        second = FileCandidate(name="a.txt", content_type="text/plain", data=b"")
        assert first.local_id != second.local_id
        assert first.local_id.startswith("temp-")

    def test_head_returns_prefix(self) -> None:
        candidate = FileCandidate(name="a.pdf", content_type="application/pdf", data=b"%PDF-1.7")
        assert candidate.head(4) == b"%PDF"

    def test_from_path_guesses_content_type(self, tmp_path: Path) -> None:
        path = tmp_path / "syllabus.pdf"
        path.write_bytes(b"%PDF-1.4")
        candidate = FileCandidate.from_path(path)
        assert candidate.name == "syllabus.pdf"
        assert candidate.content_type == "application/pdf"
        assert candidate.source is IntakeSource.PICKER
        assert candidate.size == 8


class TestFromClipboard:
    def test_names_screenshot_from_timestamp(self) -> None:
        now = datetime(2024, 3, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)
        candidate = FileCandidate.from_clipboard(b"\x89PNG", "image/png", now=now)
        assert candidate.name == "screenshot-2024-03-01T12-30-45-123000+00-00.png"
        assert candidate.source is IntakeSource.CLIPBOARD

    def test_name_has_no_colons_or_dots_before_extension(self) -> None:
        candidate = FileCandidate.from_clipboard(b"\x89PNG", "image/png")
        stem = candidate.name[: -len(".png")]
        assert ":" not in stem
        assert "." not in stem
