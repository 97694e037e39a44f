import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path


class MimeCategory(str, Enum):
    DOCUMENT = "document"
    IMAGE = "image"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    TEXT = "text"


class IntakeSource(str, Enum):
    PICKER = "picker"
    DRAG_DROP = "drag_drop"
    CLIPBOARD = "clipboard"


def _new_local_id() -> str:
    return f"temp-{uuid.uuid4().hex[:12]}"


@dataclass
class FileCandidate:
    """A selected file that has not been stored yet.

    ``local_id`` identifies the candidate for progress tracking only; the
    persisted identifier comes back from the upload collaborator.
    """

    name: str
    content_type: str
    data: bytes
    size: int = -1
    source: IntakeSource = IntakeSource.PICKER
    local_id: str = field(default_factory=_new_local_id)

    def __post_init__(self) -> None:
        if self.size < 0:
            self.size = len(self.data)

    def head(self, length: int) -> bytes:
        """Return at most the first *length* bytes of the content."""
        return self.data[:length]

    @classmethod
    def from_path(cls, path: Path, source: IntakeSource = IntakeSource.PICKER) -> "FileCandidate":
        """Build a candidate from a file on disk, guessing its content type."""
        content_type, _ = mimetypes.guess_type(path.name)
        data = path.read_bytes()
        return cls(
            name=path.name,
            content_type=content_type or "",
            data=data,
            source=source,
        )

    @classmethod
    def from_clipboard(
        cls,
        data: bytes,
        content_type: str,
        now: datetime | None = None,
    ) -> "FileCandidate":
        """Build a candidate for a pasted screenshot."""
        stamp = (now or datetime.now(timezone.utc)).isoformat()
        stamp = stamp.replace(":", "-").replace(".", "-")
        return cls(
            name=f"screenshot-{stamp}.png",
            content_type=content_type,
            data=data,
            source=IntakeSource.CLIPBOARD,
        )


@dataclass(frozen=True)
class AllowedType:
    """Allow-list entry for a content type."""

    extension: str
    category: MimeCategory
    signature_family: str | None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single admissibility check. Never raised, always returned."""

    valid: bool
    category: MimeCategory | None = None
    error: str | None = None

    @classmethod
    def ok(cls, category: MimeCategory | None = None) -> "ValidationResult":
        return cls(valid=True, category=category)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)


@dataclass
class BatchValidation:
    """Per-batch split into admissible candidates and per-file error strings."""

    valid_files: list[FileCandidate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    categories: dict[str, MimeCategory] = field(default_factory=dict)
