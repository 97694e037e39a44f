from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from courseflow.classification.models import ClassificationMatch
from courseflow.digest.service import DigestResult
from courseflow.tasks.models import FileRef
from courseflow.validation.models import FileCandidate


class UploadStatus(str, Enum):
    QUEUED = "queued"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    ERROR = "error"


class OutcomeSummary(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


@dataclass(frozen=True)
class UploadProgress:
    """Transmission state of one selected file, keyed by its local id."""

    file_id: str
    file_name: str
    progress: float = 0.0
    status: UploadStatus = UploadStatus.QUEUED
    error: str | None = None
    persisted_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "progress", max(0.0, min(100.0, float(self.progress))))

    @property
    def is_finished(self) -> bool:
        return self.status in (UploadStatus.COMPLETED, UploadStatus.ERROR)


@dataclass(frozen=True)
class PersistedFileRecord:
    """File row returned by the backend after a successful upload."""

    id: str
    display_name: str
    file_type: str
    file_size: int
    file_hash: str | None = None
    course_id: str | None = None
    folder_id: str | None = None
    ai_category: str | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "PersistedFileRecord":
        return cls(
            id=str(raw["id"]),
            display_name=raw.get("display_name") or raw.get("name") or "",
            file_type=raw.get("file_type") or raw.get("type") or "",
            file_size=int(raw.get("file_size") or 0),
            file_hash=raw.get("file_hash"),
            course_id=raw.get("course_id"),
            folder_id=raw.get("folder_id"),
            ai_category=raw.get("ai_category"),
            created_at=raw.get("created_at"),
        )

    def to_file_ref(self) -> FileRef:
        return FileRef(
            id=self.id,
            name=self.display_name,
            type=self.file_type,
            course_id=self.course_id,
        )


@dataclass(frozen=True)
class UploadErrorItem:
    filename: str
    error: str


@dataclass
class UploadResponse:
    """What the transmission collaborator returns for one batch."""

    files: list[PersistedFileRecord] = field(default_factory=list)
    errors: list[UploadErrorItem] = field(default_factory=list)


@dataclass(frozen=True)
class ExistingFile:
    id: str
    display_name: str
    file_size: int | None = None
    created_at: str | None = None
    course_id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ExistingFile":
        size = raw.get("file_size")
        return cls(
            id=str(raw["id"]),
            display_name=raw.get("display_name") or "",
            file_size=int(size) if size is not None else None,
            created_at=raw.get("created_at"),
            course_id=raw.get("course_id"),
        )


@dataclass(frozen=True)
class DuplicateCheckResult:
    is_duplicate: bool
    existing_file: ExistingFile | None = None


@dataclass
class SelectionResult:
    """Outcome of one selection pass (picker, drag-drop or clipboard)."""

    valid_files: list[FileCandidate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duplicates: dict[str, ExistingFile] = field(default_factory=dict)
    digests: dict[str, DigestResult] = field(default_factory=dict)
    course_suggestions: dict[str, ClassificationMatch] = field(default_factory=dict)


@dataclass
class UploadOutcome:
    """Result of upload_files(). ``messages`` are ready to show to the user."""

    uploaded: list[PersistedFileRecord] = field(default_factory=list)
    failed: list[UploadErrorItem] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)
    skipped_duplicates: int = 0
    task_ids: dict[str, list[str]] = field(default_factory=dict)

    @property
    def summary(self) -> OutcomeSummary:
        if self.uploaded and not self.failed:
            return OutcomeSummary.SUCCESS
        if self.uploaded:
            return OutcomeSummary.PARTIAL
        return OutcomeSummary.FAILURE
