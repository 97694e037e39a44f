from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class TaskType(str, Enum):
    CATEGORIZATION = "categorization"
    TEXT_EXTRACTION = "text_extraction"
    SUMMARY = "summary"
    TRANSLATION = "translation"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {TaskPriority.HIGH: 0, TaskPriority.MEDIUM: 1, TaskPriority.LOW: 2}


class TaskStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


@dataclass(frozen=True)
class FileRef:
    """A persisted file, as handed to the queue after a successful upload."""

    id: str
    name: str
    type: str
    course_id: str | None = None


@dataclass(frozen=True)
class TaskSpec:
    file_id: str
    file_name: str
    file_type: str
    task_type: TaskType
    priority: TaskPriority


@dataclass
class AIProcessingTask:
    """Queue entry for one post-upload enrichment step."""

    id: str
    file_id: str
    file_name: str
    file_type: str
    task_type: TaskType
    priority: TaskPriority
    created_at: datetime
    status: TaskStatus = TaskStatus.PENDING
    started_at: datetime | None = None
    completed_at: datetime | None = None
    result: dict[str, Any] | None = None
    error: str | None = None
    retry_count: int = 0
    sequence: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileId": self.file_id,
            "fileName": self.file_name,
            "fileType": self.file_type,
            "taskType": self.task_type.value,
            "priority": self.priority.value,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "startedAt": _iso(self.started_at),
            "completedAt": _iso(self.completed_at),
            "result": self.result,
            "error": self.error,
            "retryCount": self.retry_count,
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "AIProcessingTask":
        """Rebuild a task from its serialized form, reconstructing datetimes."""
        return cls(
            id=raw["id"],
            file_id=raw["fileId"],
            file_name=raw["fileName"],
            file_type=raw["fileType"],
            task_type=TaskType(raw["taskType"]),
            priority=TaskPriority(raw["priority"]),
            status=TaskStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            started_at=_parse(raw.get("startedAt")),
            completed_at=_parse(raw.get("completedAt")),
            result=raw.get("result"),
            error=raw.get("error"),
            retry_count=int(raw.get("retryCount", 0)),
            sequence=int(raw.get("sequence", 0)),
        )


@dataclass(frozen=True)
class QueueStats:
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    total: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "pending": self.pending,
            "processing": self.processing,
            "completed": self.completed,
            "failed": self.failed,
            "total": self.total,
        }


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
