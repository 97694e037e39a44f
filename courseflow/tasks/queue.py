import json
import threading
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from courseflow.logging.logger import Log
from courseflow.tasks.exceptions import QueueStoreError, TaskNotFoundError, TaskResultError
from courseflow.tasks.models import (
    AIProcessingTask,
    FileRef,
    QueueStats,
    TaskPriority,
    TaskSpec,
    TaskStatus,
    TaskType,
)
from courseflow.tasks.store.base import BaseQueueStore

TaskObserver = Callable[[AIProcessingTask], None]

DEFAULT_STORAGE_KEY = "courseflow_ai_processing_queue"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETENTION = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def is_document_like(file_type: str) -> bool:
    """Content types that get text extraction and a summary besides categorization."""
    lowered = file_type.lower()
    return lowered == "application/pdf" or "word" in lowered or "text" in lowered


class TaskQueue:
    """Persisted, priority-ordered queue of enrichment tasks.

    Every mutation happens under one condition lock and writes the full
    snapshot to the store before the lock is released. Observers are called
    after the lock is released and receive copies of the changed task.
    """

    def __init__(
        self,
        store: BaseQueueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._store = store
        self._storage_key = storage_key
        self._max_attempts = max_attempts
        self._retention = retention
        self._clock = clock
        self._tasks: dict[str, AIProcessingTask] = {}
        self._next_sequence = 0
        self._closed = False
        self._cond = threading.Condition()
        self._observers: list[TaskObserver] = []
        self._load()

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    # -- admission -------------------------------------------------------

    def add_task(self, spec: TaskSpec) -> str:
        """Admit a new pending task and return its id."""
        with self._cond:
            task = AIProcessingTask(
                id=str(uuid.uuid4()),
                file_id=spec.file_id,
                file_name=spec.file_name,
                file_type=spec.file_type,
                task_type=spec.task_type,
                priority=spec.priority,
                created_at=self._clock(),
                sequence=self._take_sequence(),
            )
            self._tasks[task.id] = task
            self._save()
            self._cond.notify()
            snapshot = self._copy(task)
        Log.debug(
            f"Queued {task.task_type.value} task {task.id} "
            f"for file {task.file_id} ({task.priority.value})"
        )
        self._notify([snapshot])
        return task.id

    def queue_file_processing(self, file_ref: FileRef) -> list[str]:
        """Seed the enrichment tasks for one uploaded file."""
        specs = [
            TaskSpec(
                file_id=file_ref.id,
                file_name=file_ref.name,
                file_type=file_ref.type,
                task_type=TaskType.CATEGORIZATION,
                priority=TaskPriority.HIGH,
            )
        ]
        if is_document_like(file_ref.type):
            specs.append(
                TaskSpec(
                    file_id=file_ref.id,
                    file_name=file_ref.name,
                    file_type=file_ref.type,
                    task_type=TaskType.TEXT_EXTRACTION,
                    priority=TaskPriority.MEDIUM,
                )
            )
            specs.append(
                TaskSpec(
                    file_id=file_ref.id,
                    file_name=file_ref.name,
                    file_type=file_ref.type,
                    task_type=TaskType.SUMMARY,
                    priority=TaskPriority.LOW,
                )
            )
        return [self.add_task(spec) for spec in specs]

    # -- queries ---------------------------------------------------------

    def get_task_status(self, task_id: str) -> AIProcessingTask | None:
        with self._cond:
            task = self._tasks.get(task_id)
            return self._copy(task) if task is not None else None

    def get_file_tasks(self, file_id: str) -> list[AIProcessingTask]:
        with self._cond:
            return [
                self._copy(task)
                for task in sorted(self._tasks.values(), key=lambda t: t.sequence)
                if task.file_id == file_id
            ]

    def get_stats(self) -> QueueStats:
        with self._cond:
            counts = {status: 0 for status in TaskStatus}
            for task in self._tasks.values():
                counts[task.status] += 1
            return QueueStats(
                pending=counts[TaskStatus.PENDING],
                processing=counts[TaskStatus.PROCESSING],
                completed=counts[TaskStatus.COMPLETED],
                failed=counts[TaskStatus.FAILED],
                total=len(self._tasks),
            )

    # -- scheduling ------------------------------------------------------

    def claim_next(self, timeout: float | None = None) -> AIProcessingTask | None:
        """Block up to *timeout* seconds for a pending task and promote it.

        Picks the highest priority first and the earliest admitted within a
        priority. Returns None on timeout or after close().
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._closed or self._next_pending() is not None,
                timeout=timeout,
            )
            if self._closed:
                return None
            task = self._next_pending()
            if task is None:
                return None
            task.status = TaskStatus.PROCESSING
            task.started_at = self._clock()
            self._save()
            snapshot = self._copy(task)
        self._notify([snapshot])
        return snapshot

    def mark_completed(self, task_id: str, result: dict[str, Any]) -> None:
        """Record a successful result.

        Raises TaskResultError, leaving the task untouched, when the result
        cannot be written to the snapshot.
        """
        try:
            json.dumps(result)
        except (TypeError, ValueError) as exc:
            raise TaskResultError(
                f"Task {task_id} result is not serializable: {exc}"
            ) from exc
        with self._cond:
            task = self._require(task_id)
            task.status = TaskStatus.COMPLETED
            task.completed_at = self._clock()
            task.result = result
            task.error = None
            self._save()
            snapshot = self._copy(task)
        self._notify([snapshot])

    def handle_failure(self, task_id: str, error: str) -> AIProcessingTask | None:
        """Count a failed attempt; requeue below the cap, fail terminally at it.

        Tasks that are not currently processing are left untouched.
        """
        with self._cond:
            task = self._require(task_id)
            if task.status is not TaskStatus.PROCESSING:
                Log.warning(
                    f"Ignoring failure for task {task_id} in status {task.status.value}"
                )
                return None
            task.retry_count += 1
            if task.retry_count >= self._max_attempts:
                task.status = TaskStatus.FAILED
                task.completed_at = self._clock()
                task.error = error
            else:
                task.status = TaskStatus.PENDING
                task.started_at = None
                self._cond.notify()
            self._save()
            snapshot = self._copy(task)
        self._notify([snapshot])
        return snapshot

    def cleanup_old_tasks(self, now: datetime | None = None) -> int:
        """Remove terminal tasks completed more than the retention window ago."""
        cutoff = (now or self._clock()) - self._retention
        with self._cond:
            stale = [
                task_id
                for task_id, task in self._tasks.items()
                if task.status.is_terminal
                and (task.completed_at is None or task.completed_at <= cutoff)
            ]
            for task_id in stale:
                del self._tasks[task_id]
            if stale:
                self._save()
        if stale:
            Log.info(f"Removed {len(stale)} expired task(s) from the queue")
        return len(stale)

    def recover_interrupted(self) -> int:
        """Return tasks left processing by a previous process to pending."""
        with self._cond:
            recovered = []
            for task in self._tasks.values():
                if task.status is TaskStatus.PROCESSING:
                    task.status = TaskStatus.PENDING
                    task.started_at = None
                    recovered.append(self._copy(task))
            if recovered:
                self._save()
                self._cond.notify_all()
        if recovered:
            Log.warning(f"Recovered {len(recovered)} interrupted task(s)")
        self._notify(recovered)
        return len(recovered)

    def close(self) -> None:
        """Wake every blocked claim_next() caller; later claims return None."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def reopen(self) -> None:
        with self._cond:
            self._closed = False

    # -- observers -------------------------------------------------------

    def subscribe(self, callback: TaskObserver) -> Callable[[], None]:
        """Register a status-change callback. Returns an unsubscribe function."""
        with self._cond:
            self._observers.append(callback)

        def _unsubscribe() -> None:
            with self._cond:
                if callback in self._observers:
                    self._observers.remove(callback)

        return _unsubscribe

    # -- internals -------------------------------------------------------

    def _next_pending(self) -> AIProcessingTask | None:
        pending = [t for t in self._tasks.values() if t.status is TaskStatus.PENDING]
        if not pending:
            return None
        return min(pending, key=lambda t: (t.priority.rank, t.sequence))

    def _require(self, task_id: str) -> AIProcessingTask:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    def _take_sequence(self) -> int:
        sequence = self._next_sequence
        self._next_sequence += 1
        return sequence

    def _notify(self, tasks: list[AIProcessingTask]) -> None:
        if not tasks:
            return
        with self._cond:
            observers = list(self._observers)
        for task in tasks:
            for observer in observers:
                try:
                    observer(self._copy(task))
                except Exception as exc:
                    Log.warning(f"Task observer failed: {exc}")

    @staticmethod
    def _copy(task: AIProcessingTask) -> AIProcessingTask:
        return AIProcessingTask.from_dict(task.to_dict())

    def _load(self) -> None:
        try:
            raw = self._store.get(self._storage_key)
        except QueueStoreError as exc:
            Log.error(f"Failed to load task queue: {exc}")
            return
        if not raw:
            return
        try:
            entries = json.loads(raw)
            tasks = [AIProcessingTask.from_dict(entry) for entry in entries]
        except (ValueError, KeyError, TypeError) as exc:
            Log.error(f"Discarding unreadable task queue snapshot: {exc}")
            return
        for position, task in enumerate(sorted(tasks, key=lambda t: t.sequence)):
            # Older snapshots may lack a sequence; keep their stored order.
            if task.sequence < position:
                task.sequence = position
            self._tasks[task.id] = task
        self._next_sequence = max((t.sequence for t in tasks), default=-1) + 1
        Log.info(f"Loaded {len(self._tasks)} task(s) from the queue store")

    def _save(self) -> None:
        payload = json.dumps(
            [task.to_dict() for task in sorted(self._tasks.values(), key=lambda t: t.sequence)]
        )
        try:
            self._store.set(self._storage_key, payload)
        except QueueStoreError as exc:
            Log.error(f"Failed to persist task queue: {exc}")
