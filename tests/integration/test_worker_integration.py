from pathlib import Path

import pytest

from courseflow.config.settings import Settings
from courseflow.enrichment.handlers import build_handlers
from courseflow.tasks.models import FileRef, TaskStatus, TaskType
from courseflow.tasks.queue import TaskQueue
from courseflow.tasks.runner import TaskRunner
from courseflow.tasks.store.file_store import FileQueueStore
from courseflow.tasks.worker import Worker


@pytest.mark.integration
class TestWorkerIntegration:
    def test_worker_enriches_uploaded_pdf(self, tmp_path: Path, sample_pdf_bytes: bytes) -> None:
        files_root = tmp_path / "files"
        files_root.mkdir()
        (files_root / "file-1").write_bytes(sample_pdf_bytes)
        settings = Settings(
            files_root=str(files_root),
            queue_store="file",
            queue_store_path=str(tmp_path / "queue"),
            summary_provider="example",
            summary_target_language="en",
            max_concurrent_tasks=2,
        )
        queue = TaskQueue(FileQueueStore(Path(settings.queue_store_path)))
        queue.queue_file_processing(
            FileRef(id="file-1", name="CS101-lecture-3.pdf", type="application/pdf")
        )

        worker = Worker(queue, TaskRunner(queue, build_handlers(settings), settings), settings)
        worker.run(max_tasks=3)

        tasks = {t.task_type: t for t in queue.get_file_tasks("file-1")}
        assert all(t.status is TaskStatus.COMPLETED for t in tasks.values())
        assert tasks[TaskType.CATEGORIZATION].result["category"] == "lecture"
        assert "CS101 Lecture 3 Sorting" in tasks[TaskType.TEXT_EXTRACTION].result["text"]
        assert tasks[TaskType.SUMMARY].result["language"] == "en"

        reloaded = TaskQueue(FileQueueStore(Path(settings.queue_store_path)))
        assert reloaded.get_stats().completed == 3

    def test_missing_file_is_retried_then_failed(self, tmp_path: Path) -> None:
        settings = Settings(
            files_root=str(tmp_path),
            summary_provider="example",
            max_concurrent_tasks=1,
        )
        queue = TaskQueue(FileQueueStore(tmp_path / "queue"), max_attempts=2)
        [_, extraction_id, _] = queue.queue_file_processing(
            FileRef(id="gone", name="notes.pdf", type="application/pdf")
        )

        worker = Worker(queue, TaskRunner(queue, build_handlers(settings), settings), settings)
        worker.run(max_tasks=5)

        task = queue.get_task_status(extraction_id)
        assert task is not None
        assert task.status is TaskStatus.FAILED
        assert task.retry_count == 2
        assert "File not found" in (task.error or "")
