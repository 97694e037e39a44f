from unittest.mock import MagicMock, patch

import pytest

from courseflow.tasks.models import AIProcessingTask, TaskPriority, TaskSpec, TaskStatus, TaskType
from courseflow.tasks.queue import TaskQueue
from courseflow.tasks.store.memory_store import InMemoryQueueStore
from courseflow.tasks.worker import Worker


def _make_worker(
    concurrency: int = 1,
) -> tuple[Worker, TaskQueue, MagicMock]:
    """Create a Worker over a real in-memory queue and a mocked runner."""
    queue = TaskQueue(InMemoryQueueStore())
    mock_runner = MagicMock()
    mock_runner.run.side_effect = lambda task: queue.mark_completed(task.id, {"ok": True})
    settings = MagicMock(max_concurrent_tasks=concurrency, queue_tick_interval_seconds=0.05)
    worker = Worker(queue, mock_runner, settings)
    return worker, queue, mock_runner


def _add(queue: TaskQueue, priority: TaskPriority, file_id: str = "f1") -> str:
    return queue.add_task(
        TaskSpec(
            file_id=file_id,
            file_name=f"{file_id}.pdf",
            file_type="application/pdf",
            task_type=TaskType.CATEGORIZATION,
            priority=priority,
        )
    )


class TestWorkerDispatch:
    def test_dispatches_task_to_runner(self) -> None:
        worker, queue, mock_runner = _make_worker()
        task_id = _add(queue, TaskPriority.HIGH)

        worker.run(max_tasks=1)

        dispatched: AIProcessingTask = mock_runner.run.call_args.args[0]
        assert dispatched.id == task_id
        assert queue.get_task_status(task_id).status is TaskStatus.COMPLETED
        assert worker.tasks_processed == 1

    def test_dispatches_in_priority_order(self) -> None:
        worker, queue, mock_runner = _make_worker()
        low = _add(queue, TaskPriority.LOW)
        high = _add(queue, TaskPriority.HIGH)

        worker.run(max_tasks=2)

        order = [call.args[0].id for call in mock_runner.run.call_args_list]
        assert order == [high, low]

    def test_processes_with_several_threads(self) -> None:
        worker, queue, mock_runner = _make_worker(concurrency=3)
        for index in range(6):
            _add(queue, TaskPriority.MEDIUM, file_id=f"f{index}")

        worker.run(max_tasks=6)

        assert mock_runner.run.call_count == 6
        assert queue.get_stats().completed == 6

    def test_zero_max_tasks_returns_immediately(self) -> None:
        worker, queue, mock_runner = _make_worker()
        _add(queue, TaskPriority.HIGH)

        worker.run(max_tasks=0)

        mock_runner.run.assert_not_called()


class TestWorkerLifecycle:
    def test_rejects_empty_pool(self) -> None:
        settings = MagicMock(max_concurrent_tasks=0)
        with pytest.raises(ValueError, match="max_concurrent_tasks"):
            Worker(MagicMock(), MagicMock(), settings)

    def test_cannot_start_twice(self) -> None:
        worker, _queue, _runner = _make_worker()
        worker.start()
        try:
            with pytest.raises(RuntimeError, match="already running"):
                worker.start()
        finally:
            worker.stop(timeout=5)
        assert not worker.is_running

    def test_stop_closes_queue(self) -> None:
        worker, queue, _runner = _make_worker()
        worker.start()
        worker.stop(timeout=5)

        _add(queue, TaskPriority.HIGH)
        assert queue.claim_next(timeout=0) is None

    def test_handles_keyboard_interrupt(self) -> None:
        worker, _queue, _runner = _make_worker()

        with patch.object(worker._done_event, "wait", side_effect=KeyboardInterrupt):
            worker.run()  # Should not raise

        assert not worker.is_running


class TestWorkerErrorHandling:
    def test_claim_error_returns_none(self) -> None:
        mock_queue = MagicMock()
        mock_queue.claim_next.side_effect = Exception("store unavailable")
        settings = MagicMock(max_concurrent_tasks=1, queue_tick_interval_seconds=1)
        worker = Worker(mock_queue, MagicMock(), settings)
        worker._stop_event.set()

        with patch("courseflow.tasks.worker.Log") as mock_log:
            assert worker._try_claim_task() is None

        mock_log.warning.assert_called_once()

    def test_sweep_error_is_logged(self) -> None:
        mock_queue = MagicMock()
        mock_queue.cleanup_old_tasks.side_effect = Exception("disk full")
        settings = MagicMock(max_concurrent_tasks=1, queue_tick_interval_seconds=1)
        worker = Worker(mock_queue, MagicMock(), settings)

        with patch("courseflow.tasks.worker.Log") as mock_log:
            worker._sweep()  # Should not raise

        mock_log.warning.assert_called_once()

    def test_sweeper_removes_expired_tasks(self) -> None:
        mock_queue = MagicMock()
        mock_queue.claim_next.return_value = None
        settings = MagicMock(max_concurrent_tasks=1, queue_tick_interval_seconds=0.01)
        worker = Worker(mock_queue, MagicMock(), settings)

        worker.start()
        try:
            worker._stop_event.wait(0.2)
        finally:
            worker.stop(timeout=5)

        assert mock_queue.cleanup_old_tasks.called
