from courseflow.config.settings import Settings
from courseflow.logging.logger import Log
from courseflow.tasks.exceptions import TaskQueueError, TaskResultError
from courseflow.tasks.handlers import EnrichmentHandlers
from courseflow.tasks.models import AIProcessingTask, TaskStatus
from courseflow.tasks.queue import TaskQueue
from courseflow.tasks.timeout import run_with_timeout


class TaskRunner:
    """Run one claimed task, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        queue: TaskQueue,
        handlers: EnrichmentHandlers,
        settings: Settings,
    ) -> None:
        self._queue = queue
        self._handlers = handlers
        self._settings = settings

    def run(self, task: AIProcessingTask) -> None:
        """Execute a single task with error handling. Never raises."""
        Log.info(
            f"Running {task.task_type.value} task {task.id} for {task.file_name} "
            f"(attempt {task.retry_count + 1})"
        )
        try:
            handler = self._handlers.resolve(task.task_type)
            result = run_with_timeout(handler, task, self._settings.task_timeout_seconds)
        except Exception as exc:
            self._handle_failure(task, exc)
            return

        try:
            self._queue.mark_completed(task.id, result)
        except TaskResultError as exc:
            self._handle_failure(task, exc)
            return
        except Exception as exc:
            Log.error(f"Task {task.id} finished but could not be recorded: {exc}")
            return
        Log.info(f"Task {task.id} completed successfully")

    def _handle_failure(self, task: AIProcessingTask, exc: Exception) -> None:
        """Count the attempt; the queue decides between retry and terminal failure."""
        message = str(exc) or exc.__class__.__name__
        Log.error(f"Task {task.id} failed: {message}")
        try:
            updated = self._queue.handle_failure(task.id, message)
        except TaskQueueError as queue_exc:
            Log.error(f"Task {task.id} failure could not be recorded: {queue_exc}")
            return

        if updated is None:
            return
        if updated.status is TaskStatus.FAILED:
            Log.error(
                f"Task {task.id} permanently failed after {updated.retry_count} attempts"
            )
        else:
            Log.warning(
                f"Task {task.id} will be retried (attempt {updated.retry_count + 1})"
            )
