import threading

from courseflow.config.settings import Settings
from courseflow.logging.logger import Log
from courseflow.tasks.models import AIProcessingTask
from courseflow.tasks.queue import TaskQueue
from courseflow.tasks.runner import TaskRunner

CLAIM_TIMEOUT_SECONDS = 1.0


class Worker:
    """Bounded pool of threads that block on the queue and dispatch to the runner.

    A separate sweeper thread removes expired terminal tasks every
    queue_tick_interval_seconds.
    """

    def __init__(
        self,
        queue: TaskQueue,
        runner: TaskRunner,
        settings: Settings,
    ) -> None:
        if settings.max_concurrent_tasks < 1:
            raise ValueError("max_concurrent_tasks must be at least 1")
        self._queue = queue
        self._runner = runner
        self._settings = settings
        self._stop_event = threading.Event()
        self._done_event = threading.Event()
        self._threads: list[threading.Thread] = []
        self._counter_lock = threading.Lock()
        self._max_tasks: int | None = None
        self._reserved = 0
        self._finished = 0

    @property
    def tasks_processed(self) -> int:
        with self._counter_lock:
            return self._finished

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def start(self, max_tasks: int | None = None) -> None:
        """Start the worker threads and the sweeper. Returns immediately."""
        if self.is_running:
            raise RuntimeError("Worker is already running")
        self._stop_event.clear()
        self._done_event.clear()
        self._max_tasks = max_tasks
        self._reserved = 0
        self._finished = 0
        if max_tasks is not None and max_tasks <= 0:
            self._done_event.set()
        self._queue.reopen()

        self._threads = [
            threading.Thread(
                target=self._work_loop, name=f"courseflow-worker-{index}", daemon=True
            )
            for index in range(self._settings.max_concurrent_tasks)
        ]
        self._threads.append(
            threading.Thread(target=self._sweep_loop, name="courseflow-sweeper", daemon=True)
        )
        for thread in self._threads:
            thread.start()
        Log.info(
            f"Worker started with {self._settings.max_concurrent_tasks} thread(s)"
        )

    def stop(self, timeout: float | None = None) -> None:
        """Signal every thread to finish its current task and exit, then join them."""
        self._stop_event.set()
        self._queue.close()
        for thread in self._threads:
            thread.join(timeout)
        self._threads = []
        Log.info("Worker stopped")

    def run(self, max_tasks: int | None = None) -> None:
        """Block until interrupted.

        If max_tasks is set, stop after processing that many tasks (for testing).
        """
        self.start(max_tasks)
        try:
            while not self._done_event.wait(CLAIM_TIMEOUT_SECONDS):
                pass
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")
        finally:
            self.stop()

    def _work_loop(self) -> None:
        while not self._stop_event.is_set():
            if not self._reserve_slot():
                return
            task = self._try_claim_task()
            if task is None:
                self._release_slot()
                continue
            self._runner.run(task)
            self._finish_slot()

    def _try_claim_task(self) -> AIProcessingTask | None:
        """Attempt to claim the next pending task. Gracefully handle queue errors."""
        try:
            return self._queue.claim_next(timeout=CLAIM_TIMEOUT_SECONDS)
        except Exception as exc:
            Log.warning(f"Queue error, will retry: {exc}")
            self._stop_event.wait(CLAIM_TIMEOUT_SECONDS)
            return None

    def _sweep_loop(self) -> None:
        interval = self._settings.queue_tick_interval_seconds
        while not self._stop_event.wait(interval):
            self._sweep()

    def _sweep(self) -> None:
        try:
            self._queue.cleanup_old_tasks()
        except Exception as exc:
            Log.warning(f"Queue cleanup failed, will retry: {exc}")

    def _reserve_slot(self) -> bool:
        with self._counter_lock:
            if self._max_tasks is not None and self._reserved >= self._max_tasks:
                return False
            self._reserved += 1
            return True

    def _release_slot(self) -> None:
        with self._counter_lock:
            self._reserved -= 1

    def _finish_slot(self) -> None:
        with self._counter_lock:
            self._finished += 1
            if self._max_tasks is not None and self._finished >= self._max_tasks:
                self._done_event.set()
