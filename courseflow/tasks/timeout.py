import threading
from typing import Any

from courseflow.tasks.exceptions import TaskTimeoutError
from courseflow.tasks.handlers import TaskHandler
from courseflow.tasks.models import AIProcessingTask


def run_with_timeout(
    handler: TaskHandler,
    task: AIProcessingTask,
    timeout_seconds: float | None,
) -> dict[str, Any]:
    """Run *handler* on a daemon thread and wait at most *timeout_seconds*.

    A handler that overruns is abandoned, not killed: its thread keeps running
    until it returns on its own, but the caller's slot is released.
    """
    if timeout_seconds is None or timeout_seconds <= 0:
        return handler(task)

    outcome: dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["result"] = handler(task)
        except BaseException as exc:  # noqa: BLE001 - re-raised on the caller's thread
            outcome["error"] = exc

    thread = threading.Thread(target=_target, name=f"handler-{task.id[:8]}", daemon=True)
    thread.start()
    thread.join(timeout_seconds)

    if thread.is_alive():
        raise TaskTimeoutError(
            f"{task.task_type.value} handler timed out after {timeout_seconds:g}s"
        )
    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]
