import threading
from collections.abc import Callable
from dataclasses import replace

from courseflow.logging.logger import Log
from courseflow.upload.models import UploadProgress, UploadStatus

ProgressObserver = Callable[[list[UploadProgress]], None]


class ProgressTracker:
    """Per-file upload progress, at most one entry per local file id.

    Observers get a fresh list of immutable entries after every change.
    """

    def __init__(self) -> None:
        self._entries: dict[str, UploadProgress] = {}
        self._observers: list[ProgressObserver] = []
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def update(self, progress: UploadProgress) -> None:
        with self._lock:
            self._entries[progress.file_id] = progress
        self._publish()

    def mark(self, file_id: str, **changes: object) -> UploadProgress | None:
        """Apply *changes* to an existing entry; unknown ids are ignored."""
        with self._lock:
            current = self._entries.get(file_id)
            if current is None:
                return None
            updated = replace(current, **changes)  # type: ignore[arg-type]
            self._entries[file_id] = updated
        self._publish()
        return updated

    def get(self, file_id: str) -> UploadProgress | None:
        with self._lock:
            return self._entries.get(file_id)

    def snapshot(self) -> list[UploadProgress]:
        with self._lock:
            return list(self._entries.values())

    def remove(self, file_id: str) -> None:
        with self._lock:
            removed = self._entries.pop(file_id, None)
        if removed is not None:
            self._publish()

    def clear(self) -> None:
        self.cancel_scheduled_clear()
        with self._lock:
            had_entries = bool(self._entries)
            self._entries.clear()
        if had_entries:
            self._publish()

    def clear_completed(self) -> int:
        with self._lock:
            done = [k for k, v in self._entries.items() if v.status is UploadStatus.COMPLETED]
            for file_id in done:
                del self._entries[file_id]
        if done:
            self._publish()
        return len(done)

    def schedule_clear_completed(self, delay_seconds: float) -> threading.Timer:
        """Purge completed entries after *delay_seconds*, replacing any pending purge."""
        self.cancel_scheduled_clear()
        timer = threading.Timer(delay_seconds, self.clear_completed)
        timer.daemon = True
        with self._lock:
            self._timer = timer
        timer.start()
        return timer

    def cancel_scheduled_clear(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def subscribe(self, callback: ProgressObserver) -> Callable[[], None]:
        """Register an observer. Returns an unsubscribe function."""
        with self._lock:
            self._observers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return _unsubscribe

    def _publish(self) -> None:
        with self._lock:
            observers = list(self._observers)
            entries = list(self._entries.values())
        for observer in observers:
            try:
                observer(list(entries))
            except Exception as exc:
                Log.warning(f"Progress observer failed: {exc}")
