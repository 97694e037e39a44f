import os
import re
import tempfile
from pathlib import Path

from courseflow.tasks.exceptions import QueueStoreError
from courseflow.tasks.store.base import BaseQueueStore

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileQueueStore(BaseQueueStore):
    """One JSON file per key inside *directory*.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so readers never see a half-written snapshot.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise QueueStoreError(f"Cannot read queue snapshot {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory, prefix=f".{path.stem}-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise QueueStoreError(f"Cannot write queue snapshot {path}: {exc}") from exc
