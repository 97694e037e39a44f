from pathlib import Path

from courseflow.extraction.exceptions import FileReadError


def stored_file_path(files_root: Path, file_id: str) -> Path:
    """Build path to a persisted file: {files_root}/{file_id}"""
    return files_root / file_id


class FileLoader:
    """Resolves the filesystem path for a persisted file and reads its bytes."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def load(self, file_id: str) -> bytes:
        """Read file bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
            FileReadError: if the id escapes the files root or the read fails.
        """
        path = self._resolve_path(file_id)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}: {exc}") from exc

    def _resolve_path(self, file_id: str) -> Path:
        if not file_id or "/" in file_id or "\\" in file_id or file_id in (".", ".."):
            raise FileReadError(f"Invalid file id '{file_id}'")
        return stored_file_path(self._files_root, file_id)
