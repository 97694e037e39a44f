import io
from collections.abc import Callable
from typing import Any

import httpx

from courseflow.config.settings import Settings
from courseflow.digest.service import ContentDigestService
from courseflow.logging.logger import Log
from courseflow.upload.base import BaseDuplicateChecker, BaseUploadClient, ProgressCallback
from courseflow.upload.exceptions import UploadError, UploadNetworkError
from courseflow.upload.models import (
    DuplicateCheckResult,
    ExistingFile,
    PersistedFileRecord,
    UploadErrorItem,
    UploadProgress,
    UploadResponse,
    UploadStatus,
)
from courseflow.validation.models import FileCandidate

UPLOAD_PATH = "/api/files/upload"
CHECK_DUPLICATE_PATH = "/api/files/check-duplicate"


class _ProgressReader(io.BytesIO):
    """BytesIO that reports how much of itself the multipart encoder has read."""

    def __init__(self, data: bytes, on_read: Callable[[int, int], None]) -> None:
        super().__init__(data)
        self._total = len(data)
        self._on_read = on_read

    def read(self, size: int | None = -1) -> bytes:
        chunk = super().read(size)
        if chunk:
            self._on_read(self.tell(), self._total)
        return chunk


class HttpUploadClient(BaseUploadClient, BaseDuplicateChecker):
    """Upload and duplicate-check collaborator for the CourseFlow web API.

    Files are sent one request at a time, in selection order.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int = 60,
        headers: dict[str, str] | None = None,
        digest_service: ContentDigestService | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers=headers,
            transport=transport,
        )
        self._digest_service = digest_service or ContentDigestService()

    @classmethod
    def create(cls, settings: Settings) -> "HttpUploadClient":
        return cls(
            base_url=settings.upload_base_url,
            timeout_seconds=settings.upload_timeout_seconds,
        )

    def close(self) -> None:
        self._client.close()

    def upload(
        self,
        candidates: list[FileCandidate],
        *,
        course_id: str | None,
        folder_id: str | None,
        on_file_progress: ProgressCallback | None = None,
    ) -> UploadResponse:
        response = UploadResponse()
        for candidate in candidates:
            emit = self._emitter(candidate, on_file_progress)
            emit(UploadStatus.UPLOADING, 0.0)
            try:
                record = self._upload_one(candidate, course_id, folder_id, emit)
            except UploadError as exc:
                Log.warning(f"Upload of {candidate.name} failed: {exc}")
                response.errors.append(UploadErrorItem(filename=candidate.name, error=str(exc)))
                emit(UploadStatus.ERROR, 0.0, error=str(exc))
                continue
            response.files.append(record)
            emit(UploadStatus.COMPLETED, 100.0, persisted_id=record.id)
        return response

    def check_duplicate(
        self,
        candidate: FileCandidate,
        course_id: str | None,
        digest: str | None = None,
    ) -> DuplicateCheckResult:
        params = {"hash": digest or self._digest_service.digest(candidate)}
        if course_id:
            params["courseId"] = course_id
        try:
            http_response = self._client.get(CHECK_DUPLICATE_PATH, params=params)
            http_response.raise_for_status()
            body = http_response.json()
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise UploadNetworkError(f"Duplicate check network error: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise UploadNetworkError(
                f"Duplicate check failed: {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UploadError(f"Duplicate check failed: {exc}") from exc

        existing = body.get("existingFile")
        return DuplicateCheckResult(
            is_duplicate=bool(body.get("isDuplicate")),
            existing_file=ExistingFile.from_dict(existing) if existing else None,
        )

    def _upload_one(
        self,
        candidate: FileCandidate,
        course_id: str | None,
        folder_id: str | None,
        emit: Callable[..., None],
    ) -> PersistedFileRecord:
        def _on_read(done: int, total: int) -> None:
            if total:
                emit(UploadStatus.UPLOADING, done / total * 100)

        data: dict[str, str] = {}
        if course_id:
            data["course_id"] = course_id
        if folder_id:
            data["folder_id"] = folder_id
        files = {
            "files": (
                candidate.name,
                _ProgressReader(candidate.data, _on_read),
                candidate.content_type or "application/octet-stream",
            )
        }
        try:
            http_response = self._client.post(UPLOAD_PATH, data=data, files=files)
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise UploadNetworkError(f"Upload failed: {exc}") from exc
        except httpx.HTTPError as exc:
            raise UploadError(f"Upload failed: {exc}") from exc

        body = self._json_body(http_response)
        if http_response.is_error:
            message = body.get("error") if isinstance(body.get("error"), str) else None
            raise UploadError(message or f"Upload failed: {http_response.status_code}")

        errors = body.get("errors") or []
        raw_files = body.get("files") or ([body["file"]] if body.get("file") else [])
        if raw_files:
            return PersistedFileRecord.from_dict(raw_files[0])
        if errors and isinstance(errors[0], dict) and errors[0].get("error"):
            raise UploadError(str(errors[0]["error"]))
        raise UploadError("Invalid response")

    @staticmethod
    def _json_body(http_response: httpx.Response) -> dict[str, Any]:
        try:
            body = http_response.json()
        except ValueError:
            if http_response.is_error:
                return {}
            raise UploadError("Invalid response") from None
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _emitter(
        candidate: FileCandidate,
        on_file_progress: ProgressCallback | None,
    ) -> Callable[..., None]:
        def _emit(status: UploadStatus, progress: float, **extra: Any) -> None:
            if on_file_progress is None:
                return
            on_file_progress(
                candidate.local_id,
                UploadProgress(
                    file_id=candidate.local_id,
                    file_name=candidate.name,
                    progress=progress,
                    status=status,
                    **extra,
                ),
            )

        return _emit
