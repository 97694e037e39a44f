from abc import ABC, abstractmethod
from collections.abc import Callable

from courseflow.upload.models import DuplicateCheckResult, UploadProgress, UploadResponse
from courseflow.validation.models import FileCandidate

ProgressCallback = Callable[[str, UploadProgress], None]


class BaseUploadClient(ABC):
    """Contract for the collaborator that persists files."""

    @abstractmethod
    def upload(
        self,
        candidates: list[FileCandidate],
        *,
        course_id: str | None,
        folder_id: str | None,
        on_file_progress: ProgressCallback | None = None,
    ) -> UploadResponse:
        """Transmit *candidates* and report per-file progress by local id.

        Per-file failures are returned in ``UploadResponse.errors``; only
        unexpected conditions raise.
        """


class BaseDuplicateChecker(ABC):
    """Contract for asking the backend whether a fingerprint is already stored."""

    @abstractmethod
    def check_duplicate(
        self,
        candidate: FileCandidate,
        course_id: str | None,
        digest: str | None = None,
    ) -> DuplicateCheckResult:
        """Look up *candidate* by content digest, scoped to *course_id* when given.

        Raises:
            UploadError: if the lookup itself fails.
        """
