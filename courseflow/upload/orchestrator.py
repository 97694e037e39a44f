"""Batch upload workflow: select, validate, dedupe, transmit, settle."""

from collections.abc import Callable
from enum import Enum

from courseflow.classification import (
    ClassificationMatch,
    Course,
    analyze_content,
    detect_course_from_file,
)
from courseflow.config.settings import Settings
from courseflow.digest.exceptions import DigestError
from courseflow.digest.service import ContentDigestService
from courseflow.logging.logger import Log
from courseflow.tasks.queue import TaskQueue
from courseflow.upload.base import BaseDuplicateChecker, BaseUploadClient
from courseflow.upload.models import (
    ExistingFile,
    PersistedFileRecord,
    SelectionResult,
    UploadErrorItem,
    UploadOutcome,
    UploadProgress,
    UploadStatus,
)
from courseflow.upload.progress import ProgressTracker
from courseflow.validation.models import FileCandidate, MimeCategory
from courseflow.validation.validator import validate_files

ALREADY_UPLOADED_MESSAGE = "This file has already been uploaded"
ALL_DUPLICATES_MESSAGE = "All selected files are duplicates in this course and have been skipped"


class UploadState(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    VALIDATING = "validating"
    DUPLICATE_CHECKING = "duplicate_checking"
    UPLOADING = "uploading"
    SETTLING = "settling"


def duplicates_skipped_message(count: int) -> str:
    return f"{count} duplicate file(s) in this course skipped"


def friendly_upload_error(item: UploadErrorItem) -> str:
    """``"{filename}: {error}"``, with conflict errors reworded for people."""
    if "already exists" in item.error.lower():
        return f"{item.filename}: {ALREADY_UPLOADED_MESSAGE}"
    return f"{item.filename}: {item.error}"


class UploadOrchestrator:
    """Drives one selection-to-upload cycle for a course (or no course).

    Selection and upload are not re-entrant: calling either while another
    cycle is in progress raises RuntimeError.
    """

    def __init__(
        self,
        *,
        upload_client: BaseUploadClient,
        task_queue: TaskQueue,
        settings: Settings,
        duplicate_checker: BaseDuplicateChecker | None = None,
        digest_service: ContentDigestService | None = None,
        courses: list[Course] | None = None,
        course_id: str | None = None,
        folder_id: str | None = None,
        on_file_added: Callable[[PersistedFileRecord], None] | None = None,
        check_duplicates: bool | None = None,
        tracker: ProgressTracker | None = None,
    ) -> None:
        self._upload_client = upload_client
        self._task_queue = task_queue
        self._settings = settings
        self._duplicate_checker = duplicate_checker
        self._digest_service = digest_service or ContentDigestService()
        self._courses = list(courses or [])
        self._course_id = course_id
        self._folder_id = folder_id
        self._on_file_added = on_file_added
        self._check_duplicates = (
            settings.check_duplicates if check_duplicates is None else check_duplicates
        )
        self._tracker = tracker or ProgressTracker()

        self._state = UploadState.IDLE
        self._selected: list[FileCandidate] = []
        self._duplicates: dict[str, ExistingFile] = {}
        self._errors: list[str] = []
        self._uploaded: list[PersistedFileRecord] = []

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def selected_files(self) -> list[FileCandidate]:
        return list(self._selected)

    @property
    def duplicates(self) -> dict[str, ExistingFile]:
        return dict(self._duplicates)

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def uploaded_files(self) -> list[PersistedFileRecord]:
        return list(self._uploaded)

    @property
    def tracker(self) -> ProgressTracker:
        return self._tracker

    # -- selection -------------------------------------------------------

    def handle_file_select(self, candidates: list[FileCandidate]) -> SelectionResult:
        """Validate a new selection and make its admissible files the selected set."""
        self._enter(UploadState.SELECTING)
        try:
            return self._select(candidates)
        finally:
            self._state = UploadState.IDLE

    def paste(self, data: bytes, content_type: str) -> SelectionResult | None:
        """Treat pasted image data as a one-file selection. Non-images are ignored."""
        if not content_type.lower().startswith("image/"):
            Log.debug(f"Ignoring pasted content of type '{content_type}'")
            return None
        return self.handle_file_select([FileCandidate.from_clipboard(data, content_type)])

    def remove_selected(self, index: int) -> FileCandidate | None:
        if not 0 <= index < len(self._selected):
            return None
        removed = self._selected.pop(index)
        self._duplicates.pop(removed.local_id, None)
        return removed

    def clear_selection(self) -> None:
        self._selected = []
        self._errors = []
        self._duplicates = {}

    def _select(self, candidates: list[FileCandidate]) -> SelectionResult:
        self._state = UploadState.VALIDATING
        self._errors = []
        self._duplicates = {}
        batch = validate_files(
            candidates,
            max_files=self._settings.max_batch_files,
            max_size_bytes=self._settings.max_file_size_bytes,
            max_total_bytes=self._settings.max_batch_total_bytes,
        )
        result = SelectionResult(valid_files=list(batch.valid_files), errors=list(batch.errors))
        self._errors = list(batch.errors)
        if batch.errors:
            Log.info(f"Rejected {len(batch.errors)} selected file(s): {'; '.join(batch.errors)}")

        if not batch.valid_files:
            self._selected = []
            return result

        if self._check_duplicates and self._duplicate_checker is not None:
            self._state = UploadState.DUPLICATE_CHECKING
            self._find_duplicates(self._duplicate_checker, batch.valid_files, result)
            self._duplicates = dict(result.duplicates)

        if self._course_id is None and self._courses:
            for candidate in batch.valid_files:
                match = self._suggest_course(candidate, batch.categories.get(candidate.local_id))
                if match is not None:
                    result.course_suggestions[candidate.local_id] = match

        self._selected = list(batch.valid_files)
        return result

    def _find_duplicates(
        self,
        checker: BaseDuplicateChecker,
        candidates: list[FileCandidate],
        result: SelectionResult,
    ) -> None:
        for candidate in candidates:
            try:
                digest = self._digest_service.compute(candidate)
            except DigestError as exc:
                Log.warning(f"Could not fingerprint {candidate.name}: {exc}")
                continue
            result.digests[candidate.local_id] = digest
            try:
                check = checker.check_duplicate(
                    candidate, self._course_id, digest=digest.value
                )
            except Exception as exc:
                Log.warning(f"Duplicate check failed for {candidate.name}, assuming new: {exc}")
                continue
            if check.is_duplicate and check.existing_file is not None:
                result.duplicates[candidate.local_id] = check.existing_file
            elif check.is_duplicate:
                result.duplicates[candidate.local_id] = ExistingFile(id="", display_name=candidate.name)

    def _suggest_course(
        self,
        candidate: FileCandidate,
        category: MimeCategory | None,
    ) -> ClassificationMatch | None:
        if category is MimeCategory.TEXT:
            text = candidate.data.decode("utf-8", errors="replace")
            match = analyze_content(
                text,
                candidate.name,
                self._courses,
                threshold=self._settings.content_match_threshold,
            )
            if match is not None:
                return match
        return detect_course_from_file(
            candidate.name,
            self._courses,
            threshold=self._settings.course_match_threshold,
        )

    # -- upload ----------------------------------------------------------

    def upload_files(self) -> UploadOutcome:
        """Transmit the selected non-duplicate files and settle the results.

        Exceptions raised by the upload client propagate after the
        orchestrator has returned to idle.
        """
        outcome = UploadOutcome()
        if not self._selected:
            return outcome

        to_upload = [c for c in self._selected if c.local_id not in self._duplicates]
        outcome.skipped_duplicates = len(self._selected) - len(to_upload)
        if not to_upload:
            outcome.messages.append(ALL_DUPLICATES_MESSAGE)
            self._errors = list(outcome.messages)
            return outcome
        if outcome.skipped_duplicates:
            outcome.messages.append(duplicates_skipped_message(outcome.skipped_duplicates))

        self._enter(UploadState.UPLOADING)
        try:
            self._tracker.clear()
            for candidate in to_upload:
                self._tracker.update(
                    UploadProgress(file_id=candidate.local_id, file_name=candidate.name)
                )
            response = self._upload_client.upload(
                to_upload,
                course_id=self._course_id,
                folder_id=self._folder_id,
                on_file_progress=self._on_progress,
            )

            self._state = UploadState.SETTLING
            for record in response.files:
                self._settle(to_upload, record, outcome)
            outcome.failed = list(response.errors)
            outcome.messages.extend(friendly_upload_error(item) for item in response.errors)
            for item in response.errors:
                self._mark_failed(to_upload, item)
        finally:
            self._state = UploadState.IDLE

        self._errors = list(outcome.messages)
        if outcome.uploaded:
            self._selected = []
            self._duplicates = {}
            self._tracker.schedule_clear_completed(self._settings.upload_grace_seconds)
            Log.info(
                f"Uploaded {len(outcome.uploaded)} file(s), "
                f"skipped {outcome.skipped_duplicates} duplicate(s)"
            )
        elif outcome.failed and len(outcome.failed) == len(to_upload):
            Log.error(f"All {len(to_upload)} file(s) failed to upload")
        return outcome

    def _settle(
        self,
        candidates: list[FileCandidate],
        record: PersistedFileRecord,
        outcome: UploadOutcome,
    ) -> None:
        outcome.uploaded.append(record)
        self._mark_completed(candidates, record)
        self._uploaded.append(record)
        if self._on_file_added is not None:
            self._on_file_added(record)
        outcome.task_ids[record.id] = self._task_queue.queue_file_processing(record.to_file_ref())

    def _on_progress(self, file_id: str, progress: UploadProgress) -> None:
        self._tracker.update(progress)

    def _mark_completed(
        self, candidates: list[FileCandidate], record: PersistedFileRecord
    ) -> None:
        # Progress events are optional; a returned record means the file arrived.
        for candidate in candidates:
            if candidate.name != record.display_name:
                continue
            current = self._tracker.get(candidate.local_id)
            if current is not None and not current.is_finished:
                self._tracker.mark(
                    candidate.local_id,
                    status=UploadStatus.COMPLETED,
                    progress=100,
                    persisted_id=record.id,
                )
                return

    def _mark_failed(self, candidates: list[FileCandidate], item: UploadErrorItem) -> None:
        # The client may not have reported an error event; make the tracker agree.
        for candidate in candidates:
            if candidate.name != item.filename:
                continue
            current = self._tracker.get(candidate.local_id)
            if current is not None and not current.is_finished:
                self._tracker.mark(candidate.local_id, status=UploadStatus.ERROR, error=item.error)

    def _enter(self, state: UploadState) -> None:
        if self._state is not UploadState.IDLE:
            raise RuntimeError(f"Cannot start {state.value} while {self._state.value}")
        self._state = state
