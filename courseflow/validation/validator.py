"""Admissibility checks for selected files.

Every check returns a ValidationResult; none of them raise for malformed
input. Limits default to the values shipped in Settings.
"""

import re

from courseflow.logging.logger import Log
from courseflow.validation.models import (
    BatchValidation,
    FileCandidate,
    ValidationResult,
)
from courseflow.validation.signatures import (
    ALLOWED_MIME_TYPES,
    SIGNATURE_READ_LENGTH,
    content_type_for_extension,
    detect_signature,
)

MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024
MAX_BATCH_FILES = 10
MAX_BATCH_TOTAL_BYTES = MAX_FILE_SIZE_BYTES * 2

SIGNATURE_MISMATCH_ERROR = "File content does not match the expected format"

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_\-\s]")
_WHITESPACE = re.compile(r"\s+")


def resolve_content_type(candidate: FileCandidate) -> str:
    """Declared content type without parameters, falling back to the extension."""
    declared = (candidate.content_type or "").split(";", 1)[0].strip().lower()
    if declared:
        return declared
    return content_type_for_extension(get_file_extension(candidate.name)) or ""


def validate_type(candidate: FileCandidate) -> ValidationResult:
    content_type = resolve_content_type(candidate)
    allowed = ALLOWED_MIME_TYPES.get(content_type)
    if allowed is None:
        supported = ", ".join(t.extension for t in ALLOWED_MIME_TYPES.values())
        shown = content_type or "unknown"
        return ValidationResult.fail(
            f"File type '{shown}' is not allowed. Supported types: {supported}"
        )
    return ValidationResult.ok(allowed.category)


def validate_size(
    candidate: FileCandidate,
    max_size_bytes: int = MAX_FILE_SIZE_BYTES,
) -> ValidationResult:
    if candidate.size > max_size_bytes:
        return ValidationResult.fail(
            f"File size exceeds limit of {format_file_size(max_size_bytes)}"
        )
    return ValidationResult.ok()


def validate_batch(
    candidates: list[FileCandidate],
    max_files: int = MAX_BATCH_FILES,
    max_total_bytes: int = MAX_BATCH_TOTAL_BYTES,
) -> ValidationResult:
    """Check the batch as a whole, independent of per-file validity."""
    if len(candidates) > max_files:
        return ValidationResult.fail(f"Maximum {max_files} files can be uploaded at once")
    total = sum(c.size for c in candidates)
    if total > max_total_bytes:
        return ValidationResult.fail("Total batch size exceeds reasonable limits")
    return ValidationResult.ok()


def validate_signature(candidate: FileCandidate) -> ValidationResult:
    """Compare the first bytes of the content with the declared type's signature.

    Text types are exempt. Unreadable content fails closed for types that
    require a signature.
    """
    content_type = resolve_content_type(candidate)
    allowed = ALLOWED_MIME_TYPES.get(content_type)
    if allowed is not None and allowed.signature_family is None:
        return ValidationResult.ok(allowed.category)

    try:
        head = candidate.head(SIGNATURE_READ_LENGTH)
    except Exception as exc:
        Log.warning(f"Could not read content of {candidate.name}: {exc}")
        return ValidationResult.fail(SIGNATURE_MISMATCH_ERROR)

    detected = detect_signature(head)
    if allowed is None:
        # No expectation to compare against; accept any known binary format.
        return ValidationResult.ok() if detected else ValidationResult.fail(SIGNATURE_MISMATCH_ERROR)
    if detected != allowed.signature_family:
        Log.debug(
            f"Signature mismatch for {candidate.name}: declared {content_type}, "
            f"detected {detected or 'unknown'}"
        )
        return ValidationResult.fail(SIGNATURE_MISMATCH_ERROR)
    return ValidationResult.ok(allowed.category)


def validate_candidate(
    candidate: FileCandidate,
    max_size_bytes: int = MAX_FILE_SIZE_BYTES,
    check_signature: bool = True,
) -> ValidationResult:
    """Run type, size and signature checks in order; the first failure wins."""
    type_result = validate_type(candidate)
    if not type_result.valid:
        return type_result
    size_result = validate_size(candidate, max_size_bytes)
    if not size_result.valid:
        return size_result
    if check_signature:
        signature_result = validate_signature(candidate)
        if not signature_result.valid:
            return signature_result
    return ValidationResult.ok(type_result.category)


def validate_files(
    candidates: list[FileCandidate],
    max_files: int = MAX_BATCH_FILES,
    max_size_bytes: int = MAX_FILE_SIZE_BYTES,
    max_total_bytes: int = MAX_BATCH_TOTAL_BYTES,
    check_signature: bool = True,
) -> BatchValidation:
    """Split a selection into admissible files and per-file errors.

    The batch check runs first and rejects everything on failure. Otherwise
    one bad file never blocks the rest; errors keep the input order.
    """
    batch_result = validate_batch(candidates, max_files, max_total_bytes)
    if not batch_result.valid:
        return BatchValidation(errors=[batch_result.error or "Invalid batch"])

    outcome = BatchValidation()
    for candidate in candidates:
        result = validate_candidate(candidate, max_size_bytes, check_signature)
        if result.valid:
            outcome.valid_files.append(candidate)
            if result.category is not None:
                outcome.categories[candidate.local_id] = result.category
        else:
            outcome.errors.append(f"{candidate.name}: {result.error}")
    return outcome


def format_file_size(size_bytes: int) -> str:
    """Human-readable size, e.g. ``52428800 -> '50 MB'``."""
    if size_bytes <= 0:
        return "0 Bytes"
    index = 0
    value = float(size_bytes)
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    number = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{number} {_SIZE_UNITS[index]}"


def get_file_extension(filename: str) -> str:
    """Lowercase extension including the dot, or '' when there is none."""
    dot = filename.rfind(".")
    return filename[dot:].lower() if dot != -1 else ""


def sanitize_filename(filename: str) -> str:
    """Make a filename safe for storage paths while keeping its extension."""
    extension = get_file_extension(filename)
    stem = filename[: len(filename) - len(extension)] if extension else filename
    stem = _UNSAFE_FILENAME_CHARS.sub("", stem)
    stem = _WHITESPACE.sub("_", stem)[:100]
    return stem + extension
