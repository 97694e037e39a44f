"""Content-type allow-list and magic-byte signatures."""

from courseflow.validation.models import AllowedType, MimeCategory

SIGNATURE_READ_LENGTH = 12

ALLOWED_MIME_TYPES: dict[str, AllowedType] = {
    "application/pdf": AllowedType(".pdf", MimeCategory.DOCUMENT, "pdf"),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": AllowedType(
        ".docx", MimeCategory.DOCUMENT, "zip"
    ),
    "application/msword": AllowedType(".doc", MimeCategory.DOCUMENT, "ole2"),
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": AllowedType(
        ".pptx", MimeCategory.PRESENTATION, "zip"
    ),
    "application/vnd.ms-powerpoint": AllowedType(".ppt", MimeCategory.PRESENTATION, "ole2"),
    "image/jpeg": AllowedType(".jpg", MimeCategory.IMAGE, "jpg"),
    "image/png": AllowedType(".png", MimeCategory.IMAGE, "png"),
    "image/gif": AllowedType(".gif", MimeCategory.IMAGE, "gif"),
    "image/webp": AllowedType(".webp", MimeCategory.IMAGE, "webp"),
    "text/plain": AllowedType(".txt", MimeCategory.TEXT, None),
    "text/markdown": AllowedType(".md", MimeCategory.TEXT, None),
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": AllowedType(
        ".xlsx", MimeCategory.SPREADSHEET, "zip"
    ),
    "application/vnd.ms-excel": AllowedType(".xls", MimeCategory.SPREADSHEET, "ole2"),
    "text/csv": AllowedType(".csv", MimeCategory.SPREADSHEET, None),
}

EXTENSION_ALIASES: dict[str, str] = {".jpeg": "image/jpeg", ".markdown": "text/markdown"}

# (family, offset, magic)
FILE_SIGNATURES: list[tuple[str, int, bytes]] = [
    ("pdf", 0, b"%PDF"),
    ("png", 0, b"\x89PNG"),
    ("jpg", 0, b"\xff\xd8\xff"),
    ("gif", 0, b"GIF"),
    ("zip", 0, b"PK\x03\x04"),
    ("ole2", 0, b"\xd0\xcf\x11\xe0"),
    ("webp", 8, b"WEBP"),
]


def detect_signature(head: bytes) -> str | None:
    """Return the signature family of *head*, or None when nothing matches."""
    for family, offset, magic in FILE_SIGNATURES:
        if head[offset : offset + len(magic)] == magic:
            if family == "webp" and not head.startswith(b"RIFF"):
                continue
            return family
    return None


def content_type_for_extension(extension: str) -> str | None:
    """Map a lowercase extension (with dot) back to an allowed content type."""
    ext = extension.lower()
    if ext in EXTENSION_ALIASES:
        return EXTENSION_ALIASES[ext]
    for content_type, allowed in ALLOWED_MIME_TYPES.items():
        if allowed.extension == ext:
            return content_type
    return None
