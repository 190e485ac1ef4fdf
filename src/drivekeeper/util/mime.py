from __future__ import annotations

import mimetypes

MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

# Content types accepted for upload, with the extensions shown to users.
ALLOWED_CONTENT_TYPES: dict[str, tuple[str, ...]] = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
    "image/gif": (".gif",),
    "image/webp": (".webp",),
    "image/svg+xml": (".svg",),
    "application/pdf": (".pdf",),
    "application/msword": (".doc",),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (".docx",),
    "application/vnd.ms-excel": (".xls",),
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": (".xlsx",),
    "application/vnd.ms-powerpoint": (".ppt",),
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": (".pptx",),
    "text/plain": (".txt",),
    "text/csv": (".csv",),
    "application/zip": (".zip",),
    "application/x-rar-compressed": (".rar",),
}

PDF_MIME: str = "application/pdf"


def is_image(content_type: str) -> bool:
    return "image" in content_type


def is_pdf(content_type: str) -> bool:
    return "pdf" in content_type


def allowed_extensions() -> str:
    """Comma-separated list of every accepted extension."""
    return ", ".join(ext for exts in ALLOWED_CONTENT_TYPES.values() for ext in exts)


def guess_content_type(file_name: str) -> str:
    """Guess a content type from a file name, defaulting to octet-stream."""
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or "application/octet-stream"


def icon_category(content_type: str) -> str:
    """
    Return the icon family for a file: image, pdf, spreadsheet, document or file.

    Matching is by substring, so vendor types such as
    "application/vnd.ms-excel" fall into "spreadsheet".
    """
    if is_image(content_type):
        return "image"
    if is_pdf(content_type):
        return "pdf"
    if "sheet" in content_type or "excel" in content_type:
        return "spreadsheet"
    if "document" in content_type or "word" in content_type:
        return "document"
    return "file"


def preview_kind(content_type: str) -> str:
    """Return how a file can be previewed inline: image, pdf, text or none."""
    if is_image(content_type):
        return "image"
    if is_pdf(content_type):
        return "pdf"
    if "text" in content_type:
        return "text"
    return "none"


def format_size(num_bytes: int) -> str:
    """Format a byte count for display, e.g. 10240 -> '10 KB'."""
    if num_bytes <= 0:
        return "0 B"
    units = ("B", "KB", "MB", "GB", "TB")
    i = 0
    while num_bytes >= 1024 ** (i + 1) and i < len(units) - 1:
        i += 1
    value = round(num_bytes / (1024**i), 1)
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text} {units[i]}"
