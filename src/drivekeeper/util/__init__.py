from .ids import new_record_id, new_upload_id, new_uuid
from .mime import (
    ALLOWED_CONTENT_TYPES,
    MAX_UPLOAD_BYTES,
    PDF_MIME,
    allowed_extensions,
    format_size,
    guess_content_type,
    icon_category,
    is_image,
    is_pdf,
    preview_kind,
)
from .time import normalize_dt, now_utc, parse_rfc3339, to_rfc3339

__all__ = [
    "new_uuid",
    "new_record_id",
    "new_upload_id",
    "ALLOWED_CONTENT_TYPES",
    "MAX_UPLOAD_BYTES",
    "PDF_MIME",
    "allowed_extensions",
    "format_size",
    "guess_content_type",
    "icon_category",
    "is_image",
    "is_pdf",
    "preview_kind",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
]
