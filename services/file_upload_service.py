import os
from typing import Optional

from config import ALLOWED_EXTENSIONS, MAX_UPLOAD_BYTES
from exceptions import UploadValidationError
from models.common_models import UploadRequest

MIME_TYPES = {
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".csv": "text/csv",
}


def validate_upload(file_name: str, size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> str:
    """
    Check a file before it is dispatched for upload.
    Returns the normalized extension, raises UploadValidationError otherwise.
    """
    ext = os.path.splitext(file_name)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise UploadValidationError("Please select a valid Excel file (.xls, .xlsx, .csv)", file_name)

    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise UploadValidationError(f"File size must be less than {limit_mb:g}MB", file_name)

    return ext


def build_upload_request(file_name: str, content: bytes, mime_type: Optional[str] = None) -> UploadRequest:
    ext = validate_upload(file_name, len(content))
    return UploadRequest(
        file_name=file_name,
        content=content,
        mime_type=mime_type or MIME_TYPES[ext],
    )


def format_size(size: int) -> str:
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.2f} MB"
