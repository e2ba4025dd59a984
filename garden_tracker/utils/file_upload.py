"""
Upload validation for plant photos.

Checks the filename (extension allowlist, no path tricks, no dangerous
inner extensions), the size and the actual image content with Pillow.
"""

from __future__ import annotations
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif"}
ALLOWED_IMAGE_FORMATS = {"PNG", "JPEG", "GIF"}

# Extensions that must not appear anywhere in a name (double-extension attacks)
DANGEROUS_EXTENSIONS = {
    "php", "php3", "php4", "php5", "phtml", "exe", "sh", "bat", "cmd", "js",
    "py", "pl", "cgi", "asp", "aspx", "jsp", "html", "htm", "svg",
}


def allowed_file(filename: str) -> bool:
    """Return True if the filename is a plain name with an allowed image extension."""
    if not filename:
        return False
    if "/" in filename or "\\" in filename or ".." in filename or "%" in filename:
        return False

    parts = filename.lower().split(".")
    if len(parts) < 2 or not parts[0]:
        return False
    if parts[-1] not in ALLOWED_EXTENSIONS:
        return False
    return not any(part in DANGEROUS_EXTENSIONS for part in parts[1:-1])


def validate_image_content(file_bytes: bytes) -> bool:
    """Return True if Pillow recognizes the bytes as a complete allowed image."""
    if not file_bytes:
        return False
    try:
        with Image.open(BytesIO(file_bytes)) as img:
            if img.format not in ALLOWED_IMAGE_FORMATS:
                return False
            img.verify()
        # verify() leaves the image unusable; load a fresh copy to catch truncation
        with Image.open(BytesIO(file_bytes)) as img:
            img.load()
    except Exception:
        return False
    return True


def validate_upload_file(file) -> Tuple[bool, Optional[str], Optional[bytes]]:
    """
    Validate an uploaded file.

    Args:
        file: FileStorage (or any object with .filename and .read()), or None

    Returns:
        (is_valid, error, file_bytes):
        - (False, None, None) when no file was provided
        - (False, message, None) when the file is rejected
        - (True, None, bytes) when the file is acceptable
    """
    if file is None or not getattr(file, "filename", ""):
        return False, None, None

    if not allowed_file(file.filename):
        return False, "Invalid file type. Only JPEG, PNG, and GIF are allowed.", None

    file_bytes = file.read(MAX_FILE_SIZE + 1)
    if len(file_bytes) > MAX_FILE_SIZE:
        return False, "File size exceeds the 5MB limit.", None

    if not validate_image_content(file_bytes):
        return False, "The uploaded file is not a valid image.", None

    return True, None, file_bytes
