"""
Photo handling for plant uploads.

Validates the uploaded file, writes it to UPLOAD_FOLDER under a
timestamped, sanitized name and returns the public URL (/uploads/<name>).
"""

from __future__ import annotations
import os
import time
from typing import Optional

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import GENERIC_MESSAGES, AppError, log_error, log_info
from .file_upload import validate_upload_file

UPLOAD_URL_PREFIX = "/uploads/"


def build_stored_name(filename: str) -> str:
    """<millis>-<sanitized name>, unique enough for one user's uploads."""
    return f"{int(time.time() * 1000)}-{secure_filename(filename)}"


def handle_photo_upload(file) -> Optional[str]:
    """
    Validate and store an uploaded plant photo.

    Args:
        file: FileStorage from request.files, or None

    Returns:
        Public URL of the stored photo, or None if no file was provided

    Raises:
        AppError(400) if the file is rejected, AppError(500) if it cannot be stored
    """
    is_valid, error, file_bytes = validate_upload_file(file)

    if error:
        raise AppError(error, 400)

    if not (is_valid and file_bytes):
        return None

    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_folder, exist_ok=True)

    stored_name = build_stored_name(file.filename)
    try:
        with open(os.path.join(upload_folder, stored_name), "wb") as fh:
            fh.write(file_bytes)
    except OSError as e:
        log_error(f"Could not store plant photo {stored_name}: {e}")
        raise AppError(GENERIC_MESSAGES["upload"], 500)

    log_info(f"Stored plant photo {stored_name}")
    return UPLOAD_URL_PREFIX + stored_name


def remove_stored_photo(photo_url: Optional[str]) -> None:
    """Delete a photo written by handle_photo_upload; other URLs are ignored."""
    if not photo_url or not photo_url.startswith(UPLOAD_URL_PREFIX):
        return

    stored_name = secure_filename(photo_url[len(UPLOAD_URL_PREFIX):])
    if not stored_name:
        return

    try:
        os.remove(os.path.join(current_app.config["UPLOAD_FOLDER"], stored_name))
    except FileNotFoundError:
        return
    except OSError as e:
        log_error(f"Could not remove plant photo {stored_name}: {e}")
        return

    log_info(f"Removed plant photo {stored_name}")
