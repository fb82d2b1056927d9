"""Local storage for medicine photos and registry CSV uploads.

Images land under ``UPLOAD_DIR/<subfolder>/<uuid><ext>`` and are served by
the ``/uploads`` static mount, so the public URL of a stored file is always
``/uploads/<subfolder>/<name>``.
"""
import logging
import re
import uuid
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Tuple
from urllib.parse import urlparse

from fastapi import HTTPException, UploadFile, status

from umutisafe.config import settings
from umutisafe.core.exceptions import BadRequestException

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"

# upload type -> (subfolder under UPLOAD_DIR, accepted extensions)
IMAGE_TARGETS: Dict[str, Tuple[str, FrozenSet[str]]] = {
    "medicine_image": ("medicine_images", frozenset({".jpg", ".jpeg", ".png"})),
}

# extension -> leading bytes every genuine file of that kind starts with
IMAGE_SIGNATURES: Dict[str, bytes] = {
    ".jpg": b"\xff\xd8\xff",
    ".jpeg": b"\xff\xd8\xff",
    ".png": b"\x89PNG\r\n\x1a\n",
}

CSV_CONTENT_TYPES = frozenset({"text/csv", "application/csv", "application/vnd.ms-excel", "text/plain"})

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def clean_filename(filename: Optional[str]) -> str:
    """Strip directories and odd characters from a client-supplied name."""
    name = _UNSAFE_NAME_CHARS.sub("_", Path(filename or "").name).lstrip(".")
    return name or "unnamed"


def extension_of(filename: Optional[str]) -> str:
    return Path(filename or "").suffix.lower()


def _read_all(upload_file: UploadFile) -> bytes:
    upload_file.file.seek(0)
    content = upload_file.file.read()
    upload_file.file.seek(0)
    return content


def check_image(upload_file: UploadFile, upload_type: str) -> Tuple[bytes, str]:
    """
    Return ``(content, extension)`` for an acceptable image upload.

    Raises:
        BadRequestException: missing or empty file, wrong extension, or
            content that does not start with the extension's signature
        HTTPException: 413 when larger than ``MAX_UPLOAD_SIZE``
    """
    if upload_type not in IMAGE_TARGETS:
        raise BadRequestException(f"Invalid upload type: {upload_type}")
    if not upload_file or not upload_file.filename:
        raise BadRequestException("No file uploaded")

    _, allowed = IMAGE_TARGETS[upload_type]
    name = clean_filename(upload_file.filename)
    ext = extension_of(name)
    if ext not in allowed:
        raise BadRequestException(f"File type not allowed. Accepted formats: {', '.join(sorted(allowed))}")

    content = _read_all(upload_file)
    if not content:
        raise BadRequestException("Empty files are not allowed")
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum: {settings.MAX_UPLOAD_SIZE / (1024 * 1024):.1f}MB",
        )
    if not content.startswith(IMAGE_SIGNATURES[ext]):
        logger.warning(f"[UPLOAD] Signature mismatch for {name} (claimed {ext})")
        raise BadRequestException("File content does not match its extension")

    return content, ext


def read_csv_upload(upload_file: UploadFile, max_size_bytes: Optional[int] = None) -> str:
    """Check a CSV upload's type and size and return its decoded text."""
    if not upload_file or not upload_file.filename:
        raise BadRequestException("Please upload a CSV file")

    if upload_file.content_type not in CSV_CONTENT_TYPES and extension_of(upload_file.filename) != ".csv":
        raise BadRequestException("Only CSV files are allowed")

    content = _read_all(upload_file)
    limit = max_size_bytes or settings.MAX_CSV_FILE_SIZE
    if len(content) > limit:
        raise BadRequestException(f"CSV file too large. Maximum: {limit / (1024 * 1024):.1f}MB")

    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Registry exports from spreadsheet tools are often cp1252
        return content.decode("latin-1")


def save_upload_file(upload_file: UploadFile, upload_type: str) -> Tuple[str, str, int]:
    """
    Validate and store an image.

    Returns:
        Tuple of (public URL, stored filename, size in bytes)
    """
    content, ext = check_image(upload_file, upload_type)
    subfolder, _ = IMAGE_TARGETS[upload_type]

    target_dir = Path(settings.UPLOAD_DIR) / subfolder
    target_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{uuid.uuid4()}{ext}"

    try:
        (target_dir / stored_name).write_bytes(content)
    except OSError as e:
        logger.error(f"[UPLOAD] Could not write {stored_name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save file. Please try again.",
        ) from e

    logger.info(f"[UPLOAD] Stored {upload_type} as {subfolder}/{stored_name} ({len(content)} bytes)")
    return f"{URL_PREFIX}/{subfolder}/{stored_name}", stored_name, len(content)


def local_path_for(file_url: Optional[str]) -> Optional[Path]:
    """
    Map a stored file's URL back onto disk.

    Accepts ``/uploads/...`` paths and absolute http(s) URLs pointing at
    one. Anything else, including paths that would escape ``UPLOAD_DIR``,
    yields None.
    """
    if not file_url:
        return None
    try:
        parsed = urlparse(file_url)
    except ValueError:
        return None
    if parsed.scheme not in ("", "http", "https"):
        return None

    path = parsed.path or ""
    if not path.startswith(URL_PREFIX + "/") or ".." in path or "\\" in path:
        return None

    root = Path(settings.UPLOAD_DIR).resolve()
    candidate = (root / path[len(URL_PREFIX) + 1:]).resolve()
    if root not in candidate.parents:
        return None
    return candidate


def delete_file(file_url: Optional[str]) -> bool:
    """Best-effort removal of a stored upload. Never raises.

    Returns True only when a file was actually removed.
    """
    try:
        path = local_path_for(file_url)
        if path is None:
            logger.warning(f"[UPLOAD] Ignoring file URL outside the upload area: {file_url!r}")
            return False
        if not path.is_file():
            logger.info(f"[UPLOAD] Nothing to delete at {path}")
            return False
        path.unlink()
        logger.info(f"[UPLOAD] Deleted {path}")
        return True
    except Exception as e:
        logger.error(f"[UPLOAD] Error deleting {file_url!r}: {e}")
        return False
