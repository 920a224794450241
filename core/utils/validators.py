"""Validation utilities for common data types."""

import re
from pathlib import PurePath
from typing import Optional


ALLOWED_RESUME_EXTENSIONS = {".pdf", ".doc", ".docx"}

ALLOWED_RESUME_CONTENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    # Browsers sometimes fall back to this for .doc/.docx
    "application/octet-stream",
}


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename by removing dangerous characters.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    # Drop any directory component the client sent
    sanitized = PurePath(filename.replace("\\", "/")).name

    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '', sanitized)
    sanitized = sanitized.replace(' ', '_')

    if len(sanitized) > 255:
        name, ext = sanitized.rsplit('.', 1) if '.' in sanitized else (sanitized, '')
        sanitized = name[:250] + ('.' + ext if ext else '')

    return sanitized


def validate_resume_file(
    filename: str,
    content_type: Optional[str],
    size: int,
    max_size_bytes: int,
) -> tuple[bool, Optional[str]]:
    """
    Validate an uploaded resume by extension, content type and size.

    Returns:
        Tuple of (is_valid, error_message)
    """
    extension = PurePath(filename).suffix.lower()
    if extension not in ALLOWED_RESUME_EXTENSIONS:
        return False, "Invalid file type. Only PDF, DOC, and DOCX files are allowed."

    if content_type and content_type not in ALLOWED_RESUME_CONTENT_TYPES:
        return False, "Invalid file type. Only PDF, DOC, and DOCX files are allowed."

    if size == 0:
        return False, "Uploaded file is empty"

    if size > max_size_bytes:
        limit_mb = max_size_bytes // (1024 * 1024)
        return False, f"File too large. Maximum size is {limit_mb}MB."

    return True, None


def guess_name_from_filename(filename: str) -> Optional[str]:
    """
    Best-effort candidate name from a resume filename.

    "john_smith_resume.pdf" -> "John Smith". Purely cosmetic; returns None
    when nothing name-like is left after stripping common resume words.
    """
    stem = PurePath(filename).stem
    words = [w for w in re.split(r'[\s_\-.]+', stem) if w]
    noise = {"resume", "cv", "curriculum", "vitae", "final", "updated", "new"}
    words = [w for w in words if w.lower() not in noise and not w.isdigit()]

    if not words:
        return None

    return " ".join(w.capitalize() for w in words[:3])
