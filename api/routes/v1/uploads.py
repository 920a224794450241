"""Public resume upload for the application form."""

import logging

from fastapi import APIRouter, File, UploadFile, status

from api.schemas.jobs import ResumeUploadResponse
from core.config import settings
from core.exceptions import ValidationError
from core.storage.local import LocalStorage
from core.utils.validators import guess_name_from_filename, sanitize_filename, validate_resume_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/resume", response_model=ResumeUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_resume(resume: UploadFile = File(..., description="PDF, DOC or DOCX")):
    """
    Store a resume under a generated name. The returned ``path`` goes into
    the ``resume`` field of the application form.
    """
    original_filename = sanitize_filename(resume.filename or "")
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    # Read at most one byte past the limit.
    content = await resume.read(max_bytes + 1)

    valid, error = validate_resume_file(
        original_filename,
        resume.content_type,
        len(content),
        max_bytes,
    )
    if not valid:
        logger.info(f"Rejected resume upload {original_filename!r}: {error}")
        raise ValidationError(error, details={"filename": original_filename})

    storage = LocalStorage(settings.upload_dir)
    stored_name = storage.unique_name(original_filename, prefix="resume")
    path = storage.save(content, stored_name)

    return {
        "path": path,
        "original_filename": original_filename,
        "suggested_name": guess_name_from_filename(original_filename),
    }
