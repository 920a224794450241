"""Local disk storage for uploaded resumes."""

import logging
import secrets
import time
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

# URL prefix under which stored files are referenced by candidates/applications
PUBLIC_PREFIX = "/uploads"


class LocalStorage:
    """Writes uploads into a single directory under generated names."""

    def __init__(self, base_path: str = "./uploads"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def unique_name(original_filename: str, prefix: str = "file") -> str:
        """``<prefix>-<millis>-<random><ext>``; only the extension of the client's name survives."""
        extension = PurePath(original_filename).suffix.lower()
        return f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"

    @staticmethod
    def public_path(stored_name: str) -> str:
        return f"{PUBLIC_PREFIX}/{stored_name}"

    def save(self, data: bytes, stored_name: str) -> str:
        """
        Write ``data`` under ``stored_name``.

        Returns:
            The public path to store on the candidate, e.g. ``/uploads/resume-...pdf``
        """
        file_path = self.base_path / stored_name
        file_path.write_bytes(data)
        logger.info(f"Saved upload to {file_path} ({len(data)} bytes)")
        return self.public_path(stored_name)
