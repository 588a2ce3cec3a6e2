"""Local disk storage for uploaded attachments and profile pictures."""

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile, status

from codelogs.config import get_settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MAX_FILENAME_LENGTH = 255
STORED_STEM_LENGTH = 100

IMAGE_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "gif"})
ATTACHMENT_EXTENSIONS = IMAGE_EXTENSIONS | {"pdf", "txt", "doc", "docx", "zip"}


@dataclass
class StoredFile:
    """An upload written to disk."""

    path: Path
    url: str
    original_name: str
    size: int


class UploadStorage:
    """Streams uploads to a directory served statically at ``url_path``."""

    def __init__(self, upload_dir: str | Path, url_path: str, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.url_path = url_path.rstrip("/")
        self.max_bytes = max_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        upload: UploadFile,
        allowed_extensions: frozenset[str] = ATTACHMENT_EXTENSIONS,
        image_only: bool = False,
    ) -> StoredFile:
        """Validate and write an upload, returning where it landed.

        Raises 400 for a disallowed type or a file over ``max_bytes``; a
        partially written file is removed first.
        """
        original_name = Path(upload.filename or "").name
        extension = Path(original_name).suffix.lower().lstrip(".")

        if image_only and not (upload.content_type or "").startswith("image/"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only image files are allowed.",
            )
        if not original_name or extension not in allowed_extensions:
            allowed = ", ".join(sorted(allowed_extensions))
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File type not allowed. Allowed types: {allowed}.",
            )
        if len(original_name) > MAX_FILENAME_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File name must be at most {MAX_FILENAME_LENGTH} characters.",
            )

        # Stem is shortened so the prefixed name stays within filesystem limits
        stem = Path(original_name).stem[:STORED_STEM_LENGTH]
        stored_name = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}-{stem}.{extension}"
        path = self.upload_dir / stored_name

        size = 0
        too_large = False
        with path.open("wb") as out:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    too_large = True
                    break
                out.write(chunk)

        if too_large:
            path.unlink(missing_ok=True)
            logger.warning(f"Rejected upload '{original_name}' over {self.max_bytes} bytes")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)} MB.",
            )

        logger.info(f"Stored upload '{original_name}' as {stored_name} ({size} bytes)")
        return StoredFile(
            path=path,
            url=f"{self.url_path}/{stored_name}",
            original_name=original_name,
            size=size,
        )

    def delete(self, stored: StoredFile) -> None:
        """Remove a stored file, ignoring one that is already gone."""
        stored.path.unlink(missing_ok=True)

    def delete_url(self, url: str | None) -> None:
        """Remove the file behind a public upload URL.

        URLs outside ``url_path`` are left alone.
        """
        prefix = f"{self.url_path}/"
        if not url or not url.startswith(prefix):
            return
        name = Path(url[len(prefix) :]).name
        if name:
            (self.upload_dir / name).unlink(missing_ok=True)


def get_upload_storage() -> UploadStorage:
    """Build storage from settings."""
    settings = get_settings()
    return UploadStorage(settings.upload_dir, settings.uploads_url_path, settings.max_upload_bytes)
