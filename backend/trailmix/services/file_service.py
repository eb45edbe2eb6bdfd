"""
TrailMix Backend: File Storage Service
========================================

What:  Validates uploaded media and stores it under the public upload root.
How:   Each multipart field has an UploadRule (allowed MIME types, optional
       extension allow-list, size limit, target directory). Files are copied
       to disk in chunks with aiofiles; the public `/uploads/...` URL is
       returned for persistence.
Who:   Called by UserService (profile images) and TrailService (photo/video).
When:  After FastAPI has parsed the multipart body, before any database write.

Directory Structure:
    uploads/
    ├── profiles/          profile-1718000000000-123456789.jpg
    └── trails/
        ├── photos/        photo-1718000000000-987654321.png
        └── videos/        video-1718000000000-555555555.mp4

Validation order:
    1. Declared MIME type (and extension for profile images)
    2. Declared size, when the client sent one
    3. Actual size, enforced while copying; partial files are removed
"""

import logging
import os
import secrets
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple

import aiofiles
from fastapi import UploadFile

from trailmix.config import settings
from trailmix.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# Public mount point of the upload root (see main.create_app)
PUBLIC_PREFIX = "/uploads"

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class UploadRule:
    """Acceptance and placement rules for one multipart field."""

    field_name: str
    filename_prefix: str
    directory: str
    max_size: int
    type_error: str
    mime_prefixes: Tuple[str, ...] = ()
    mime_types: FrozenSet[str] = frozenset()
    extensions: FrozenSet[str] = frozenset()

    def accepts_mime(self, content_type: Optional[str]) -> bool:
        mime = (content_type or "").lower()
        if self.mime_types and mime not in self.mime_types:
            return False
        if self.mime_prefixes and not mime.startswith(self.mime_prefixes):
            return False
        return bool(mime)

    def accepts_extension(self, extension: str) -> bool:
        return not self.extensions or extension in self.extensions


@dataclass(frozen=True)
class StoredFile:
    """A file written to disk: absolute path plus its public URL."""

    path: str
    url: str
    size: int = field(default=0)


class FileService:
    """
    Manages validation and storage of uploaded trail media and profile images.

    Lifecycle of an uploaded file:
        1. validate() checks type and declared size (no disk writes)
        2. store() writes the bytes to <upload_root>/<directory>/<unique name>
        3. The returned StoredFile.url is saved in the database by the caller
        4. If the database write fails, the caller invokes cleanup_files()
    """

    def __init__(
        self,
        upload_root: Optional[str] = None,
        max_trail_media_size: Optional[int] = None,
        max_profile_image_size: Optional[int] = None,
    ):
        self.upload_root = Path(upload_root or settings.upload_root).resolve()
        media_limit = max_trail_media_size or settings.max_trail_media_size
        profile_limit = max_profile_image_size or settings.max_profile_image_size

        self.rules = {
            "photo": UploadRule(
                field_name="photo",
                filename_prefix="photo",
                directory="trails/photos",
                max_size=media_limit,
                type_error="Not an image file",
                mime_prefixes=("image/",),
            ),
            "video": UploadRule(
                field_name="video",
                filename_prefix="video",
                directory="trails/videos",
                max_size=media_limit,
                type_error="Not a video file",
                mime_prefixes=("video/",),
            ),
            "profile_image": UploadRule(
                field_name="profile_image",
                filename_prefix="profile",
                directory="profiles",
                max_size=profile_limit,
                type_error="Images only (jpeg, jpg, png)!",
                mime_types=frozenset({"image/jpeg", "image/jpg", "image/png"}),
                extensions=frozenset({".jpeg", ".jpg", ".png"}),
            ),
        }

    # ── Directory bootstrap ───────────────────────────────────────────────

    def ensure_directories(self) -> None:
        """Create the upload root and every per-field directory."""
        self.upload_root.mkdir(parents=True, exist_ok=True)
        for rule in self.rules.values():
            (self.upload_root / rule.directory).mkdir(parents=True, exist_ok=True)

    # ── Validation ────────────────────────────────────────────────────────

    def rule_for(self, field_name: str) -> UploadRule:
        try:
            return self.rules[field_name]
        except KeyError:
            raise ValidationError(message="Unexpected field", field=field_name)

    def validate_type(self, rule: UploadRule, content_type: Optional[str], filename: str) -> str:
        """
        Check declared MIME type (and extension where the rule has a list).

        Returns the normalized extension (lowercase with dot, may be empty).
        Raises ValidationError with the rule's file-type message.
        """
        extension = Path(filename or "").suffix.lower()
        if not rule.accepts_mime(content_type) or not rule.accepts_extension(extension):
            raise ValidationError(
                message=rule.type_error,
                field=rule.field_name,
                context={"content_type": content_type, "extension": extension},
            )
        return extension

    def validate_size(self, rule: UploadRule, size: Optional[int]) -> None:
        """Reject a file whose size is known and above the rule's limit."""
        if size is not None and size > rule.max_size:
            max_mb = rule.max_size / (1024 * 1024)
            raise ValidationError(
                message=f"File too large. Maximum size for {rule.field_name} is {max_mb:.0f}MB.",
                field=rule.field_name,
                context={"max_size": rule.max_size, "size": size},
            )

    def validate(self, field_name: str, upload: UploadFile) -> UploadRule:
        """Type and declared-size checks for one upload; writes nothing."""
        rule = self.rule_for(field_name)
        self.validate_type(rule, upload.content_type, upload.filename or "")
        self.validate_size(rule, upload.size)
        return rule

    # ── Storage ───────────────────────────────────────────────────────────

    def _generate_storage_path(self, rule: UploadRule, extension: str) -> Tuple[Path, str]:
        """
        Build `<prefix>-<epoch ms>-<random>` + extension inside the rule's directory.

        Returns (absolute_path, public_url).
        """
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(1_000_000_000)}"
        filename = f"{rule.filename_prefix}-{unique_suffix}{extension}"
        absolute_path = self.upload_root / rule.directory / filename
        public_url = f"{PUBLIC_PREFIX}/{rule.directory}/{filename}"
        return absolute_path, public_url

    async def store(self, field_name: str, upload: UploadFile) -> StoredFile:
        """
        Validate and write one upload to disk.

        Raises:
            ValidationError: wrong type, or size over the limit (partial file removed)
            FileStorageError: the OS refused the write
        """
        rule = self.validate(field_name, upload)
        extension = Path(upload.filename or "").suffix.lower()
        absolute_path, public_url = self._generate_storage_path(rule, extension)

        written = 0
        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            await upload.seek(0)
            async with aiofiles.open(absolute_path, "wb") as f:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > rule.max_size:
                        break
                    await f.write(chunk)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", absolute_path, str(e))
            await self.cleanup_file(str(absolute_path))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            ) from e

        if written > rule.max_size:
            await self.cleanup_file(str(absolute_path))
            self.validate_size(rule, written)

        logger.info("Stored %s upload: %s (%d bytes)", field_name, public_url, written)
        return StoredFile(path=str(absolute_path), url=public_url, size=written)

    # ── Cleanup ───────────────────────────────────────────────────────────

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a file from storage if it exists.

        Best-effort: failures are logged, never raised, so cleanup cannot
        mask the error that triggered it.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def cleanup_files(self, stored: Iterable[Optional[StoredFile]]) -> None:
        for item in stored:
            if item is not None:
                await self.cleanup_file(item.path)


def is_present(upload: Optional[UploadFile]) -> bool:
    """True when the multipart field carried an actual file."""
    return upload is not None and bool(upload.filename)


file_service = FileService()
