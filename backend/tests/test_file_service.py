"""
TrailMix Backend: File Service Unit Tests
===========================================

What:  Tests for FileService validation (MIME type, extension, size) and storage.
How:   Real UploadFile objects over in-memory bytes, written into tmp_path.

Test Strategy:
    ✅ photo accepts any image/*, video any video/*
    ✅ profile_image needs both an allowed MIME type and extension
    ✅ declared and actual size limits (partial file removed)
    ✅ generated filenames and public URLs
    ✅ cleanup never raises
"""

import io
import re
from pathlib import Path

import pytest
from starlette.datastructures import Headers, UploadFile

from trailmix.exceptions import ValidationError
from trailmix.services.file_service import FileService, is_present


def make_upload(data: bytes, filename: str, content_type: str, size=None) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data) if size is None else size,
        headers=Headers({"content-type": content_type}),
    )


class TestFileValidation:
    """Type and size checks; nothing touches the disk."""

    def setup_method(self):
        self.service = FileService(upload_root="/tmp/trailmix-unused")

    # ── Type Validation ───────────────────────────────────────────────────

    def test_photo_accepts_any_image_type(self):
        for mime in ("image/jpeg", "image/png", "image/gif", "image/webp"):
            self.service.validate("photo", make_upload(b"x", "p.bin", mime))

    def test_photo_rejects_video(self):
        with pytest.raises(ValidationError, match="Not an image file"):
            self.service.validate("photo", make_upload(b"x", "clip.mp4", "video/mp4"))

    def test_video_accepts_any_video_type(self):
        self.service.validate("video", make_upload(b"x", "clip.mov", "video/quicktime"))

    def test_video_rejects_image(self):
        with pytest.raises(ValidationError, match="Not a video file"):
            self.service.validate("video", make_upload(b"x", "p.jpg", "image/jpeg"))

    def test_missing_content_type_rejected(self):
        with pytest.raises(ValidationError):
            self.service.validate("photo", make_upload(b"x", "p.jpg", ""))

    def test_profile_image_jpeg_and_png(self):
        self.service.validate("profile_image", make_upload(b"x", "me.jpg", "image/jpeg"))
        self.service.validate("profile_image", make_upload(b"x", "me.JPEG", "image/jpeg"))
        self.service.validate("profile_image", make_upload(b"x", "me.png", "image/png"))

    def test_profile_image_gif_rejected(self):
        with pytest.raises(ValidationError, match=re.escape("Images only (jpeg, jpg, png)!")):
            self.service.validate("profile_image", make_upload(b"x", "me.gif", "image/gif"))

    def test_profile_image_extension_must_match_list(self):
        """Allowed MIME type with a disallowed extension is still rejected."""
        with pytest.raises(ValidationError):
            self.service.validate("profile_image", make_upload(b"x", "me.bmp", "image/png"))

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError, match="Unexpected field"):
            self.service.validate("document", make_upload(b"x", "a.pdf", "application/pdf"))

    # ── Size Validation ───────────────────────────────────────────────────

    def test_declared_size_over_profile_limit(self):
        upload = make_upload(b"x", "me.png", "image/png", size=5 * 1024 * 1024 + 1)
        with pytest.raises(ValidationError, match="too large"):
            self.service.validate("profile_image", upload)

    def test_declared_size_at_limit_passes(self):
        upload = make_upload(b"x", "me.png", "image/png", size=5 * 1024 * 1024)
        self.service.validate("profile_image", upload)

    def test_unknown_size_is_not_rejected_up_front(self):
        rule = self.service.rule_for("photo")
        self.service.validate_size(rule, None)


class TestFileStorage:

    @pytest.mark.asyncio
    async def test_store_photo_writes_file_and_returns_public_url(self, tmp_path, sample_image_bytes):
        service = FileService(upload_root=str(tmp_path))
        stored = await service.store("photo", make_upload(sample_image_bytes, "summit.JPG", "image/jpeg"))

        assert re.fullmatch(r"/uploads/trails/photos/photo-\d+-\d+\.jpg", stored.url)
        assert Path(stored.path).read_bytes() == sample_image_bytes
        assert Path(stored.path).parent == tmp_path / "trails" / "photos"
        assert stored.size == len(sample_image_bytes)

    @pytest.mark.asyncio
    async def test_store_profile_image_uses_profile_prefix(self, tmp_path, sample_image_bytes):
        service = FileService(upload_root=str(tmp_path))
        stored = await service.store("profile_image", make_upload(sample_image_bytes, "me.png", "image/png"))

        assert stored.url.startswith("/uploads/profiles/profile-")
        assert stored.url.endswith(".png")

    @pytest.mark.asyncio
    async def test_store_removes_partial_file_when_actual_size_exceeds_limit(self, tmp_path):
        """Client under-declared the size; the copy loop catches it."""
        service = FileService(upload_root=str(tmp_path), max_profile_image_size=10)
        upload = make_upload(b"x" * 64, "me.png", "image/png", size=1)

        with pytest.raises(ValidationError, match="too large"):
            await service.store("profile_image", upload)

        assert list((tmp_path / "profiles").iterdir()) == []

    @pytest.mark.asyncio
    async def test_generated_names_are_unique(self, tmp_path, sample_image_bytes):
        service = FileService(upload_root=str(tmp_path))
        first = await service.store("photo", make_upload(sample_image_bytes, "a.jpg", "image/jpeg"))
        second = await service.store("photo", make_upload(sample_image_bytes, "a.jpg", "image/jpeg"))
        assert first.url != second.url

    def test_ensure_directories(self, tmp_path):
        service = FileService(upload_root=str(tmp_path / "uploads"))
        service.ensure_directories()
        assert (tmp_path / "uploads" / "profiles").is_dir()
        assert (tmp_path / "uploads" / "trails" / "photos").is_dir()
        assert (tmp_path / "uploads" / "trails" / "videos").is_dir()

    # ── Cleanup ───────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, tmp_path):
        test_file = tmp_path / "test.jpg"
        test_file.write_bytes(b"test content")

        await FileService(upload_root=str(tmp_path)).cleanup_file(str(test_file))
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        await FileService(upload_root=str(tmp_path)).cleanup_file(str(tmp_path / "nonexistent.jpg"))

    @pytest.mark.asyncio
    async def test_cleanup_files_skips_none(self, tmp_path):
        await FileService(upload_root=str(tmp_path)).cleanup_files([None, None])


def test_is_present():
    assert not is_present(None)
    assert not is_present(make_upload(b"", "", "application/octet-stream"))
    assert is_present(make_upload(b"x", "a.jpg", "image/jpeg"))
