"""Upload ingestion: validate an inbound video and persist it to scratch storage."""

import logging
import mimetypes
import secrets
import time
from pathlib import Path

from models.video import VideoAsset
from utils.config import get_supported_video_formats
from utils.errors import ValidationError
from utils.formatting import format_file_size

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024  # 100MB


class UploadIngestor:
    """Validates uploads and writes accepted videos under collision-free names.

    Names are ``video-<epoch ms>-<random hex><ext>``. Concurrent requests
    therefore never share a scratch file and no locking is needed.
    """

    def __init__(self, upload_dir: str | Path, max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES):
        """Initialize the ingestor.

        Args:
            upload_dir: Scratch directory, created on first accepted upload
            max_size_bytes: Largest accepted upload
        """
        self.upload_dir = Path(upload_dir)
        self.max_size_bytes = max_size_bytes

    def check(self, declared_mime: str | None, declared_size: int | None) -> None:
        """Reject an upload from its declared metadata alone.

        Raises:
            ValidationError: If the MIME type is not video/* or the size is over the limit
        """
        if not declared_mime or not declared_mime.startswith("video/"):
            raise ValidationError(f"Only video files are allowed (got {declared_mime or 'unknown type'})")

        if declared_size is not None and declared_size > self.max_size_bytes:
            raise ValidationError(
                f"Video is too large: {format_file_size(declared_size)} "
                f"(limit {format_file_size(self.max_size_bytes)})"
            )

    def accept(
        self,
        file_bytes: bytes,
        declared_mime: str | None,
        declared_size: int | None = None,
        original_filename: str = "",
    ) -> VideoAsset:
        """Validate and persist an uploaded video.

        Args:
            file_bytes: Raw upload body
            declared_mime: MIME type sent by the client
            declared_size: Size sent by the client; the body length when omitted
            original_filename: Client filename, used only for its extension

        Returns:
            VideoAsset pointing at the new scratch file

        Raises:
            ValidationError: On a non-video MIME type or an oversize upload.
                Nothing is written in that case.
        """
        size = declared_size if declared_size is not None else len(file_bytes)
        self.check(declared_mime, size)
        # The body itself must also respect the limit
        self.check(declared_mime, len(file_bytes))

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / self._scratch_name(original_filename, declared_mime)

        # "xb" fails instead of overwriting if a name ever repeats
        with path.open("xb") as f:
            f.write(file_bytes)

        logger.info(
            f"[UploadIngestor] Stored {original_filename or 'upload'} as {path.name} "
            f"({format_file_size(len(file_bytes))}, {declared_mime})"
        )

        return VideoAsset(
            path=path,
            mime_type=declared_mime,
            size_bytes=len(file_bytes),
            original_filename=original_filename,
        )

    @staticmethod
    def _scratch_name(original_filename: str, mime_type: str) -> str:
        extension = Path(original_filename).suffix.lower() if original_filename else ""
        if extension not in get_supported_video_formats():
            extension = mimetypes.guess_extension(mime_type) or extension
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"
        return f"video-{unique_suffix}{extension}"
