"""Single-frame thumbnail extraction using FFmpeg.

Turns an editor-facing timestamp ("02:15.750" or "90") into a seek offset
and asks ffmpeg for exactly one frame, scaled to fit 1920x1080. Output is
written to a ``.partial`` file in a sibling directory (outside the served
thumbnails directory) and only moved into place once ffmpeg has
succeeded and produced a non-empty image. A failed extraction therefore
never leaves a corrupt thumbnail behind.
"""

import logging
import math
import os
import secrets
import subprocess
import time
from pathlib import Path
from typing import Optional

from models.video import ThumbnailExtractionJob
from utils.errors import ExtractionError, ExtractionTimeoutError, TimestampParseError

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".partial"


def partial_path_for(final_path: Path) -> Path:
    """Where ffmpeg writes before the commit: ``<dir>.partial/<stem>.partial<ext>`` next to ``<dir>``."""
    output_dir = final_path.parent.resolve()
    staging_dir = output_dir.with_name(output_dir.name + PARTIAL_SUFFIX)
    return staging_dir / (final_path.stem + PARTIAL_SUFFIX + final_path.suffix)


def parse_timestamp(timestamp: str) -> float:
    """Convert a timestamp string to seconds.

    ``MM:SS[.fraction]`` (exactly one colon) becomes ``minutes * 60 + seconds``;
    neither part may be signed and seconds must be below 60.
    Anything else is read as a plain number of seconds.

    Args:
        timestamp: e.g. "02:15.750", "2:05", "90", "12.5"

    Returns:
        Offset in seconds

    Raises:
        TimestampParseError: Empty, non-numeric, NaN, infinite or negative input
    """
    if not isinstance(timestamp, str) or not timestamp.strip():
        raise TimestampParseError("Timestamp is empty")

    text = timestamp.strip()
    parts = text.split(":")
    try:
        if len(parts) == 2:
            minutes, seconds = (float(part) for part in parts)
            if any(part.strip().startswith(("-", "+")) for part in parts) or not seconds < 60:
                raise TimestampParseError(f"Invalid MM:SS timestamp: {timestamp!r}")
            value = minutes * 60 + seconds
        else:
            value = float(text)
    except ValueError:
        raise TimestampParseError(f"Invalid timestamp: {timestamp!r}") from None

    if math.isnan(value) or math.isinf(value):
        raise TimestampParseError(f"Invalid timestamp: {timestamp!r}")
    if value < 0:
        raise TimestampParseError(f"Timestamp must not be negative: {timestamp!r}")

    return value


class FrameExtractor:
    """Extracts still frames from videos into the thumbnails directory."""

    def __init__(
        self,
        output_dir: str | Path,
        ffmpeg_path: str = "ffmpeg",
        timeout_seconds: float = 60.0,
        max_width: int = 1920,
        max_height: int = 1080,
        quality: int = 2,
    ):
        """Initialize frame extractor.

        Args:
            output_dir: Directory for extracted thumbnails, created lazily
            ffmpeg_path: ffmpeg executable
            timeout_seconds: Kill ffmpeg after this long
            max_width: Scale down to fit this width, preserving aspect ratio
            max_height: Scale down to fit this height, preserving aspect ratio
            quality: JPEG quality for -q:v (1-31, lower is better)
        """
        self.output_dir = Path(output_dir)
        self.ffmpeg_path = ffmpeg_path
        self.timeout_seconds = timeout_seconds
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality

    def new_output_path(self) -> Path:
        """Return a fresh, never-shared thumbnail path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        unique_suffix = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"
        return self.output_dir / f"thumbnail-{unique_suffix}.jpg"

    def create_job(self, video_path: str | Path, timestamp: str) -> ThumbnailExtractionJob:
        return ThumbnailExtractionJob(
            source_video_path=Path(video_path),
            timestamp=timestamp,
            output_image_path=self.new_output_path(),
        )

    def run_job(self, job: ThumbnailExtractionJob) -> Path:
        return self.extract_frame(job.source_video_path, job.timestamp, job.output_image_path)

    def build_command(self, video_path: Path, offset_seconds: float, output_path: Path) -> list[str]:
        # -ss before -i for fast input seeking
        return [
            self.ffmpeg_path,
            "-y",
            "-v",
            "error",
            "-ss",
            f"{offset_seconds:.3f}",
            "-i",
            str(video_path),
            "-frames:v",
            "1",
            "-vf",
            f"scale={self.max_width}:{self.max_height}:force_original_aspect_ratio=decrease",
            "-q:v",
            str(self.quality),
            "-f",
            "image2",
            "-update",
            "1",
            str(output_path),
        ]

    def extract_frame(
        self,
        video_path: str | Path,
        timestamp: str,
        output_path: Optional[str | Path] = None,
    ) -> Path:
        """Extract the frame at ``timestamp`` into a JPEG.

        Args:
            video_path: Source video
            timestamp: "MM:SS[.fff]" or seconds
            output_path: Destination image; a unique path is generated when omitted

        Returns:
            Path of the written image

        Raises:
            TimestampParseError: The timestamp is unusable; ffmpeg is not started
            ExtractionTimeoutError: ffmpeg exceeded timeout_seconds
            ExtractionError: ffmpeg failed or produced no image (e.g. seek past the end)
        """
        offset = parse_timestamp(timestamp)
        source = Path(video_path)
        final_path = Path(output_path) if output_path is not None else self.new_output_path()
        final_path.parent.mkdir(parents=True, exist_ok=True)
        partial_path = partial_path_for(final_path)
        partial_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(source, offset, partial_path)

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, errors="replace", timeout=self.timeout_seconds
            )
        except subprocess.TimeoutExpired:
            partial_path.unlink(missing_ok=True)
            error_msg = f"FFmpeg frame extraction timed out after {self.timeout_seconds:.0f}s"
            logger.error(error_msg)
            raise ExtractionTimeoutError(error_msg) from None
        except OSError as e:
            partial_path.unlink(missing_ok=True)
            error_msg = f"Could not run ffmpeg ({self.ffmpeg_path}): {e}"
            logger.error(error_msg)
            raise ExtractionError(error_msg) from e

        if result.returncode != 0:
            partial_path.unlink(missing_ok=True)
            stderr = (result.stderr or "").strip()
            error_msg = f"FFmpeg failed at {timestamp} (exit {result.returncode}): {stderr[-500:]}"
            logger.error(error_msg)
            raise ExtractionError(error_msg)

        # ffmpeg exits 0 with no output when seeking past the last frame
        if not partial_path.exists() or partial_path.stat().st_size == 0:
            partial_path.unlink(missing_ok=True)
            error_msg = f"No frame at {timestamp} ({offset:.3f}s); is it beyond the end of the video?"
            logger.error(error_msg)
            raise ExtractionError(error_msg)

        os.replace(partial_path, final_path)
        logger.info(f"Extracted frame at {timestamp} ({offset:.3f}s) -> {final_path.name}")
        return final_path
