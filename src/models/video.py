"""Video-related data models for the upload and extraction flows."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class VideoAsset:
    """An uploaded video persisted to scratch storage.

    Owned by exactly one request and deleted by the cleanup supervisor
    once that request's flow has finished.
    """

    path: Path  # Scratch file location
    mime_type: str  # Declared MIME type, always video/*
    size_bytes: int
    original_filename: str = ""

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs for one content-generation call."""

    reporter_name: str
    video_date: str
    video_asset: VideoAsset


@dataclass(frozen=True)
class ThumbnailExtractionJob:
    """One frame extraction: the output image outlives the request."""

    source_video_path: Path
    timestamp: str  # As supplied by the caller, e.g. "02:15.750"
    output_image_path: Path

    @property
    def output_filename(self) -> str:
        return self.output_image_path.name
