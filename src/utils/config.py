"""Configuration loading and validation for newsdesk."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Get the project root directory (parent of src)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Load environment variables from .env file in project root
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_GEMINI_MODEL = "gemini-2.5-pro"
DEFAULT_CHANNEL_NAME = "כאן חדשות"


@dataclass(frozen=True)
class AppConfig:
    """Process-wide settings, built once at startup and passed to each service."""

    # Gemini
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    model_timeout_seconds: float = 300.0
    channel_name: str = DEFAULT_CHANNEL_NAME

    # Scratch storage
    upload_dir: str = str(PROJECT_ROOT / "uploads")
    thumbnails_dir: str = str(PROJECT_ROOT / "thumbnails")
    max_upload_size_mb: int = 100

    # Frame extraction
    ffmpeg_path: str = "ffmpeg"
    extraction_timeout_seconds: float = 60.0
    thumbnail_max_width: int = 1920
    thumbnail_max_height: int = 1080
    thumbnail_quality: int = 2  # ffmpeg -q:v, 1-31, lower is better

    # Admission limits for blocking calls
    parallel_ai_calls: int = 5
    parallel_extractions: int = 2

    # Notion feedback store
    notion_token: str | None = None
    notion_feedback_database_id: str | None = None
    notion_timeout_seconds: float = 10.0

    # HTTP server
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))
    port: int = 3001

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def notion_configured(self) -> bool:
        return bool(self.notion_token and self.notion_feedback_database_id)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def load_config() -> AppConfig:
    """Load configuration from environment variables."""

    # Helper function to resolve paths relative to project root
    def resolve_path(path: str | None, default_relative: str) -> str:
        if not path:
            return str(PROJECT_ROOT / default_relative)
        if Path(path).is_absolute():
            return path
        return str(PROJECT_ROOT / path)

    cors_origins = tuple(
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    )

    return AppConfig(
        # Either name is accepted for the Gemini key
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        model_timeout_seconds=float(os.getenv("MODEL_TIMEOUT_SECONDS", "300")),
        channel_name=os.getenv("CHANNEL_NAME", DEFAULT_CHANNEL_NAME),
        upload_dir=resolve_path(os.getenv("UPLOAD_DIR"), "uploads"),
        thumbnails_dir=resolve_path(os.getenv("THUMBNAILS_DIR"), "thumbnails"),
        max_upload_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", "100")),
        ffmpeg_path=os.getenv("FFMPEG_PATH", "ffmpeg"),
        extraction_timeout_seconds=float(os.getenv("EXTRACTION_TIMEOUT_SECONDS", "60")),
        thumbnail_max_width=int(os.getenv("THUMBNAIL_MAX_WIDTH", "1920")),
        thumbnail_max_height=int(os.getenv("THUMBNAIL_MAX_HEIGHT", "1080")),
        thumbnail_quality=int(os.getenv("THUMBNAIL_QUALITY", "2")),
        parallel_ai_calls=int(os.getenv("PARALLEL_AI_CALLS", "5")),
        parallel_extractions=int(os.getenv("PARALLEL_EXTRACTIONS", "2")),
        notion_token=os.getenv("NOTION_TOKEN") or None,
        notion_feedback_database_id=os.getenv("NOTION_FEEDBACK_DATABASE_ID") or None,
        notion_timeout_seconds=float(os.getenv("NOTION_TIMEOUT_SECONDS", "10")),
        cors_origins=cors_origins or ("*",),
        port=int(os.getenv("PORT", "3001")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=_env_bool("LOG_JSON"),
    )


def validate_config(config: AppConfig) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []

    # Generation is unusable without a key, everything else still works
    if not config.gemini_api_key:
        errors.append("GEMINI_API_KEY (or GOOGLE_API_KEY) is required for content generation")

    if config.max_upload_size_mb <= 0:
        errors.append("MAX_UPLOAD_SIZE_MB must be positive")

    if config.model_timeout_seconds <= 0:
        errors.append("MODEL_TIMEOUT_SECONDS must be positive")

    if config.extraction_timeout_seconds <= 0:
        errors.append("EXTRACTION_TIMEOUT_SECONDS must be positive")

    if config.parallel_ai_calls < 1 or config.parallel_extractions < 1:
        errors.append("PARALLEL_AI_CALLS and PARALLEL_EXTRACTIONS must be at least 1")

    if not 1 <= config.thumbnail_quality <= 31:
        errors.append("THUMBNAIL_QUALITY must be between 1 and 31")

    # Notion needs both halves or neither
    if bool(config.notion_token) != bool(config.notion_feedback_database_id):
        errors.append(
            "NOTION_TOKEN and NOTION_FEEDBACK_DATABASE_ID must be set together "
            "(feedback will be acknowledged locally only)"
        )

    return errors


def get_supported_video_formats() -> list[str]:
    """Return list of supported video file extensions."""
    return [".mp4", ".avi", ".mov", ".mkv", ".wmv", ".flv", ".webm", ".m4v"]
