"""Service construction and dependency injection for the newsdesk API.

Services are built once from the AppConfig handed to ``create_app`` and kept
on ``app.state``. Routes reach them through the getters below, and tests
swap them out with ``app.dependency_overrides``.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from services.content_generator import ContentGenerator
from services.feedback_recorder import FeedbackRecorder
from services.frame_extractor import FrameExtractor
from services.notion_store import NotionFeedbackStore
from services.upload_ingestor import UploadIngestor
from utils.config import AppConfig


@dataclass
class ServiceContainer:
    """Everything the routes need, wired from one AppConfig."""

    config: AppConfig
    upload_ingestor: UploadIngestor
    content_generator: ContentGenerator
    frame_extractor: FrameExtractor
    feedback_recorder: FeedbackRecorder
    ai_slots: asyncio.Semaphore
    extraction_slots: asyncio.Semaphore
    notion_store: Optional[NotionFeedbackStore] = None

    def close(self) -> None:
        if self.notion_store is not None:
            self.notion_store.close()


def build_services(config: AppConfig) -> ServiceContainer:
    """Create the service singletons for one application instance."""
    notion_store = None
    if config.notion_configured:
        notion_store = NotionFeedbackStore(
            token=config.notion_token,
            database_id=config.notion_feedback_database_id,
            timeout_seconds=config.notion_timeout_seconds,
        )

    return ServiceContainer(
        config=config,
        upload_ingestor=UploadIngestor(
            upload_dir=config.upload_dir,
            max_size_bytes=config.max_upload_size_bytes,
        ),
        content_generator=ContentGenerator(
            api_key=config.gemini_api_key,
            model_name=config.gemini_model,
            timeout_seconds=config.model_timeout_seconds,
            channel_name=config.channel_name,
        ),
        frame_extractor=FrameExtractor(
            output_dir=config.thumbnails_dir,
            ffmpeg_path=config.ffmpeg_path,
            timeout_seconds=config.extraction_timeout_seconds,
            max_width=config.thumbnail_max_width,
            max_height=config.thumbnail_max_height,
            quality=config.thumbnail_quality,
        ),
        feedback_recorder=FeedbackRecorder(store=notion_store),
        ai_slots=asyncio.Semaphore(config.parallel_ai_calls),
        extraction_slots=asyncio.Semaphore(config.parallel_extractions),
        notion_store=notion_store,
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_upload_ingestor(request: Request) -> UploadIngestor:
    """Get the upload ingestor instance."""
    return get_services(request).upload_ingestor


def get_content_generator(request: Request) -> ContentGenerator:
    """Get the content generator instance."""
    return get_services(request).content_generator


def get_frame_extractor(request: Request) -> FrameExtractor:
    """Get the frame extractor instance."""
    return get_services(request).frame_extractor


def get_feedback_recorder(request: Request) -> FeedbackRecorder:
    """Get the feedback recorder instance."""
    return get_services(request).feedback_recorder


def get_ai_slots(request: Request) -> asyncio.Semaphore:
    """Admission limit for concurrent Gemini calls."""
    return get_services(request).ai_slots


def get_extraction_slots(request: Request) -> asyncio.Semaphore:
    """Admission limit for concurrent ffmpeg runs."""
    return get_services(request).extraction_slots
