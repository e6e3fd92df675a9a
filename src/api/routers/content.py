"""Content generation and thumbnail extraction routes for the newsdesk API."""

import asyncio
import logging
import time

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.dependencies import (
    get_ai_slots,
    get_content_generator,
    get_extraction_slots,
    get_frame_extractor,
    get_upload_ingestor,
)
from api.schemas import ErrorResponse, GenerateResponse, ProcessingInfo, ThumbnailResponse
from models.video import GenerationRequest, VideoAsset
from services.cleanup import ScratchVideo
from services.content_generator import ContentGenerator
from services.frame_extractor import FrameExtractor
from services.upload_ingestor import UploadIngestor
from utils.errors import ValidationError
from utils.formatting import elapsed_ms, format_file_size

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Content"])

THUMBNAILS_ROUTE = "/api/thumbnails"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing fields, non-video upload or oversize file"},
    500: {"model": ErrorResponse, "description": "Model or ffmpeg failure"},
    504: {"model": ErrorResponse, "description": "Model or ffmpeg timed out"},
}


async def ingest_upload(video: UploadFile, ingestor: UploadIngestor) -> VideoAsset:
    """Validate and store an upload. Nothing is written if validation fails."""
    # Reject on declared metadata before pulling the body into memory
    ingestor.check(video.content_type, video.size)
    data = await video.read()
    write = asyncio.ensure_future(
        asyncio.to_thread(
            ingestor.accept,
            data,
            video.content_type,
            video.size if video.size is not None else len(data),
            video.filename or "",
        )
    )
    try:
        return await asyncio.shield(write)
    except asyncio.CancelledError:
        # The worker thread cannot be interrupted; delete its file once it lands
        write.add_done_callback(_discard_orphaned_upload)
        raise


def _discard_orphaned_upload(write: "asyncio.Future[VideoAsset]") -> None:
    if write.cancelled() or write.exception() is not None:
        return
    asset = write.result()
    logger.info(f"Request cancelled during upload, removing {asset.path.name}")
    ScratchVideo(asset).release()


@router.post(
    "/api/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    summary="Generate editorial suggestions",
    description="Upload a news video and get a summary, title options, description options and thumbnail moments.",
    responses=ERROR_RESPONSES,
)
async def generate_content(
    video: UploadFile | None = File(None),
    reporter_name: str | None = Form(None, alias="reporterName"),
    video_date: str | None = Form(None, alias="videoDate"),
    ingestor: UploadIngestor = Depends(get_upload_ingestor),
    generator: ContentGenerator = Depends(get_content_generator),
    ai_slots: asyncio.Semaphore = Depends(get_ai_slots),
) -> GenerateResponse:
    """Analyze a video with Gemini and return structured or raw suggestions."""
    if video is None or not reporter_name or not video_date:
        raise ValidationError("Missing required fields: video file, reporterName, videoDate")

    logger.info(f"Generate request: reporter={reporter_name!r} date={video_date!r} file={video.filename!r}")
    asset = await ingest_upload(video, ingestor)
    started = time.monotonic()

    with ScratchVideo(asset):
        request = GenerationRequest(reporter_name=reporter_name, video_date=video_date, video_asset=asset)
        async with ai_slots:
            suggestion = await asyncio.to_thread(generator.generate_for, request)

    processing_time = elapsed_ms(started, time.monotonic())
    logger.info(f"Generated {suggestion.kind} suggestion for {asset.path.name} in {processing_time}ms")

    return GenerateResponse(
        content=suggestion.to_dict(),
        reporter_name=reporter_name,
        video_date=video_date,
        processing=ProcessingInfo(
            video_size=format_file_size(asset.size_bytes),
            processing_time=processing_time,
            model_used=generator.model_name,
        ),
    )


@router.post(
    "/api/extract-thumbnail",
    response_model=ThumbnailResponse,
    summary="Extract a thumbnail frame",
    description="Upload the video again with a timestamp (MM:SS.mmm or seconds) and get a URL for the extracted frame.",
    responses=ERROR_RESPONSES,
)
async def extract_thumbnail(
    video: UploadFile | None = File(None),
    timestamp: str | None = Form(None),
    ingestor: UploadIngestor = Depends(get_upload_ingestor),
    extractor: FrameExtractor = Depends(get_frame_extractor),
    extraction_slots: asyncio.Semaphore = Depends(get_extraction_slots),
) -> ThumbnailResponse:
    """Extract one frame at ``timestamp``. The thumbnail outlives the request, the video does not."""
    if video is None or not timestamp:
        raise ValidationError("Missing required fields: video file, timestamp")

    logger.info(f"Thumbnail request at {timestamp!r} for {video.filename!r}")
    asset = await ingest_upload(video, ingestor)

    with ScratchVideo(asset):
        job = extractor.create_job(asset.path, timestamp)
        async with extraction_slots:
            output_path = await asyncio.to_thread(extractor.run_job, job)

    return ThumbnailResponse(
        thumbnail_url=f"{THUMBNAILS_ROUTE}/{output_path.name}",
        timestamp=timestamp,
    )
