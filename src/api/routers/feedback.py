"""Editorial feedback routes for the newsdesk API."""

import asyncio
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_feedback_recorder
from api.schemas import ErrorResponse, FeedbackRequest, FeedbackResponse
from models.feedback import FeedbackSubmission
from services.feedback_recorder import FeedbackRecorder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Feedback"])


@router.post(
    "/api/feedback",
    response_model=FeedbackResponse,
    response_model_exclude_none=True,
    summary="Record feedback",
    description="Record a like/dislike on one generated suggestion. Succeeds even when the remote store is down.",
    responses={400: {"model": ErrorResponse, "description": "Malformed feedback body"}},
)
async def submit_feedback(
    body: FeedbackRequest,
    recorder: FeedbackRecorder = Depends(get_feedback_recorder),
) -> FeedbackResponse:
    """Record feedback, forwarding it to the remote store when available."""
    submission = FeedbackSubmission(
        content_type=body.content_type,
        content_text=body.content_text,
        verdict=body.feedback,
        explanation=body.explanation or None,
        reporter=body.reporter or None,
        video_date=body.video_date or None,
    )
    # The remote store call is blocking network I/O
    ack = await asyncio.to_thread(recorder.record, submission)

    message = "Feedback saved" if ack.stored_remotely else "Feedback received"
    return FeedbackResponse(
        message=message,
        feedback_id=ack.feedback_id,
        remote_id=ack.remote_id,
        note=ack.note,
    )
