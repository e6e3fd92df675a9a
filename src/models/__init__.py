# Data models for newsdesk
from .video import VideoAsset, GenerationRequest, ThumbnailExtractionJob
from .suggestion import ContentSuggestion, RawSuggestion, StructuredSuggestion, ThumbnailMoment
from .feedback import (
    FeedbackAcknowledgment,
    FeedbackRecord,
    FeedbackSubmission,
    FeedbackVerdict,
)

__all__ = [
    "VideoAsset",
    "GenerationRequest",
    "ThumbnailExtractionJob",
    # Content generation results
    "ContentSuggestion",
    "StructuredSuggestion",
    "RawSuggestion",
    "ThumbnailMoment",
    # Feedback
    "FeedbackSubmission",
    "FeedbackRecord",
    "FeedbackVerdict",
    "FeedbackAcknowledgment",
]
