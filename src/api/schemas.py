"""Pydantic request/response models for the newsdesk API.

Wire names are camelCase (the browser client's convention); Python
attributes stay snake_case via an alias generator.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.feedback import FeedbackVerdict


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Response Models
# =============================================================================


class RootResponse(BaseModel):
    """Root endpoint response."""

    message: str
    version: str

    model_config = {"json_schema_extra": {"examples": [{"message": "Newsdesk API", "version": "1.0.0"}]}}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str

    model_config = {"json_schema_extra": {"examples": [{"status": "healthy"}]}}


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str


class ThumbnailMomentBody(CamelModel):
    timestamp: str
    description: str


class StructuredContent(CamelModel):
    """Parsed suggestions. Fields the model omitted are left out of the JSON."""

    kind: Literal["structured"] = "structured"
    summary: Optional[str] = None
    titles: Optional[list[str]] = None
    descriptions: Optional[list[str]] = None
    thumbnails: Optional[list[ThumbnailMomentBody]] = None


class RawContent(CamelModel):
    """Model text that could not be read as JSON."""

    kind: Literal["raw"] = "raw"
    raw_content: str


SuggestionContent = Annotated[Union[StructuredContent, RawContent], Field(discriminator="kind")]


class ProcessingInfo(CamelModel):
    video_size: str
    processing_time: int = Field(description="Elapsed milliseconds")
    model_used: str


class GenerateResponse(CamelModel):
    """Response of POST /api/generate."""

    success: bool = True
    content: SuggestionContent
    reporter_name: str
    video_date: str
    processing: ProcessingInfo

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "success": True,
                    "content": {
                        "kind": "structured",
                        "summary": "...",
                        "titles": ["...", "...", "..."],
                        "descriptions": ["...", "..."],
                        "thumbnails": [{"timestamp": "00:05.000", "description": "..."}],
                    },
                    "reporterName": "Dana Levi",
                    "videoDate": "2026-10-19",
                    "processing": {"videoSize": "12.5 MB", "processingTime": 41230, "modelUsed": "gemini-2.5-pro"},
                }
            ]
        },
    )


class ThumbnailResponse(CamelModel):
    """Response of POST /api/extract-thumbnail."""

    success: bool = True
    thumbnail_url: str
    timestamp: str


# =============================================================================
# Request Models
# =============================================================================


class FeedbackRequest(CamelModel):
    """Body of POST /api/feedback."""

    content_type: str = Field(min_length=1)
    content_text: str
    feedback: FeedbackVerdict
    explanation: Optional[str] = None
    reporter: Optional[str] = None
    video_date: Optional[str] = None


class FeedbackResponse(CamelModel):
    """Response of POST /api/feedback."""

    success: bool = True
    message: str
    feedback_id: str
    remote_id: Optional[str] = None
    note: Optional[str] = None
