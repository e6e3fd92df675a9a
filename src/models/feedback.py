"""Data models for editorial feedback on generated suggestions.

Each like/dislike on a title, description, summary or thumbnail becomes one
immutable FeedbackRecord. Records are forwarded to the remote store on a
best-effort basis.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class FeedbackVerdict(str, Enum):
    """Approve/reject verdict on a single suggestion."""

    LIKE = "like"
    DISLIKE = "dislike"


@dataclass(frozen=True)
class FeedbackSubmission:
    """Caller-supplied feedback fields, before an id is assigned."""

    content_type: str
    """Which suggestion was rated: 'title', 'description', 'summary', 'thumbnail'."""

    content_text: str
    """The rated suggestion text."""

    verdict: FeedbackVerdict

    explanation: Optional[str] = None
    """Free-text reason given by the editor."""

    reporter: Optional[str] = None
    video_date: Optional[str] = None


@dataclass(frozen=True)
class FeedbackRecord:
    """A recorded piece of feedback. Never mutated after creation."""

    id: str
    content_type: str
    content_text: str
    verdict: FeedbackVerdict
    created_at: datetime
    explanation: Optional[str] = None
    reporter: Optional[str] = None
    video_date: Optional[str] = None

    @classmethod
    def from_submission(cls, submission: FeedbackSubmission) -> "FeedbackRecord":
        """Create a record with a fresh local id and UTC timestamp."""
        return cls(
            id=str(uuid.uuid4()),
            content_type=submission.content_type,
            content_text=submission.content_text,
            verdict=submission.verdict,
            created_at=datetime.now(timezone.utc),
            explanation=submission.explanation,
            reporter=submission.reporter,
            video_date=submission.video_date,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "content_type": self.content_type,
            "content_text": self.content_text,
            "verdict": self.verdict.value,
            "created_at": self.created_at.isoformat(),
            "explanation": self.explanation,
            "reporter": self.reporter,
            "video_date": self.video_date,
        }


@dataclass(frozen=True)
class FeedbackAcknowledgment:
    """Result of recording feedback. Always a success from the caller's view."""

    feedback_id: str
    remote_id: Optional[str] = None
    stored_remotely: bool = False
    note: Optional[str] = None
    record: Optional[FeedbackRecord] = field(default=None, compare=False, repr=False)
