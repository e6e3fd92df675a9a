"""Feedback recorder for editor approvals and rejections.

Submission is best-effort: the record is built locally first, then
forwarded to the remote store. A remote failure is logged with the full
record for later reconciliation, and the caller still gets a success.
"""

import logging
from typing import Optional, Protocol

from models.feedback import FeedbackAcknowledgment, FeedbackRecord, FeedbackSubmission
from utils.errors import FeedbackBackendError

logger = logging.getLogger(__name__)


class FeedbackStore(Protocol):
    """Remote structured-record store (e.g., NotionFeedbackStore)."""

    def create_record(self, record: FeedbackRecord) -> str:
        """Persist the record and return the store's identifier for it."""
        ...


class FeedbackRecorder:
    """Records feedback locally and forwards it to an optional remote store."""

    def __init__(self, store: Optional[FeedbackStore] = None):
        """Initialize the feedback recorder.

        Args:
            store: Remote store; None when it is not configured
        """
        self.store = store
        if store is None:
            logger.warning("[FeedbackRecorder] No remote store configured; feedback is acknowledged locally only")

    def record(self, submission: FeedbackSubmission) -> FeedbackAcknowledgment:
        """Record one piece of feedback.

        Args:
            submission: Caller-supplied fields

        Returns:
            Acknowledgment with the local id, plus the remote id when the store accepted it
        """
        record = FeedbackRecord.from_submission(submission)
        logger.info(
            f"[FeedbackRecorder] {record.verdict.value} on {record.content_type} "
            f"(id={record.id}, reporter={record.reporter or '-'})"
        )

        if self.store is None:
            return FeedbackAcknowledgment(
                feedback_id=record.id,
                note="Remote feedback store not configured; feedback kept locally",
                record=record,
            )

        try:
            remote_id = self.store.create_record(record)
        except FeedbackBackendError as e:
            logger.warning(f"[FeedbackRecorder] Remote store failed, needs reconciliation: {e} record={record.to_dict()}")
            return FeedbackAcknowledgment(
                feedback_id=record.id,
                note=f"Remote feedback store unavailable: {e.message}",
                record=record,
            )

        return FeedbackAcknowledgment(
            feedback_id=record.id,
            remote_id=remote_id,
            stored_remotely=True,
            record=record,
        )
