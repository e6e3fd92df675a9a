"""Notion database client for persisting editorial feedback.

Each FeedbackRecord becomes one page in a Notion database. The database is
expected to have these properties:

    Content (title), Type (select), Feedback (select), Explanation (text),
    Reporter (text), VideoDate (text), FeedbackId (text), CreatedAt (date)
"""

import logging
from typing import Optional

import httpx

from models.feedback import FeedbackRecord
from utils.errors import FeedbackBackendError

logger = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
# Notion rejects rich text segments longer than this
MAX_TEXT_LENGTH = 2000


def format_database_id(database_id: str) -> str:
    """Insert dashes into a bare 32-character Notion id."""
    if len(database_id) == 32 and "-" not in database_id:
        return (
            f"{database_id[:8]}-{database_id[8:12]}-{database_id[12:16]}-"
            f"{database_id[16:20]}-{database_id[20:]}"
        )
    return database_id


def _rich_text(value: str) -> dict:
    return {"rich_text": [{"text": {"content": value[:MAX_TEXT_LENGTH]}}]}


def build_properties(record: FeedbackRecord) -> dict:
    """Map a feedback record onto Notion page properties."""
    properties = {
        "Content": {"title": [{"text": {"content": record.content_text[:MAX_TEXT_LENGTH]}}]},
        "Type": {"select": {"name": record.content_type.replace(",", " ") or "unknown"}},
        "Feedback": {"select": {"name": record.verdict.value}},
        "FeedbackId": _rich_text(record.id),
        "CreatedAt": {"date": {"start": record.created_at.isoformat()}},
    }

    # Optional fields
    if record.explanation:
        properties["Explanation"] = _rich_text(record.explanation)
    if record.reporter:
        properties["Reporter"] = _rich_text(record.reporter)
    if record.video_date:
        properties["VideoDate"] = _rich_text(record.video_date)

    return properties


class NotionFeedbackStore:
    """Creates one Notion page per feedback record."""

    def __init__(
        self,
        token: str,
        database_id: str,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the Notion client.

        Args:
            token: Notion integration token
            database_id: Target database (dashed or bare 32-char form)
            timeout_seconds: Per-request timeout
            transport: Custom httpx transport (tests)
        """
        self.database_id = format_database_id(database_id)
        self.client = httpx.Client(
            base_url=NOTION_API_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Notion-Version": NOTION_VERSION,
                "Content-Type": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )
        logger.info(f"[NotionFeedbackStore] Initialized for database {self.database_id}")

    def create_record(self, record: FeedbackRecord) -> str:
        """Create a page for ``record``.

        Returns:
            The Notion page id

        Raises:
            FeedbackBackendError: Network failure, non-200 response or malformed reply
        """
        payload = {
            "parent": {"database_id": self.database_id},
            "properties": build_properties(record),
        }

        try:
            response = self.client.post("/pages", json=payload)
        except httpx.HTTPError as e:
            raise FeedbackBackendError(f"Notion request failed: {e}") from e

        if response.status_code != 200:
            raise FeedbackBackendError(
                f"Notion rejected feedback ({response.status_code}): {response.text[:300]}"
            )

        try:
            page_id = response.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise FeedbackBackendError(f"Unexpected Notion response: {e}") from e

        logger.debug(f"[NotionFeedbackStore] Created page {page_id} for feedback {record.id}")
        return page_id

    def close(self) -> None:
        self.client.close()
