"""Shared pytest fixtures for newsdesk tests."""

import sys
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import Mock

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def app_config(temp_dir):
    """AppConfig with scratch directories under a temp dir and no remote services."""
    from utils.config import AppConfig

    return AppConfig(
        gemini_api_key="test_gemini_key",
        gemini_model="gemini-2.5-pro",
        upload_dir=str(temp_dir / "uploads"),
        thumbnails_dir=str(temp_dir / "thumbnails"),
        max_upload_size_mb=1,
        notion_token=None,
        notion_feedback_database_id=None,
    )


@pytest.fixture
def sample_video_bytes() -> bytes:
    """Bytes standing in for an uploaded MP4."""
    return b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 1024


@pytest.fixture
def video_asset(temp_dir, sample_video_bytes):
    """A VideoAsset backed by a real scratch file."""
    from models.video import VideoAsset

    path = temp_dir / "video-1700000000000-abcdef012345.mp4"
    path.write_bytes(sample_video_bytes)
    return VideoAsset(
        path=path,
        mime_type="video/mp4",
        size_bytes=len(sample_video_bytes),
        original_filename="report.mp4",
    )


@pytest.fixture
def structured_model_reply() -> str:
    """Model reply wrapped in a markdown fence, as Gemini often returns it."""
    return """```json
{
  "summary": "ראש הממשלה נפגש עם נציגי המחאה",
  "titles": ["כותרת ראשונה", "כותרת שנייה", "כותרת שלישית"],
  "descriptions": ["תיאור ראשון", "תיאור שני"],
  "thumbnails": [
    {"timestamp": "00:05.000", "description": "פתיחת הפגישה"},
    {"timestamp": "01:12.500", "description": "לחיצת ידיים"}
  ]
}
```"""


@pytest.fixture
def mock_genai_client(structured_model_reply):
    """Mock google-genai Client whose generate_content returns a canned reply."""
    client = Mock()
    client.models.generate_content = Mock(return_value=Mock(text=structured_model_reply))
    return client
