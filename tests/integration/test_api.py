"""Integration tests for the newsdesk HTTP API.

The Gemini client and ffmpeg are faked; everything else (upload ingestion,
scratch cleanup, parsing, error mapping, static thumbnails) runs for real.
"""

import dataclasses
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import Mock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_content_generator, get_feedback_recorder
from api.server import create_app
from services.content_generator import ContentGenerator
from services.feedback_recorder import FeedbackRecorder
from services.notion_store import NotionFeedbackStore


def fake_ffmpeg(cmd, **kwargs):
    Path(cmd[-1]).write_bytes(b"\xff\xd8fake-jpeg")
    return Mock(returncode=0, stderr="", stdout="")


@pytest.fixture
def app(app_config, mock_genai_client):
    app = create_app(app_config)
    generator = ContentGenerator(api_key="test_key", model_name=app_config.gemini_model, client=mock_genai_client)
    app.dependency_overrides[get_content_generator] = lambda: generator
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upload_dir(app_config) -> Path:
    return Path(app_config.upload_dir)


def scratch_files(upload_dir: Path) -> list[Path]:
    return list(upload_dir.iterdir()) if upload_dir.exists() else []


def video_upload(data: bytes, mime: str = "video/mp4", name: str = "report.mp4") -> dict:
    return {"video": (name, data, mime)}


class InFlightCounter:
    """Wraps a blocking call and records the most calls seen running at once."""

    def __init__(self, func, delay: float = 0.2):
        self.func = func
        self.delay = delay
        self.current = 0
        self.peak = 0
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            self.current += 1
            self.calls += 1
            self.peak = max(self.peak, self.current)
        try:
            time.sleep(self.delay)
            return self.func(*args, **kwargs)
        finally:
            with self._lock:
                self.current -= 1


def post_concurrently(client: TestClient, count: int, **request) -> list[httpx.Response]:
    with ThreadPoolExecutor(max_workers=count) as pool:
        futures = [pool.submit(client.post, **request) for _ in range(count)]
        return [future.result() for future in futures]


@pytest.mark.integration
class TestMetaEndpoints:
    """Tests for root, health, CORS and request ids."""

    def test_health(self, client):
        """Test the health check."""
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        """Test the root banner."""
        assert client.get("/").json()["message"] == "Newsdesk API"

    def test_request_id_is_echoed(self, client):
        """Test a caller-supplied request id is echoed back."""
        response = client.get("/api/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_is_generated(self, client):
        """Test a request id is generated when none is sent."""
        assert client.get("/api/health").headers["X-Request-ID"]

    def test_cors(self, client):
        """Test CORS allows any origin."""
        response = client.get("/api/health", headers={"Origin": "https://editor.example"})
        assert response.headers["access-control-allow-origin"] == "*"

    def test_unknown_route_uses_error_body(self, client):
        """Test unknown routes use the error body shape."""
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert "error" in response.json()


@pytest.mark.integration
class TestGenerateEndpoint:
    """Tests for POST /api/generate."""

    def test_structured_content(self, client, sample_video_bytes, upload_dir):
        """Test a structured reply with processing info and scratch cleanup."""
        response = client.post(
            "/api/generate",
            files=video_upload(sample_video_bytes),
            data={"reporterName": "דנה לוי", "videoDate": "19.10.2026"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["reporterName"] == "דנה לוי"
        assert body["videoDate"] == "19.10.2026"
        assert body["content"]["kind"] == "structured"
        assert len(body["content"]["titles"]) == 3
        assert body["content"]["thumbnails"][0] == {"timestamp": "00:05.000", "description": "פתיחת הפגישה"}
        assert body["processing"]["modelUsed"] == "gemini-2.5-pro"
        assert body["processing"]["videoSize"] == "1.01 KB"
        assert isinstance(body["processing"]["processingTime"], int)
        assert scratch_files(upload_dir) == []

    def test_raw_content(self, client, mock_genai_client, sample_video_bytes, upload_dir):
        """Test a prose reply is returned as raw content."""
        mock_genai_client.models.generate_content.return_value = Mock(text="Plain prose reply")

        response = client.post(
            "/api/generate",
            files=video_upload(sample_video_bytes),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.status_code == 200
        assert response.json()["content"] == {"kind": "raw", "rawContent": "Plain prose reply"}
        assert scratch_files(upload_dir) == []

    def test_partial_structured_content_omits_missing_fields(self, client, mock_genai_client, sample_video_bytes):
        """Test absent fields are left out of the response."""
        mock_genai_client.models.generate_content.return_value = Mock(text='{"summary": "only a summary"}')

        response = client.post(
            "/api/generate",
            files=video_upload(sample_video_bytes),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.json()["content"] == {"kind": "structured", "summary": "only a summary"}

    def test_missing_fields(self, client, sample_video_bytes, upload_dir):
        """Test missing form fields are a 400 and nothing is stored."""
        response = client.post("/api/generate", files=video_upload(sample_video_bytes), data={"reporterName": "Dana"})

        assert response.status_code == 400
        assert "Missing required fields" in response.json()["error"]
        assert scratch_files(upload_dir) == []

    def test_missing_video(self, client):
        """Test a request without a video is a 400."""
        response = client.post("/api/generate", data={"reporterName": "Dana", "videoDate": "2026-10-19"})
        assert response.status_code == 400

    def test_non_video_upload(self, client, mock_genai_client, upload_dir):
        """Test a non-video upload is rejected before the model is called."""
        response = client.post(
            "/api/generate",
            files=video_upload(b"\x89PNG", mime="image/png", name="photo.png"),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.status_code == 400
        assert "Only video files" in response.json()["error"]
        assert scratch_files(upload_dir) == []
        mock_genai_client.models.generate_content.assert_not_called()

    def test_oversize_upload(self, client, upload_dir):
        """Test an upload over the size limit is rejected."""
        response = client.post(
            "/api/generate",
            files=video_upload(b"x" * (1024 * 1024 + 1)),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.status_code == 400
        assert "too large" in response.json()["error"]
        assert scratch_files(upload_dir) == []

    def test_model_failure_deletes_scratch_file(self, client, mock_genai_client, sample_video_bytes, upload_dir):
        """Test a model failure is a 500 and the scratch file is removed."""
        mock_genai_client.models.generate_content.side_effect = RuntimeError("quota exceeded")

        response = client.post(
            "/api/generate",
            files=video_upload(sample_video_bytes),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.status_code == 500
        assert "quota exceeded" in response.json()["error"]
        assert scratch_files(upload_dir) == []

    def test_model_timeout(self, client, mock_genai_client, sample_video_bytes, upload_dir):
        """Test a model timeout is a 504."""
        mock_genai_client.models.generate_content.side_effect = httpx.ReadTimeout("timed out")

        response = client.post(
            "/api/generate",
            files=video_upload(sample_video_bytes),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.status_code == 504
        assert scratch_files(upload_dir) == []

    def test_lone_surrogate_in_reply_is_still_served(self, client, mock_genai_client, sample_video_bytes, upload_dir):
        """Test an unpaired \\ud800 escape in the model's JSON does not break the response."""
        mock_genai_client.models.generate_content.return_value = Mock(
            text='{"summary": "bad \\ud800 escape", "titles": ["t"]}'
        )

        response = client.post(
            "/api/generate",
            files=video_upload(sample_video_bytes),
            data={"reporterName": "Dana", "videoDate": "2026-10-19"},
        )

        assert response.status_code == 200
        assert response.json()["content"] == {"kind": "structured", "summary": "bad ? escape", "titles": ["t"]}
        assert scratch_files(upload_dir) == []

    def test_parallel_ai_calls_limit(self, app_config, mock_genai_client, sample_video_bytes, upload_dir):
        """Test PARALLEL_AI_CALLS=1 lets only one model call run at a time."""
        counter = InFlightCounter(mock_genai_client.models.generate_content)
        mock_genai_client.models.generate_content = Mock(side_effect=counter)
        app = create_app(dataclasses.replace(app_config, parallel_ai_calls=1))
        generator = ContentGenerator(api_key="test_key", client=mock_genai_client)
        app.dependency_overrides[get_content_generator] = lambda: generator

        with TestClient(app) as client:
            responses = post_concurrently(
                client,
                3,
                url="/api/generate",
                files=video_upload(sample_video_bytes),
                data={"reporterName": "Dana", "videoDate": "2026-10-19"},
            )

        assert [response.status_code for response in responses] == [200, 200, 200]
        assert counter.calls == 3
        assert counter.peak == 1
        assert scratch_files(upload_dir) == []


@pytest.mark.integration
class TestExtractThumbnailEndpoint:
    """Tests for POST /api/extract-thumbnail."""

    def test_extracts_and_serves_thumbnail(self, client, sample_video_bytes, upload_dir, app_config):
        """Test a frame is extracted, committed and served statically."""
        with patch("services.frame_extractor.subprocess.run", side_effect=fake_ffmpeg):
            response = client.post(
                "/api/extract-thumbnail",
                files=video_upload(sample_video_bytes),
                data={"timestamp": "02:15.750"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["timestamp"] == "02:15.750"
        assert body["thumbnailUrl"].startswith("/api/thumbnails/thumbnail-")
        assert scratch_files(upload_dir) == []

        thumbnails = list(Path(app_config.thumbnails_dir).iterdir())
        assert [path.name for path in thumbnails] == [body["thumbnailUrl"].rsplit("/", 1)[-1]]

        served = client.get(body["thumbnailUrl"])
        assert served.status_code == 200
        assert served.content == b"\xff\xd8fake-jpeg"

    def test_missing_timestamp(self, client, sample_video_bytes, upload_dir):
        """Test a request without a timestamp is a 400."""
        response = client.post("/api/extract-thumbnail", files=video_upload(sample_video_bytes))

        assert response.status_code == 400
        assert scratch_files(upload_dir) == []

    def test_garbage_timestamp(self, client, sample_video_bytes, upload_dir, app_config):
        """Test an unparseable timestamp fails without starting ffmpeg."""
        with patch("services.frame_extractor.subprocess.run") as mock_run:
            response = client.post(
                "/api/extract-thumbnail",
                files=video_upload(sample_video_bytes),
                data={"timestamp": "soon"},
            )

        assert response.status_code == 500
        assert "Invalid timestamp" in response.json()["error"]
        mock_run.assert_not_called()
        assert scratch_files(upload_dir) == []
        assert list(Path(app_config.thumbnails_dir).iterdir()) == []

    def test_ffmpeg_failure(self, client, sample_video_bytes, upload_dir, app_config):
        """Test an ffmpeg failure is a 500 and leaves no files."""
        failed = Mock(returncode=1, stderr="moov atom not found", stdout="")
        with patch("services.frame_extractor.subprocess.run", return_value=failed):
            response = client.post(
                "/api/extract-thumbnail",
                files=video_upload(sample_video_bytes),
                data={"timestamp": "10"},
            )

        assert response.status_code == 500
        assert "moov atom not found" in response.json()["error"]
        assert scratch_files(upload_dir) == []
        assert list(Path(app_config.thumbnails_dir).iterdir()) == []

    def test_parallel_extractions_limit(self, app_config, sample_video_bytes, upload_dir):
        """Test PARALLEL_EXTRACTIONS=1 lets only one ffmpeg run at a time."""
        config = dataclasses.replace(app_config, parallel_extractions=1)
        app = create_app(config)
        counter = InFlightCounter(fake_ffmpeg)

        with patch("services.frame_extractor.subprocess.run", side_effect=counter):
            with TestClient(app) as client:
                responses = post_concurrently(
                    client,
                    3,
                    url="/api/extract-thumbnail",
                    files=video_upload(sample_video_bytes),
                    data={"timestamp": "00:01"},
                )

        assert [response.status_code for response in responses] == [200, 200, 200]
        assert counter.calls == 3
        assert counter.peak == 1
        assert len(list(Path(config.thumbnails_dir).iterdir())) == 3
        assert scratch_files(upload_dir) == []


@pytest.mark.integration
class TestFeedbackEndpoint:
    """Tests for POST /api/feedback."""

    def test_feedback_without_remote_store(self, client):
        """Test feedback is acknowledged locally without Notion."""
        response = client.post(
            "/api/feedback",
            json={"contentType": "title", "contentText": "כותרת", "feedback": "like", "reporter": "Dana"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Feedback received"
        assert body["feedbackId"]
        assert "remoteId" not in body
        assert "not configured" in body["note"]

    def test_feedback_with_unreachable_store(self, app):
        """Test feedback is acknowledged when Notion is unreachable."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = NotionFeedbackStore(token="t", database_id="db", transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_feedback_recorder] = lambda: FeedbackRecorder(store=store)

        with TestClient(app) as client:
            response = client.post(
                "/api/feedback",
                json={"contentType": "description", "contentText": "x", "feedback": "dislike"},
            )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert "unavailable" in response.json()["note"]

    def test_feedback_saved_remotely(self, app):
        """Test the remote page id is returned when Notion accepts the record."""
        store = NotionFeedbackStore(
            token="t",
            database_id="db",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "page-1"})),
        )
        app.dependency_overrides[get_feedback_recorder] = lambda: FeedbackRecorder(store=store)

        with TestClient(app) as client:
            response = client.post(
                "/api/feedback",
                json={"contentType": "summary", "contentText": "x", "feedback": "like"},
            )

        body = response.json()
        assert body["message"] == "Feedback saved"
        assert body["remoteId"] == "page-1"
        assert "note" not in body

    @pytest.mark.parametrize(
        "payload",
        [
            {"contentType": "title", "contentText": "x", "feedback": "love"},
            {"contentText": "x", "feedback": "like"},
            {"contentType": "", "contentText": "x", "feedback": "like"},
        ],
    )
    def test_malformed_feedback(self, client, payload):
        """Test invalid feedback bodies are a 400."""
        response = client.post("/api/feedback", json=payload)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request")
