"""Editorial content generation for uploaded news videos using Google GenAI.

One synchronous Gemini call per video: the editorial prompt plus the video
bytes inline. The free-form reply is handed to the lenient parser, so a
model that ignores the JSON instruction still yields a usable (raw) result.
"""

import logging
import time
from typing import Optional

import httpx
from google.genai import Client, types

from models.suggestion import ContentSuggestion
from models.video import GenerationRequest, VideoAsset
from services.prompts import PROMPT_VERSIONS, build_editorial_prompt
from services.response_parser import parse_suggestion
from utils.config import DEFAULT_CHANNEL_NAME, DEFAULT_GEMINI_MODEL
from utils.errors import ModelInvocationError, ModelTimeoutError

logger = logging.getLogger(__name__)


class ContentGenerator:
    """Builds the editorial prompt, calls Gemini, and parses the reply.

    Deleting the video is not this class's job. Callers wrap ``generate``
    in a ScratchVideo block.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = DEFAULT_GEMINI_MODEL,
        timeout_seconds: float = 300.0,
        channel_name: str = DEFAULT_CHANNEL_NAME,
        client: Optional[Client] = None,
    ):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key. Without one every call fails with ModelInvocationError.
            model_name: Gemini model to use
            timeout_seconds: Per-call timeout for generate_content
            channel_name: Channel named in the prompt and description attribution
            client: Pre-built client (tests)
        """
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.channel_name = channel_name

        if client is not None:
            self.client: Optional[Client] = client
        elif api_key:
            self.client = Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        else:
            self.client = None
            logger.warning("Gemini API key not configured; content generation is disabled")

        logger.info(f"Initialized content generator with model: {model_name} (timeout {timeout_seconds:.0f}s)")

    def build_prompt(self, reporter_name: str, video_date: str) -> str:
        return build_editorial_prompt(reporter_name, video_date, self.channel_name)

    def generate(self, video_asset: VideoAsset, reporter_name: str, video_date: str) -> ContentSuggestion:
        """Generate editorial suggestions for a video.

        Args:
            video_asset: Uploaded video in scratch storage
            reporter_name: Reporter credited in the descriptions
            video_date: Air date, embedded verbatim

        Returns:
            StructuredSuggestion when the reply contains a JSON object, else RawSuggestion

        Raises:
            ModelTimeoutError: The call exceeded timeout_seconds
            ModelInvocationError: Any other failure of the model call
        """
        if self.client is None:
            raise ModelInvocationError("Gemini API key not configured")

        prompt = self.build_prompt(reporter_name, video_date)

        try:
            video_bytes = video_asset.read_bytes()
        except OSError as e:
            raise ModelInvocationError(f"Could not read uploaded video: {e}") from e

        logger.info(
            f"Sending {video_asset.path.name} ({video_asset.size_bytes} bytes, {video_asset.mime_type}) "
            f"to {self.model_name} with prompt editorial_suggestions "
            f"{PROMPT_VERSIONS['editorial_suggestions']}"
        )
        started = time.monotonic()

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=[
                    types.Content(
                        role="user",
                        parts=[
                            types.Part.from_text(text=prompt),
                            types.Part.from_bytes(data=video_bytes, mime_type=video_asset.mime_type),
                        ],
                    )
                ],
            )
        except httpx.TimeoutException as e:
            logger.error(f"Gemini call timed out after {self.timeout_seconds:.0f}s")
            raise ModelTimeoutError(f"Model call timed out after {self.timeout_seconds:.0f}s") from e
        except Exception as e:
            logger.error(f"Gemini call failed: {e}")
            raise ModelInvocationError(f"Model call failed: {e}") from e

        text = response.text
        if text is None:
            # Blocked or empty candidates
            logger.error("Gemini returned no text")
            raise ModelInvocationError("Model returned an empty response")

        logger.info(f"Received {len(text)} chars from {self.model_name} in {time.monotonic() - started:.1f}s")
        return parse_suggestion(text)

    def generate_for(self, request: GenerationRequest) -> ContentSuggestion:
        """Convenience wrapper taking a GenerationRequest."""
        return self.generate(request.video_asset, request.reporter_name, request.video_date)
