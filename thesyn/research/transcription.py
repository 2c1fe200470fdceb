"""
Transcription Service - captured speech to text via Gemini.

The recorded blob is sent in its native container (usually audio/webm from
a browser recorder); no PCM conversion happens here.
"""

import base64
import logging
import time
from typing import Optional

from google.genai import types

from .gemini_client import GeminiClient, response_text
from .models import strip_data_uri
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

TRANSCRIBE_PROMPT = "Transcribe this audio exactly as spoken. Return only the transcription, no other text."
DEFAULT_CAPTURE_MIME = "audio/webm"


def decode_audio_payload(payload: str) -> bytes:
    """Decode base64 audio sent by a client, with or without a data URL prefix."""
    return base64.b64decode(strip_data_uri(payload.strip()))


class TranscriptionService:
    """
    Speech-to-text for voice input.

    An empty transcript is a normal result ("could not understand") for
    the caller to interpret; request failures propagate.
    """

    def __init__(self, client: GeminiClient, retry_policy: Optional[RetryPolicy] = None):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()

    async def transcribe(self, audio: bytes, mime_type: str = DEFAULT_CAPTURE_MIME) -> str:
        """
        Transcribe a recorded audio blob.

        Args:
            audio: Recorded audio bytes in their captured format
            mime_type: Container MIME type of the recording

        Returns:
            Transcribed text (may be empty)
        """
        contents = types.Content(
            role="user",
            parts=[
                types.Part.from_bytes(data=audio, mime_type=mime_type or DEFAULT_CAPTURE_MIME),
                types.Part.from_text(text=TRANSCRIBE_PROMPT),
            ],
        )

        async def transcribe_op():
            return await self.client.generate(
                model=self.client.config.transcribe_model,
                contents=contents,
            )

        start_time = time.perf_counter()
        try:
            response = await self.retry_policy.run(transcribe_op)
        except Exception as e:
            logger.error(f"Transcription failed: {e}")
            raise

        text = response_text(response).strip()
        latency = (time.perf_counter() - start_time) * 1000
        logger.debug(f"Transcribed {len(audio)} bytes in {latency:.0f}ms: {text[:50]}")
        return text
