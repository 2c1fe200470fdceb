"""Text-to-speech via Gemini's TTS model.

Usage:
    speech = SpeechService(GeminiClient())
    pcm = await speech.synthesize("Hello world")
    audio = await speech.speak("Hello world")
"""
import base64
import logging
from typing import Optional

from google.genai import types

from thesyn.research.errors import NoAudioDataError
from thesyn.research.gemini_client import GeminiClient, first_candidate_parts
from thesyn.research.retry import RetryPolicy

from .audio import PlayableAudio, pcm_to_playable

logger = logging.getLogger(__name__)

# Gemini TTS is only asked for short passages
MAX_SPEECH_CHARS = 400


def extract_audio(response) -> bytes:
    """Raw PCM from the first inline part of a TTS response."""
    parts = first_candidate_parts(response)
    inline = getattr(parts[0], "inline_data", None) if parts else None
    data = getattr(inline, "data", None)

    if not data:
        raise NoAudioDataError("No audio data returned")

    if isinstance(data, str):
        return base64.b64decode(data)
    return bytes(data)


class SpeechService:
    """Synthesizes speech as 24 kHz 16-bit mono PCM."""

    def __init__(self, client: GeminiClient, retry_policy: Optional[RetryPolicy] = None):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()

    def _request_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(
                        voice_name=self.client.config.tts_voice,
                    )
                )
            ),
        )

    async def synthesize(self, text: str) -> bytes:
        """Synthesize speech for (at most the first 400 characters of) text.

        Args:
            text: Text to speak

        Returns:
            Raw PCM bytes

        Raises:
            NoAudioDataError: If the response carried no audio
        """
        spoken = text[:MAX_SPEECH_CHARS]
        if len(text) > MAX_SPEECH_CHARS:
            logger.debug(f"Speech input truncated from {len(text)} to {MAX_SPEECH_CHARS} chars")

        contents = types.Content(role="user", parts=[types.Part.from_text(text=spoken)])
        config = self._request_config()

        async def tts_op() -> bytes:
            response = await self.client.generate(
                model=self.client.config.tts_model,
                contents=contents,
                config=config,
            )
            return extract_audio(response)

        try:
            return await self.retry_policy.run(tts_op)
        except Exception as e:
            logger.error(f"TTS failed: {e}")
            raise

    async def speak(self, text: str) -> PlayableAudio:
        """Synthesize and decode in one step."""
        pcm = await self.synthesize(text)
        return pcm_to_playable(pcm, sample_rate=self.client.config.tts_sample_rate)
