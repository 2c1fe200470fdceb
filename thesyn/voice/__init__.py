"""Speech in and out: Gemini TTS decoding, playback and voice capture."""
from .audio import PlayableAudio, pcm_to_playable, TTS_SAMPLE_RATE
from .speech import SpeechService, MAX_SPEECH_CHARS
from .playback import PlaybackDevice, PlaybackController
from .capture import (
    CaptureDevice,
    CaptureResult,
    CaptureState,
    VoiceCapture,
)

__all__ = [
    "PlayableAudio",
    "pcm_to_playable",
    "TTS_SAMPLE_RATE",
    "SpeechService",
    "MAX_SPEECH_CHARS",
    "PlaybackDevice",
    "PlaybackController",
    "CaptureDevice",
    "CaptureResult",
    "CaptureState",
    "VoiceCapture",
]
