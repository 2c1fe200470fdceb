"""PCM decoding for Gemini TTS output.

Gemini speech comes back as raw signed 16-bit little-endian mono PCM at
24 kHz. Playback devices want float samples in [-1, 1]; HTTP clients want a
WAV file.
"""
import io
import wave
from dataclasses import dataclass

import numpy as np

TTS_SAMPLE_RATE = 24000
PCM_SCALE = 32768.0


@dataclass
class PlayableAudio:
    """Decoded mono audio ready for a playback device."""
    samples: np.ndarray  # float32 in [-1, 1]
    sample_rate: int = TTS_SAMPLE_RATE
    channels: int = 1

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_seconds(self) -> float:
        if not self.sample_rate:
            return 0.0
        return self.frame_count / self.sample_rate

    def to_pcm16(self) -> bytes:
        """Re-quantize to 16-bit little-endian PCM."""
        scaled = np.clip(np.round(self.samples * PCM_SCALE), -32768, 32767)
        return scaled.astype("<i2").tobytes()

    def to_wav_bytes(self) -> bytes:
        """Wrap the samples in a 16-bit WAV container."""
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(self.channels)
            wav.setsampwidth(2)  # 16-bit
            wav.setframerate(self.sample_rate)
            wav.writeframes(self.to_pcm16())
        return buffer.getvalue()


def pcm_to_playable(buffer: bytes, sample_rate: int = TTS_SAMPLE_RATE) -> PlayableAudio:
    """Convert raw 16-bit PCM to float samples.

    Args:
        buffer: Signed 16-bit little-endian mono PCM bytes
        sample_rate: Sample rate of the buffer (Gemini TTS uses 24000)

    Returns:
        PlayableAudio with each sample divided by 32768

    Raises:
        ValueError: If the buffer does not hold a whole number of samples
    """
    if len(buffer) % 2:
        raise ValueError(f"PCM buffer length must be even, got {len(buffer)} bytes")

    samples = np.frombuffer(buffer, dtype="<i2").astype(np.float32) / PCM_SCALE
    return PlayableAudio(samples=samples, sample_rate=sample_rate, channels=1)
