"""Singleton speech playback.

At most one synthesized clip plays at a time: starting a new one halts the
clip in flight first. The actual output device is supplied by the caller.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .audio import PlayableAudio
from .speech import SpeechService

logger = logging.getLogger(__name__)


class PlaybackDevice(ABC):
    """Buffer-source style audio output."""

    @abstractmethod
    def start(self, audio: PlayableAudio, on_ended: Callable[[], None]) -> None:
        """Start playing; call on_ended when playback finishes naturally."""

    @abstractmethod
    def stop(self) -> None:
        """Halt the current playback immediately."""


class PlaybackController:
    """Owns the single active playback for a surface.

    Usage:
        player = PlaybackController(device, speech)
        await player.toggle(message.id, message.text)
    """

    def __init__(self, device: PlaybackDevice, speech: SpeechService):
        self.device = device
        self.speech = speech
        self._playing_id: Optional[str] = None
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def playing_id(self) -> Optional[str]:
        """Key of the clip currently playing, if any."""
        return self._playing_id

    @property
    def is_playing(self) -> bool:
        return self._playing_id is not None

    def stop(self) -> None:
        """Halt whatever is playing."""
        if self._playing_id is not None:
            logger.debug(f"Stopping playback: {self._playing_id}")
            self.device.stop()
        self._playing_id = None
        self._generation += 1

    def play(self, key: str, audio: PlayableAudio) -> None:
        """Play decoded audio, halting any playback in flight first."""
        self.stop()
        generation = self._generation

        def on_ended():
            # A stale callback from a halted clip must not clear the new one
            if generation == self._generation:
                self._playing_id = None

        self._playing_id = key
        try:
            self.device.start(audio, on_ended)
        except Exception:
            self._playing_id = None
            raise
        logger.debug(f"Playing {key} ({audio.duration_seconds:.1f}s)")

    async def speak(self, key: str, text: str) -> None:
        """Synthesize text and play it.

        Any playback in flight stops before synthesis starts. Synthesis
        errors propagate; playback state is left idle.
        """
        async with self._lock:
            self.stop()
            audio = await self.speech.speak(text)
            self.play(key, audio)

    async def toggle(self, key: str, text: str) -> bool:
        """Read a message aloud, or stop it if it is already playing.

        Returns:
            True if playback started, False if it was stopped
        """
        if self._playing_id == key:
            self.stop()
            return False

        await self.speak(key, text)
        return True

    def close(self) -> None:
        """Release playback on surface teardown."""
        self.stop()
