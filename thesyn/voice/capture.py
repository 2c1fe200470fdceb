"""Voice input capture state machine.

States: idle -> recording -> transcribing -> idle

The microphone is a singleton: it is opened on start and always released
once transcription completes or fails, or the surface is torn down.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from thesyn.research.transcription import DEFAULT_CAPTURE_MIME, TranscriptionService

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    """Voice capture states."""
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"


class CaptureDevice(ABC):
    """Microphone recorder producing binary chunks."""

    mime_type: str = DEFAULT_CAPTURE_MIME

    @abstractmethod
    def start(self, on_chunk: Callable[[bytes], None]) -> None:
        """Open the microphone and begin delivering chunks."""

    @abstractmethod
    def stop(self) -> None:
        """Stop recording; remaining chunks are flushed before returning."""

    @abstractmethod
    def close(self) -> None:
        """Release the microphone."""


@dataclass
class CaptureResult:
    """Outcome of one capture session."""
    text: str
    understood: bool


@dataclass
class CaptureStateChange:
    """A state transition, kept for status reporting."""
    state: CaptureState
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self):
        return {"state": self.state.value, "timestamp": self.timestamp.isoformat()}


class VoiceCapture:
    """Records one utterance at a time and hands it to transcription."""

    def __init__(self, device: CaptureDevice, transcription: TranscriptionService):
        self.device = device
        self.transcription = transcription
        self._state = CaptureState.IDLE
        self._chunks: List[bytes] = []
        self._history: List[CaptureStateChange] = []
        self._max_history = 50
        self._listeners: List[Callable[[CaptureState], None]] = []

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def history(self) -> List[CaptureStateChange]:
        return list(self._history)

    def on_state_change(self, listener: Callable[[CaptureState], None]):
        """Register a callback invoked on every transition."""
        self._listeners.append(listener)

    def _set_state(self, state: CaptureState):
        self._state = state
        self._history.append(CaptureStateChange(state=state))
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        for listener in self._listeners:
            listener(state)

    def _on_chunk(self, chunk: bytes):
        if chunk:
            self._chunks.append(chunk)

    def start(self) -> bool:
        """
        Begin recording.

        Returns:
            True if recording started, False if a session is already open
        """
        if self._state != CaptureState.IDLE:
            logger.debug(f"start() ignored while {self._state.value}")
            return False

        self._chunks = []
        try:
            self.device.start(self._on_chunk)
        except Exception as e:
            logger.error(f"Error accessing microphone: {e}")
            self.device.close()
            raise

        self._set_state(CaptureState.RECORDING)
        return True

    async def stop(self) -> Optional[CaptureResult]:
        """
        Stop recording and transcribe what was captured.

        Returns:
            CaptureResult, or None if nothing was recording

        Raises:
            Transcription errors, after the device has been released
        """
        if self._state != CaptureState.RECORDING:
            return None

        self._set_state(CaptureState.TRANSCRIBING)
        try:
            self.device.stop()
            blob = b"".join(self._chunks)
            text = await self.transcription.transcribe(blob, mime_type=self.device.mime_type)
        finally:
            self._chunks = []
            self.device.close()
            self._set_state(CaptureState.IDLE)

        text = text.strip()
        if not text:
            logger.info("Could not understand audio")
        return CaptureResult(text=text, understood=bool(text))

    def close(self):
        """Tear down: drop any open recording and release the microphone."""
        if self._state == CaptureState.RECORDING:
            try:
                self.device.stop()
            finally:
                self._chunks = []
                self.device.close()
                self._set_state(CaptureState.IDLE)
