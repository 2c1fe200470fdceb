"""
Gemini client wrapper for the research services.

Uses the google-genai SDK (unified SDK). Blocking SDK calls run in a worker
thread so the event loop never stalls on network I/O.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from google import genai
from google.genai import types

from .errors import GeminiUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class GeminiConfig:
    """Model identifiers and request settings for every Gemini call."""
    api_key: Optional[str] = None
    analysis_model: str = "gemini-3-pro-preview"
    chat_model: str = "gemini-3-pro-preview"
    search_model: str = "gemini-2.5-flash"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    transcribe_model: str = "gemini-2.5-flash"
    tts_voice: str = "Fenrir"
    thinking_budget: int = 32768
    tts_sample_rate: int = 24000

    @classmethod
    def from_env(cls) -> "GeminiConfig":
        """
        Load configuration from environment variables.

        GEMINI_API_KEY (or API_KEY) is required for remote calls; model
        overrides use the THESYN_* variables.
        """
        defaults = cls()
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            analysis_model=os.getenv("THESYN_ANALYSIS_MODEL", defaults.analysis_model),
            chat_model=os.getenv("THESYN_CHAT_MODEL", defaults.chat_model),
            search_model=os.getenv("THESYN_SEARCH_MODEL", defaults.search_model),
            tts_model=os.getenv("THESYN_TTS_MODEL", defaults.tts_model),
            transcribe_model=os.getenv("THESYN_TRANSCRIBE_MODEL", defaults.transcribe_model),
            tts_voice=os.getenv("THESYN_TTS_VOICE", defaults.tts_voice),
            thinking_budget=int(os.getenv("THESYN_THINKING_BUDGET", defaults.thinking_budget)),
        )


class GeminiClient:
    """
    Thin async facade over ``genai.Client``.

    Every research service talks to Gemini through ``generate``; tests swap
    in a mock SDK client via the ``client`` argument.
    """

    def __init__(self, config: Optional[GeminiConfig] = None, client: Any = None):
        """
        Initialize Gemini client.

        Args:
            config: Model configuration. Falls back to GeminiConfig.from_env().
            client: Pre-built SDK client (mainly for tests)
        """
        self.config = config or GeminiConfig.from_env()
        self.client = client

        if self.client is not None:
            return

        if not self.config.api_key:
            logger.warning("No Gemini API key provided. Set GEMINI_API_KEY env var.")
            return

        try:
            self.client = genai.Client(api_key=self.config.api_key)
            logger.info("Gemini client initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Gemini: {e}")

    @property
    def is_available(self) -> bool:
        """Check if client is ready to use."""
        return self.client is not None

    async def generate(
        self,
        model: str,
        contents: Any,
        config: Optional[types.GenerateContentConfig] = None,
    ) -> types.GenerateContentResponse:
        """
        Issue one generate_content request.

        Args:
            model: Gemini model identifier
            contents: Content list (or a single Content/str)
            config: Optional request config (schema, tools, modalities)

        Returns:
            The raw SDK response

        Raises:
            GeminiUnavailableError: If no client is configured
        """
        if not self.is_available:
            raise GeminiUnavailableError("Gemini client not available - check GEMINI_API_KEY")

        return await asyncio.to_thread(
            self.client.models.generate_content,
            model=model,
            contents=contents,
            config=config,
        )


def first_candidate_parts(response: Any) -> list:
    """Return the parts of the first candidate, or an empty list."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def response_text(response: Any) -> str:
    """Best-effort text of a response, joining candidate parts if needed."""
    text = getattr(response, "text", None)
    if text:
        return text

    parts = [getattr(p, "text", None) for p in first_candidate_parts(response)]
    return "".join(p for p in parts if p)
