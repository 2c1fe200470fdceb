"""
Research assistant facade.

Bundles one GeminiClient with every service built on it so the HTTP surface
(and any other caller) shares a single configured client.
"""

import logging
from typing import Optional, Sequence

from thesyn.research import (
    AnalysisResult,
    AnalysisService,
    ChatMessage,
    ChatReply,
    ChatSession,
    ChatSessionManager,
    ComprehensionLevel,
    DocumentContext,
    GeminiClient,
    GeminiConfig,
    RetryPolicy,
    SearchResult,
    SearchService,
    TranscriptionService,
)
from thesyn.voice import PlayableAudio, SpeechService

logger = logging.getLogger(__name__)


class ResearchAssistant:
    """All Gemini-backed operations behind one object."""

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        client: Optional[GeminiClient] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.client = client or GeminiClient(config)
        self.retry_policy = retry_policy or RetryPolicy()

        self.analysis = AnalysisService(self.client, self.retry_policy)
        self.chat = ChatSessionManager(self.client)
        self.search_service = SearchService(self.client, self.retry_policy)
        self.speech = SpeechService(self.client, self.retry_policy)
        self.transcription = TranscriptionService(self.client, self.retry_policy)

    @property
    def is_available(self) -> bool:
        return self.client.is_available

    async def analyze(self, context: DocumentContext, level: ComprehensionLevel) -> AnalysisResult:
        return await self.analysis.analyze(context, level)

    async def reply(
        self,
        history: Sequence[ChatMessage],
        message: str,
        context: DocumentContext,
    ) -> ChatReply:
        return await self.chat.reply(history, message, context)

    def start_chat(self, context: DocumentContext) -> ChatSession:
        """Open a caller-side transcript for a document."""
        return ChatSession(self.chat, context)

    async def search(self, query: str) -> SearchResult:
        return await self.search_service.search(query)

    async def synthesize(self, text: str) -> bytes:
        return await self.speech.synthesize(text)

    async def speak(self, text: str) -> PlayableAudio:
        return await self.speech.speak(text)

    async def transcribe(self, audio: bytes, mime_type: str = "audio/webm") -> str:
        return await self.transcription.transcribe(audio, mime_type)


# Singleton instance
_assistant: Optional[ResearchAssistant] = None


def get_assistant() -> ResearchAssistant:
    """Get the global research assistant instance."""
    global _assistant
    if _assistant is None:
        _assistant = ResearchAssistant()
    return _assistant
