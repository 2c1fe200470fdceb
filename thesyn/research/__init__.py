"""
Research services - document analysis, chat, search and transcription.

Components:
- build_context: Raw input to a DocumentContext (text, PDF or URL)
- RetryPolicy: Exponential backoff for transient Gemini failures
- AnalysisService: Summary, glossary and key insights
- ChatSessionManager: Context-seeded, stateless chat turns
- SearchService: Google Search grounded lookups
- TranscriptionService: Captured speech to text
"""

from .errors import (
    ThesynError,
    InvalidInputError,
    EmptyResponseError,
    MalformedResponseError,
    NoAudioDataError,
    GeminiUnavailableError,
)
from .models import (
    ContextKind,
    ComprehensionLevel,
    ChatRole,
    TextContext,
    PdfContext,
    UrlContext,
    DocumentContext,
    GlossaryEntry,
    AnalysisResult,
    ChatMessage,
    ChatReply,
    GroundingSource,
    SearchResult,
)
from .context import build_context, context_from_dict
from .retry import RetryPolicy, is_retryable, with_retry
from .gemini_client import GeminiClient, GeminiConfig
from .analysis import AnalysisService
from .chat import ChatSessionManager, ChatSession
from .search import SearchService
from .transcription import TranscriptionService

__all__ = [
    "ThesynError",
    "InvalidInputError",
    "EmptyResponseError",
    "MalformedResponseError",
    "NoAudioDataError",
    "GeminiUnavailableError",
    "ContextKind",
    "ComprehensionLevel",
    "ChatRole",
    "TextContext",
    "PdfContext",
    "UrlContext",
    "DocumentContext",
    "GlossaryEntry",
    "AnalysisResult",
    "ChatMessage",
    "ChatReply",
    "GroundingSource",
    "SearchResult",
    "build_context",
    "context_from_dict",
    "RetryPolicy",
    "is_retryable",
    "with_retry",
    "GeminiClient",
    "GeminiConfig",
    "AnalysisService",
    "ChatSessionManager",
    "ChatSession",
    "SearchService",
    "TranscriptionService",
]
