"""
Research Dashboard - Backend API Module.
Serves the browser frontend: analysis, chat, search and voice.
"""
from .api import router as dashboard_router
from .models import (
    AnalyzeResponse,
    ChatRequest,
    ChatResponse,
    SearchRequest,
    SearchResponse,
    SpeechRequest,
    TranscribeResponse,
    HealthStatus,
)

__all__ = [
    "dashboard_router",
    "AnalyzeResponse",
    "ChatRequest",
    "ChatResponse",
    "SearchRequest",
    "SearchResponse",
    "SpeechRequest",
    "TranscribeResponse",
    "HealthStatus",
]
