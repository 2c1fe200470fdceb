"""
Research Dashboard - Pydantic Models for API requests and responses.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from thesyn.research.models import ChatRole, ComprehensionLevel, ContextKind


# ============================================================
# Context
# ============================================================

class ContextPayload(BaseModel):
    """Document context as exchanged with clients."""
    kind: ContextKind
    content: str


# ============================================================
# Analysis Models
# ============================================================

class GlossaryItem(BaseModel):
    term: str
    definition: str


class AnalysisPayload(BaseModel):
    """Structured analysis, using the camelCase key the frontend reads."""
    summary: str
    glossary: List[GlossaryItem]
    keyInsights: List[str]


class AnalyzeResponse(BaseModel):
    """Analysis plus the context to send back with chat requests."""
    context: ContextPayload
    level: ComprehensionLevel
    analysis: AnalysisPayload


# ============================================================
# Chat Models
# ============================================================

class ChatTurn(BaseModel):
    """A prior turn of the visible transcript."""
    role: ChatRole
    text: str
    id: Optional[str] = None
    is_error: bool = False


class ChatRequest(BaseModel):
    """A new user message with the transcript and document so far."""
    context: ContextPayload
    history: List[ChatTurn] = Field(default_factory=list)
    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    id: str
    role: ChatRole = ChatRole.MODEL
    text: str
    is_error: bool = False


# ============================================================
# Search Models
# ============================================================

class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)


class SourceItem(BaseModel):
    title: str
    uri: str


class SearchResponse(BaseModel):
    text: str
    sources: List[SourceItem] = Field(default_factory=list)


# ============================================================
# Voice Models
# ============================================================

class SpeechRequest(BaseModel):
    text: str = Field(..., min_length=1)


class TranscribeResponse(BaseModel):
    text: str
    understood: bool


# ============================================================
# Health
# ============================================================

class HealthStatus(BaseModel):
    status: str
    version: str
    gemini: str
