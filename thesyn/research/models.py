"""
Research Assistant Data Models

Defines the document context union, analysis results, chat transcript
messages and search results shared by every research service.
"""

import base64
import binascii
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Tuple, Union

from .errors import InvalidInputError, MalformedResponseError


class ContextKind(str, Enum):
    """Which kind of document the user is discussing."""
    TEXT = "text"
    PDF = "pdf"
    URL = "url"


class ComprehensionLevel(str, Enum):
    """Target audience for the generated analysis."""
    HIGH_SCHOOL = "High School"
    UNDERGRADUATE = "Undergraduate"
    GRADUATE = "Graduate"


class ChatRole(str, Enum):
    """Author of a chat turn, using Gemini's role names."""
    USER = "user"
    MODEL = "model"


def strip_data_uri(value: str) -> str:
    """Drop a ``data:<mime>;base64,`` prefix, keeping only the payload."""
    if value.startswith("data:") and "," in value:
        return value.split(",", 1)[1]
    return value


# ==================== Document Context ====================

@dataclass(frozen=True)
class TextContext:
    """Raw pasted text, kept unmodified."""
    content: str
    kind: ClassVar[ContextKind] = ContextKind.TEXT

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "content": self.content}


@dataclass(frozen=True)
class PdfContext:
    """A PDF payload held as a base64 string (no data URI prefix)."""
    content: str
    kind: ClassVar[ContextKind] = ContextKind.PDF

    @classmethod
    def from_bytes(cls, data: bytes) -> "PdfContext":
        return cls(content=base64.b64encode(data).decode("ascii"))

    @classmethod
    def from_base64(cls, encoded: str) -> "PdfContext":
        """Build from base64 text, accepting browser-style data URLs."""
        payload = strip_data_uri(encoded.strip())
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError(f"PDF payload is not valid base64: {e}") from e
        return cls(content=payload)

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.content)

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "content": self.content}


@dataclass(frozen=True)
class UrlContext:
    """A URI forwarded to Gemini for retrieval; never fetched locally."""
    content: str
    kind: ClassVar[ContextKind] = ContextKind.URL

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "content": self.content}


DocumentContext = Union[TextContext, PdfContext, UrlContext]


# ==================== Analysis ====================

@dataclass(frozen=True)
class GlossaryEntry:
    """A technical term and its plain-language definition."""
    term: str
    definition: str

    def to_dict(self) -> Dict[str, str]:
        return {"term": self.term, "definition": self.definition}


@dataclass(frozen=True)
class AnalysisResult:
    """Structured analysis of a document: summary, glossary, key insights."""
    summary: str
    glossary: Tuple[GlossaryEntry, ...]
    key_insights: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "glossary", tuple(self.glossary))
        object.__setattr__(self, "key_insights", tuple(self.key_insights))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Decode Gemini's schema-constrained JSON object."""
        try:
            summary = data["summary"]
            glossary = tuple(
                GlossaryEntry(term=str(item["term"]), definition=str(item["definition"]))
                for item in data["glossary"]
            )
            insights = tuple(str(item) for item in data["keyInsights"])
        except (KeyError, TypeError) as e:
            raise MalformedResponseError(f"Analysis payload missing field: {e}") from e

        if not isinstance(summary, str):
            raise MalformedResponseError("Analysis summary is not a string")

        return cls(summary=summary, glossary=glossary, key_insights=insights)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "glossary": [entry.to_dict() for entry in self.glossary],
            "keyInsights": list(self.key_insights),
        }


# ==================== Chat ====================

@dataclass
class ChatMessage:
    """One turn of the visible conversation transcript."""
    role: ChatRole
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
            "is_error": self.is_error,
        }


@dataclass(frozen=True)
class ChatReply:
    """Model reply for a turn; ``is_error`` marks an absorbed failure."""
    text: str
    is_error: bool = False


# ==================== Search ====================

@dataclass(frozen=True)
class GroundingSource:
    """A web page Gemini cited while answering a search query."""
    title: str
    uri: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "uri": self.uri}


@dataclass(frozen=True)
class SearchResult:
    """Grounded answer text plus its attributed sources."""
    text: str
    sources: List[GroundingSource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "sources": [source.to_dict() for source in self.sources],
        }
