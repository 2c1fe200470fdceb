"""
Research Dashboard - FastAPI Routes.
Exposes analysis, chat, search and voice to the browser frontend.
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from thesyn.assistant import get_assistant
from thesyn.research import (
    ChatMessage,
    ChatRole,
    ComprehensionLevel,
    ContextKind,
    GeminiUnavailableError,
    InvalidInputError,
    ThesynError,
    build_context,
    context_from_dict,
)
from thesyn.research.transcription import DEFAULT_CAPTURE_MIME
from thesyn.voice import pcm_to_playable

from .models import (
    AnalyzeResponse,
    ChatRequest,
    ChatResponse,
    SearchRequest,
    SearchResponse,
    SpeechRequest,
    TranscribeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Research"])


def _http_error(e: Exception) -> HTTPException:
    """Map a service failure onto an HTTP status."""
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, GeminiUnavailableError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, ThesynError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=502, detail=f"Gemini request failed: {e}")


# ============================================================
# Analysis
# ============================================================

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_document(
    kind: ContextKind = Form(...),
    level: ComprehensionLevel = Form(ComprehensionLevel.UNDERGRADUATE),
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
):
    """
    Analyze a pasted text, a URL or an uploaded PDF.

    PDFs arrive as ``file``; text and URLs as ``content``.
    """
    try:
        if kind == ContextKind.PDF:
            if file is None:
                raise InvalidInputError("A PDF upload is required for kind 'pdf'")
            data = await file.read()
            if not data:
                raise InvalidInputError("Uploaded PDF is empty")
            context = build_context(kind, data)
        else:
            if not content or not content.strip():
                raise InvalidInputError(f"Content is required for kind '{kind.value}'")
            context = build_context(kind, content)

        result = await get_assistant().analyze(context, level)
    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        raise _http_error(e)

    return {
        "context": context.to_dict(),
        "level": level,
        "analysis": result.to_dict(),
    }


# ============================================================
# Chat
# ============================================================

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """Answer a follow-up question about the analyzed document."""
    try:
        context = context_from_dict(request.context.model_dump(mode="json"))
    except InvalidInputError as e:
        raise _http_error(e)

    history = [
        ChatMessage(role=turn.role, text=turn.text, is_error=turn.is_error)
        for turn in request.history
    ]

    # Failures come back as an apology flagged is_error, never as an HTTP error
    reply = await get_assistant().reply(history, request.message, context)
    message = ChatMessage(role=ChatRole.MODEL, text=reply.text, is_error=reply.is_error)
    return message.to_dict()


# ============================================================
# Search
# ============================================================

@router.post("/search", response_model=SearchResponse)
async def search(request: SearchRequest):
    """Google Search grounded lookup. Never fails; degrades to a placeholder."""
    result = await get_assistant().search(request.query)
    return result.to_dict()


# ============================================================
# Voice
# ============================================================

@router.post("/speech")
async def synthesize_speech(request: SpeechRequest):
    """Read text aloud. Returns a mono 16-bit WAV clip."""
    try:
        pcm = await get_assistant().synthesize(request.text)
        audio = pcm_to_playable(pcm)
    except Exception as e:
        logger.error(f"Speech synthesis failed: {e}")
        raise _http_error(e)

    return Response(content=audio.to_wav_bytes(), media_type="audio/wav")


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(file: UploadFile = File(...)):
    """Transcribe a recorded voice clip."""
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Audio upload is empty")

    mime_type = file.content_type or DEFAULT_CAPTURE_MIME
    try:
        text = await get_assistant().transcribe(data, mime_type)
    except Exception as e:
        logger.error(f"Transcription failed: {e}")
        raise _http_error(e)

    text = text.strip()
    return {"text": text, "understood": bool(text)}
