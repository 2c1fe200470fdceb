"""
Document context construction.

Turns the raw input collected by the surface (an uploaded PDF, pasted text
or a URL) into exactly one DocumentContext variant.
"""

import base64
import logging
from pathlib import Path
from typing import Any, Union

from .errors import InvalidInputError
from .models import (
    ContextKind,
    DocumentContext,
    PdfContext,
    TextContext,
    UrlContext,
    strip_data_uri,
)

logger = logging.getLogger(__name__)


def encode_base64(data: bytes) -> str:
    """Base64-encode a binary payload, without any data URI metadata."""
    return strip_data_uri(base64.b64encode(bytes(data)).decode("ascii"))


def _read_file_bytes(payload: Any) -> bytes:
    """
    Read the bytes behind a file handle.

    Accepts raw bytes, paths, binary file objects, and upload wrappers that
    expose the underlying file as ``.file``.
    """
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)

    if isinstance(payload, Path):
        if not payload.is_file():
            raise InvalidInputError(f"PDF file not found: {payload}")
        return payload.read_bytes()

    # Upload wrappers (FastAPI/Starlette UploadFile) keep the handle on .file
    handle = getattr(payload, "file", None)
    if handle is not None and hasattr(handle, "read"):
        payload = handle

    if hasattr(payload, "read"):
        if hasattr(payload, "seek"):
            payload.seek(0)
        data = payload.read()
        if isinstance(data, str):
            raise InvalidInputError("PDF file must be opened in binary mode")
        return bytes(data)

    raise InvalidInputError(
        f"A 'pdf' document needs a file handle, got {type(payload).__name__}"
    )


def build_context(kind: Union[ContextKind, str], payload: Any) -> DocumentContext:
    """
    Build the canonical document context for a raw input.

    Args:
        kind: "pdf", "text" or "url" (or the ContextKind member)
        payload: File handle for pdf, string for text and url

    Returns:
        TextContext, PdfContext or UrlContext

    Raises:
        InvalidInputError: If the kind is unknown or does not match the payload type
    """
    try:
        kind = ContextKind(kind)
    except ValueError as e:
        raise InvalidInputError(f"Unknown document kind: {kind!r}") from e

    if kind == ContextKind.PDF:
        if isinstance(payload, str):
            raise InvalidInputError("A 'pdf' document needs a file handle, got str")
        data = _read_file_bytes(payload)
        logger.debug(f"Encoded PDF context ({len(data)} bytes)")
        return PdfContext(content=encode_base64(data))

    if not isinstance(payload, str):
        raise InvalidInputError(
            f"A '{kind.value}' document needs a string, got {type(payload).__name__}"
        )

    if kind == ContextKind.URL:
        return UrlContext(content=payload)

    return TextContext(content=payload)


def context_from_dict(data: dict) -> DocumentContext:
    """Rebuild a context sent back by a client as ``{"kind", "content"}``."""
    kind = data.get("kind")
    content = data.get("content")

    if kind == ContextKind.PDF.value:
        if not isinstance(content, str):
            raise InvalidInputError("PDF context content must be base64 text")
        return PdfContext.from_base64(content)

    return build_context(kind, content)
