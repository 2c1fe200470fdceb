"""
Shared test fixtures for the research and voice services.

Provides:
- Mock google-genai SDK client (bypasses the Gemini API)
- Response builders shaped like GenerateContentResponse
- A RetryPolicy that never actually sleeps
- Sample PCM and PDF payloads
"""

import struct
from types import SimpleNamespace
from typing import List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from thesyn.research.gemini_client import GeminiClient, GeminiConfig
from thesyn.research.retry import RetryPolicy


class FakeAPIError(Exception):
    """Stand-in for an SDK APIError carrying an HTTP status code."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


def text_response(text: Optional[str]):
    """A plain text reply."""
    return SimpleNamespace(text=text, candidates=[])


def audio_response(data):
    """A TTS reply with inline audio on the first part."""
    part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type="audio/pcm"))
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]), grounding_metadata=None)
    return SimpleNamespace(text=None, candidates=[candidate])


def grounded_response(text: Optional[str], chunks: List[Tuple[Optional[str], Optional[str]]]):
    """A search reply whose grounding chunks are (title, uri) pairs."""
    grounding_chunks = [
        SimpleNamespace(web=SimpleNamespace(title=title, uri=uri)) for title, uri in chunks
    ]
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=[]),
        grounding_metadata=SimpleNamespace(grounding_chunks=grounding_chunks),
    )
    return SimpleNamespace(text=text, candidates=[candidate])


@pytest.fixture
def fake_sdk() -> MagicMock:
    """Mock genai.Client; set ``fake_sdk.models.generate_content`` per test."""
    sdk = MagicMock()
    sdk.models.generate_content = MagicMock(return_value=text_response("ok"))
    return sdk


@pytest.fixture
def gemini_config() -> GeminiConfig:
    return GeminiConfig(api_key="test-key")


@pytest.fixture
def gemini_client(fake_sdk, gemini_config) -> GeminiClient:
    return GeminiClient(config=gemini_config, client=fake_sdk)


@pytest.fixture
def offline_client() -> GeminiClient:
    """Client with no SDK behind it, as when no API key is configured."""
    config = GeminiConfig(api_key=None)
    return GeminiClient(config=config)


@pytest.fixture
def no_sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def retry_policy(no_sleep) -> RetryPolicy:
    """Default backoff parameters with sleeps recorded instead of awaited."""
    return RetryPolicy(sleep=no_sleep)


@pytest.fixture
def sample_pcm() -> bytes:
    """Four 16-bit LE samples: 0, -32768, 32767, 16384."""
    return struct.pack("<4h", 0, -32768, 32767, 16384)


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


@pytest.fixture
def photosynthesis_text() -> str:
    return (
        "Photosynthesis converts light energy into chemical energy. Chlorophyll in "
        "the thylakoid membranes absorbs photons, driving the light-dependent "
        "reactions that produce ATP and NADPH, which the Calvin cycle then uses to "
        "fix carbon dioxide into glucose."
    )


@pytest.fixture
def analysis_json() -> str:
    return (
        '{"summary": "Plants turn light into sugar.",'
        ' "glossary": ['
        '{"term": "Chlorophyll", "definition": "Green pigment that absorbs light."},'
        '{"term": "Thylakoid", "definition": "Membrane sac inside chloroplasts."},'
        '{"term": "ATP", "definition": "Energy-carrying molecule."},'
        '{"term": "NADPH", "definition": "Electron carrier."},'
        '{"term": "Calvin cycle", "definition": "Carbon-fixing reactions."}'
        '],'
        ' "keyInsights": ["Light drives ATP synthesis.",'
        ' "Carbon is fixed in the Calvin cycle.",'
        ' "Glucose stores the captured energy."]}'
    )
