"""Exceptions raised by the research services."""


class ThesynError(Exception):
    """Base class for all research assistant errors."""


class InvalidInputError(ThesynError):
    """Raw input could not be turned into a document context."""


class EmptyResponseError(ThesynError):
    """Gemini returned no usable payload."""


class MalformedResponseError(ThesynError):
    """Gemini returned a payload that does not match the expected schema."""


class NoAudioDataError(ThesynError):
    """Speech synthesis response carried no audio."""


class GeminiUnavailableError(ThesynError):
    """No Gemini client could be created (missing SDK or API key)."""
