"""
Search Grounding Service - related-topic lookup with Google Search.

Best-effort: any failure turns into an "unavailable" placeholder so the
rest of the app keeps working.
"""

import logging
from typing import Any, List, Optional

from google.genai import types

from .gemini_client import GeminiClient, response_text
from .models import GroundingSource, SearchResult
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

SEARCH_UNAVAILABLE = "Search currently unavailable."
SEARCH_NO_RESULTS = "No results found."


def extract_sources(response: Any) -> List[GroundingSource]:
    """
    Pull web sources out of the first candidate's grounding metadata.

    Keeps backend order; chunks without both a title and a URI are dropped.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        title = getattr(web, "title", None)
        uri = getattr(web, "uri", None)
        if title and uri:
            sources.append(GroundingSource(title=title, uri=uri))

    return sources


class SearchService:
    """Free-text query answered with live web evidence."""

    def __init__(self, client: GeminiClient, retry_policy: Optional[RetryPolicy] = None):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self._config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )

    async def search(self, query: str) -> SearchResult:
        """
        Search the web for information related to a query.

        Args:
            query: Free-text query

        Returns:
            SearchResult; the placeholder result if anything went wrong
        """
        contents = types.Content(
            role="user",
            parts=[types.Part.from_text(text=f"Find recent information related to: {query}")],
        )

        async def search_op():
            return await self.client.generate(
                model=self.client.config.search_model,
                contents=contents,
                config=self._config,
            )

        try:
            response = await self.retry_policy.run(search_op)
            text = response_text(response) or SEARCH_NO_RESULTS
            sources = extract_sources(response)
        except Exception as e:
            logger.warning(f"Search failed: {e}")
            return SearchResult(text=SEARCH_UNAVAILABLE, sources=[])

        logger.debug(f"Search returned {len(sources)} sources")
        return SearchResult(text=text, sources=sources)
