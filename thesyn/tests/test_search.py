"""
Tests for Google Search grounded lookups.

Run with:
    pytest thesyn/tests/test_search.py -v
"""

import pytest

from conftest import FakeAPIError, grounded_response, text_response
from thesyn.research.search import (
    SEARCH_NO_RESULTS,
    SEARCH_UNAVAILABLE,
    SearchService,
    extract_sources,
)


pytestmark = pytest.mark.asyncio


class TestExtractSources:
    """Grounding chunk filtering."""

    async def test_order_kept_and_incomplete_chunks_dropped(self):
        response = grounded_response("text", [
            ("Nature", "https://nature.com/a"),
            (None, "https://untitled.example"),
            ("No link", None),
            ("Science", "https://science.org/b"),
        ])

        sources = extract_sources(response)

        assert [(s.title, s.uri) for s in sources] == [
            ("Nature", "https://nature.com/a"),
            ("Science", "https://science.org/b"),
        ]

    async def test_no_candidates(self):
        assert extract_sources(text_response("text")) == []


class TestSearchService:
    """search() never raises."""

    async def test_grounded_result(self, gemini_client, fake_sdk, retry_policy):
        fake_sdk.models.generate_content.return_value = grounded_response(
            "Recent work extends transformers.", [("arXiv", "https://arxiv.org/abs/1")]
        )
        service = SearchService(gemini_client, retry_policy)

        result = await service.search("transformers")

        assert result.text == "Recent work extends transformers."
        assert result.to_dict()["sources"] == [{"title": "arXiv", "uri": "https://arxiv.org/abs/1"}]

        kwargs = fake_sdk.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"].parts[0].text == "Find recent information related to: transformers"
        assert kwargs["config"].tools[0].google_search is not None

    async def test_empty_text_placeholder(self, gemini_client, fake_sdk, retry_policy):
        fake_sdk.models.generate_content.return_value = grounded_response(None, [])
        service = SearchService(gemini_client, retry_policy)

        result = await service.search("nothing")

        assert result.text == SEARCH_NO_RESULTS
        assert result.sources == []

    async def test_failure_returns_unavailable(self, gemini_client, fake_sdk, retry_policy):
        fake_sdk.models.generate_content.side_effect = FakeAPIError("forbidden", code=403)
        service = SearchService(gemini_client, retry_policy)

        result = await service.search("anything")

        assert result.text == SEARCH_UNAVAILABLE
        assert result.sources == []
        assert fake_sdk.models.generate_content.call_count == 1

    async def test_transient_failures_exhausted(self, gemini_client, fake_sdk, retry_policy, no_sleep):
        fake_sdk.models.generate_content.side_effect = FakeAPIError("overloaded", code=503)
        service = SearchService(gemini_client, retry_policy)

        result = await service.search("anything")

        assert result.text == SEARCH_UNAVAILABLE
        assert fake_sdk.models.generate_content.call_count == 4
        assert no_sleep.await_count == 3

    async def test_unconfigured_client(self, offline_client, retry_policy):
        result = await SearchService(offline_client, retry_policy).search("q")

        assert result.text == SEARCH_UNAVAILABLE
