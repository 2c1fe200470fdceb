"""
Tests for the analysis service.

Tests:
1. Request framing per context kind
2. JSON decoding (valid, empty, malformed)
3. Retry on transient Gemini failures
4. End-to-end analysis of a pasted text

Run with:
    pytest thesyn/tests/test_analysis.py -v
"""

import json

import pytest

from conftest import FakeAPIError, text_response
from thesyn.research.analysis import (
    AnalysisService,
    build_analysis_parts,
    parse_analysis,
)
from thesyn.research.errors import (
    EmptyResponseError,
    GeminiUnavailableError,
    MalformedResponseError,
)
from thesyn.research.models import (
    AnalysisResult,
    ComprehensionLevel,
    PdfContext,
    TextContext,
    UrlContext,
)


class TestRequestFraming:
    """Document part first, instruction second."""

    def test_text_context(self):
        parts = build_analysis_parts(TextContext(content="Paper body"), ComprehensionLevel.GRADUATE)

        assert len(parts) == 2
        assert parts[0].text == "Paper body"
        assert "Target Audience Level: Graduate." in parts[1].text
        assert "Output pure JSON." in parts[1].text

    def test_url_context(self):
        parts = build_analysis_parts(
            UrlContext(content="https://example.org/p.pdf"), ComprehensionLevel.HIGH_SCHOOL
        )

        assert parts[0].text == (
            "Please read and analyze the research paper at this URL: https://example.org/p.pdf"
        )
        assert "Target Audience Level: High School." in parts[1].text

    def test_pdf_context_inline(self, sample_pdf_bytes):
        context = PdfContext.from_bytes(sample_pdf_bytes)
        parts = build_analysis_parts(context, ComprehensionLevel.UNDERGRADUATE)

        assert parts[0].inline_data.mime_type == "application/pdf"
        assert parts[0].inline_data.data == sample_pdf_bytes


class TestParseAnalysis:
    """Reply decoding."""

    def test_valid_payload(self, analysis_json):
        result = parse_analysis(analysis_json)

        assert result.summary == "Plants turn light into sugar."
        assert len(result.glossary) == 5
        assert result.glossary[0].term == "Chlorophyll"
        assert result.key_insights[-1] == "Glucose stores the captured energy."

    def test_empty_reply(self):
        with pytest.raises(EmptyResponseError, match="No response generated"):
            parse_analysis("")

        with pytest.raises(EmptyResponseError):
            parse_analysis(None)

    def test_invalid_json(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis("Sure! Here is the summary:")

    def test_missing_field(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis(json.dumps({"summary": "x", "glossary": []}))

    def test_not_an_object(self):
        with pytest.raises(MalformedResponseError):
            parse_analysis("[1, 2, 3]")

    def test_out_of_range_counts_accepted(self):
        result = parse_analysis(json.dumps({
            "summary": "short",
            "glossary": [{"term": "A", "definition": "B"}],
            "keyInsights": ["only one"],
        }))

        assert len(result.glossary) == 1
        assert result.key_insights == ("only one",)

    def test_wire_format_uses_camel_case(self, analysis_json):
        data = parse_analysis(analysis_json).to_dict()

        assert set(data) == {"summary", "glossary", "keyInsights"}


@pytest.mark.asyncio
class TestAnalysisService:
    """Full analyze() flow against a mocked SDK."""

    async def test_photosynthesis_undergraduate(
        self, gemini_client, fake_sdk, retry_policy, photosynthesis_text, analysis_json
    ):
        fake_sdk.models.generate_content.return_value = text_response(analysis_json)
        service = AnalysisService(gemini_client, retry_policy)

        result = await service.analyze(
            TextContext(content=photosynthesis_text), ComprehensionLevel.UNDERGRADUATE
        )

        assert result.summary
        assert 5 <= len(result.glossary) <= 10
        assert 3 <= len(result.key_insights) <= 5

        kwargs = fake_sdk.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-3-pro-preview"
        assert kwargs["contents"].parts[0].text == photosynthesis_text
        assert "Undergraduate" in kwargs["contents"].parts[1].text
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].thinking_config.thinking_budget == 32768

    async def test_transient_failure_retried(
        self, gemini_client, fake_sdk, retry_policy, no_sleep, analysis_json
    ):
        fake_sdk.models.generate_content.side_effect = [
            FakeAPIError("Internal error", code=500),
            text_response(analysis_json),
        ]
        service = AnalysisService(gemini_client, retry_policy)

        result = await service.analyze(TextContext(content="x"), ComprehensionLevel.GRADUATE)

        assert result.summary == "Plants turn light into sugar."
        assert fake_sdk.models.generate_content.call_count == 2
        no_sleep.assert_awaited_once_with(1.0)

    async def test_empty_reply_aborts(self, gemini_client, fake_sdk, retry_policy):
        fake_sdk.models.generate_content.return_value = text_response(None)
        service = AnalysisService(gemini_client, retry_policy)

        with pytest.raises(EmptyResponseError):
            await service.analyze(TextContext(content="x"), ComprehensionLevel.GRADUATE)

        assert fake_sdk.models.generate_content.call_count == 1

    async def test_terminal_error_propagates(self, gemini_client, fake_sdk, retry_policy):
        fake_sdk.models.generate_content.side_effect = FakeAPIError("bad key", code=400)
        service = AnalysisService(gemini_client, retry_policy)

        with pytest.raises(FakeAPIError):
            await service.analyze(TextContext(content="x"), ComprehensionLevel.GRADUATE)

        assert fake_sdk.models.generate_content.call_count == 1

    async def test_unconfigured_client(self, offline_client, retry_policy):
        service = AnalysisService(offline_client, retry_policy)

        with pytest.raises(GeminiUnavailableError):
            await service.analyze(TextContext(content="x"), ComprehensionLevel.GRADUATE)

    async def test_malformed_reply_not_retried(self, gemini_client, fake_sdk, retry_policy, no_sleep):
        # decode error message reads "... (char 500)"
        fake_sdk.models.generate_content.return_value = text_response(" " * 500 + "oops")
        service = AnalysisService(gemini_client, retry_policy)

        with pytest.raises(MalformedResponseError):
            await service.analyze(TextContext(content="x"), ComprehensionLevel.GRADUATE)

        assert fake_sdk.models.generate_content.call_count == 1
        no_sleep.assert_not_awaited()


class TestAnalysisResult:
    """Decoded results are immutable."""

    def test_sequences_are_tuples(self, analysis_json):
        result = parse_analysis(analysis_json)

        assert isinstance(result.glossary, tuple)
        assert isinstance(result.key_insights, tuple)
        with pytest.raises(AttributeError):
            result.key_insights.append("extra")

    def test_lists_frozen_on_construction(self):
        insights = ["one"]
        result = AnalysisResult(summary="s", glossary=[], key_insights=insights)
        insights.append("two")

        assert result.key_insights == ("one",)
        assert result.to_dict()["keyInsights"] == ["one"]
