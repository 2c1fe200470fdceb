"""
Analysis Service - structured summary, glossary and key insights.

One schema-constrained Gemini request per document; the JSON reply is
decoded into an AnalysisResult. Transient failures are retried by the
RetryPolicy; an empty or malformed reply aborts the analysis.
"""

import json
import logging
import time
from typing import List, Optional

from google.genai import types

from .errors import EmptyResponseError, MalformedResponseError
from .gemini_client import GeminiClient
from .models import (
    AnalysisResult,
    ComprehensionLevel,
    DocumentContext,
    PdfContext,
    UrlContext,
)
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

GLOSSARY_RANGE = (5, 10)
INSIGHTS_RANGE = (3, 5)

ANALYSIS_PROMPT = """
Analyze the provided research paper content.
Target Audience Level: {level}.

Please provide:
1. A comprehensive summary suited for the target audience.
2. A glossary of 5-10 key technical terms used in the text with simple definitions.
3. 3-5 key insights or takeaways from the paper.

Output pure JSON.
"""

ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": types.Schema(
            type=types.Type.STRING,
            description="The main summary of the paper.",
        ),
        "glossary": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "term": types.Schema(type=types.Type.STRING),
                    "definition": types.Schema(type=types.Type.STRING),
                },
                required=["term", "definition"],
            ),
        ),
        "keyInsights": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
        ),
    },
    required=["summary", "glossary", "keyInsights"],
)


def build_instruction(level: ComprehensionLevel) -> str:
    """Instruction block for the requested audience level."""
    return ANALYSIS_PROMPT.format(level=ComprehensionLevel(level).value)


def build_analysis_parts(context: DocumentContext, level: ComprehensionLevel) -> List[types.Part]:
    """
    Frame the document for an analysis request.

    PDFs go inline as binary, URLs as a textual reference Gemini retrieves
    itself, and pasted text as-is; the instruction block always follows.
    """
    instruction = types.Part.from_text(text=build_instruction(level))

    if isinstance(context, PdfContext):
        document = types.Part.from_bytes(data=context.raw_bytes(), mime_type="application/pdf")
    elif isinstance(context, UrlContext):
        document = types.Part.from_text(
            text=f"Please read and analyze the research paper at this URL: {context.content}"
        )
    else:
        document = types.Part.from_text(text=context.content)

    return [document, instruction]


def parse_analysis(raw_text: Optional[str]) -> AnalysisResult:
    """Decode Gemini's JSON reply into an AnalysisResult."""
    if not raw_text:
        raise EmptyResponseError("No response generated")

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Analysis reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError("Analysis reply is not a JSON object")

    result = AnalysisResult.from_dict(data)

    if not GLOSSARY_RANGE[0] <= len(result.glossary) <= GLOSSARY_RANGE[1]:
        logger.warning(f"Glossary has {len(result.glossary)} entries, expected 5-10")
    if not INSIGHTS_RANGE[0] <= len(result.key_insights) <= INSIGHTS_RANGE[1]:
        logger.warning(f"Got {len(result.key_insights)} key insights, expected 3-5")

    return result


class AnalysisService:
    """
    Single-shot structured extraction from a document context.

    Usage:
        service = AnalysisService(GeminiClient())
        result = await service.analyze(context, ComprehensionLevel.UNDERGRADUATE)
    """

    def __init__(self, client: GeminiClient, retry_policy: Optional[RetryPolicy] = None):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()

    def _request_config(self) -> types.GenerateContentConfig:
        thinking = None
        if self.client.config.thinking_budget:
            thinking = types.ThinkingConfig(thinking_budget=self.client.config.thinking_budget)

        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=ANALYSIS_SCHEMA,
            thinking_config=thinking,
        )

    async def analyze(self, context: DocumentContext, level: ComprehensionLevel) -> AnalysisResult:
        """
        Analyze a document for the given audience level.

        Args:
            context: Document to analyze
            level: Target comprehension level

        Returns:
            AnalysisResult with summary, glossary and key insights

        Raises:
            EmptyResponseError: If Gemini returned no payload
            MalformedResponseError: If the payload does not match the schema
        """
        contents = types.Content(role="user", parts=build_analysis_parts(context, level))
        config = self._request_config()

        async def generate_op() -> AnalysisResult:
            response = await self.client.generate(
                model=self.client.config.analysis_model,
                contents=contents,
                config=config,
            )
            return parse_analysis(getattr(response, "text", None))

        start_time = time.perf_counter()
        try:
            result = await self.retry_policy.run(generate_op)
        except Exception as e:
            logger.error(f"Analysis failed: {e}")
            raise

        latency = (time.perf_counter() - start_time) * 1000
        logger.info(f"Analyzed {context.kind.value} document in {latency:.0f}ms")
        return result
