"""
Per-chapter interpretation with a grounded LLM request.
"""

import logging

from openai import AsyncOpenAI

from .llm import DEFAULT_MODEL, complete
from .models import AnalysisResponse, AnalysisStyle, Chapter, KnowledgeLevel, Language, VideoInfo
from .prompts import build_analysis_prompts

logger = logging.getLogger("ytinterp")

ANALYSIS_TEMPERATURE = 0.4
EMPTY_RESULT_TEXT = "Failed to generate interpretation."


class AnalysisError(RuntimeError):
    """Raised when the interpretation request for a chapter fails."""


async def analyze_chapter(
    client: AsyncOpenAI,
    video: VideoInfo,
    chapter: Chapter,
    style: AnalysisStyle,
    level: KnowledgeLevel,
    language: Language,
    *,
    model: str = DEFAULT_MODEL,
) -> AnalysisResponse:
    """Interpret one chapter. Request failures raise AnalysisError and are not retried."""
    system, user = build_analysis_prompts(video, chapter, style, level, language)

    logger.info(
        "Interpreting chapter '%s' (%s, %s, %s)", chapter.title, style.value, level.value, language.value
    )
    try:
        result = await complete(
            client,
            user,
            system=system,
            temperature=ANALYSIS_TEMPERATURE,
            grounded=True,
            model=model,
        )
    except Exception as e:
        logger.error("Chapter analysis failed: %s", e)
        msg = "Analysis failed. The model API may be busy or the video content is restricted."
        raise AnalysisError(msg) from e

    logger.info("Chapter '%s' interpreted (%d sources)", chapter.title, len(result.sources))
    return AnalysisResponse(text=result.text or EMPTY_RESULT_TEXT, sources=result.sources)
