"""
Chapter detection for a video using a grounded LLM request.
"""

import logging

from openai import AsyncOpenAI

from .llm import DEFAULT_MODEL, complete
from .models import Chapter
from .timestamps import parse_timestamp_line

logger = logging.getLogger("ytinterp")

LAST_CHAPTER_SECS = 900
EXTRACTION_TEMPERATURE = 0.1

# Used when the model answered but listed no timestamps
PLACEHOLDER_CHAPTERS = (
    Chapter(id="p1", title="Beginning & Context", start_time=0, end_time=300),
    Chapter(id="p2", title="Core Content", start_time=300, end_time=600),
    Chapter(id="p3", title="Key Details", start_time=600, end_time=900),
    Chapter(id="p4", title="Conclusion", start_time=900, end_time=1200),
)

# Used when the request itself failed
FULL_VIDEO_CHAPTER = Chapter(id="full", title="Complete Analysis", start_time=0, end_time=3600)


def build_extraction_prompt(url: str, title: str) -> str:
    return f"""You are a YouTube Metadata Expert.
Task: Identify the chapters/segments for this video: "{title}" ({url}).

Steps:
1. Use web search to find the official chapters, timestamps, or a content breakdown for this specific video.
2. If official chapters exist, extract them exactly.
3. If NO official chapters exist, logically divide the video content into 4-6 distinct, meaningful segments based on typical structure for this type of content.

Output Format (strictly adhere to this list format):
0:00 - Introduction
5:30 - Topic Name
...

Do not add any conversational text. Only the list."""


def parse_chapters(text: str) -> list[Chapter]:
    """Turn ``<timestamp> - <title>`` lines into chapters ordered by start time, with end times."""
    parsed = []
    for index, line in enumerate(text.splitlines()):
        hit = parse_timestamp_line(line)
        if hit is None:
            continue
        start, title = hit
        parsed.append((f"ch_{index}", title, start))
    parsed.sort(key=lambda item: item[2])

    chapters = []
    for i, (chapter_id, title, start) in enumerate(parsed):
        if i + 1 < len(parsed):
            end = parsed[i + 1][2]
        else:
            end = start + LAST_CHAPTER_SECS
        chapters.append(Chapter(id=chapter_id, title=title, start_time=start, end_time=end))
    return chapters


async def extract_chapters(
    client: AsyncOpenAI, url: str, title: str, *, model: str = DEFAULT_MODEL
) -> list[Chapter]:
    """
    Ask the model for the chapter list of a video.

    Never raises for model or network failures: an unparseable answer gives
    the four placeholder chapters, a failed request gives one chapter
    spanning the whole video.
    """
    prompt = build_extraction_prompt(url, title or "YouTube Video")
    try:
        result = await complete(
            client, prompt, temperature=EXTRACTION_TEMPERATURE, grounded=True, model=model
        )
    except Exception as e:
        logger.error("Chapter extraction failed: %s", e)
        return [FULL_VIDEO_CHAPTER]

    chapters = parse_chapters(result.text)
    if not chapters:
        logger.warning("No timestamps found in chapter list, using placeholder chapters")
        return list(PLACEHOLDER_CHAPTERS)

    logger.info("Detected %d chapters", len(chapters))
    return chapters
