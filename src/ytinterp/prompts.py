"""
Prompt templates for chapter interpretation.
"""

from .models import AnalysisStyle, Chapter, KnowledgeLevel, Language, VideoInfo

STYLE_INSTRUCTIONS = {
    AnalysisStyle.CLASSROOM: """
STYLE: CLASSROOM / ACADEMIC
- Structure the output like a high-quality set of lecture notes.
- Use headers like "## Core Concepts", "## Detailed Explanation", and "## Key Takeaways".
- Bold key terms and provide brief definitions if they are technical.
- Tone: Educational, structured, encouraging, and clear.
- End with a "Self-Check Question" related to the content.
""",
    AnalysisStyle.STORYTELLING: """
STYLE: STORYTELLING / NARRATIVE
- Transform the information into a compelling narrative flow.
- Use vivid language and analogies to explain what is happening in the video.
- Connect the facts together like a story with a beginning, middle, and end.
- Tone: Engaging, warm, captivating, like a blog post or a documentary narrator.
- Avoid overly rigid lists; use paragraphs that flow into each other.
""",
    AnalysisStyle.INTENSIVE: """
STYLE: INTENSIVE / DEEP DIVE
- Provide a rigorous, granular analysis of the content.
- Scrutinize specific claims, data points, or arguments presented.
- If the video mentions specific tools, theories, or people, provide context about them.
- Tone: Critical, analytical, professional, and dense with information.
- Highlight "Nuances" or "Hidden Details" that a casual viewer might miss.
""",
    AnalysisStyle.FAST_TALK: """
STYLE: FAST TALK / EXECUTIVE SUMMARY
- Focus on high-density information with minimal fluff.
- Use bullet points extensively.
- Sections: "TL;DR", "Actionable Insights", "Bottom Line".
- Tone: Direct, efficient, business-like.
- Maximum impact, minimum reading time.
""",
    AnalysisStyle.DIALOGUE: """
STYLE: DIALOGUE / Q&A
- Present the analysis as a conversation between a curious Student and an Expert Mentor.
- The Student asks relevant questions based on the chapter title.
- The Mentor answers using the specific content from the video.
- Tone: Conversational, Socratic, easy to follow.
""",
}

LEVEL_INSTRUCTIONS = {
    KnowledgeLevel.BEGINNER: """
LEVEL: BEGINNER (ELI5)
- Assume the reader has ZERO prior knowledge of this topic.
- Use simple analogies to explain complex terms.
- Avoid jargon where possible, or explain it immediately in plain language.
- Keep sentences relatively short and digestible.
""",
    KnowledgeLevel.INTERMEDIATE: """
LEVEL: INTERMEDIATE
- Assume the reader has a basic understanding but wants to learn more.
- Balance professional terminology with clear explanations.
- Focus on "How" and "Why", not just "What".
""",
    KnowledgeLevel.EXPERT: """
LEVEL: EXPERT
- Use industry-standard terminology freely.
- Don't waste time explaining basic concepts.
- Focus on advanced implications, edge cases, and technical specifics.
- Treat the reader as a peer in the field.
""",
}

OUTPUT_LANGUAGES = {
    Language.ZH: "Simplified Chinese (简体中文)",
    Language.EN: "English",
}


def style_instruction(style: AnalysisStyle) -> str:
    return STYLE_INSTRUCTIONS.get(style, "STYLE: General Summary. Clear and concise.")


def level_instruction(level: KnowledgeLevel) -> str:
    return LEVEL_INSTRUCTIONS.get(level, "LEVEL: General Audience.")


def build_analysis_prompts(
    video: VideoInfo,
    chapter: Chapter,
    style: AnalysisStyle,
    level: KnowledgeLevel,
    language: Language,
) -> tuple[str, str]:
    """Return the (system, user) prompt pair for interpreting one chapter."""
    target_lang = OUTPUT_LANGUAGES.get(language, "English")

    system = f"""ROLE: You are an Elite Video Content Analyst and Educator.
OBJECTIVE: Specific, accurate, and high-value interpretation of a specific video chapter.

TARGET VIDEO:
- Title: "{video.title}"
- URL: {video.url}

CURRENT CHAPTER CONTEXT:
- Chapter Title: "{chapter.title}"
- Timeframe: {chapter.start_time}s to {chapter.end_time}s
{style_instruction(style)}
{level_instruction(level)}
CRITICAL INSTRUCTIONS:
1. **GROUNDING**: You MUST use the web search tool to find the actual transcript, summary, or content discussion of THIS specific video. Do not guess.
2. **ACCURACY**: Base your interpretation strictly on the likely content of this video chapter.
3. **FORMAT**: Output strictly in Markdown. Use Bold for emphasis.
4. **LANGUAGE**: Output entirely in {target_lang}.
"""

    user = f"""Please interpret the chapter "{chapter.title}" of the video "{video.title}".

Using the search tool, verify what is actually discussed or shown during this segment.
Synthesize this information according to the requested "{style.value}" style and "{level.value}" level.

If the specific details of this chapter are hard to find, provide the best logical reconstruction based on the video's general topic and this chapter's title, but explicitly state you are inferring based on context.
"""
    return system, user
