"""
Markdown export of an interpretation session.
"""

import logging
import re
from datetime import datetime
from pathlib import Path

from .models import AnalysisStyle, KnowledgeLevel, Language, VideoInfo
from .timestamps import format_time
from .youtube import watch_url

logger = logging.getLogger("ytinterp")

STYLE_LABELS = {
    Language.EN: {
        AnalysisStyle.CLASSROOM: "Classroom (Formal & Structured)",
        AnalysisStyle.STORYTELLING: "Storytelling (Vivid & Fun)",
        AnalysisStyle.INTENSIVE: "Intensive (Deep Dive Details)",
        AnalysisStyle.FAST_TALK: "Fast Talk (Key Points Summary)",
        AnalysisStyle.DIALOGUE: "Dialogue (Q&A Style)",
    },
    Language.ZH: {
        AnalysisStyle.CLASSROOM: "课堂式 (严谨、结构化)",
        AnalysisStyle.STORYTELLING: "讲故事 (生动、趣味)",
        AnalysisStyle.INTENSIVE: "精读 (深度剖析细节)",
        AnalysisStyle.FAST_TALK: "速讲 (高效总结要点)",
        AnalysisStyle.DIALOGUE: "对话 (问答交互感)",
    },
}

LEVEL_LABELS = {
    Language.EN: {
        KnowledgeLevel.BEGINNER: "Beginner (Simple & Clear)",
        KnowledgeLevel.INTERMEDIATE: "Intermediate (Balanced Professionalism)",
        KnowledgeLevel.EXPERT: "Expert (Technical Discussion)",
    },
    Language.ZH: {
        KnowledgeLevel.BEGINNER: "初学者 (通俗易懂)",
        KnowledgeLevel.INTERMEDIATE: "进阶者 (平衡专业与科普)",
        KnowledgeLevel.EXPERT: "专家 (深度专业讨论)",
    },
}

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|]')


def export_filename(title: str) -> str:
    return f"{_UNSAFE_FILENAME_RE.sub('', title)}_Interpretation.md"


def render_markdown(
    video: VideoInfo,
    results: dict[str, str],
    style: AnalysisStyle,
    level: KnowledgeLevel,
    language: Language = Language.EN,
    exported_at: datetime | None = None,
) -> str:
    """Render every interpreted chapter, in chapter order, as one document."""
    exported_at = exported_at or datetime.now()

    content = f"# {video.title}\n\n"
    content += f"**Source URL:** {video.url}\n"
    content += f"**Style:** {STYLE_LABELS[language][style]}\n"
    content += f"**Level:** {LEVEL_LABELS[language][level]}\n"
    content += f"**Export Date:** {exported_at.strftime('%Y-%m-%d %H:%M:%S')}\n\n"
    content += "---\n\n"

    for idx, chapter in enumerate(video.chapters):
        body = results.get(chapter.id)
        if not body:
            continue
        content += f"## Phase {idx + 1}: {chapter.title} ({format_time(chapter.start_time)})\n\n"
        content += f"[Watch on YouTube]({watch_url(video.id, chapter.start_time)})\n\n"
        content += f"{body}\n\n"
        content += "---\n\n"

    return content


def write_markdown(path: str | Path, content: str) -> Path:
    """Write an export; a directory path gets the default file name."""
    path = Path(path)
    if path.is_dir():
        title = content.splitlines()[0].removeprefix("# ") if content else "video"
        path = path / export_filename(title)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Markdown export written to %s", path)
    return path
