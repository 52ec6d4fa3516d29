"""
Data models for the video interpreter.
"""

from dataclasses import dataclass, field
from enum import Enum


class Language(str, Enum):
    ZH = "zh"
    EN = "en"


class AnalysisStyle(str, Enum):
    CLASSROOM = "classroom"
    STORYTELLING = "storytelling"
    INTENSIVE = "intensive"
    FAST_TALK = "fast_talk"
    DIALOGUE = "dialogue"


class KnowledgeLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


@dataclass(frozen=True)
class Chapter:
    """A titled, time-bounded segment of a video."""

    id: str
    title: str
    start_time: int  # seconds
    end_time: int  # seconds

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Chapter":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            start_time=int(data["startTime"]),
            end_time=int(data["endTime"]),
        )


@dataclass(frozen=True)
class VideoInfo:
    """Video metadata plus its detected chapters."""

    id: str
    url: str
    title: str
    thumbnail: str
    duration: int = 0  # seconds, 0 when unknown
    chapters: tuple[Chapter, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "chapters": [c.to_dict() for c in self.chapters],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VideoInfo":
        return cls(
            id=data["id"],
            url=data["url"],
            title=data.get("title", ""),
            thumbnail=data.get("thumbnail", ""),
            duration=int(data.get("duration") or 0),
            chapters=tuple(Chapter.from_dict(c) for c in data.get("chapters", [])),
        )


@dataclass(frozen=True)
class Source:
    """A web source cited by a grounded response."""

    title: str
    uri: str


@dataclass
class AnalysisResponse:
    """Interpretation text for one chapter and the sources it cites."""

    text: str
    sources: list[Source] = field(default_factory=list)


@dataclass
class Preferences:
    """User preferences, persisted independently of history."""

    language: Language = Language.ZH
    style: AnalysisStyle = AnalysisStyle.CLASSROOM
    level: KnowledgeLevel = KnowledgeLevel.BEGINNER

    def to_dict(self) -> dict:
        return {"lang": self.language.value, "style": self.style.value, "level": self.level.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Preferences":
        """Build preferences, keeping the default for any unknown value."""
        prefs = cls()
        try:
            prefs.language = Language(data.get("lang", prefs.language))
        except ValueError:
            pass
        try:
            prefs.style = AnalysisStyle(data.get("style", prefs.style))
        except ValueError:
            pass
        try:
            prefs.level = KnowledgeLevel(data.get("level", prefs.level))
        except ValueError:
            pass
        return prefs


@dataclass
class HistoryEntry:
    """A persisted snapshot of one video's interpretation session."""

    id: str  # video id
    video: VideoInfo
    style: AnalysisStyle
    level: KnowledgeLevel
    results: dict[str, str] = field(default_factory=dict)  # chapter id -> markdown
    timestamp: int = 0  # milliseconds since epoch

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "videoInfo": self.video.to_dict(),
            "style": self.style.value,
            "level": self.level.value,
            "results": dict(self.results),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            id=data["id"],
            video=VideoInfo.from_dict(data["videoInfo"]),
            style=AnalysisStyle(data["style"]),
            level=KnowledgeLevel(data["level"]),
            results=dict(data.get("results") or {}),
            timestamp=int(data.get("timestamp") or 0),
        )
