"""
Interpretation session: drives metadata lookup, chapter detection,
lazy per-chapter analysis, history persistence and export.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import httpx
from openai import AsyncOpenAI
from tqdm.asyncio import tqdm

from .analysis import AnalysisError, analyze_chapter
from .chapters import extract_chapters
from .exports import render_markdown
from .llm import DEFAULT_MODEL
from .models import (
    AnalysisStyle,
    Chapter,
    HistoryEntry,
    KnowledgeLevel,
    Language,
    Preferences,
    Source,
    VideoInfo,
)
from .storage import HistoryStore, PreferencesStore
from .youtube import InvalidVideoURLError, fetch_video_metadata

logger = logging.getLogger("ytinterp")


class ChapterState(str, Enum):
    NOT_STARTED = "not_started"
    ANALYZING = "analyzing"
    COMPLETE = "complete"


@dataclass
class AppState:
    """Mutable state of one session, owned by InterpreterSession."""

    video: VideoInfo | None = None
    active_index: int = 0
    results: dict[str, str] = field(default_factory=dict)  # chapter id -> markdown
    sources: dict[str, list[Source]] = field(default_factory=dict)
    in_flight: set[str] = field(default_factory=set)
    analyzing: str | None = None  # chapter id behind the loading indicator
    error: str | None = None

    @property
    def active_chapter(self) -> Chapter | None:
        if self.video is None or not self.video.chapters:
            return None
        return self.video.chapters[self.active_index]

    def chapter_state(self, chapter_id: str) -> ChapterState:
        if chapter_id in self.results:
            return ChapterState.COMPLETE
        if chapter_id in self.in_flight:
            return ChapterState.ANALYZING
        return ChapterState.NOT_STARTED


class InterpreterSession:
    def __init__(
        self,
        client: AsyncOpenAI,
        history: HistoryStore,
        preferences: PreferencesStore,
        *,
        model: str = DEFAULT_MODEL,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client = client
        self.history = history
        self.preferences_store = preferences
        self.model = model
        self.http_client = http_client
        self.prefs = preferences.load() or Preferences()
        self.state = AppState()

    async def load_video(self, url: str) -> VideoInfo:
        """Look up a video and its chapters, starting a fresh session."""
        self.state.error = None
        try:
            metadata = await fetch_video_metadata(url, http_client=self.http_client)
        except InvalidVideoURLError as e:
            self.state.error = str(e)
            raise

        logger.info("Detecting chapters for '%s'", metadata.title)
        chapters = await extract_chapters(self.client, metadata.url, metadata.title, model=self.model)
        video = VideoInfo(
            id=metadata.id,
            url=metadata.url,
            title=metadata.title,
            thumbnail=metadata.thumbnail,
            duration=0,
            chapters=tuple(chapters),
        )
        self.state = AppState(video=video)
        return video

    def restore(self, entry: HistoryEntry) -> None:
        """Reopen a saved session without any network request."""
        self.state = AppState(video=entry.video, results=dict(entry.results))
        self.set_preferences(style=entry.style, level=entry.level)
        logger.info("Restored '%s' from history (%d results)", entry.video.title, len(entry.results))

    def restore_from_history(self, video_id: str) -> bool:
        entry = self.history.get(video_id)
        if entry is None:
            return False
        self.restore(entry)
        return True

    def set_preferences(
        self,
        language: Language | None = None,
        style: AnalysisStyle | None = None,
        level: KnowledgeLevel | None = None,
    ) -> Preferences:
        if language is not None:
            self.prefs.language = language
        if style is not None:
            self.prefs.style = style
        if level is not None:
            self.prefs.level = level
        self.preferences_store.save(self.prefs)
        return self.prefs

    async def select_chapter(self, index: int) -> str | None:
        """Make a chapter active and interpret it unless already done."""
        if self.state.video is None or not self.state.video.chapters:
            return None
        self.state.active_index = max(0, min(index, len(self.state.video.chapters) - 1))
        return await self.analyze_active()

    async def next_chapter(self) -> str | None:
        return await self.select_chapter(self.state.active_index + 1)

    async def previous_chapter(self) -> str | None:
        return await self.select_chapter(self.state.active_index - 1)

    async def analyze_active(self) -> str | None:
        """
        Interpret the active chapter.

        Cached results return without a request. The result of a request is
        committed under its chapter id even if another chapter became active
        meanwhile; it is dropped if a different video was loaded.
        """
        video = self.state.video
        chapter = self.state.active_chapter
        if video is None or chapter is None:
            return None

        cached = self.state.results.get(chapter.id)
        if cached is not None:
            return cached
        if chapter.id in self.state.in_flight:
            return None

        state = self.state
        state.in_flight.add(chapter.id)
        state.analyzing = chapter.id
        state.error = None
        try:
            response = await analyze_chapter(
                self.client,
                video,
                chapter,
                self.prefs.style,
                self.prefs.level,
                self.prefs.language,
                model=self.model,
            )
        except AnalysisError as e:
            state.error = str(e)
            raise
        finally:
            state.in_flight.discard(chapter.id)
            if state.analyzing == chapter.id:
                state.analyzing = None

        if self.state is not state:
            logger.info("Discarding interpretation of '%s': a different video was loaded", chapter.title)
            return response.text

        state.results[chapter.id] = response.text
        state.sources[chapter.id] = response.sources
        self.history.save(self.history_entry())
        return response.text

    async def analyze_all(self, progress: bool = True) -> dict[str, str]:
        """Interpret every chapter in order, one request at a time."""
        if self.state.video is None:
            return {}
        indices = range(len(self.state.video.chapters))
        for index in tqdm(indices, desc="Interpreting chapters", disable=not progress):
            await self.select_chapter(index)
        return dict(self.state.results)

    def history_entry(self) -> HistoryEntry:
        if self.state.video is None:
            raise RuntimeError("No video loaded")
        return HistoryEntry(
            id=self.state.video.id,
            video=self.state.video,
            style=self.prefs.style,
            level=self.prefs.level,
            results=dict(self.state.results),
            timestamp=int(time.time() * 1000),
        )

    def export_markdown(self, exported_at: datetime | None = None) -> str:
        if self.state.video is None:
            raise RuntimeError("No video loaded")
        return render_markdown(
            self.state.video,
            self.state.results,
            self.prefs.style,
            self.prefs.level,
            self.prefs.language,
            exported_at=exported_at,
        )
