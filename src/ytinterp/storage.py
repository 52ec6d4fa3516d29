"""
Local persistence: interpretation history and user preferences.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from .models import HistoryEntry, Preferences

logger = logging.getLogger("ytinterp")

HISTORY_KEY = "yt_interpreter_history"
PREFS_KEY = "yt_interpreter_prefs"
MAX_HISTORY = 50


def default_data_dir() -> Path:
    return Path(os.getenv("YTINTERP_HOME") or Path.home() / ".ytinterp")


class KeyValueStore:
    """
    JSON documents stored one file per key.

    Writes land in a temporary file that is moved over the target, so a
    reader never sees half a document. There is no locking between
    processes; the last writer wins.
    """

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory) if directory else default_data_dir()

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str):
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable %s: %s", path, e)
            return None

    def set(self, key: str, value) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class HistoryStore:
    """Interpretation history, most recent first, one entry per video."""

    def __init__(self, kv: KeyValueStore, max_entries: int = MAX_HISTORY):
        self.kv = kv
        self.max_entries = max_entries

    def load(self) -> list[HistoryEntry]:
        data = self.kv.get(HISTORY_KEY)
        if not isinstance(data, list):
            return []
        entries = []
        for item in data:
            try:
                entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed history entry: %s", e)
        return entries

    def get(self, video_id: str) -> HistoryEntry | None:
        for entry in self.load():
            if entry.id == video_id:
                return entry
        return None

    def save(self, entry: HistoryEntry) -> None:
        """Insert or replace the entry for a video and move it to the front."""
        entries = self.load()
        index = next((i for i, e in enumerate(entries) if e.id == entry.id), None)
        if index is not None:
            del entries[index]
        entries.insert(0, entry)
        entries = entries[: self.max_entries]
        self._write(entries)
        logger.debug("Saved history entry %s (%d entries)", entry.id, len(entries))

    def delete(self, video_id: str) -> bool:
        entries = self.load()
        kept = [e for e in entries if e.id != video_id]
        self._write(kept)
        return len(kept) != len(entries)

    def _write(self, entries: list[HistoryEntry]) -> None:
        self.kv.set(HISTORY_KEY, [e.to_dict() for e in entries])


class PreferencesStore:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def load(self) -> Preferences | None:
        data = self.kv.get(PREFS_KEY)
        if not isinstance(data, dict):
            return None
        return Preferences.from_dict(data)

    def save(self, prefs: Preferences) -> None:
        self.kv.set(PREFS_KEY, prefs.to_dict())
