"""
YouTube URL handling and metadata lookup.
"""

import logging
import re
from dataclasses import dataclass

import httpx

logger = logging.getLogger("ytinterp")

NOEMBED_URL = "https://noembed.com/embed"

_VIDEO_ID_RE = re.compile(r"^.*((youtu.be/)|(v/)|(/u/\w/)|(embed/)|(watch\?))\??v?=?([^#&?]*).*")


class InvalidVideoURLError(ValueError):
    """Raised for URLs that do not point at a YouTube video."""


@dataclass(frozen=True)
class VideoMetadata:
    """Best-effort metadata for a video."""

    id: str
    url: str
    title: str
    thumbnail: str


def extract_video_id(url: str) -> str | None:
    """Return the 11-character video id of a YouTube URL, or None."""
    m = _VIDEO_ID_RE.match(url)
    if m and len(m.group(7)) == 11:
        return m.group(7)
    return None


def validate_video_url(url: str) -> str:
    """Check that ``url`` is a YouTube video URL and return its video id."""
    url = (url or "").strip()
    if not url or ("youtube.com" not in url and "youtu.be" not in url):
        raise InvalidVideoURLError("Please enter a valid YouTube URL.")
    video_id = extract_video_id(url)
    if not video_id:
        raise InvalidVideoURLError(f"Invalid YouTube URL: {url}")
    return video_id


def thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


def watch_url(video_id: str, start_time: int | None = None) -> str:
    """Link to a video, optionally at a start offset in seconds."""
    if start_time is not None:
        return f"https://www.youtube.com/watch?v={video_id}&t={start_time}s"
    return f"https://www.youtube.com/watch?v={video_id}"


async def fetch_video_metadata(
    url: str, *, http_client: httpx.AsyncClient | None = None
) -> VideoMetadata:
    """
    Fetch title and thumbnail for a video from noembed.

    Raises InvalidVideoURLError for non-video URLs. Any failure of the
    lookup itself is logged and answered with placeholder metadata.
    """
    video_id = validate_video_url(url)
    url = url.strip()

    try:
        if http_client is None:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                data = await _fetch_noembed(client, url)
        else:
            data = await _fetch_noembed(http_client, url)
    except (httpx.HTTPError, ValueError, RuntimeError) as e:
        logger.warning("Metadata fetch failed, using fallback: %s", e)
        return VideoMetadata(
            id=video_id,
            url=url,
            title=f"YouTube Video ({video_id})",
            thumbnail=thumbnail_url(video_id),
        )

    return VideoMetadata(
        id=video_id,
        url=url,
        title=data.get("title") or f"Video {video_id}",
        thumbnail=data.get("thumbnail_url") or thumbnail_url(video_id),
    )


async def _fetch_noembed(client: httpx.AsyncClient, url: str) -> dict:
    r = await client.get(NOEMBED_URL, params={"url": url}, headers={"Accept": "application/json"})
    r.raise_for_status()
    data = r.json()
    if not isinstance(data, dict):
        raise ValueError("Unexpected metadata payload")
    if data.get("error"):
        raise RuntimeError(data["error"])
    logger.debug("Metadata for %s: %s", url, data.get("title"))
    return data
