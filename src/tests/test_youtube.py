"""
Tests for YouTube URL handling and metadata lookup.
"""

import asyncio

import httpx
import pytest

from ytinterp.youtube import (
    InvalidVideoURLError,
    extract_video_id,
    fetch_video_metadata,
    validate_video_url,
    watch_url,
)

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _run(url, handler):
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_video_metadata(url, http_client=client)

    return asyncio.run(go())


def test_extract_video_id():
    assert extract_video_id(URL) == "dQw4w9WgXcQ"
    assert extract_video_id("https://youtu.be/dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert extract_video_id("https://youtu.be/dQw4w9WgXcQ?si=abc") == "dQw4w9WgXcQ"
    assert extract_video_id("https://www.youtube.com/embed/dQw4w9WgXcQ") == "dQw4w9WgXcQ"
    assert extract_video_id("https://www.youtube.com/watch?v=short") is None
    assert extract_video_id("not a url") is None


def test_validate_video_url_rejects_other_sites():
    with pytest.raises(InvalidVideoURLError):
        validate_video_url("https://vimeo.com/123456")
    with pytest.raises(InvalidVideoURLError):
        validate_video_url("")
    with pytest.raises(InvalidVideoURLError):
        validate_video_url("https://www.youtube.com/feed/trending")


def test_watch_url():
    assert watch_url("dQw4w9WgXcQ") == URL
    assert watch_url("dQw4w9WgXcQ", 0) == URL + "&t=0s"
    assert watch_url("dQw4w9WgXcQ", 330) == URL + "&t=330s"


def test_fetch_video_metadata():
    def handler(request):
        assert request.url.host == "noembed.com"
        assert request.url.params["url"] == URL
        return httpx.Response(200, json={"title": "Never Gonna Give You Up", "thumbnail_url": "https://i/x.jpg"})

    meta = _run(URL, handler)

    assert meta.id == "dQw4w9WgXcQ"
    assert meta.url == URL
    assert meta.title == "Never Gonna Give You Up"
    assert meta.thumbnail == "https://i/x.jpg"


def test_fetch_video_metadata_missing_fields():
    meta = _run(URL, lambda request: httpx.Response(200, json={}))

    assert meta.title == "Video dQw4w9WgXcQ"
    assert meta.thumbnail == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="oops"),
        httpx.Response(200, json={"error": "no matching providers found"}),
        httpx.Response(200, text="<html>"),
    ],
)
def test_fetch_video_metadata_falls_back(response):
    meta = _run(URL, lambda request: response)

    assert meta.title == "YouTube Video (dQw4w9WgXcQ)"
    assert meta.thumbnail == "https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg"


def test_fetch_video_metadata_network_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    meta = _run(URL, handler)

    assert meta.title == "YouTube Video (dQw4w9WgXcQ)"


def test_fetch_video_metadata_invalid_url_makes_no_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(InvalidVideoURLError):
        _run("https://example.com/video", handler)
    assert calls == []
