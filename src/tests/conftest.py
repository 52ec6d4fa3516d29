"""
Shared fixtures: a fake OpenAI client and stores in a temp directory.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from ytinterp.storage import HistoryStore, KeyValueStore, PreferencesStore


def make_response(text: str, citations: list[tuple[str, str]] | None = None):
    """Build an object shaped like a Responses API result."""
    annotations = [
        SimpleNamespace(type="url_citation", title=title, url=url) for title, url in (citations or [])
    ]
    message = SimpleNamespace(
        type="message",
        content=[SimpleNamespace(type="output_text", text=text, annotations=annotations)],
    )
    return SimpleNamespace(output_text=text, output=[SimpleNamespace(type="web_search_call"), message])


def make_client(*responses):
    """Fake AsyncOpenAI whose responses.create returns (or raises) each item in turn."""
    create = AsyncMock(side_effect=list(responses))
    return SimpleNamespace(responses=SimpleNamespace(create=create))


@pytest.fixture
def llm_response():
    return make_response


@pytest.fixture
def fake_client():
    return make_client


@pytest.fixture
def kv(tmp_path):
    return KeyValueStore(tmp_path / "data")


@pytest.fixture
def history(kv):
    return HistoryStore(kv)


@pytest.fixture
def prefs_store(kv):
    return PreferencesStore(kv)
