"""
Tests for the command-line interface.
"""

from ytinterp import cli, session as session_mod
from ytinterp.models import AnalysisStyle, Chapter, HistoryEntry, KnowledgeLevel, VideoInfo
from ytinterp.storage import HistoryStore, KeyValueStore, PreferencesStore
from ytinterp.youtube import VideoMetadata

URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _seed(data_dir):
    video = VideoInfo(
        id="dQw4w9WgXcQ",
        url=URL,
        title="Never Gonna Give You Up",
        thumbnail="",
        chapters=(
            Chapter(id="ch_0", title="Intro", start_time=0, end_time=60),
            Chapter(id="ch_1", title="Chorus", start_time=60, end_time=960),
        ),
    )
    HistoryStore(KeyValueStore(data_dir)).save(
        HistoryEntry(
            id=video.id,
            video=video,
            style=AnalysisStyle.STORYTELLING,
            level=KnowledgeLevel.EXPERT,
            results={"ch_1": "Chorus notes"},
            timestamp=1700000000000,
        )
    )


def _patch_network(monkeypatch, fake_client, *responses):
    async def fake_metadata(url, *, http_client=None):
        return VideoMetadata(id="dQw4w9WgXcQ", url=url, title="Never Gonna Give You Up", thumbnail="")

    client = fake_client(*responses)
    monkeypatch.setattr(session_mod, "fetch_video_metadata", fake_metadata)
    monkeypatch.setattr(cli, "make_client", lambda: client)
    return client


def test_history_list_and_delete(tmp_path, capsys):
    _seed(tmp_path)

    assert cli.main(["history", "--data-dir", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "dQw4w9WgXcQ" in out
    assert "storytelling/expert" in out
    assert "1/2" in out

    assert cli.main(["history", "--delete", "dQw4w9WgXcQ", "--data-dir", str(tmp_path)]) == 0
    assert HistoryStore(KeyValueStore(tmp_path)).load() == []
    assert cli.main(["history", "--delete", "dQw4w9WgXcQ", "--data-dir", str(tmp_path)]) == 1


def test_export_saved_entry(tmp_path, capsys):
    _seed(tmp_path)
    out_file = tmp_path / "notes.md"

    assert cli.main(["export", "dQw4w9WgXcQ", "-o", str(out_file), "--data-dir", str(tmp_path)]) == 0

    md = out_file.read_text(encoding="utf-8")
    assert "## Phase 2: Chorus (1:00)" in md
    assert "Intro" not in md
    assert cli.main(["export", "missing", "--data-dir", str(tmp_path)]) == 1


def test_prefs(tmp_path, capsys):
    assert cli.main(["prefs", "--lang", "en", "--style", "fast_talk", "--data-dir", str(tmp_path)]) == 0

    prefs = PreferencesStore(KeyValueStore(tmp_path)).load()
    assert prefs.language.value == "en"
    assert prefs.style is AnalysisStyle.FAST_TALK
    assert prefs.level is KnowledgeLevel.BEGINNER
    assert "fast_talk" in capsys.readouterr().out


def test_interpret(tmp_path, capsys, monkeypatch, fake_client, llm_response):
    client = _patch_network(
        monkeypatch,
        fake_client,
        llm_response("0:00 - Intro\n3:00 - Chorus"),
        llm_response("Chorus notes", citations=[("Lyrics", "https://example.org/lyrics")]),
    )
    export = tmp_path / "out.md"

    code = cli.main(
        [
            "interpret",
            URL,
            "--chapter",
            "2",
            "--style",
            "dialogue",
            "--export",
            str(export),
            "--data-dir",
            str(tmp_path),
        ]
    )

    assert code == 0
    out = capsys.readouterr().out
    assert "## Chorus (3:00)" in out
    assert "- [Lyrics](https://example.org/lyrics)" in out
    assert "DIALOGUE / Q&A" in client.responses.create.call_args.kwargs["instructions"]
    assert "Chorus notes" in export.read_text(encoding="utf-8")
    assert HistoryStore(KeyValueStore(tmp_path)).get("dQw4w9WgXcQ").style is AnalysisStyle.DIALOGUE


def test_interpret_resume_uses_history(tmp_path, capsys, monkeypatch, fake_client):
    _seed(tmp_path)
    client = _patch_network(monkeypatch, fake_client)

    assert cli.main(["interpret", URL, "--resume", "--chapter", "2", "--data-dir", str(tmp_path)]) == 0

    assert "Chorus notes" in capsys.readouterr().out
    client.responses.create.assert_not_awaited()


def test_interpret_invalid_url(tmp_path, capsys, monkeypatch, fake_client):
    client = fake_client()
    monkeypatch.setattr(cli, "make_client", lambda: client)

    assert cli.main(["interpret", "https://vimeo.com/1", "--data-dir", str(tmp_path)]) == 2

    assert "valid YouTube URL" in capsys.readouterr().err
    client.responses.create.assert_not_awaited()


def test_interpret_analysis_failure(tmp_path, capsys, monkeypatch, fake_client, llm_response):
    _patch_network(monkeypatch, fake_client, llm_response("0:00 - Intro"), RuntimeError("busy"))

    assert cli.main(["interpret", URL, "--data-dir", str(tmp_path)]) == 1

    assert "Analysis failed" in capsys.readouterr().err
    assert HistoryStore(KeyValueStore(tmp_path)).load() == []


def test_interpret_invalid_url_without_api_key(tmp_path, capsys, monkeypatch):
    """A bad URL is reported before the missing API key is noticed."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda *a, **k: False)

    assert cli.main(["interpret", "https://vimeo.com/1", "--data-dir", str(tmp_path)]) == 2

    assert "valid YouTube URL" in capsys.readouterr().err


def test_interpret_missing_api_key(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda *a, **k: False)

    assert cli.main(["interpret", URL, "--data-dir", str(tmp_path)]) == 1

    assert "OPENAI_API_KEY is not set" in capsys.readouterr().err
