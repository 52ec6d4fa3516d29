"""
Command-line interface for the video interpreter.
"""

import argparse
import asyncio
import logging
import os
import pathlib
import sys
from datetime import datetime

from dotenv import load_dotenv

from .analysis import AnalysisError
from .exports import LEVEL_LABELS, STYLE_LABELS, export_filename, render_markdown, write_markdown
from .llm import DEFAULT_MODEL, make_client
from .models import AnalysisStyle, KnowledgeLevel, Language, Preferences
from .session import InterpreterSession
from .storage import HistoryStore, KeyValueStore, PreferencesStore
from .timestamps import format_time
from .youtube import InvalidVideoURLError, validate_video_url

logger = logging.getLogger("ytinterp")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _add_common(ap: argparse.ArgumentParser) -> None:
    ap.add_argument(
        "--data-dir",
        default=None,
        help="Where history and preferences are stored (default: $YTINTERP_HOME or ~/.ytinterp)",
    )
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")


def _add_prefs(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--lang", choices=[x.value for x in Language], default=None, help="Output language")
    ap.add_argument("--style", choices=[x.value for x in AnalysisStyle], default=None)
    ap.add_argument("--level", choices=[x.value for x in KnowledgeLevel], default=None)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(prog="ytinterp", description="Chapter-by-chapter YouTube video interpreter")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("interpret", help="Detect chapters of a video and interpret them")
    p.add_argument("url", help="YouTube video URL")
    _add_prefs(p)
    p.add_argument(
        "--chapter",
        type=int,
        action="append",
        default=None,
        help="1-based chapter number to interpret (repeatable; default: 1)",
    )
    p.add_argument("--all", action="store_true", help="Interpret every chapter")
    p.add_argument(
        "--resume", action="store_true", help="Reuse chapters and results saved in history for this video"
    )
    p.add_argument("--export", default=None, help="Write a markdown export to this file or directory")
    p.add_argument("--model", default=os.getenv("YTINTERP_MODEL", DEFAULT_MODEL))
    _add_common(p)

    p = sub.add_parser("history", help="List or delete saved interpretations")
    p.add_argument("--delete", metavar="VIDEO_ID", default=None)
    _add_common(p)

    p = sub.add_parser("export", help="Export a saved interpretation as markdown")
    p.add_argument("video_id")
    p.add_argument("--output", "-o", default=None, help="Output file or directory (default: current directory)")
    _add_common(p)

    p = sub.add_parser("prefs", help="Show or change saved preferences")
    _add_prefs(p)
    _add_common(p)

    return ap.parse_args(argv)


def _apply_prefs(session: InterpreterSession, args: argparse.Namespace) -> Preferences:
    return session.set_preferences(
        language=Language(args.lang) if args.lang else None,
        style=AnalysisStyle(args.style) if args.style else None,
        level=KnowledgeLevel(args.level) if args.level else None,
    )


async def run_interpret(args: argparse.Namespace, kv: KeyValueStore) -> int:
    try:
        video_id = validate_video_url(args.url)
    except InvalidVideoURLError as e:
        print(e, file=sys.stderr)
        return 2

    try:
        client = make_client()
    except RuntimeError as e:
        print(e, file=sys.stderr)
        return 1

    session = InterpreterSession(
        client,
        HistoryStore(kv),
        PreferencesStore(kv),
        model=args.model,
    )

    if args.resume and session.restore_from_history(video_id):
        logger.info("Resuming '%s' from history", session.state.video.title)
    else:
        try:
            await session.load_video(args.url)
        except InvalidVideoURLError as e:
            print(e, file=sys.stderr)
            return 2
    _apply_prefs(session, args)

    video = session.state.video
    logger.info("%d chapters for '%s'", len(video.chapters), video.title)
    for i, chapter in enumerate(video.chapters, 1):
        logger.info("  %d. [%s] %s", i, format_time(chapter.start_time), chapter.title)

    try:
        if args.all:
            await session.analyze_all()
            selected = range(len(video.chapters))
        else:
            last = len(video.chapters) - 1
            selected = [max(0, min(n - 1, last)) for n in (args.chapter or [1])]
            for index in selected:
                await session.select_chapter(index)
    except AnalysisError as e:
        print(e, file=sys.stderr)
        return 1

    for index in selected:
        chapter = video.chapters[index]
        body = session.state.results.get(chapter.id)
        if body is None:
            continue
        print(f"## {chapter.title} ({format_time(chapter.start_time)})\n")
        print(body)
        for source in session.state.sources.get(chapter.id, []):
            print(f"- [{source.title}]({source.uri})")
        print()

    if args.export:
        try:
            path = write_markdown(args.export, session.export_markdown())
        except OSError as e:
            print(f"Export failed: {e}", file=sys.stderr)
            return 1
        print(f"Exported -> {path}")

    return 0


def run_history(args: argparse.Namespace, kv: KeyValueStore) -> int:
    history = HistoryStore(kv)
    if args.delete:
        if not history.delete(args.delete):
            print(f"No history entry for {args.delete}", file=sys.stderr)
            return 1
        print(f"Deleted {args.delete}")
        return 0

    entries = history.load()
    if not entries:
        print("No history yet")
    for entry in entries:
        saved = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        done = sum(1 for c in entry.video.chapters if c.id in entry.results)
        print(
            f"{entry.id}  {saved}  {entry.style.value}/{entry.level.value}  "
            f"{done}/{len(entry.video.chapters)}  {entry.video.title}"
        )
    return 0


def run_export(args: argparse.Namespace, kv: KeyValueStore) -> int:
    entry = HistoryStore(kv).get(args.video_id)
    if entry is None:
        print(f"No history entry for {args.video_id}", file=sys.stderr)
        return 1
    prefs = PreferencesStore(kv).load() or Preferences()
    content = render_markdown(entry.video, entry.results, entry.style, entry.level, prefs.language)
    try:
        path = write_markdown(args.output or export_filename(entry.video.title), content)
    except OSError as e:
        print(f"Export failed: {e}", file=sys.stderr)
        return 1
    print(f"Exported -> {path}")
    return 0


def run_prefs(args: argparse.Namespace, kv: KeyValueStore) -> int:
    store = PreferencesStore(kv)
    prefs = store.load() or Preferences()
    if args.lang or args.style or args.level:
        if args.lang:
            prefs.language = Language(args.lang)
        if args.style:
            prefs.style = AnalysisStyle(args.style)
        if args.level:
            prefs.level = KnowledgeLevel(args.level)
        store.save(prefs)
    print(f"lang:  {prefs.language.value}")
    print(f"style: {prefs.style.value} - {STYLE_LABELS[Language.EN][prefs.style]}")
    print(f"level: {prefs.level.value} - {LEVEL_LABELS[Language.EN][prefs.level]}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    # Look for .env in the project root (parent of src directory)
    project_root = pathlib.Path(__file__).parent.parent.parent
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    args = parse_args(argv)
    setup_logging(args.verbose)
    kv = KeyValueStore(args.data_dir)

    if args.command == "interpret":
        return asyncio.run(run_interpret(args, kv))
    if args.command == "history":
        return run_history(args, kv)
    if args.command == "export":
        return run_export(args, kv)
    return run_prefs(args, kv)


if __name__ == "__main__":
    sys.exit(main())
