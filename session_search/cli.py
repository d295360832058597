#!/usr/bin/env python3
"""Command line for session-search.

Prints fzf-ready lines and preview text; the interactive filter and the
resumed session run outside this tool.

Usage:
    session-search list
    session-search preview SESSION_ID --query "migration"
    session-search rebuild
    session-search resume-command SESSION_ID

Typical fzf wiring:
    session-search list | fzf --delimiter '\\t' --with-nth 2..4 --nth 5 \\
        --preview 'session-search preview {1} --query {q}'
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path

from filelock import Timeout

from session_search.cache_store import CacheStore
from session_search.config import SearchConfig, load_config
from session_search.models import Conversation
from session_search.preview import render_conversation
from session_search.scanner import ScanCancelled, refresh_conversations
from session_search.search_index import build_search_lines
from session_search.transcript_parser import SessionParser

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 1
EXIT_FATAL = 2
EXIT_INTERRUPTED = 130

RESUME_COMMAND = "claude"


def _refresh(config: SearchConfig, store: CacheStore) -> list[Conversation]:
    return refresh_conversations(
        config.resolved_projects_dir(),
        store,
        SessionParser(config.excluded_prefixes),
        max_workers=config.max_workers,
    )


def _find_conversation(
    session_id: str, config: SearchConfig, store: CacheStore
) -> Conversation | None:
    """Look in the cache first, then re-scan once."""
    conversation = store.load().get(session_id)
    if conversation is not None:
        return conversation
    logger.debug("Session %s not cached, refreshing", session_id)
    for candidate in _refresh(config, store):
        if candidate.session_id == session_id:
            return candidate
    return None


def cmd_list(args: argparse.Namespace, config: SearchConfig, store: CacheStore) -> int:
    conversations = _refresh(config, store)
    lines, _ = build_search_lines(
        conversations,
        project_width=config.project_width,
        topic_width=config.topic_width,
    )
    for line in lines:
        print(line)
    return 0


def cmd_preview(args: argparse.Namespace, config: SearchConfig, store: CacheStore) -> int:
    conversation = _find_conversation(args.session_id, config, store)
    if conversation is None:
        print(f"Session not found: {args.session_id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    sys.stdout.write(render_conversation(conversation, args.query))
    return 0


def cmd_rebuild(args: argparse.Namespace, config: SearchConfig, store: CacheStore) -> int:
    try:
        store.clear()
    except (OSError, Timeout) as e:
        logger.warning("Could not clear cache %s: %s", store.path, e)
    conversations = _refresh(config, store)
    print(f"Indexed {len(conversations)} conversations into {store.path}")
    return 0


def resume_command(conversation: Conversation) -> str:
    """Shell command that resumes a session from its working directory."""
    command = f"{RESUME_COMMAND} --resume {shlex.quote(conversation.session_id)}"
    if conversation.cwd:
        return f"cd {shlex.quote(conversation.cwd)} && {command}"
    return command


def cmd_resume_command(args: argparse.Namespace, config: SearchConfig, store: CacheStore) -> int:
    conversation = _find_conversation(args.session_id, config, store)
    if conversation is None:
        print(f"Session not found: {args.session_id}", file=sys.stderr)
        return EXIT_NOT_FOUND
    print(resume_command(conversation))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="session-search",
        description="Index and search past chat sessions",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("--projects-dir", type=Path, help="Session root (overrides config)")
    parser.add_argument("--cache", type=Path, help="Cache document path (overrides config)")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Print one search line per session, newest first")
    p_list.set_defaults(func=cmd_list)

    p_preview = sub.add_parser("preview", help="Render a session for a preview pane")
    p_preview.add_argument("session_id")
    p_preview.add_argument("--query", default="", help="Text to highlight")
    p_preview.set_defaults(func=cmd_preview)

    p_rebuild = sub.add_parser("rebuild", help="Drop the cache and re-parse everything")
    p_rebuild.set_defaults(func=cmd_rebuild)

    p_resume = sub.add_parser("resume-command", help="Print the command that resumes a session")
    p_resume.add_argument("session_id")
    p_resume.set_defaults(func=cmd_resume_command)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = load_config(args.config)
    overrides = {}
    if args.projects_dir:
        overrides["projects_dir"] = args.projects_dir
    if args.cache:
        overrides["cache_path"] = args.cache
    if overrides:
        config = config.model_copy(update=overrides)

    store = CacheStore(config.resolved_cache_path())

    try:
        return args.func(args, config, store)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FATAL
    except ScanCancelled:
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
