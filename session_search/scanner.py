"""Session scanner: discover, re-parse what changed, aggregate.

Session files live one level below the projects root:

    ~/.claude/projects/
    ├── -home-me-app/
    │   ├── 0b6f....jsonl
    │   └── agent-1a2b....jsonl   (sub-agent transcript, skipped by the parser)
    └── -home-me-lib/
        └── 7c1d....jsonl

Each file is parsed independently in a thread pool bounded by the number of
cores. Results are only aggregated once every worker has finished, and the
cache is only written after a scan completes, so an interrupted scan never
leaves a partial cache behind.

Usage:
    from session_search.scanner import refresh_conversations

    conversations = refresh_conversations(projects_dir, CacheStore(), SessionParser())
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from filelock import Timeout

from session_search.cache_store import CacheDocument, CacheStore
from session_search.models import Conversation
from session_search.search_index import sort_by_recency

logger = logging.getLogger(__name__)

SESSION_SUFFIX = ".jsonl"

Parser = Callable[[Path], Conversation | None]


class ScanCancelled(Exception):
    """Raised when a scan is interrupted before all files were parsed."""


@dataclass
class ScanResult:
    """Aggregated outcome of one scan."""

    conversations: dict[str, Conversation] = field(default_factory=dict)
    sources: dict[str, float] = field(default_factory=dict)
    parsed: int = 0
    reused: int = 0
    failed: int = 0


def discover_session_files(projects_dir: Path) -> list[Path]:
    """
    List session files one level below each project directory.

    Raises:
        FileNotFoundError: If projects_dir does not exist
    """
    if not projects_dir.is_dir():
        raise FileNotFoundError(f"Session directory not found: {projects_dir}")

    files: list[Path] = []
    for project_dir in sorted(projects_dir.iterdir()):
        if not project_dir.is_dir() or project_dir.name.startswith("."):
            continue
        files.extend(
            p for p in sorted(project_dir.iterdir()) if p.suffix == SESSION_SUFFIX and p.is_file()
        )
    return files


class SessionScanner:
    """Parses session files in parallel, reusing cached results for unchanged files."""

    def __init__(self, parser: Parser, max_workers: int | None = None):
        """Initialize the scanner.

        Args:
            parser: Callable turning one path into a Conversation or None
            max_workers: Worker threads. Defaults to os.cpu_count().
        """
        self.parser = parser
        self.max_workers = max_workers or os.cpu_count() or 1

    def scan(
        self,
        files: Iterable[Path],
        cached: CacheDocument | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult:
        """
        Parse changed files and reuse cached conversations for the rest.

        A file is unchanged when its current mtime equals the one recorded in
        cached.sources. Cached conversations whose files are gone are dropped.

        Args:
            files: Session files to consider
            cached: Previously saved cache document
            cancel: Event checked before each file; when set the scan stops

        Returns:
            ScanResult with the new conversation map and source mtimes

        Raises:
            ScanCancelled: If cancel was set or the scan was interrupted
        """
        cached = cached or CacheDocument()
        cached_by_session: dict[str, Conversation] = cached.conversations
        result = ScanResult()
        to_parse: list[tuple[Path, float]] = []

        for path in files:
            try:
                mtime = path.stat().st_mtime
            except OSError as e:
                logger.warning("Cannot stat %s: %s", path, e)
                result.failed += 1
                continue

            key = str(path)
            if cached.sources.get(key) == mtime:
                result.sources[key] = mtime
                result.reused += 1
                conversation = cached_by_session.get(path.stem)
                if conversation is not None:
                    result.conversations[path.stem] = conversation
            else:
                to_parse.append((path, mtime))

        if to_parse:
            self._parse_all(to_parse, result, cancel)

        logger.info(
            "Scan complete: %d parsed, %d reused, %d failed, %d conversations",
            result.parsed,
            result.reused,
            result.failed,
            len(result.conversations),
        )
        return result

    def _parse_one(self, path: Path, cancel: threading.Event | None) -> Conversation | None:
        if cancel is not None and cancel.is_set():
            raise ScanCancelled(f"Scan cancelled before {path}")
        return self.parser(path)

    def _parse_all(
        self,
        to_parse: list[tuple[Path, float]],
        result: ScanResult,
        cancel: threading.Event | None,
    ) -> None:
        parsed: dict[str, Conversation] = {}
        sources: dict[str, float] = {}
        failed = 0

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(to_parse)),
            thread_name_prefix="session_parse",
        )
        try:
            futures: dict[Future[Conversation | None], tuple[Path, float]] = {
                executor.submit(self._parse_one, path, cancel): (path, mtime)
                for path, mtime in to_parse
            }
            for future in as_completed(futures):
                path, mtime = futures[future]
                try:
                    conversation = future.result()
                except OSError as e:
                    logger.warning("Failed to read %s: %s", path, e)
                    failed += 1
                    continue
                sources[str(path)] = mtime
                if conversation is not None:
                    parsed[conversation.session_id] = conversation
        except (ScanCancelled, KeyboardInterrupt) as e:
            executor.shutdown(wait=True, cancel_futures=True)
            raise ScanCancelled("Scan cancelled, discarding partial results") from e
        finally:
            executor.shutdown(wait=True)

        # Aggregate only after every worker finished
        result.conversations.update(parsed)
        result.sources.update(sources)
        result.parsed += len(sources)
        result.failed += failed


def refresh_conversations(
    projects_dir: Path,
    store: CacheStore,
    parser: Parser,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> list[Conversation]:
    """
    Load the cache, re-scan the session root, save the cache.

    The cache is read once before the scan and written once after it
    succeeds. A cancelled scan propagates ScanCancelled and leaves the
    cache untouched. A failed save is logged and the conversations are still
    returned.

    Returns:
        Conversations sorted newest first

    Raises:
        FileNotFoundError: If projects_dir does not exist
        ScanCancelled: If the scan was interrupted
    """
    files = discover_session_files(projects_dir)
    cached = store.load_document()
    result = SessionScanner(parser, max_workers=max_workers).scan(files, cached, cancel)
    try:
        store.save(result.conversations, result.sources)
    except (OSError, Timeout) as e:
        # Cache errors are not fatal
        logger.warning("Could not save cache %s: %s", store.path, e)
    return sort_by_recency(result.conversations.values())
