"""Parsed-conversation cache.

One JSON document holds every parsed Conversation so unchanged session
files need not be parsed again on the next run.

Document schema:
    {
      "version": 1,
      "generated": "ISO timestamp",
      "conversations": { "session-id": Conversation },
      "sources": { "/path/to/session.jsonl": mtime }
    }

`sources` records the modification time of every file the scanner parsed,
including files that produced no conversation. The store itself never checks
freshness; that is the scanner's job.

Usage:
    from session_search.cache_store import CacheStore

    store = CacheStore(Path("/tmp/conversations.json"))
    store.save({conv.session_id: conv})
    conversations = store.load()
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from filelock import FileLock, Timeout
from pydantic import BaseModel, Field, ValidationError

from session_search.models import Conversation
from session_search.paths import get_cache_path

logger = logging.getLogger(__name__)

LOCK_TIMEOUT_SECONDS = 10


class CacheDocument(BaseModel):
    """On-disk cache layout."""

    version: int = 1
    generated: str | None = None
    conversations: dict[str, Conversation] = Field(default_factory=dict)
    sources: dict[str, float] = Field(default_factory=dict)


class CacheStore:
    """Whole-document load/save of the conversation cache.

    Loading never fails: a missing, corrupt, locked or outdated document is
    an empty cache and callers fall back to a full re-parse.
    """

    VERSION = 1

    def __init__(self, path: Path | None = None):
        """Initialize the store.

        Args:
            path: Cache document location. Defaults to paths.get_cache_path().
        """
        self.path = path or get_cache_path()

    @property
    def lock_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".lock")

    def _lock(self) -> FileLock:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(self.lock_path, timeout=LOCK_TIMEOUT_SECONDS)

    def load_document(self) -> CacheDocument:
        """Read the full document, or an empty one if it cannot be used."""
        if not self.path.exists():
            logger.debug("No cache at %s", self.path)
            return CacheDocument(version=self.VERSION)

        try:
            with self._lock():
                raw = self.path.read_text(encoding="utf-8")
        except Timeout:
            logger.warning("Cache %s is locked, starting cold", self.path)
            return CacheDocument(version=self.VERSION)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read cache %s: %s", self.path, e)
            return CacheDocument(version=self.VERSION)

        try:
            document = CacheDocument.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Corrupt cache %s, ignoring it: %s", self.path, e)
            return CacheDocument(version=self.VERSION)

        if document.version != self.VERSION:
            logger.warning(
                "Cache %s has version %s (expected %s), ignoring it",
                self.path,
                document.version,
                self.VERSION,
            )
            return CacheDocument(version=self.VERSION)

        return document

    def load(self) -> dict[str, Conversation]:
        """Load the session-id -> Conversation map."""
        return self.load_document().conversations

    def save(
        self,
        conversations: dict[str, Conversation],
        sources: dict[str, float] | None = None,
    ) -> None:
        """Replace the cache document.

        Writes to a temp file in the same directory and renames it over the
        target, so readers see either the old or the new document.

        Raises:
            OSError: If the document cannot be written
            filelock.Timeout: If another process holds the lock too long
        """
        document = CacheDocument(
            version=self.VERSION,
            generated=datetime.now().astimezone().replace(microsecond=0).isoformat(),
            conversations=conversations,
            sources=sources or {},
        )
        data = document.model_dump_json()

        with self._lock():
            fd, temp_path_str = tempfile.mkstemp(
                prefix=f"{self.path.stem}_", suffix=".tmp", dir=str(self.path.parent)
            )
            temp_path = Path(temp_path_str)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                temp_path.replace(self.path)
            except BaseException:
                temp_path.unlink(missing_ok=True)
                raise

        logger.debug("Saved %d conversations to %s", len(conversations), self.path)

    def clear(self) -> None:
        """Delete the cache document if present."""
        with self._lock():
            self.path.unlink(missing_ok=True)
