"""
Path resolution for session-search.

Every location can be overridden through the environment so tests and
unusual installs never touch the real home directory.

Environment variables:
- $CLAUDE_CONFIG_DIR: Claude Code config root (default ~/.claude)
- $SESSION_SEARCH_CACHE: cache document path
- $SESSION_SEARCH_CONFIG: YAML config file path
- $XDG_CACHE_HOME / $XDG_CONFIG_HOME: standard base directories
"""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "session-search"
CACHE_FILENAME = "conversations.json"
CONFIG_FILENAME = "config.yaml"


def get_claude_dir() -> Path:
    """Get the Claude Code configuration root ($CLAUDE_CONFIG_DIR or ~/.claude)."""
    configured = os.environ.get("CLAUDE_CONFIG_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".claude"


def get_projects_dir() -> Path:
    """Get the directory holding one sub-directory of session files per project."""
    return get_claude_dir() / "projects"


def _xdg_dir(variable: str, fallback: str) -> Path:
    base = os.environ.get(variable)
    if base:
        return Path(base).expanduser() / APP_NAME
    return Path.home() / fallback / APP_NAME


def get_cache_path() -> Path:
    """
    Get the cache document location.

    Resolution order:
    1. $SESSION_SEARCH_CACHE
    2. $XDG_CACHE_HOME/session-search/conversations.json
    3. ~/.cache/session-search/conversations.json
    """
    configured = os.environ.get("SESSION_SEARCH_CACHE")
    if configured:
        return Path(configured).expanduser()
    return _xdg_dir("XDG_CACHE_HOME", ".cache") / CACHE_FILENAME


def get_config_path() -> Path:
    """Get the YAML config file location (same resolution scheme as the cache)."""
    configured = os.environ.get("SESSION_SEARCH_CONFIG")
    if configured:
        return Path(configured).expanduser()
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / CONFIG_FILENAME
