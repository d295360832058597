"""User configuration loaded from YAML.

Config file: ~/.config/session-search/config.yaml (see paths.get_config_path)

Example:
    projects_dir: ~/.claude/projects
    excluded_prefixes: [agent-]
    max_workers: 4
    project_width: 24
    topic_width: 80

Every key is optional. A missing file yields the defaults; a file that
cannot be read or validated is logged and ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from session_search.paths import get_cache_path, get_config_path, get_projects_dir

logger = logging.getLogger(__name__)

# Sub-agent transcripts live next to the main session files
DEFAULT_EXCLUDED_PREFIXES = ("agent-",)


class SearchConfig(BaseModel):
    """Settings shared by the scanner, index builder and CLI."""

    projects_dir: Path | None = None
    cache_path: Path | None = None
    excluded_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_PREFIXES)
    )
    max_workers: int | None = Field(None, ge=1)
    project_width: int = Field(20, ge=1)
    topic_width: int = Field(60, ge=1)

    @field_validator("projects_dir", "cache_path")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    def resolved_projects_dir(self) -> Path:
        return self.projects_dir or get_projects_dir()

    def resolved_cache_path(self) -> Path:
        return self.cache_path or get_cache_path()


def load_config(path: Path | None = None) -> SearchConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file to read. Defaults to paths.get_config_path().

    Returns:
        SearchConfig, with defaults for anything missing or invalid.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return SearchConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config %s: %s", config_path, e)
        return SearchConfig()

    if not isinstance(data, dict):
        logger.warning("Config %s is not a mapping, ignoring it", config_path)
        return SearchConfig()

    try:
        return SearchConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid config %s: %s", config_path, e)
        return SearchConfig()
