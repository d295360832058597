"""Tests for YAML configuration loading."""

from __future__ import annotations

from pathlib import Path

from session_search.config import SearchConfig, load_config
from session_search.paths import get_projects_dir


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yaml")
    assert config == SearchConfig()
    assert config.excluded_prefixes == ["agent-"]
    assert config.project_width == 20
    assert config.topic_width == 60


def test_yaml_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "projects_dir: ~/sessions\n"
        "excluded_prefixes: [agent-, draft-]\n"
        "max_workers: 3\n"
        "topic_width: 80\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.projects_dir == Path("~/sessions").expanduser()
    assert config.excluded_prefixes == ["agent-", "draft-"]
    assert config.max_workers == 3
    assert config.topic_width == 80
    assert config.project_width == 20


def test_invalid_yaml_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("topic_width: [unclosed\n", encoding="utf-8")
    assert load_config(path) == SearchConfig()


def test_invalid_values_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("max_workers: 0\n", encoding="utf-8")
    assert load_config(path) == SearchConfig()


def test_non_mapping_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(path) == SearchConfig()


def test_default_locations_follow_environment(isolated_env: Path) -> None:
    (isolated_env).mkdir(parents=True, exist_ok=True)
    (isolated_env / "config.yaml").write_text("project_width: 12\n", encoding="utf-8")

    config = load_config()

    assert config.project_width == 12
    assert config.resolved_projects_dir() == get_projects_dir()
    assert config.resolved_projects_dir() == isolated_env / ".claude" / "projects"
