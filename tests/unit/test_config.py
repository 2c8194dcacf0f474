from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dayplan.config import (
    ConfigError,
    configure_logging,
    load_config,
    planner_preferences,
    resolve_logs_root,
    write_config,
)
from dayplan.prompts import DEFAULT_PREFERENCES


def test_load_config_without_path_returns_defaults() -> None:
    config = load_config(None)
    assert config["models"]["default"] == "gemini-2.5-flash-lite"
    assert config["models"]["max_output_tokens"] == 1000
    assert planner_preferences(config) == DEFAULT_PREFERENCES


def test_load_config_merges_nested_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "models:\n  default: gemini-offline\npaths:\n  logs: data/logs\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config["models"]["default"] == "gemini-offline"
    assert config["models"]["timeout"] == 60
    assert resolve_logs_root(config, base_dir=tmp_path) == tmp_path / "data" / "logs"


def test_round_trip_through_write_config(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "config.yaml"
    written = load_config(None)
    written["planner"]["preferences"] = ["Keep mornings free"]
    write_config(config_path, written)

    config = load_config(config_path)
    assert planner_preferences(config) == ("Keep mornings free",)


@pytest.mark.parametrize("content", ["- just\n- a list\n", "models: [unclosed\n"])
def test_load_config_rejects_bad_yaml(tmp_path: Path, content: str) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_path)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_logs_disabled_by_default(tmp_path: Path) -> None:
    assert resolve_logs_root(load_config(None), base_dir=tmp_path) is None


def test_configure_logging_falls_back_to_info(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging({"logging": {"level": "chatty"}})
    configure_logging({"logging": {"level": "debug"}})

    assert [call["level"] for call in calls] == [logging.INFO, logging.DEBUG]
