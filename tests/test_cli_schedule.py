from __future__ import annotations

import textwrap
from pathlib import Path

import yaml
from typer.testing import CliRunner

from dayplan.cli import app


def _write_activities(path: Path, body: str) -> Path:
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _offline_config(tmp_path: Path, *, logs: str = "") -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"models": {"default": "offline"}, "paths": {"logs": logs}}),
        encoding="utf-8",
    )
    return config_path


def test_init_writes_default_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    runner = CliRunner()

    result = runner.invoke(app, ["init", "--config", str(config_path)], catch_exceptions=False)
    assert result.exit_code == 0, result.output
    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    assert data["models"]["default"] == "gemini-2.5-flash-lite"

    again = runner.invoke(app, ["init", "--config", str(config_path)])
    assert again.exit_code == 1
    assert "--force" in again.output


def test_show_renders_manual_schedule(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    activities = _write_activities(
        tmp_path / "day.yaml",
        """
        activities:
          - {title: Breakfast, duration: 1, start: 14}
          - {title: Morning Workout, duration: 2, start: 16}
          - {title: Evening Reading, duration: 2}
        """,
    )

    result = CliRunner().invoke(app, ["show", str(activities)], catch_exceptions=False)

    assert result.exit_code == 0, result.output
    assert "7:00 AM - Breakfast (30 min)" in result.output
    assert "8:00 AM - Morning Workout (1 hours)" in result.output
    assert "- Evening Reading (1 hours)" in result.output


def test_schedule_with_offline_planner_assigns_remaining(tmp_path: Path) -> None:
    activities = _write_activities(
        tmp_path / "day.yaml",
        """
        activities:
          - {title: Breakfast, duration: 1, start: 14}
          - {title: Gym, duration: 2}
          - {title: Gym, duration: 2}
        """,
    )
    config_path = _offline_config(tmp_path, logs="logs")

    result = CliRunner().invoke(
        app,
        ["schedule", str(activities), "--config", str(config_path)],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "offline-only" in result.output
    assert 'Assigned "Gym" to 7:30 AM' in result.output
    assert 'Assigned "Gym" to 8:30 AM' in result.output
    assert "All activities are assigned!" in result.output
    assert list((tmp_path / "logs" / "exchanges").glob("*__applied__*.json"))


def test_schedule_reports_when_nothing_is_pending(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    activities = _write_activities(
        tmp_path / "day.yaml",
        """
        - {title: Lunch, duration: 1, start: 26}
        """,
    )

    result = CliRunner().invoke(
        app,
        ["schedule", str(activities), "--no-use-remote"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0, result.output
    assert "Using offline planner." in result.output
    assert "1:00 PM - Lunch (30 min)" in result.output


def test_schedule_rejects_invalid_activity(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    activities = _write_activities(
        tmp_path / "day.yaml",
        """
        activities:
          - {title: Marathon, duration: 60}
        """,
    )

    result = CliRunner().invoke(app, ["schedule", str(activities), "--no-auto"])

    assert result.exit_code == 1
    assert "Invalid activity" in result.output


def test_schedule_rejects_unknown_fields(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    activities = _write_activities(
        tmp_path / "day.yaml",
        """
        activities:
          - {title: Lunch, duration: 1, when: noon}
        """,
    )

    result = CliRunner().invoke(app, ["show", str(activities)])

    assert result.exit_code == 1
    assert "did not validate" in result.output


def test_schedule_without_api_key_exits(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    activities = _write_activities(tmp_path / "day.yaml", "- {title: Gym, duration: 2}\n")

    result = CliRunner().invoke(app, ["schedule", str(activities)])

    assert result.exit_code == 1
    assert "No API key given" in result.output
