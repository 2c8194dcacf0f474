"""CLI commands for building a day schedule and auto-assigning activities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from .config import (
    DEFAULT_CONFIG_NAME,
    ConfigError,
    configure_logging,
    default_config,
    load_config,
    planner_preferences,
    resolve_logs_root,
    write_config,
)
from .errors import DayPlanError, ParseError, PlannerTransportError, ValidationError
from .models import GeminiClient, LLMClient, OfflinePlannerClient, is_offline_model
from .planner import DayPlanner
from .render import render_schedule
from .schedule.schema import Assignment
from .slots import format_time_slot

APP_HELP = "Organise a day's activities into half-hour slots."

app = typer.Typer(help=APP_HELP)


class ActivityEntry(BaseModel):
    """One activity row in an activity file."""

    model_config = ConfigDict(extra="forbid")

    title: str
    duration: int
    start: Optional[int] = None


class ActivityFile(BaseModel):
    """Top-level layout of an activity file."""

    model_config = ConfigDict(extra="forbid")

    activities: List[ActivityEntry] = Field(default_factory=list)


def load_activity_file(path: Path) -> ActivityFile:
    """Read and validate a YAML activity file."""
    if not path.exists():
        raise typer.BadParameter(f"Activity file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        typer.echo(f"Failed to parse activity file: {error}")
        raise typer.Exit(code=1) from error

    if isinstance(data, list):
        data = {"activities": data}
    try:
        return ActivityFile.model_validate(data)
    except SchemaError as error:
        typer.echo(f"Activity file did not validate: {error}")
        raise typer.Exit(code=1) from error


def _load_cli_config(config: Optional[str]) -> tuple[Dict[str, Any], Path]:
    """Return the merged configuration and the directory relative paths resolve from."""
    if config is None:
        candidate = Path(DEFAULT_CONFIG_NAME)
        config_path = candidate if candidate.exists() else None
    else:
        config_path = Path(config)
    try:
        data = load_config(config_path)
    except ConfigError as error:
        typer.echo(str(error))
        raise typer.Exit(code=1) from error
    base_dir = config_path.parent if config_path is not None else Path.cwd()
    return data, base_dir


def _build_client(config: Dict[str, Any], *, use_remote: bool) -> LLMClient:
    """Select either the Gemini client or the offline stub."""
    models_cfg = config.get("models") or {}
    model_name = str(models_cfg.get("default") or "offline")

    if use_remote and not is_offline_model(model_name):
        typer.echo(f"Using Gemini client ({model_name}).")
        client_kwargs: Dict[str, Any] = {}
        timeout_value = models_cfg.get("timeout")
        if isinstance(timeout_value, (int, float)) and timeout_value > 0:
            client_kwargs["timeout"] = float(timeout_value)
        tokens_value = models_cfg.get("max_output_tokens")
        if isinstance(tokens_value, int) and tokens_value > 0:
            client_kwargs["max_output_tokens"] = tokens_value
        max_attempts_value = models_cfg.get("max_attempts")
        if isinstance(max_attempts_value, int) and max_attempts_value > 0:
            client_kwargs["max_attempts"] = max_attempts_value
        retry_delay_value = models_cfg.get("retry_delay")
        if isinstance(retry_delay_value, (int, float)) and retry_delay_value >= 0:
            client_kwargs["retry_delay"] = float(retry_delay_value)
        base_url_value = models_cfg.get("base_url")
        if isinstance(base_url_value, str) and base_url_value.strip():
            client_kwargs["base_url"] = base_url_value.strip()
        api_key_value = models_cfg.get("api_key")
        if isinstance(api_key_value, str) and api_key_value.strip():
            client_kwargs["api_key"] = api_key_value.strip()
        try:
            return GeminiClient(model=model_name, **client_kwargs)
        except ValueError as error:
            if "api key" in str(error).lower():
                typer.echo(
                    "No API key given. Set GEMINI_API_KEY or GOOGLE_API_KEY, "
                    "or re-run with --no-use-remote to use the offline planner."
                )
            else:
                typer.echo(f"Failed to initialise Gemini client: {error}")
            raise typer.Exit(code=1)

    if use_remote:
        typer.echo(f"Model '{model_name}' is offline-only; using offline planner.")
    else:
        typer.echo("Using offline planner.")
    return OfflinePlannerClient()


def _build_planner(activity_file: ActivityFile, config: Dict[str, Any], base_dir: Path) -> DayPlanner:
    """Create a planner holding the file's activities and manual starts."""
    planner = DayPlanner(
        preferences=planner_preferences(config),
        logs_root=resolve_logs_root(config, base_dir=base_dir),
    )
    try:
        for entry in activity_file.activities:
            activity = planner.add_activity(entry.title, entry.duration)
            if entry.start is not None:
                planner.assign_activity(activity, entry.start)
    except DayPlanError as error:
        typer.echo(f"Invalid activity: {error}")
        raise typer.Exit(code=1) from error
    return planner


def _echo_applied(assignment: Assignment) -> None:
    typer.echo(f'Assigned "{assignment.activity.title}" to {format_time_slot(assignment.start_time)}')


@app.command()
def init(
    config: str = typer.Option(
        DEFAULT_CONFIG_NAME,
        "--config",
        "-c",
        help="Where to write the configuration file.",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration file."),
) -> None:
    """Write a default configuration file."""
    config_path = Path(config)
    if config_path.exists() and not force:
        typer.echo(f"Config already exists at {config_path}; pass --force to overwrite.")
        raise typer.Exit(code=1)
    write_config(config_path, default_config())
    typer.echo(f"Wrote configuration to {config_path}")


@app.command()
def show(
    activities: Path = typer.Argument(..., help="YAML file listing activities."),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
) -> None:
    """Display the schedule described by an activity file."""
    config_data, base_dir = _load_cli_config(config)
    configure_logging(config_data)
    planner = _build_planner(load_activity_file(activities), config_data, base_dir)
    typer.echo(render_schedule(planner))


@app.command()
def schedule(
    activities: Path = typer.Argument(..., help="YAML file listing activities."),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the configuration file.",
    ),
    auto: bool = typer.Option(
        True,
        "--auto/--no-auto",
        help="Ask the planner to place activities that have no start slot.",
    ),
    use_remote: bool = typer.Option(
        True,
        "--use-remote/--no-use-remote",
        help="Call the configured remote model instead of the offline planner.",
    ),
) -> None:
    """Build the schedule and auto-assign any unplaced activities."""
    config_data, base_dir = _load_cli_config(config)
    configure_logging(config_data)
    planner = _build_planner(load_activity_file(activities), config_data, base_dir)

    if auto:
        client = _build_client(config_data, use_remote=use_remote)
        try:
            result = planner.request_auto_assignment(client, on_applied=_echo_applied)
        except ValidationError as error:
            typer.echo("Planner proposed disallowed assignments; nothing was applied:")
            for issue in error.issues:
                typer.echo(f"  - {issue}")
            typer.echo(render_schedule(planner))
            raise typer.Exit(code=1) from error
        except ParseError as error:
            typer.echo(f"Could not read the planner response: {error}")
            raise typer.Exit(code=1) from error
        except PlannerTransportError as error:
            typer.echo(f"Planner call failed: {error}")
            raise typer.Exit(code=1) from error
        if result.skipped:
            typer.echo("All activities are already assigned!")

    typer.echo(render_schedule(planner))


if __name__ == "__main__":
    app()
