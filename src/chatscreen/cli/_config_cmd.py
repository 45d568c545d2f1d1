"""CLI commands: chatscreen config show | validate."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, SecretStr
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chatscreen.core.constants import ExitCode

console = Console()

# Rendered in this order; a missing optional section is skipped.
SECTIONS: dict[str, str] = {
    "telegram": "Bot API channel",
    "ui": "Screen engine",
    "logging": "Log output",
}


@click.group("config")
def config_group() -> None:
    """View and validate chatscreen configuration."""


@config_group.command("show")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
@click.option("--redact/--no-redact", default=True, help="Redact secrets (default: redact)")
def config_show(as_json: bool, redact: bool) -> None:
    """Display the effective configuration, file plus environment overrides."""
    cfg, cfg_path = _load_or_exit()
    sections = _config_sections(cfg, redact=redact)

    if as_json:
        click.echo(json.dumps({**sections, "_config_path": str(cfg_path)}, indent=2))
        return

    console.print(_config_table(cfg, sections, cfg_path))


@config_group.command("validate")
def config_validate() -> None:
    """Validate the current config file against the schema."""
    cfg, cfg_path = _load_or_exit(failure_label="Config validation failed")
    console.print(f"[green]Config is valid:[/green] {cfg_path}")
    console.print(
        f"  Send [bold]{cfg.ui.start_command}[/bold] to open the main screen; "
        f"chats start in state [bold]{cfg.ui.initial_state}[/bold]."
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_or_exit(failure_label: str = "Config error") -> tuple[Any, Path]:
    from chatscreen.core.config import config_file_path, load_config

    cfg_path = config_file_path()
    if not cfg_path.exists():
        console.print(f"[red]Config not found:[/red] {cfg_path}")
        sys.exit(ExitCode.CONFIG_ERROR)

    try:
        return load_config(cfg_path), cfg_path
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]{failure_label}:[/red] {escape(str(exc))}")
        sys.exit(ExitCode.CONFIG_ERROR)


def _config_sections(cfg: Any, redact: bool = True) -> dict[str, dict[str, Any]]:
    """Dump each configured section, unwrapping (and optionally masking) secrets."""
    sections: dict[str, dict[str, Any]] = {}
    for name in SECTIONS:
        section: BaseModel | None = getattr(cfg, name, None)
        if section is None:
            continue
        values: dict[str, Any] = {}
        for key, value in section.model_dump().items():
            if isinstance(value, SecretStr):
                secret = value.get_secret_value()
                value = _mask(secret) if redact else secret
            values[key] = value
        sections[name] = values
    return sections


def _is_default(cfg: Any, section: str, key: str, value: Any) -> bool:
    model = getattr(cfg, section)
    field = type(model).model_fields.get(key)
    if field is None or field.is_required():
        return False
    return field.get_default(call_default_factory=True) == value


def _config_table(cfg: Any, sections: dict[str, dict[str, Any]], cfg_path: Path) -> Table:
    table = Table(title="chatscreen configuration", caption=str(cfg_path), title_justify="left")
    table.add_column("Section", style="cyan", no_wrap=True)
    table.add_column("Key", no_wrap=True)
    table.add_column("Value")

    for name, values in sections.items():
        label = f"{name}\n[dim]{SECTIONS[name]}[/dim]"
        for i, (key, value) in enumerate(values.items()):
            shown = ", ".join(str(v) for v in value) if isinstance(value, list) else str(value)
            if isinstance(value, list) and not value:
                shown = "[dim]anyone[/dim]" if key == "allowed_users" else "[dim]none[/dim]"
            elif _is_default(cfg, name, key, value):
                shown = f"{shown} [dim](default)[/dim]"
            table.add_row(label if i == 0 else "", key, shown)
        table.add_section()
    return table


def _mask(value: str) -> str:
    """Mask a secret value, showing first 4 and last 4 chars."""
    if len(value) <= 12:
        return "***"
    return value[:4] + "***" + value[-4:]
