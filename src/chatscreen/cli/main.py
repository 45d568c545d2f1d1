"""
chatscreen CLI entry point.

Commands:
  chatscreen version            — show version
  chatscreen config show        — print the effective configuration
  chatscreen config validate    — validate the config file
  chatscreen verify             — check the Telegram bot token against getMe
  chatscreen run [--demo]       — run the bot in the foreground
"""

from __future__ import annotations

import sys

import click
from rich.console import Console

from chatscreen import __version__
from chatscreen.cli._config_cmd import config_group
from chatscreen.core.constants import ExitCode

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "--version", "-V", message="chatscreen %(version)s")
def cli() -> None:
    """chatscreen — screen-based conversational UIs for chat bots."""


cli.add_command(config_group)


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"chatscreen [bold]{__version__}[/bold]")


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------


@cli.command()
def verify() -> None:
    """Verify the configured Telegram bot token."""
    from chatscreen.channels.telegram.verify import verify_telegram_token
    from chatscreen.core.config import load_config
    from chatscreen.core.exceptions import ConfigError

    try:
        telegram = load_config().require_telegram()
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)

    ok, detail = verify_telegram_token(telegram.bot_token.get_secret_value())
    if not ok:
        err_console.print(f"[red]Token check failed:[/red] {detail}")
        sys.exit(ExitCode.NETWORK_ERROR)
    console.print(f"[green]Token OK[/green]  {detail}")


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--demo", is_flag=True, default=False, help="Serve the built-in demo screens")
def run(demo: bool) -> None:
    """Run the bot in the foreground until interrupted."""
    from chatscreen.cli._run import cmd_run

    cmd_run(demo=demo, console=console, err_console=err_console)


if __name__ == "__main__":
    cli()
