"""chatscreen run — foreground bot runner."""

from __future__ import annotations

import asyncio
import sys

from rich.console import Console

from chatscreen.core.constants import ExitCode


def cmd_run(demo: bool, console: Console, err_console: Console) -> None:
    from chatscreen.bot import ScreenBot
    from chatscreen.channels.telegram.channel import TelegramChannel
    from chatscreen.core.config import load_config
    from chatscreen.core.exceptions import ConfigError
    from chatscreen.core.logging import configure_logging
    from chatscreen.core.manager import ScreenManager
    from chatscreen.demo import build_demo

    try:
        cfg = load_config()
        telegram = cfg.require_telegram()
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(ExitCode.CONFIG_ERROR)

    if not demo:
        # Applications embed ScreenManager directly; the CLI only ships the demo tree.
        err_console.print("Nothing to serve. Use [bold]chatscreen run --demo[/bold].")
        sys.exit(ExitCode.ERROR)

    channel = TelegramChannel(
        bot_token=telegram.bot_token.get_secret_value(),
        allowed_user_ids=telegram.allowed_users,
        poll_timeout=telegram.poll_timeout,
    )
    manager = ScreenManager(
        channel,
        start_command=cfg.ui.start_command,
        initial_state=cfg.ui.initial_state,
    )

    configure_logging(cfg.logging)
    build_demo(manager)
    console.print(f"Serving demo screens. Send [bold]{cfg.ui.start_command}[/bold] to the bot.")

    try:
        asyncio.run(ScreenBot(manager, channel).run())
    except KeyboardInterrupt:
        console.print("Stopped.")
