"""
Operator console running next to the bot.

Commands are registered with :func:`console_command` and looked up by name
or alias. Output goes through prompt_toolkit so it never tears the prompt
line while log records are being printed.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import PromptSession

from spiritbot.util.logger import get_logger

if TYPE_CHECKING:
    from spiritbot.bot.client import SpiritBot

logger = get_logger("console")

PROMPT = "spiritbot> "


class Lifecycle(Enum):
    SHUTDOWN = "shutdown"
    RESTART = "restart"


class ConsoleControl:
    """State shared by the console task and the process entry point."""

    def __init__(self) -> None:
        self.bot: Optional[SpiritBot] = None
        self.requested: Optional[Lifecycle] = None
        self._stopped = asyncio.Event()

    def set_bot(self, bot: Optional[SpiritBot]) -> None:
        self.bot = bot

    def request(self, action: Lifecycle) -> None:
        """Ask the process to stop; a pending restart is never downgraded to a shutdown."""
        if self.requested is not Lifecycle.RESTART:
            self.requested = action
        self._stopped.set()

    def stop(self) -> None:
        self._stopped.set()

    def is_shutdown_requested(self) -> bool:
        return self._stopped.is_set()

    def is_restart_requested(self) -> bool:
        return self.requested is Lifecycle.RESTART


ConsoleHandler = Callable[[ConsoleControl, list[str]], Awaitable[None]]


@dataclass(frozen=True)
class ConsoleCommand:
    name: str
    aliases: tuple[str, ...]
    summary: str
    handler: ConsoleHandler


COMMANDS: dict[str, ConsoleCommand] = {}


def console_command(name: str, *aliases: str, summary: str) -> Callable[[ConsoleHandler], ConsoleHandler]:
    """Register the decorated coroutine under ``name`` and every alias."""

    def register(handler: ConsoleHandler) -> ConsoleHandler:
        command = ConsoleCommand(name, aliases, summary, handler)
        for key in (name, *aliases):
            COMMANDS[key] = command
        return handler

    return register


def registered_commands() -> list[ConsoleCommand]:
    """Each command once, in registration order."""
    return list({id(command): command for command in COMMANDS.values()}.values())


def echo(text: str, style: str = "") -> None:
    print_formatted_text(FormattedText([(style, text)]) if style else text)


def banner(title: str, style: str = "ansicyan") -> None:
    echo(title, f"bold {style}")
    echo("─" * len(title), style)


async def close_bot(bot: Optional[SpiritBot], *, announce: bool = False) -> None:
    """Close the gateway connection if the bot is still connected."""
    if bot is None or bot.is_closed():
        return
    try:
        await bot.close()
    except Exception:
        logger.exception("Closing the Discord connection failed")
        return
    if announce:
        logger.info("Discord connection closed.")


# ---- commands ----

@console_command("help", "h", "?", summary="List console commands")
async def cmd_help(control: ConsoleControl, args: list[str]) -> None:
    banner("Console commands", "ansigreen")
    for command in registered_commands():
        aliases = f"  ({', '.join(command.aliases)})" if command.aliases else ""
        echo(f"  {command.name:<10}{command.summary}{aliases}")


@console_command("status", "stat", "info", summary="Connection, volatile state and handler counts")
async def cmd_status(control: ConsoleControl, args: list[str]) -> None:
    banner("Status")
    bot = control.bot
    if bot is None:
        echo("  bot: not running", "ansired")
        return

    services = bot.services
    rows = [
        ("connection", "closed" if bot.is_closed() else "open"),
        ("guilds", len(bot.guilds)),
        ("latency", f"{bot.latency * 1000:.0f} ms"),
        ("pending self-deletions", services.state.pending_deletions),
        ("tracked ticket threads", services.state.ticket_thread_count),
        ("handlers in flight", services.dispatcher.in_flight),
        ("allow-listed sites", len(services.allowed_sites)),
    ]
    for label, value in rows:
        echo(f"  {label:<24}{value}")


@console_command("guilds", "servers", "g", summary="Guilds the bot is a member of")
async def cmd_guilds(control: ConsoleControl, args: list[str]) -> None:
    bot = control.bot
    if bot is None or not bot.guilds:
        echo("Not connected to any guild.", "ansiyellow")
        return
    banner(f"Guilds ({len(bot.guilds)})")
    for guild in bot.guilds:
        echo(f"  {guild.name}  id={guild.id}  members={guild.member_count}")


@console_command("reload", summary="Re-read app_config.yml and re-resolve output channels")
async def cmd_reload(control: ConsoleControl, args: list[str]) -> None:
    bot = control.bot
    if bot is None:
        echo("  bot: not running", "ansired")
        return
    services = bot.services
    if not services.config.reload():
        echo("Configuration could not be read; defaults are in effect.", "ansired")
    services.channels.resolve(bot)
    echo("Configuration reloaded. The allow-list is only read at startup.", "ansigreen")


@console_command("clear", "cls", summary="Clear the terminal")
async def cmd_clear(control: ConsoleControl, args: list[str]) -> None:
    os.system("cls" if os.name == "nt" else "clear")


@console_command("restart", "reboot", summary="Stop the bot and start a fresh process")
async def cmd_restart(control: ConsoleControl, args: list[str]) -> None:
    echo("Restarting...", "ansiyellow")
    control.request(Lifecycle.RESTART)
    await close_bot(control.bot)


@console_command("shutdown", "stop", "quit", "exit", summary="Stop the bot")
async def cmd_shutdown(control: ConsoleControl, args: list[str]) -> None:
    echo("Shutting down...", "ansiyellow")
    control.request(Lifecycle.SHUTDOWN)
    await close_bot(control.bot)


# ---- input loop ----

async def handle_console_command(line: str, control: ConsoleControl) -> None:
    """Run one input line. Handler errors are logged and shown, never raised."""
    name, *args = line.split() or [""]
    if not name:
        return

    command = COMMANDS.get(name.lower())
    if command is None:
        echo(f"Unknown command '{name}'. Try 'help'.", "ansired")
        return

    try:
        await command.handler(control, args)
    except Exception as exc:
        logger.exception("Console command '%s' failed", command.name)
        echo(f"{command.name} failed: {exc}", "ansired")


async def run_console(control: ConsoleControl) -> None:
    """Read and run commands until shutdown is requested or input ends."""
    session = PromptSession(PROMPT)
    echo("SpiritBot console. Type 'help' for commands.", "ansibrightblack")

    with patch_stdout():
        while not control.is_shutdown_requested():
            try:
                line = await session.prompt_async()
            except (EOFError, KeyboardInterrupt):
                echo("Input closed, shutting down.", "ansiyellow")
                control.request(Lifecycle.SHUTDOWN)
                await close_bot(control.bot)
                return
            except Exception as exc:
                logger.exception("Console input failed")
                echo(f"Input error: {exc}", "ansired")
                continue
            await handle_console_command(line, control)


@asynccontextmanager
async def console_session(control: ConsoleControl) -> AsyncIterator[ConsoleControl]:
    """Run the console as a background task for the duration of the block."""
    task = asyncio.create_task(run_console(control))
    try:
        yield control
    finally:
        control.stop()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
