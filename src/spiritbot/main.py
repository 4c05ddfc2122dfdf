"""
SpiritBot
=========

A Discord community bot that keeps the art channel media-only, audits
deleted and auto-deleted messages, pages moderators, and rewards artists
with profile badges.

Run with the ``spiritbot`` console script or ``python -m spiritbot.main``.
Relative paths in the configuration resolve against the project home,
which is ``SPIRITBOT_HOME`` when set.
"""

import os
import sys
from pathlib import Path


def find_project_home() -> Path:
    """``SPIRITBOT_HOME`` if set, the executable's folder for frozen builds, else the checkout root."""
    override = os.getenv("SPIRITBOT_HOME")
    if override:
        return Path(override).resolve()
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


PROJECT_HOME = find_project_home()
# app_configuration reads ./config relative to the cwd at import time
os.chdir(PROJECT_HOME)

import asyncio

from dotenv import load_dotenv

from spiritbot.bot.client import BotServices, SpiritBot
from spiritbot.configuration.allowed_sites import load_allowed_sites
from spiritbot.configuration.app_configuration import app_config
from spiritbot.database.database import Database
from spiritbot.ui.console import ConsoleControl, close_bot, console_session
from spiritbot.util.logger import get_logger, handle_exception

logger = get_logger("main")

RESTART_EXIT_CODE = 42


def load_environment() -> str:
    """Read ``.env`` and return ``DISCORD_BOT_TOKEN``, exiting with status 1 when it is unset."""
    env_file = PROJECT_HOME / ".env"
    load_dotenv(dotenv_path=env_file)
    token = (os.getenv("DISCORD_BOT_TOKEN") or "").strip()
    if token:
        return token
    logger.critical("DISCORD_BOT_TOKEN is not set (looked in the environment and %s)", env_file)
    sys.exit(1)


def load_cogs(bot: SpiritBot) -> None:
    from spiritbot.bot.cogs import badge_cmds, basic_cmds, events_listener, message_listener, ticket_cmds

    for module in (events_listener, message_listener, basic_cmds, ticket_cmds, badge_cmds):
        module.setup(bot, bot.services)
    logger.info("Registered cogs: %s", ", ".join(bot.cogs))


def create_bot(services: BotServices) -> SpiritBot:
    bot = SpiritBot(services)
    load_cogs(bot)
    return bot


async def shutdown_runtime(bot: SpiritBot) -> None:
    """Disconnect, let spawned handlers finish, then release the database."""
    await close_bot(bot, announce=True)
    await bot.services.dispatcher.drain()
    bot.services.database.shutdown()
    logger.info("SpiritBot stopped.")


async def run_bot_session(bot: SpiritBot, token: str, control: ConsoleControl) -> int:
    """Serve until the client closes, with the console running next to it."""
    control.set_bot(bot)
    try:
        async with console_session(control):
            logger.info("Connecting to Discord...")
            await bot.start(token)
        return 0
    except asyncio.CancelledError:
        logger.info("Client task cancelled")
        return 0
    except Exception:
        logger.exception("The Discord client stopped with an error")
        return 1
    finally:
        control.set_bot(None)
        await shutdown_runtime(bot)


async def async_main() -> int:
    token = load_environment()

    database = Database(app_config.database_path)
    if not await database.initialize():
        logger.critical("Could not open the badge store at %s", app_config.database_path)
        return 1

    services = BotServices.build(app_config, database, load_allowed_sites(app_config.allowed_sites_file))
    try:
        bot = create_bot(services)
    except Exception:
        logger.exception("Could not set up the Discord client")
        return 1

    control = ConsoleControl()
    exit_code = await run_bot_session(bot, token, control)
    return RESTART_EXIT_CODE if control.is_restart_requested() else exit_code


def main() -> int:
    """Console-script entry point. A restart request replaces this process with a fresh one."""
    logger.info("Starting SpiritBot from %s", PROJECT_HOME)
    try:
        exit_code = asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting.")
        return 0

    if exit_code == RESTART_EXIT_CODE:
        logger.info("Restarting SpiritBot...")
        os.execv(sys.executable, [sys.executable, *sys.argv])
    return exit_code


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
