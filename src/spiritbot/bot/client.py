"""
The SpiritBot client and the services it carries.

Text commands are not processed automatically: the message listener
decides per message whether the command framework should see it, so
``on_message`` is overridden to do nothing here.
"""

from __future__ import annotations

from dataclasses import dataclass

import discord
from discord.ext import commands

from spiritbot.bot.bot_state import VolatileState
from spiritbot.bot.dispatcher import EventDispatcher
from spiritbot.configuration.app_configuration import AppConfig
from spiritbot.database.database import Database
from spiritbot.moderation.audit_notifier import AuditNotifier
from spiritbot.services.channel_registry import ChannelRegistry
from spiritbot.services.exception_reporter import ExceptionReporter


@dataclass(slots=True)
class BotServices:
    """Everything the cogs share, built once at startup."""
    config: AppConfig
    state: VolatileState
    database: Database
    channels: ChannelRegistry
    reporter: ExceptionReporter
    dispatcher: EventDispatcher
    notifier: AuditNotifier
    allowed_sites: tuple[str, ...]

    @classmethod
    def build(cls, config: AppConfig, database: Database, allowed_sites: tuple[str, ...]) -> "BotServices":
        state = VolatileState()
        channels = ChannelRegistry(config)
        reporter = ExceptionReporter(channels, owner_id=config.owner_id)
        return cls(
            config=config,
            state=state,
            database=database,
            channels=channels,
            reporter=reporter,
            dispatcher=EventDispatcher(reporter),
            notifier=AuditNotifier(state, channels, database, config.art_channel_id),
            allowed_sites=allowed_sites,
        )


def build_intents() -> discord.Intents:
    """Intents for message content, members and presences (moderator paging needs online status)."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.guilds = True
    intents.messages = True
    intents.members = True
    intents.presences = True
    return intents


class SpiritBot(commands.Bot):
    """Py-Cord bot whose text commands are routed by the message listener."""

    def __init__(self, services: BotServices) -> None:
        super().__init__(
            command_prefix=services.config.prefix,
            intents=build_intents(),
            help_command=None,
        )
        self.services = services

    async def on_message(self, message: discord.Message) -> None:
        return None
