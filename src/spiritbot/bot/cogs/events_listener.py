"""Event listener Cog for SpiritBot.

This cog handles bot lifecycle events (on_ready), message deletions, thread
deletions and command error handling. Message creation and edits are handled
by the MessageListenerCog.
"""

import discord
from discord.ext import commands

from spiritbot.bot.client import BotServices
from spiritbot.datatypes.discord_datatypes import classify_deletion
from spiritbot.services.exception_reporter import ExceptionContext
from spiritbot.util.logger import get_logger

logger = get_logger("events")

APPLICATION_ERROR_MESSAGE = "A :bug: showed up while running this command."


class EventsListenerCog(commands.Cog):
    """Cog containing lifecycle, deletion and command error handlers."""

    def __init__(self, discord_bot_instance, services: BotServices):
        self.bot = discord_bot_instance
        self.services = services
        logger.debug("Gateway event handlers registered")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Resolve configured channels and set the bot's presence."""
        self.services.channels.resolve(self.bot)

        if self.bot.user:
            await self.bot.change_presence(
                status=discord.Status.online,
                activity=discord.Activity(type=discord.ActivityType.watching, name="the art channel"),
            )
            logger.info("Ready as %s (%s)", self.bot.user, self.bot.user.id)
        else:
            logger.warning("Ready fired before the bot user was known")

    @commands.Cog.listener(name="on_raw_message_delete")
    async def on_raw_message_delete(self, payload: discord.RawMessageDeleteEvent):
        """Audit every deletion; the payload carries the message only when it was cached."""
        deleted = classify_deletion(payload)
        self.services.dispatcher.spawn(
            self.services.notifier.on_external_delete(deleted),
            lambda: ExceptionContext.from_channel_id(payload.channel_id),
            "Exception while executing message deleted event",
        )

    @commands.Cog.listener(name="on_raw_thread_delete")
    async def on_raw_thread_delete(self, payload: discord.RawThreadDeleteEvent):
        """Stop tracking a ticket thread once it is gone."""
        self.services.state.forget_ticket_thread(payload.thread_id)

    @commands.Cog.listener(name="on_command_error")
    async def on_command_error(self, context: commands.Context, error: commands.CommandError):
        """Report faults of text commands and echo user errors back to the channel."""
        self.services.dispatcher.spawn(
            self.handle_command_error(context, error),
            lambda: ExceptionContext.from_message(context.message),
            "Exception while executing command executed event",
            ping_owner=True,
        )

    async def handle_command_error(self, context: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            return

        if isinstance(error, commands.CommandInvokeError):
            await self.services.reporter.notify(
                error.original,
                ExceptionContext.from_message(context.message),
                "Exception while executing a text command",
                ping_owner=True,
            )
            return

        await context.channel.send(str(error))

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(self, application_context: discord.ApplicationContext, error: Exception):
        """Failed checks are answered ephemerally; anything else is reported as a fault."""
        if isinstance(error, commands.CheckFailure):
            await self._respond_ephemeral(application_context, str(error))
            return

        original = getattr(error, "original", error)
        command_name = getattr(application_context.command, "name", "<unknown>")
        await self.services.reporter.notify(
            original,
            ExceptionContext.from_argument("Command", f"/{command_name} in #{application_context.channel}"),
            "Exception while executing a slash command",
            ping_owner=True,
        )
        await self._respond_ephemeral(application_context, APPLICATION_ERROR_MESSAGE)

    @staticmethod
    async def _respond_ephemeral(application_context: discord.ApplicationContext, text: str) -> None:
        try:
            await application_context.respond(text, ephemeral=True)
        except discord.HTTPException as exc:
            logger.debug("Could not deliver error notice for /%s: %s", application_context.command, exc)


def setup(discord_bot_instance, services: BotServices):
    """Attach the gateway event handlers."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, services))
