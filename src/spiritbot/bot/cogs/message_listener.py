"""Message listener Cog for SpiritBot.

This cog handles message creation and editing. Each event is handed to the
event dispatcher as its own task; the handler then classifies the message
by channel and content:

1. art channel -> art policy (accepted posts are pinned and earn a badge)
2. command prefix -> text command framework
3. leading slash -> hint to use the native slash command picker
4. commands channel -> canned reply to greetings
5. any-moderator role mention -> page one online moderator

Inside tracked ticket threads, mentioned members who are neither
moderators, the bot nor the ticket opener are removed from the thread.
"""

import re

import discord
from discord.ext import commands

from spiritbot.bot.client import BotServices
from spiritbot.datatypes.badge_datatypes import BadgeKind
from spiritbot.datatypes.discord_datatypes import SystemMessage, UserMessage, classify_message
from spiritbot.datatypes.policy_datatypes import AttachmentInfo
from spiritbot.moderation.art_policy import evaluate_art_post
from spiritbot.moderation.moderator_paging import page_moderator
from spiritbot.services.exception_reporter import ExceptionContext
from spiritbot.util import discord_utils
from spiritbot.util.logger import get_logger

logger = get_logger("message_listener_cog")

MENTION_PATTERN = re.compile(r"<@!?(\d+)>")

SLASH_HINT = "oh! to use slash commands make sure to click on the option!"
GREETING_REPLY = "Hello there! I hope you have a great day 💙"


class MessageListenerCog(commands.Cog):
    """Cog responsible for handling message creation and editing events."""

    def __init__(self, bot: commands.Bot, services: BotServices):
        self.bot = bot
        self.services = services
        self.greeting = re.compile(services.config.greeting_pattern, re.IGNORECASE)
        logger.info("Message listener cog loaded")

    @staticmethod
    def _is_user_authored(message: discord.Message) -> bool:
        """True for messages written by a human user (not a bot, webhook or the platform)."""
        match classify_message(message):
            case SystemMessage():
                return False
            case UserMessage(message=user_message):
                return not user_message.author.bot and user_message.webhook_id is None

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        """Spawn the message-received handler for ``message``."""
        self.services.dispatcher.spawn(
            self.handle_message(message),
            lambda: ExceptionContext.from_message(message),
            "Exception while executing message received event",
        )

    @commands.Cog.listener(name="on_raw_message_edit")
    async def on_raw_message_edit(self, payload: discord.RawMessageUpdateEvent):
        """Spawn the message-updated handler; fires for cached and uncached messages alike."""
        self.services.dispatcher.spawn(
            self.handle_edit(payload.channel_id, payload.message_id),
            lambda: ExceptionContext.from_channel_id(payload.channel_id),
            "Exception while executing message updated event",
        )

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def handle_message(self, message: discord.Message) -> None:
        if not self._is_user_authored(message):
            return
        if message.guild is None:
            return

        await self.prune_ticket_mentions(message)

        config = self.services.config
        content = message.content or ""

        if message.channel.id == config.art_channel_id:
            if await self.check_art_post(message):
                await message.add_reaction(discord_utils.PIN_EMOJI)
                await self.services.database.grant_badge(message.author.id, BadgeKind.CREATIVE)
                logger.info("Accepted art post %s from %s", message.id, message.author)
        elif content.startswith(config.prefix):
            await self.bot.process_commands(message)
        elif content.startswith("/"):
            await message.reply(SLASH_HINT)
        elif message.channel.id == config.commands_channel_id:
            if self.greeting.search(content):
                await message.reply(GREETING_REPLY)
        elif config.any_moderator_role_id and f"<@&{config.any_moderator_role_id}>" in content:
            await page_moderator(message, config.moderator_role_id)

    async def handle_edit(self, channel_id: int, message_id: int) -> None:
        """Re-run the art policy on an edited art-channel post.

        Only rejection has an effect. Edits never grant or revoke badges,
        whichever way the verdict changed.
        """
        if channel_id != self.services.config.art_channel_id:
            return

        channel = self.bot.get_channel(channel_id)
        if channel is None:
            channel = await self.bot.fetch_channel(channel_id)
        try:
            message = await channel.fetch_message(message_id)
        except discord.NotFound:
            # Deleted before the edit was handled, e.g. auto-deleted on creation
            return

        if not self._is_user_authored(message):
            return
        await self.check_art_post(message)

    async def check_art_post(self, message: discord.Message) -> bool:
        """Apply the art policy, auto-deleting the post when it fails. Returns the verdict."""
        verdict = evaluate_art_post(
            [AttachmentInfo.from_discord(attachment) for attachment in message.attachments],
            message.content or "",
            self.services.allowed_sites,
        )
        if not verdict.accepted:
            await self.services.notifier.reject(message, verdict.reason)
        return verdict.accepted

    async def prune_ticket_mentions(self, message: discord.Message) -> None:
        """Remove uninvited members mentioned inside a tracked ticket thread."""
        opener_id = self.services.state.ticket_opener(message.channel.id)
        if opener_id is None:
            return

        thread = message.channel
        moderator_role_id = self.services.config.moderator_role_id
        bot_id = self.bot.user.id if self.bot.user else None

        for user_id in {int(match) for match in MENTION_PATTERN.findall(message.content or "")}:
            if user_id in (bot_id, opener_id):
                continue
            member = message.guild.get_member(user_id)
            if member is None:
                try:
                    member = await message.guild.fetch_member(user_id)
                except discord.NotFound:
                    continue
            if discord_utils.has_role(member, moderator_role_id):
                continue
            await thread.remove_user(member)
            logger.info("Removed %s from ticket thread %s (mentioned by %s)", member, thread.id, message.author)


def setup(discord_bot_instance, services: BotServices):
    """Register the MessageListenerCog with the bot."""
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance, services))
