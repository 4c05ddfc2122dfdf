"""
Auto-deletion of rejected posts and audit entries for deleted messages.

Messages the bot deletes itself are recorded in the volatile self-deletion
set before the delete call, so the delete event that follows (which may
arrive before the call even returns) is recognised and not audited twice.
"""

from __future__ import annotations

from typing import Optional

import discord

from spiritbot.bot.bot_state import VolatileState
from spiritbot.database.database import Database
from spiritbot.datatypes.badge_datatypes import BadgeKind
from spiritbot.datatypes.discord_datatypes import (
    CachedDeletion,
    DeletedMessage,
    SystemDeletion,
    UncachedDeletion,
)
from spiritbot.datatypes.policy_datatypes import RejectionReason
from spiritbot.moderation.art_policy import rejection_notice
from spiritbot.services.channel_registry import ChannelRegistry
from spiritbot.util import discord_utils
from spiritbot.util.format_utils import full_timestamp
from spiritbot.util.logger import get_logger

logger = get_logger("audit_notifier")


class AuditNotifier:
    """Applies auto-deletions and writes audit entries to the notes and autos channels."""

    def __init__(
        self,
        state: VolatileState,
        channels: ChannelRegistry,
        database: Database,
        art_channel_id: Optional[int],
    ) -> None:
        self._state = state
        self._channels = channels
        self._database = database
        self._art_channel_id = art_channel_id

    async def reject(self, message: discord.Message, reason: RejectionReason) -> None:
        """
        Remove a post that broke the art policy and audit the removal.

        The author is told why by DM when their DMs are open; the quote and
        its attachments are posted to the autos channel either way.

        Args:
            message: The offending post.
            reason: Why the policy rejected it.
        """
        embed = discord_utils.quote_user_message(
            "Message autodeleted",
            message,
            discord_utils.SPIRIT_RED,
            include_origin_channel=True,
            include_direct_user_link=True,
            include_message_reference=True,
        )
        # Download attachments while the message still exists
        files = await discord_utils.collect_files(message)

        self._state.ignore_deletion(message.id)
        try:
            await message.delete()
        except discord.NotFound:
            logger.debug("Message %s was already gone before auto-deletion", message.id)

        logger.info("Auto-deleted message %s from %s in #%s: %s", message.id, message.author, message.channel, reason)

        guild_name = message.guild.name if message.guild else "the server"
        notice = rejection_notice(reason, message.channel.id, guild_name)
        await discord_utils.try_send_dm(message.author, notice, embed)

        autos = self._channels.autos
        if autos is None:
            logger.warning("No autos channel configured; auto-deletion of %s not posted", message.id)
            return
        await autos.send(embed=embed, files=files)

    async def on_external_delete(self, deleted: DeletedMessage) -> None:
        """
        Audit a message deletion reported by the gateway.

        Deletions the bot made itself are consumed from the self-deletion set
        and otherwise ignored. A cached user message is quoted in full; for an
        uncached one only its creation time and channel are known.
        """
        match deleted:
            case CachedDeletion(message=message):
                if self._state.consume_ignored_deletion(message.id):
                    return
                if message.guild is None:
                    return
                await self._audit_cached(message)
            case UncachedDeletion(message_id=message_id, channel_id=channel_id, guild_id=guild_id):
                if self._state.consume_ignored_deletion(message_id):
                    return
                if guild_id is None:
                    return
                await self._audit_uncached(message_id, channel_id)
            case SystemDeletion(message_id=message_id):
                self._state.consume_ignored_deletion(message_id)

    async def _audit_cached(self, message: discord.Message) -> None:
        notes = self._channels.notes
        if notes is not None:
            embed = discord_utils.quote_user_message(
                "Message deleted",
                message,
                discord_utils.SPIRIT_RED,
                include_origin_channel=True,
                include_direct_user_link=True,
                include_message_reference=True,
            )
            await discord_utils.send_message_with_files(notes, embed, message)
        else:
            logger.warning("No notes channel configured; deletion of %s not posted", message.id)

        if message.channel.id == self._art_channel_id:
            await self._database.revoke_badge(message.author.id, BadgeKind.CREATIVE)
            logger.info("Revoked %s badge from %s after art post deletion", BadgeKind.CREATIVE, message.author)

    async def _audit_uncached(self, message_id: int, channel_id: int) -> None:
        notes = self._channels.notes
        if notes is None:
            logger.warning("No notes channel configured; deletion of %s not posted", message_id)
            return

        created_at = discord.utils.snowflake_time(message_id)
        embed = discord.Embed(title="Message deleted", color=discord_utils.SPIRIT_RED)
        embed.add_field(name="Message", value="Message was not in cache", inline=False)
        embed.add_field(name="Message was created on", value=full_timestamp(created_at), inline=True)
        embed.add_field(name="Channel", value=f"<#{channel_id}>", inline=True)
        await notes.send(embed=embed)
