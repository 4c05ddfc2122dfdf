"""
discord_utils.py
================

Low-level Discord helpers for SpiritBot.

Stateless functions for quoting messages into embeds, re-uploading
attachments, best-effort DMs, role checks and component waits. Higher-level
components (audit notifier, cogs) build on these.
"""

import asyncio
from typing import Optional

import discord

from spiritbot.util.format_utils import truncate
from spiritbot.util.logger import get_logger

logger = get_logger("discord_utils")

SPIRIT_BLUE = discord.Color.from_rgb(0x5A, 0xB4, 0xF0)
SPIRIT_RED = discord.Color.from_rgb(0xE0, 0x3C, 0x3C)

PIN_EMOJI = "📌"

EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FIELD_LIMIT = 1024


def quote_user_message(
    title: str,
    message: discord.Message,
    color: discord.Color,
    *,
    include_origin_channel: bool = False,
    include_direct_user_link: bool = False,
    include_message_reference: bool = False,
) -> discord.Embed:
    """
    Build an embed quoting a user message for audit channels and DMs.

    Args:
        title: Embed title, e.g. "Message deleted".
        message: The message to quote.
        color: Embed colour.
        include_origin_channel: Add a field mentioning the channel it was posted in.
        include_direct_user_link: Add a field mentioning the author.
        include_message_reference: Add a jump link to the message.

    Returns:
        discord.Embed: The quote embed.
    """
    embed = discord.Embed(
        title=title,
        description=truncate(message.content or "*no text*", EMBED_DESCRIPTION_LIMIT),
        color=color,
        timestamp=message.created_at,
    )
    embed.set_author(name=str(message.author), icon_url=message.author.display_avatar.url)

    if include_origin_channel:
        embed.add_field(name="Channel", value=f"<#{message.channel.id}>", inline=True)
    if include_direct_user_link:
        embed.add_field(name="User", value=f"<@{message.author.id}>", inline=True)
    if include_message_reference:
        embed.add_field(name="Message", value=f"[Jump to message]({message.jump_url})", inline=True)

    if message.attachments:
        names = "\n".join(attachment.filename for attachment in message.attachments)
        embed.add_field(name="Attachments", value=truncate(names, EMBED_FIELD_LIMIT), inline=False)

    embed.set_footer(text=f"User ID: {message.author.id} | Message ID: {message.id}")
    return embed


async def collect_files(message: discord.Message) -> list[discord.File]:
    """
    Download the attachments of a message so they can be re-uploaded.

    Attachments that can no longer be fetched (deleted from the CDN, too
    large) are skipped; their filenames are already listed in the quote embed.
    """
    files: list[discord.File] = []
    for attachment in message.attachments:
        try:
            files.append(await attachment.to_file(use_cached=True))
        except discord.HTTPException as exc:
            logger.debug("Could not re-upload attachment %s: %s", attachment.filename, exc)
    return files


async def send_message_with_files(
    channel: discord.abc.Messageable,
    embed: discord.Embed,
    message: discord.Message,
) -> discord.Message:
    """Send ``embed`` to ``channel`` together with copies of ``message``'s attachments."""
    files = await collect_files(message)
    return await channel.send(embed=embed, files=files)


async def try_send_dm(
    user: discord.abc.User,
    content: str,
    embed: Optional[discord.Embed] = None,
) -> bool:
    """
    Best-effort direct message.

    Returns:
        bool: True if the DM was delivered, False if the user cannot be reached.
    """
    try:
        await user.send(content=content, embed=embed)
        return True
    except discord.Forbidden:
        logger.debug("DMs are closed for %s", user)
    except discord.HTTPException as exc:
        logger.warning("Failed to DM %s: %s", user, exc)
    return False


def has_role(member: discord.Member, role_id: Optional[int]) -> bool:
    """Return True when ``member`` holds the role with ``role_id``."""
    if role_id is None:
        return False
    return any(role.id == role_id for role in member.roles)


def can_ban_members(member: discord.abc.User) -> bool:
    """Return True for guild members with the ban-members permission."""
    permissions = getattr(member, "guild_permissions", None)
    return bool(getattr(permissions, "ban_members", False))


def disable_all_buttons(view: discord.ui.View) -> discord.ui.View:
    """Disable every button of ``view`` in place and return it."""
    for item in view.children:
        if isinstance(item, discord.ui.Button):
            item.disabled = True
    return view


async def await_component(
    bot: discord.Client,
    message_id: int,
    user_id: int,
    *,
    component_type: discord.ComponentType = discord.ComponentType.button,
    timeout: Optional[float] = None,
) -> Optional[discord.Interaction]:
    """
    Wait for a component interaction on one message from one user.

    Args:
        bot: Client dispatching the ``interaction`` event.
        message_id: Message carrying the components.
        user_id: Only interactions from this user count.
        component_type: Kind of component that must be used.
        timeout: Seconds to wait; None waits indefinitely.

    Returns:
        The interaction, or None when the wait expired.
    """

    def check(interaction: discord.Interaction) -> bool:
        if interaction.type != discord.InteractionType.component:
            return False
        if interaction.message is None or interaction.message.id != message_id:
            return False
        if interaction.user is None or interaction.user.id != user_id:
            return False
        data = interaction.data or {}
        return data.get("component_type") == component_type.value

    try:
        return await bot.wait_for("interaction", check=check, timeout=timeout)
    except asyncio.TimeoutError:
        return None
