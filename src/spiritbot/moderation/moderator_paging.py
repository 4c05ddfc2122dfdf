"""
Paging a single online moderator on behalf of a member.

When a member mentions the any-moderator role, one online human moderator
(ban-members permission) is picked uniformly at random and mentioned. With
nobody online the moderator role itself is mentioned.
"""

import random
from typing import Iterable, Optional

import discord

from spiritbot.util.discord_utils import can_ban_members
from spiritbot.util.logger import get_logger

logger = get_logger("moderator_paging")

NOBODY_TO_PING = "No moderator is online right now. Please open a /ticket and one will get back to you."


def eligible_moderators(members: Iterable[discord.Member]) -> list[discord.Member]:
    """Members that can ban, are not bots and are not offline."""
    return [
        member for member in members
        if can_ban_members(member)
        and not member.bot
        and member.status != discord.Status.offline
    ]


def pick_moderator(
    members: Iterable[discord.Member],
    rng: random.Random | None = None,
) -> Optional[discord.Member]:
    """Choose one eligible moderator with equal probability, or None if there are none."""
    candidates = eligible_moderators(members)
    if not candidates:
        return None
    return (rng or random).choice(candidates)


async def page_moderator(message: discord.Message, moderator_role_id: Optional[int]) -> None:
    """
    Answer an any-moderator ping in the message's channel.

    Args:
        message: The message that mentioned the any-moderator role.
        moderator_role_id: Role mentioned when no moderator is online; when unset
            the member is pointed at /ticket instead.
    """
    moderator = pick_moderator(message.guild.members)
    if moderator is None:
        if moderator_role_id is None:
            logger.warning("No moderator online and roles.moderator is unset; nobody can be pinged")
            await message.channel.send(NOBODY_TO_PING, allowed_mentions=discord.AllowedMentions.none())
            return
        logger.info("No moderator online for ping in #%s; mentioning the role", message.channel)
        await message.channel.send(
            f"<@&{moderator_role_id}>, I have pinged all moderators for you.",
            allowed_mentions=discord.AllowedMentions(roles=True),
        )
        return

    logger.info("Paging moderator %s for ping in #%s", moderator, message.channel)
    await message.channel.send(
        f"<@{moderator.id}>, Will be here to assist you.",
        allowed_mentions=discord.AllowedMentions(users=True),
    )
