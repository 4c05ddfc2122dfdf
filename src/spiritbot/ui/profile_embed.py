"""Embed rendering for the /profile command."""

from typing import Sequence

import discord

from spiritbot.datatypes.badge_datatypes import UserBadge
from spiritbot.util.discord_utils import SPIRIT_BLUE, can_ban_members
from spiritbot.util.format_utils import badge_title, long_date

MODERATOR_FIELD_NAME = "🚨 Moderator"
MODERATOR_FIELD_VALUE = "I'm a moderator of this community"


def build_profile_embed(member: discord.Member, badges: Sequence[UserBadge]) -> discord.Embed:
    """
    Build a member's profile: account dates, moderator status and badges.

    Args:
        member: The member whose profile is shown.
        badges: The member's badge rows from the store.
    """
    embed = discord.Embed(title=f"Profile of {member}", color=SPIRIT_BLUE)
    embed.set_thumbnail(url=member.display_avatar.url)
    embed.add_field(name="Created at", value=long_date(member.created_at), inline=True)
    joined = long_date(member.joined_at) if member.joined_at else "Unknown"
    embed.add_field(name="Joined at", value=joined, inline=False)

    if can_ban_members(member):
        embed.add_field(name=MODERATOR_FIELD_NAME, value=MODERATOR_FIELD_VALUE, inline=False)

    for user_badge in badges:
        badge = user_badge.badge
        embed.add_field(
            name=badge_title(badge.emote, badge.name, user_badge.count),
            value=badge.description,
            inline=True,
        )
    return embed
