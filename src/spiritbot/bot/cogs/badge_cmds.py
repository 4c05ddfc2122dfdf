"""
Text commands for moderators to adjust badges by hand.

Usage: ``<prefix>badge grant @member Creative`` / ``<prefix>badge revoke @member Creative``.
"""

import discord
from discord.ext import commands

from spiritbot.bot.client import BotServices
from spiritbot.datatypes.badge_datatypes import BadgeKind
from spiritbot.util.logger import get_logger

logger = get_logger("badge_commands")


def badge_kind(argument: str) -> BadgeKind:
    """Converter from a case-insensitive badge name to a BadgeKind."""
    for kind in BadgeKind:
        if kind.value.lower() == argument.lower():
            return kind
    known = ", ".join(kind.value for kind in BadgeKind)
    raise commands.BadArgument(f"Unknown badge {argument!r}. Known badges: {known}")


class BadgeAdmin(commands.Cog):
    """Moderator-only badge adjustments."""

    def __init__(self, bot: commands.Bot, services: BotServices):
        self.bot = bot
        self.services = services

    @commands.group(name="badge", invoke_without_command=True)
    @commands.guild_only()
    @commands.has_permissions(ban_members=True)
    async def badge(self, ctx: commands.Context) -> None:
        await ctx.send(f"Usage: `{ctx.prefix}badge grant|revoke @member <badge>`")

    @badge.command(name="grant")
    @commands.guild_only()
    @commands.has_permissions(ban_members=True)
    async def grant(self, ctx: commands.Context, member: discord.Member, kind: badge_kind) -> None:
        await self.services.database.grant_badge(member.id, kind)
        logger.info(f"{ctx.author} granted {kind} to {member}")
        await ctx.send(f"Granted **{kind}** to {member.display_name}.")

    @badge.command(name="revoke")
    @commands.guild_only()
    @commands.has_permissions(ban_members=True)
    async def revoke(self, ctx: commands.Context, member: discord.Member, kind: badge_kind) -> None:
        await self.services.database.revoke_badge(member.id, kind)
        logger.info(f"{ctx.author} revoked {kind} from {member}")
        await ctx.send(f"Revoked **{kind}** from {member.display_name}.")


def setup(bot: commands.Bot, services: BotServices) -> None:
    """Register the badge admin cog with the bot."""
    bot.add_cog(BadgeAdmin(bot, services))
