"""
Support tickets as private threads.

A ticket thread is tracked in the volatile state so the message listener can
keep it restricted to its opener, the moderators and the bot.
"""

import discord
from discord.ext import commands

from spiritbot.bot.client import BotServices
from spiritbot.util.logger import get_logger

logger = get_logger("ticket_commands")

TICKET_ARCHIVE_MINUTES = 1440


class Tickets(commands.Cog):
    """Cog for opening support tickets."""

    def __init__(self, bot: discord.Bot, services: BotServices):
        self.bot = bot
        self.services = services

    @discord.slash_command(name="ticket", description="Open a private thread with the moderators")
    async def ticket(
        self,
        ctx: discord.ApplicationContext,
        topic: discord.Option(str, "What do you need help with?", max_length=200),
    ) -> None:
        tickets = self.services.channels.tickets
        if tickets is None:
            await ctx.respond("❌ Tickets are not set up on this server.", ephemeral=True)
            return

        await ctx.defer(ephemeral=True)
        thread = await tickets.create_thread(
            name=f"ticket-{ctx.author.name}",
            type=discord.ChannelType.private_thread,
            auto_archive_duration=TICKET_ARCHIVE_MINUTES,
        )
        self.services.state.register_ticket_thread(thread.id, ctx.author.id)
        await thread.add_user(ctx.author)

        role_id = self.services.config.moderator_role_id
        role_mention = f"<@&{role_id}>" if role_id else "Moderators"
        await thread.send(
            f"{role_mention}, {ctx.author.mention} opened a ticket: {topic}",
            allowed_mentions=discord.AllowedMentions(roles=True, users=True),
        )
        await ctx.send_followup(f"Your ticket is open in {thread.mention}.", ephemeral=True)
        logger.info(f"Ticket thread {thread.id} opened by {ctx.author}")


def setup(bot: discord.Bot, services: BotServices) -> None:
    """Register the ticket cog with the bot."""
    bot.add_cog(Tickets(bot, services))
