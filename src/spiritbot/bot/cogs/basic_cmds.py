"""
Basic slash commands: /help and /profile.

Both are only answered in the configured commands channel.
"""

from typing import Optional

import discord
from discord.ext import commands

from spiritbot.bot.client import BotServices
from spiritbot.ui import help_ui
from spiritbot.ui.profile_embed import build_profile_embed
from spiritbot.util.discord_utils import await_component, disable_all_buttons
from spiritbot.util.logger import get_logger

logger = get_logger("basic_commands")

HELP_INTRO = "Here's a list of commands and their description:"


class NotInCommandsChannel(commands.CheckFailure):
    """Raised when a commands-channel-only command is used elsewhere."""

    def __init__(self, channel_id: int):
        super().__init__(f"Please use <#{channel_id}> for this command.")


class Basic(commands.Cog):
    """Cog for the basic member-facing commands."""

    def __init__(self, bot: discord.Bot, services: BotServices):
        self.bot = bot
        self.services = services

    def cog_check(self, ctx: discord.ApplicationContext) -> bool:
        if ctx.guild is None:
            raise commands.NoPrivateMessage()
        channel_id = self.services.config.commands_channel_id
        if channel_id is not None and ctx.channel.id != channel_id:
            raise NotInCommandsChannel(channel_id)
        return True

    @discord.slash_command(name="help", description="Gives help (hopefully)")
    async def help(self, ctx: discord.ApplicationContext) -> None:
        """Show one module's commands at a time, switching modules with buttons."""
        modules = help_ui.collect_modules(self.bot)
        module_name = type(self).__name__
        view = help_ui.HelpView(modules.keys(), ctx.author.id)

        await ctx.respond(HELP_INTRO, view=view)
        info_message = await ctx.interaction.original_response()

        selection: Optional[discord.Interaction] = None
        while True:
            embed = help_ui.build_module_embed(module_name, modules)
            if selection is None:
                await info_message.edit(embed=embed, view=view)
            else:
                await selection.response.edit_message(embed=embed, view=view)

            selection = await await_component(
                self.bot,
                info_message.id,
                ctx.author.id,
                timeout=help_ui.HELP_TIMEOUT_SECONDS,
            )
            if selection is None:
                break
            module_name = selection.data["custom_id"]

        disable_all_buttons(view)
        view.stop()
        # The /help interaction token has expired by now; edit with the bot token instead
        try:
            await ctx.channel.get_partial_message(info_message.id).edit(view=view)
        except discord.NotFound:
            logger.debug("Help message %s was deleted before its buttons were disabled", info_message.id)

    @discord.slash_command(name="profile", description="Gets the information of someone")
    async def profile(
        self,
        ctx: discord.ApplicationContext,
        user: discord.Option(discord.Member, "Whose profile to show", required=False, default=None),
    ) -> None:
        """Show a member's profile with their badges. Defaults to the invoker."""
        await ctx.defer()
        member = user or ctx.author
        badges = await self.services.database.list_badges(member.id)
        await ctx.send_followup(embed=build_profile_embed(member, badges))
        logger.debug(f"Profile of {member} shown to {ctx.author}")


def setup(bot: discord.Bot, services: BotServices) -> None:
    """Register the basic commands cog with the bot."""
    bot.add_cog(Basic(bot, services))
