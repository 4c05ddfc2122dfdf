"""Embeds and buttons for the paginated /help command."""

from typing import Iterable, Mapping, Sequence

import discord

from spiritbot.util.discord_utils import SPIRIT_BLUE

# Idle time after which the buttons are disabled
HELP_TIMEOUT_SECONDS = 15 * 60

NOT_YOUR_HELP = "Only the member who ran /help can switch its pages. Run /help yourself to browse."


def collect_modules(bot: discord.Bot) -> dict[str, list[discord.SlashCommand]]:
    """Group the bot's slash commands by the cog that defines them."""
    modules: dict[str, list[discord.SlashCommand]] = {}
    for command in bot.walk_application_commands():
        if not isinstance(command, discord.SlashCommand) or command.cog is None:
            continue
        modules.setdefault(command.cog.qualified_name, []).append(command)
    return modules


def format_arguments(options: Sequence[discord.Option]) -> str:
    """Render command options as ``name(optional)(default: x), ...`` or ``None``."""
    parts: list[str] = []
    for option in options:
        part = option.name
        if not option.required:
            part += "(optional)"
        if option.default is not None and str(option.default) != "":
            part += f"(default: {option.default})"
        parts.append(part)
    return ", ".join(parts) if parts else "None"


def build_module_embed(module_name: str, modules: Mapping[str, Sequence[discord.SlashCommand]]) -> discord.Embed:
    """
    Build the embed listing one module's commands.

    Raises:
        LookupError: If ``module_name`` is not one of ``modules``.
    """
    if module_name not in modules:
        raise LookupError(f"You tried to access a module that doesn't exist: {module_name}")

    embed = discord.Embed(title=module_name, color=SPIRIT_BLUE)
    for command in modules[module_name]:
        if not command.description:
            continue
        embed.add_field(
            name=command.qualified_name,
            value=f"{command.description}\n*Arguments*: {format_arguments(command.options)}",
            inline=False,
        )
    return embed


class HelpView(discord.ui.View):
    """One button per module. Presses are read by the /help loop, not by callbacks.

    Presses from anyone but ``owner_id`` are answered with an ephemeral note
    and never reach the loop.
    """

    def __init__(self, module_names: Iterable[str], owner_id: int):
        super().__init__(timeout=None)
        self.owner_id = owner_id
        for name in module_names:
            self.add_item(discord.ui.Button(label=f"{name} commands", custom_id=name, style=discord.ButtonStyle.secondary))

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user is not None and interaction.user.id == self.owner_id:
            return True
        await interaction.response.send_message(NOT_YOUR_HELP, ephemeral=True)
        return False
