"""
Live channel lookups for the configured ids.

The registry is filled once the gateway reports ready and again whenever the
operator reloads the configuration. Until then, and for ids missing from the
configuration, every accessor returns None and callers skip the
corresponding notification.
"""

from __future__ import annotations

from typing import Optional

import discord

from spiritbot.configuration.app_configuration import AppConfig
from spiritbot.util.logger import get_logger

logger = get_logger("channel_registry")

# Channels the bot posts into; the art and commands channels are matched by id only
CHANNEL_NAMES = ("notes", "autos", "errors", "tickets")


class ChannelRegistry:
    """Resolves the configured output channels against a connected bot."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._channels: dict[str, discord.TextChannel] = {}

    def resolve(self, bot: discord.Client) -> None:
        """Look up every configured channel on ``bot``, replacing earlier lookups."""
        channels: dict[str, discord.TextChannel] = {}
        for name in CHANNEL_NAMES:
            channel_id = self._config.channel_id(name)
            if channel_id is None:
                continue
            channel = bot.get_channel(channel_id)
            if channel is None:
                logger.warning("Configured %s channel %s is not visible to the bot", name, channel_id)
                continue
            channels[name] = channel

        self._channels = channels
        logger.info("Resolved channels: %s", ", ".join(sorted(channels)) or "none")

    @property
    def notes(self) -> Optional[discord.TextChannel]:
        return self._channels.get("notes")

    @property
    def autos(self) -> Optional[discord.TextChannel]:
        return self._channels.get("autos")

    @property
    def errors(self) -> Optional[discord.TextChannel]:
        return self._channels.get("errors")

    @property
    def tickets(self) -> Optional[discord.TextChannel]:
        return self._channels.get("tickets")
