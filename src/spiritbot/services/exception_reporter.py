"""
Operator notifications for unhandled faults.

Every event handler and text command runs behind an error boundary that
hands its exception to :class:`ExceptionReporter`. The reporter logs the
traceback and posts a summary embed, the event context and the full
traceback file to the configured error channel. Reporting is best-effort:
a failure to post is logged and never raised back into the handler.
"""

from __future__ import annotations

import io
import traceback
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import discord

from spiritbot.util.discord_utils import SPIRIT_RED
from spiritbot.util.format_utils import truncate
from spiritbot.util.logger import get_logger

if TYPE_CHECKING:
    from spiritbot.services.channel_registry import ChannelRegistry

logger = get_logger("exception_reporter")


@dataclass(slots=True)
class ExceptionContext:
    """What the failing handler was working on, rendered as embed fields."""
    fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_message(cls, message: discord.Message) -> "ExceptionContext":
        return cls({
            "Author": f"{message.author} (<@{message.author.id}>)",
            "Channel": f"<#{message.channel.id}>",
            "Message": f"[Jump to message]({message.jump_url})",
            "Content": truncate(message.content or "*no text*", 1024),
        })

    @classmethod
    def from_channel_id(cls, channel_id: Optional[int]) -> "ExceptionContext":
        if channel_id is None:
            return cls({"Channel": "unknown"})
        return cls({"Channel": f"<#{channel_id}>"})

    @classmethod
    def from_argument(cls, name: str, value: object) -> "ExceptionContext":
        return cls({name: truncate(repr(value), 1024)})


class ExceptionReporter:
    """Posts exception reports to the operator error channel."""

    def __init__(self, channels: "ChannelRegistry", owner_id: Optional[int] = None) -> None:
        self._channels = channels
        self._owner_id = owner_id

    def build_report(
        self,
        exc: BaseException,
        context: ExceptionContext,
        description: str,
    ) -> discord.Embed:
        embed = discord.Embed(
            title="Exception report",
            description=description,
            color=SPIRIT_RED,
            timestamp=discord.utils.utcnow(),
        )
        embed.add_field(
            name=type(exc).__name__,
            value=truncate(str(exc) or "*no message*", 1024),
            inline=False,
        )
        for name, value in context.fields.items():
            embed.add_field(name=name, value=value, inline=True)
        return embed

    async def notify(
        self,
        exc: BaseException,
        context: ExceptionContext,
        description: str,
        ping_owner: bool = False,
    ) -> None:
        """
        Log ``exc`` and post a report to the error channel.

        Args:
            exc: The unhandled exception.
            context: The message, channel or argument being processed.
            description: Which handler failed.
            ping_owner: Mention the configured owner in the report.
        """
        logger.error("%s: %s", description, exc, exc_info=exc)

        channel = self._channels.errors
        if channel is None:
            logger.warning("No error channel configured; exception report kept in logs only")
            return

        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        content = f"<@{self._owner_id}>" if ping_owner and self._owner_id else None
        try:
            await channel.send(
                content=content,
                embed=self.build_report(exc, context, description),
                file=discord.File(io.BytesIO(trace.encode("utf-8")), filename="traceback.txt"),
            )
        except discord.HTTPException as report_exc:
            logger.error("Failed to post exception report: %s", report_exc)
