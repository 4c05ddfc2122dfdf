"""
Explicit variants over the message shapes delivered by Discord events.

Inbound messages are either authored by a user or generated by the platform
(joins, pins, boosts...). Deleted messages arrive with the cached message
when the client still holds it, otherwise with the bare ids only. Handlers
``match`` on these variants instead of probing attributes at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import discord


@dataclass(frozen=True, slots=True)
class UserMessage:
    """A regular message written by a user (or another bot)."""
    message: discord.Message


@dataclass(frozen=True, slots=True)
class SystemMessage:
    """A platform-generated message such as a join or pin notice."""
    message: discord.Message


InboundMessage = Union[UserMessage, SystemMessage]


@dataclass(frozen=True, slots=True)
class CachedDeletion:
    """A deleted user message whose body was still cached."""
    message: discord.Message


@dataclass(frozen=True, slots=True)
class SystemDeletion:
    """A deleted platform-generated message."""
    message_id: int


@dataclass(frozen=True, slots=True)
class UncachedDeletion:
    """A deleted message of which only the ids are known."""
    message_id: int
    channel_id: int
    guild_id: Optional[int]


DeletedMessage = Union[CachedDeletion, SystemDeletion, UncachedDeletion]


def classify_message(message: discord.Message) -> InboundMessage:
    """Wrap a message in the variant matching its origin."""
    if message.is_system():
        return SystemMessage(message)
    return UserMessage(message)


def classify_deletion(payload: discord.RawMessageDeleteEvent) -> DeletedMessage:
    """Wrap a raw delete payload in the variant matching what is known about it."""
    cached = payload.cached_message
    if cached is None:
        return UncachedDeletion(
            message_id=payload.message_id,
            channel_id=payload.channel_id,
            guild_id=payload.guild_id,
        )
    if cached.is_system():
        return SystemDeletion(message_id=payload.message_id)
    return CachedDeletion(cached)
