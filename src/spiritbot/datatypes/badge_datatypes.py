"""
Badge catalog and per-user badge rows.

Badges are static reference data seeded into the database by the schema
manager. ``BadgeKind`` names the catalog entries the bot grants itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BadgeKind(Enum):
    """Catalog badges the bot logic grants or revokes."""

    CREATIVE = "Creative"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Badge:
    """A catalog entry.

    Attributes:
        name: Unique badge name, matching a ``BadgeKind`` value.
        description: Text shown under the badge on profiles.
        emote: Display glyph prefixed to the badge name.
    """
    name: str
    description: str
    emote: str


@dataclass(frozen=True, slots=True)
class UserBadge:
    """A user's holding of one badge. ``count`` is always at least 1."""
    user_id: int
    badge: Badge
    count: int


BADGE_CATALOG: tuple[Badge, ...] = (
    Badge(
        name=BadgeKind.CREATIVE.value,
        description="Shared their art with the community",
        emote="🎨",
    ),
)
