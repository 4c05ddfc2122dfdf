"""
Inputs and outcomes of the art-channel posting policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import discord


class RejectionReason(Enum):
    """Why an art-channel post was refused."""

    NO_ART_SOURCE = "no recognized art source"
    IMAGE_TOO_SMALL = "image too small"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AttachmentInfo:
    """The parts of an attachment the policy looks at.

    Discord reports ``width`` and ``height`` for images and videos alike, so
    the content type decides which of the two it is when it is known.
    """
    filename: str
    width: Optional[int] = None
    height: Optional[int] = None
    content_type: Optional[str] = None

    @property
    def is_image(self) -> bool:
        if self.width is None or self.height is None:
            return False
        return self.content_type is None or self.content_type.startswith("image/")

    @classmethod
    def from_discord(cls, attachment: discord.Attachment) -> "AttachmentInfo":
        return cls(
            filename=attachment.filename,
            width=attachment.width,
            height=attachment.height,
            content_type=attachment.content_type,
        )


@dataclass(frozen=True, slots=True)
class PolicyVerdict:
    """Result of evaluating a post. ``reason`` is set iff the post was rejected."""
    accepted: bool
    reason: Optional[RejectionReason] = None

    @classmethod
    def accept(cls) -> "PolicyVerdict":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason) -> "PolicyVerdict":
        return cls(accepted=False, reason=reason)
