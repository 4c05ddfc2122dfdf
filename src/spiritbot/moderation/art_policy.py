"""
Art-channel posting policy.

A post is art when it carries an image of at least 40x40 pixels, or, when
it has no attachments at all, links to one of the allow-listed art sites.
Only the first attachment is inspected; later attachments are assumed to
piggyback on a valid first one.
"""

from typing import Sequence

from spiritbot.datatypes.policy_datatypes import AttachmentInfo, PolicyVerdict, RejectionReason

MIN_IMAGE_WIDTH = 40
MIN_IMAGE_HEIGHT = 40


def evaluate_art_post(
    attachments: Sequence[AttachmentInfo],
    content: str,
    allowed_sites: Sequence[str],
) -> PolicyVerdict:
    """
    Decide whether a post satisfies the art-channel policy.

    Args:
        attachments: The post's attachments in upload order.
        content: The post's text.
        allowed_sites: Substrings that mark a link to a trusted art site.

    Returns:
        PolicyVerdict: accepted, or rejected with the reason.
    """
    if not attachments:
        if any(site in content for site in allowed_sites):
            return PolicyVerdict.accept()
        return PolicyVerdict.reject(RejectionReason.NO_ART_SOURCE)

    first = attachments[0]
    if not first.is_image or first.width < MIN_IMAGE_WIDTH or first.height < MIN_IMAGE_HEIGHT:
        return PolicyVerdict.reject(RejectionReason.IMAGE_TOO_SMALL)
    return PolicyVerdict.accept()


def rejection_notice(reason: RejectionReason, channel_id: int, guild_name: str) -> str:
    """The DM explaining to the author why their post was removed."""
    lines = [
        f"Hello there!, the message you sent in <#{channel_id}> does not contain "
        "a valid message that I recognize as art",
    ]
    if reason is RejectionReason.IMAGE_TOO_SMALL:
        lines.append("The image sent is too small")
        lines.append(f"if you think this is an error feel free to send a /ticket in {guild_name}")
    else:
        lines.append(
            "if you think this is an error or want to suggest more sites to accept "
            f"feel free to send a /ticket in {guild_name}"
        )
    return "\n".join(lines)
