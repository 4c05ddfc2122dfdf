from types import SimpleNamespace

from conftest import FakeMessage
from spiritbot.datatypes.discord_datatypes import (
    CachedDeletion,
    SystemDeletion,
    SystemMessage,
    UncachedDeletion,
    UserMessage,
    classify_deletion,
    classify_message,
)
from spiritbot.datatypes.policy_datatypes import AttachmentInfo, PolicyVerdict, RejectionReason


def test_classify_message():
    user_message = FakeMessage(content="hi")
    system_message = FakeMessage(system=True)

    assert classify_message(user_message) == UserMessage(user_message)
    assert classify_message(system_message) == SystemMessage(system_message)


def test_classify_deletion_variants():
    cached = FakeMessage(content="bye")
    system = FakeMessage(system=True)

    assert classify_deletion(SimpleNamespace(cached_message=cached, message_id=cached.id, channel_id=1, guild_id=2)) == CachedDeletion(cached)
    assert classify_deletion(SimpleNamespace(cached_message=system, message_id=8, channel_id=1, guild_id=2)) == SystemDeletion(8)
    assert classify_deletion(SimpleNamespace(cached_message=None, message_id=9, channel_id=1, guild_id=None)) == UncachedDeletion(9, 1, None)


def test_attachment_info_from_discord():
    attachment = SimpleNamespace(filename="a.png", width=64, height=32, content_type="image/png")

    info = AttachmentInfo.from_discord(attachment)

    assert info == AttachmentInfo("a.png", 64, 32, "image/png")
    assert info.is_image
    assert not AttachmentInfo("a.txt").is_image
    assert not AttachmentInfo("clip.webm", 640, 480, "video/webm").is_image


def test_policy_verdict_constructors():
    assert PolicyVerdict.accept() == PolicyVerdict(True, None)
    assert PolicyVerdict.reject(RejectionReason.IMAGE_TOO_SMALL).reason is RejectionReason.IMAGE_TOO_SMALL
    assert str(RejectionReason.NO_ART_SOURCE) == "no recognized art source"
