"""
Pytest configuration and shared fakes for SpiritBot tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from spiritbot.bot.bot_state import VolatileState  # noqa: E402

ART_CHANNEL_ID = 10
COMMANDS_CHANNEL_ID = 20
MODERATOR_ROLE_ID = 30
ANY_MODERATOR_ROLE_ID = 31
BOT_USER_ID = 999
TRUSTED_SITE = "https://trusted-site.example"


class FakeUser:
    def __init__(self, user_id=1, *, name="artist", bot=False, roles=(), ban_members=False, status="online"):
        self.id = user_id
        self.name = name
        self.display_name = name
        self.bot = bot
        self.mention = f"<@{user_id}>"
        self.roles = [SimpleNamespace(id=role_id) for role_id in roles]
        self.guild_permissions = SimpleNamespace(ban_members=ban_members)
        self.status = status
        self.display_avatar = SimpleNamespace(url=f"https://cdn.example/avatars/{user_id}.png")
        self.created_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
        self.joined_at = datetime(2021, 6, 1, tzinfo=timezone.utc)
        self.send = AsyncMock()

    def __str__(self):
        return self.name


class FakeAttachment:
    def __init__(self, filename="art.png", width=None, height=None, content_type="image/png"):
        self.filename = filename
        self.width = width
        self.height = height
        self.content_type = content_type
        self.to_file = AsyncMock(return_value=SimpleNamespace(filename=filename))


class FakeChannel:
    def __init__(self, channel_id=1, name="general"):
        self.id = channel_id
        self.name = name
        self.mention = f"<#{channel_id}>"
        self.send = AsyncMock()
        self.remove_user = AsyncMock()
        self.fetch_message = AsyncMock()

    def __str__(self):
        return self.name


class FakeGuild:
    def __init__(self, guild_id=1, name="Spirit Community", members=()):
        self.id = guild_id
        self.name = name
        self.members = list(members)
        self.fetch_member = AsyncMock()

    def get_member(self, user_id):
        return next((member for member in self.members if member.id == user_id), None)


class FakeMessage:
    def __init__(
        self,
        *,
        message_id=1_100_000_000_000_000_000,
        content="",
        author=None,
        channel=None,
        guild=None,
        attachments=(),
        system=False,
        webhook_id=None,
    ):
        self.id = message_id
        self.content = content
        self.author = author or FakeUser()
        self.channel = channel or FakeChannel()
        self.guild = guild
        self.attachments = list(attachments)
        self.webhook_id = webhook_id
        self.created_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self.jump_url = f"https://discord.com/channels/1/{self.channel.id}/{message_id}"
        self._system = system
        self.delete = AsyncMock()
        self.add_reaction = AsyncMock()
        self.reply = AsyncMock()

    def is_system(self):
        return self._system


@pytest.fixture
def guild():
    return FakeGuild()


@pytest.fixture
def services():
    """Service container with fake collaborators and a real VolatileState."""
    return SimpleNamespace(
        config=SimpleNamespace(
            prefix="!",
            art_channel_id=ART_CHANNEL_ID,
            commands_channel_id=COMMANDS_CHANNEL_ID,
            moderator_role_id=MODERATOR_ROLE_ID,
            any_moderator_role_id=ANY_MODERATOR_ROLE_ID,
            greeting_pattern="hi spirit",
        ),
        state=VolatileState(),
        database=SimpleNamespace(
            grant_badge=AsyncMock(),
            revoke_badge=AsyncMock(),
            list_badges=AsyncMock(return_value=[]),
        ),
        notifier=SimpleNamespace(reject=AsyncMock(), on_external_delete=AsyncMock()),
        reporter=SimpleNamespace(notify=AsyncMock()),
        dispatcher=SimpleNamespace(spawn=lambda work, context, description, **kwargs: work.close()),
        channels=SimpleNamespace(autos=FakeChannel(40, "autos"), notes=FakeChannel(41, "notes"), errors=FakeChannel(42, "errors"), tickets=None),
        allowed_sites=(TRUSTED_SITE,),
    )
