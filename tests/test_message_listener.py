from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from conftest import (
    ANY_MODERATOR_ROLE_ID,
    ART_CHANNEL_ID,
    BOT_USER_ID,
    COMMANDS_CHANNEL_ID,
    MODERATOR_ROLE_ID,
    TRUSTED_SITE,
    FakeAttachment,
    FakeChannel,
    FakeGuild,
    FakeMessage,
    FakeUser,
)
from spiritbot.bot.cogs import message_listener
from spiritbot.datatypes.badge_datatypes import BadgeKind
from spiritbot.datatypes.policy_datatypes import RejectionReason
from spiritbot.util.discord_utils import PIN_EMOJI


@pytest.fixture
def fake_bot():
    return SimpleNamespace(
        user=SimpleNamespace(id=BOT_USER_ID),
        process_commands=AsyncMock(),
        get_channel=MagicMock(return_value=None),
        fetch_channel=AsyncMock(),
    )


@pytest.fixture
def cog(fake_bot, services):
    return message_listener.MessageListenerCog(fake_bot, services)


def guild_message(**kwargs):
    kwargs.setdefault("guild", FakeGuild())
    return FakeMessage(**kwargs)


def art_channel():
    return FakeChannel(ART_CHANNEL_ID, "art")


@pytest.mark.asyncio
async def test_on_message_spawns_handler(cog, services):
    spawned = []

    def spawn(work, context, description, **kwargs):
        spawned.append((context, description))
        work.close()

    services.dispatcher = SimpleNamespace(spawn=spawn)
    message = guild_message(content="hello")

    await cog.on_message(message)

    assert len(spawned) == 1
    context, description = spawned[0]
    assert description == "Exception while executing message received event"
    assert context().fields["Channel"] == f"<#{message.channel.id}>"


@pytest.mark.asyncio
async def test_accepted_art_post_is_pinned_and_earns_badge(cog, services):
    message = guild_message(channel=art_channel(), content=f"new piece {TRUSTED_SITE}/gallery/1")

    await cog.handle_message(message)

    services.notifier.reject.assert_not_awaited()
    message.add_reaction.assert_awaited_once_with(PIN_EMOJI)
    services.database.grant_badge.assert_awaited_once_with(message.author.id, BadgeKind.CREATIVE)


@pytest.mark.asyncio
async def test_large_image_in_art_channel_is_accepted(cog, services):
    message = guild_message(channel=art_channel(), attachments=[FakeAttachment(width=512, height=512)])

    await cog.handle_message(message)

    message.add_reaction.assert_awaited_once_with(PIN_EMOJI)
    services.database.grant_badge.assert_awaited_once()


@pytest.mark.asyncio
async def test_rejected_art_post_goes_to_notifier(cog, services):
    message = guild_message(channel=art_channel(), content="just chatting")

    await cog.handle_message(message)

    services.notifier.reject.assert_awaited_once_with(message, RejectionReason.NO_ART_SOURCE)
    message.add_reaction.assert_not_awaited()
    services.database.grant_badge.assert_not_awaited()


@pytest.mark.asyncio
async def test_art_channel_takes_precedence_over_prefix(cog, fake_bot, services):
    message = guild_message(channel=art_channel(), content="!profile")

    await cog.handle_message(message)

    fake_bot.process_commands.assert_not_awaited()
    services.notifier.reject.assert_awaited_once()


@pytest.mark.asyncio
async def test_prefixed_message_goes_to_command_framework(cog, fake_bot):
    message = guild_message(content="!badge grant @someone Creative")

    await cog.handle_message(message)

    fake_bot.process_commands.assert_awaited_once_with(message)
    message.reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_typed_slash_command_gets_hint(cog, fake_bot):
    message = guild_message(content="/help")

    await cog.handle_message(message)

    message.reply.assert_awaited_once_with(message_listener.SLASH_HINT)
    fake_bot.process_commands.assert_not_awaited()


@pytest.mark.asyncio
async def test_greeting_in_commands_channel_is_answered(cog):
    message = guild_message(channel=FakeChannel(COMMANDS_CHANNEL_ID, "commands"), content="Hi Spirit, how are you?")

    await cog.handle_message(message)

    message.reply.assert_awaited_once_with(message_listener.GREETING_REPLY)


@pytest.mark.asyncio
async def test_other_text_in_commands_channel_is_ignored(cog):
    message = guild_message(channel=FakeChannel(COMMANDS_CHANNEL_ID, "commands"), content="hello")

    await cog.handle_message(message)

    message.reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_greeting_outside_commands_channel_is_ignored(cog):
    message = guild_message(content="hi spirit")

    await cog.handle_message(message)

    message.reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_any_moderator_mention_pages_a_moderator(cog, monkeypatch):
    pager = AsyncMock()
    monkeypatch.setattr(message_listener, "page_moderator", pager)
    message = guild_message(content=f"<@&{ANY_MODERATOR_ROLE_ID}> someone is spamming")

    await cog.handle_message(message)

    pager.assert_awaited_once_with(message, MODERATOR_ROLE_ID)


@pytest.mark.asyncio
async def test_any_moderator_mention_in_commands_channel_is_not_paged(cog, monkeypatch):
    pager = AsyncMock()
    monkeypatch.setattr(message_listener, "page_moderator", pager)
    message = guild_message(channel=FakeChannel(COMMANDS_CHANNEL_ID), content=f"<@&{ANY_MODERATOR_ROLE_ID}>")

    await cog.handle_message(message)

    pager.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message",
    [
        FakeMessage(content="!help", author=FakeUser(2, bot=True), guild=FakeGuild()),
        FakeMessage(content="!help", webhook_id=123, guild=FakeGuild()),
        FakeMessage(content="!help", system=True, guild=FakeGuild()),
        FakeMessage(content="!help", guild=None),
    ],
    ids=["bot", "webhook", "system", "direct-message"],
)
async def test_non_user_and_direct_messages_are_ignored(cog, fake_bot, services, message):
    await cog.handle_message(message)

    fake_bot.process_commands.assert_not_awaited()
    message.reply.assert_not_awaited()
    services.notifier.reject.assert_not_awaited()


@pytest.mark.asyncio
async def test_ticket_thread_mentions_remove_uninvited_members(cog, services):
    opener = FakeUser(1, name="opener")
    outsider = FakeUser(2, name="outsider")
    moderator = FakeUser(3, name="mod", roles=[MODERATOR_ROLE_ID])
    uncached = FakeUser(4, name="uncached")
    guild = FakeGuild(members=[opener, outsider, moderator])
    guild.fetch_member.return_value = uncached
    thread = FakeChannel(500, "ticket-opener")
    services.state.register_ticket_thread(thread.id, opener.id)

    message = FakeMessage(
        content=f"<@2> <@3> <@{BOT_USER_ID}> <@1> <@!4> please look",
        author=opener,
        channel=thread,
        guild=guild,
    )
    await cog.handle_message(message)

    removed = {call.args[0].id for call in thread.remove_user.await_args_list}
    assert removed == {2, 4}
    guild.fetch_member.assert_awaited_once_with(4)


@pytest.mark.asyncio
async def test_ticket_pruning_skips_unknown_users(cog, services):
    guild = FakeGuild()
    guild.fetch_member.side_effect = discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Member")
    thread = FakeChannel(500, "ticket-opener")
    services.state.register_ticket_thread(thread.id, 1)

    await cog.handle_message(FakeMessage(content="<@12345>", author=FakeUser(1), channel=thread, guild=guild))

    thread.remove_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_mentions_outside_ticket_threads_remove_nobody(cog):
    channel = FakeChannel(501, "general")
    await cog.handle_message(guild_message(content="<@2> hi", channel=channel))

    channel.remove_user.assert_not_awaited()


@pytest.mark.asyncio
async def test_edit_outside_art_channel_is_ignored(cog, fake_bot, services):
    await cog.handle_edit(COMMANDS_CHANNEL_ID, 1)

    fake_bot.get_channel.assert_not_called()
    services.notifier.reject.assert_not_awaited()


@pytest.mark.asyncio
async def test_edit_that_breaks_policy_is_rejected(cog, fake_bot, services):
    channel = art_channel()
    edited = guild_message(channel=channel, content="removed the link")
    channel.fetch_message.return_value = edited
    fake_bot.get_channel.return_value = channel

    await cog.handle_edit(ART_CHANNEL_ID, edited.id)

    channel.fetch_message.assert_awaited_once_with(edited.id)
    services.notifier.reject.assert_awaited_once_with(edited, RejectionReason.NO_ART_SOURCE)


@pytest.mark.asyncio
async def test_edit_that_passes_policy_grants_nothing(cog, fake_bot, services):
    channel = art_channel()
    edited = guild_message(channel=channel, content=f"fixed: {TRUSTED_SITE}")
    channel.fetch_message.return_value = edited
    fake_bot.fetch_channel.return_value = channel

    await cog.handle_edit(ART_CHANNEL_ID, edited.id)

    fake_bot.fetch_channel.assert_awaited_once_with(ART_CHANNEL_ID)
    services.notifier.reject.assert_not_awaited()
    services.database.grant_badge.assert_not_awaited()
    edited.add_reaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_edit_of_vanished_message_is_ignored(cog, fake_bot, services):
    channel = art_channel()
    channel.fetch_message.side_effect = discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Message")
    fake_bot.get_channel.return_value = channel

    await cog.handle_edit(ART_CHANNEL_ID, 1)

    services.notifier.reject.assert_not_awaited()
