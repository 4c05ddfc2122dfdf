from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord.ext import commands

from conftest import COMMANDS_CHANNEL_ID, FakeChannel, FakeUser
from spiritbot.bot.cogs import basic_cmds
from spiritbot.datatypes.badge_datatypes import BADGE_CATALOG, UserBadge
from spiritbot.ui import help_ui


@pytest.fixture
def cog(services):
    return basic_cmds.Basic(SimpleNamespace(), services)


def application_context(channel_id=COMMANDS_CHANNEL_ID, guild=True):
    return SimpleNamespace(
        guild=SimpleNamespace(id=1) if guild else None,
        channel=FakeChannel(channel_id),
        author=FakeUser(5, name="painter"),
        defer=AsyncMock(),
        respond=AsyncMock(),
        send_followup=AsyncMock(),
    )


def test_commands_channel_check(cog):
    assert cog.cog_check(application_context()) is True

    with pytest.raises(basic_cmds.NotInCommandsChannel, match=f"<#{COMMANDS_CHANNEL_ID}>"):
        cog.cog_check(application_context(channel_id=1))

    with pytest.raises(commands.NoPrivateMessage):
        cog.cog_check(application_context(guild=False))


def test_check_allows_any_channel_when_unconfigured(cog, services):
    services.config.commands_channel_id = None

    assert cog.cog_check(application_context(channel_id=1)) is True


@pytest.mark.asyncio
async def test_profile_defaults_to_invoker(cog, services):
    ctx = application_context()
    services.database.list_badges.return_value = [UserBadge(user_id=5, badge=BADGE_CATALOG[0], count=2)]

    await basic_cmds.Basic.profile.callback(cog, ctx, None)

    ctx.defer.assert_awaited_once()
    services.database.list_badges.assert_awaited_once_with(5)
    embed = ctx.send_followup.await_args.kwargs["embed"]
    assert embed.title == "Profile of painter"
    assert embed.fields[-1].name == "🎨 Creative II"


@pytest.mark.asyncio
async def test_profile_of_other_member(cog, services):
    ctx = application_context()
    other = FakeUser(9, name="sculptor")

    await basic_cmds.Basic.profile.callback(cog, ctx, other)

    services.database.list_badges.assert_awaited_once_with(9)
    assert ctx.send_followup.await_args.kwargs["embed"].title == "Profile of sculptor"


def help_context(info_message):
    ctx = application_context()
    ctx.interaction = SimpleNamespace(original_response=AsyncMock(return_value=info_message))
    ctx.channel.partial = SimpleNamespace(edit=AsyncMock())
    ctx.channel.get_partial_message = MagicMock(return_value=ctx.channel.partial)
    return ctx


def fake_command(name, description):
    return SimpleNamespace(name=name, qualified_name=name, description=description, options=[])


@pytest.mark.asyncio
async def test_help_switches_modules_until_timeout(cog, monkeypatch):
    modules = {
        "Basic": [fake_command("help", "Gives help (hopefully)")],
        "Tickets": [fake_command("ticket", "Open a private thread with the moderators")],
    }
    monkeypatch.setattr(help_ui, "collect_modules", lambda bot: modules)
    selection = SimpleNamespace(data={"custom_id": "Tickets"}, response=SimpleNamespace(edit_message=AsyncMock()))
    waiter = AsyncMock(side_effect=[selection, None])
    monkeypatch.setattr(basic_cmds, "await_component", waiter)

    info_message = SimpleNamespace(id=77, edit=AsyncMock())
    ctx = help_context(info_message)

    await basic_cmds.Basic.help.callback(cog, ctx)

    ctx.respond.assert_awaited_once()
    assert ctx.respond.await_args.args[0] == basic_cmds.HELP_INTRO

    first_edit = info_message.edit.await_args_list[0].kwargs
    assert first_edit["embed"].title == "Basic"
    assert selection.response.edit_message.await_args.kwargs["embed"].title == "Tickets"

    assert waiter.await_args.args == (cog.bot, 77, 5)
    assert waiter.await_args.kwargs["timeout"] == help_ui.HELP_TIMEOUT_SECONDS

    info_message.edit.assert_awaited_once()
    ctx.channel.get_partial_message.assert_called_once_with(77)
    final_view = ctx.channel.partial.edit.await_args.kwargs["view"]
    buttons = [item for item in final_view.children if isinstance(item, discord.ui.Button)]
    assert buttons and all(button.disabled for button in buttons)


def http_error(exc_type, status, reason):
    return exc_type(SimpleNamespace(status=status, reason=reason), reason)


@pytest.mark.asyncio
async def test_help_disables_buttons_after_interaction_token_expired(cog, monkeypatch):
    monkeypatch.setattr(help_ui, "collect_modules", lambda bot: {"Basic": [fake_command("help", "Gives help (hopefully)")]})
    clock = {"now": 0.0}

    async def idle_until_timeout(bot, message_id, user_id, *, timeout):
        clock["now"] += timeout
        return None

    monkeypatch.setattr(basic_cmds, "await_component", idle_until_timeout)

    async def edit_with_interaction_token(**kwargs):
        if clock["now"] >= 15 * 60:
            raise http_error(discord.HTTPException, 401, "Invalid Webhook Token")

    info_message = SimpleNamespace(id=77, edit=AsyncMock(side_effect=edit_with_interaction_token))
    ctx = help_context(info_message)

    await basic_cmds.Basic.help.callback(cog, ctx)

    info_message.edit.assert_awaited_once()
    ctx.channel.partial.edit.assert_awaited_once()


@pytest.mark.asyncio
async def test_help_tolerates_deleted_message(cog, monkeypatch):
    monkeypatch.setattr(help_ui, "collect_modules", lambda bot: {"Basic": [fake_command("help", "Gives help (hopefully)")]})
    monkeypatch.setattr(basic_cmds, "await_component", AsyncMock(return_value=None))
    ctx = help_context(SimpleNamespace(id=77, edit=AsyncMock()))
    ctx.channel.partial.edit.side_effect = http_error(discord.NotFound, 404, "Unknown Message")

    await basic_cmds.Basic.help.callback(cog, ctx)

    ctx.channel.partial.edit.assert_awaited_once()
