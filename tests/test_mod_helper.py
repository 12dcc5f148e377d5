from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from conftest import FakeGuild, FakePermissions, FakeRole
from huskymod.configuration.app_configuration import AppConfig
from huskymod.datatypes.action_datatypes import ActionType
from huskymod.moderation.mod_helper import ModHelper, SECONDS_PER_DAY
from huskymod.moderation.mod_result import ModResult


def http_error(cls, status: int):
    return cls(SimpleNamespace(status=status, reason="error"), "boom")


@pytest.fixture()
def config(tmp_path) -> AppConfig:
    return AppConfig(tmp_path / "missing.yml")


@pytest.fixture()
def modlog():
    return SimpleNamespace(record=AsyncMock())


@pytest.fixture()
def helper(modlog, config) -> ModHelper:
    return ModHelper(modlog=modlog, config=config)


def assert_no_mutation(guild: FakeGuild, *members) -> None:
    guild.ban.assert_not_awaited()
    guild.unban.assert_not_awaited()
    guild.kick.assert_not_awaited()
    for member in members:
        member.send.assert_not_awaited()


# --------------------------
# Bot permission check
# --------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["try_ban", "try_kick", "try_warn", "try_unban"])
async def test_bot_without_permission_is_denied_first(helper, moderator, target, method):
    guild = FakeGuild(bot_permissions=FakePermissions(ban_members=False, kick_members=False))
    # Moderator also lacks permissions: the bot check must still win
    moderator.guild_permissions = FakePermissions()

    result = await getattr(helper, method)(guild, moderator, target, "reason")

    assert result is ModResult.BOT_LACKS_PERMISSION
    assert_no_mutation(guild, target)
    guild.fetch_ban.assert_not_awaited()


@pytest.mark.asyncio
async def test_warn_requires_kick_not_ban_permission(helper, moderator, target):
    guild = FakeGuild(bot_permissions=FakePermissions(ban_members=True, kick_members=False))

    result = await helper.try_warn(guild, moderator, target, "reason")

    assert result is ModResult.BOT_LACKS_PERMISSION
    target.send.assert_not_awaited()


# --------------------------
# Actor permission check
# --------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["try_ban", "try_kick", "try_warn", "try_unban"])
async def test_moderator_without_permission_is_denied(helper, guild, target, method):
    moderator = guild.add_member(7, permissions=FakePermissions(ban_members=False, kick_members=False))

    result = await getattr(helper, method)(guild, moderator, target, "reason")

    assert result is ModResult.ACTOR_LACKS_PERMISSION
    assert_no_mutation(guild, target)


@pytest.mark.asyncio
async def test_plain_user_invoker_has_no_permissions(helper, guild, target):
    invoker = SimpleNamespace(id=8)

    result = await helper.try_kick(guild, invoker, target, "reason")

    assert result is ModResult.ACTOR_LACKS_PERMISSION
    guild.kick.assert_not_awaited()


@pytest.mark.asyncio
async def test_kick_permission_alone_does_not_allow_ban(helper, guild, target):
    moderator = guild.add_member(7, permissions=FakePermissions(kick_members=True, ban_members=False))

    assert await helper.try_ban(guild, moderator, target, "r") is ModResult.ACTOR_LACKS_PERMISSION
    assert await helper.try_kick(guild, moderator, target, "r") is ModResult.SUCCESS


# --------------------------
# Hierarchy check
# --------------------------

@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["try_ban", "try_kick"])
async def test_target_above_bot_is_too_high(helper, guild, moderator, method):
    target = guild.add_member(4, top_role=FakeRole(50))

    result = await getattr(helper, method)(guild, moderator, target, "reason")

    assert result is ModResult.TARGET_TOO_HIGH
    assert_no_mutation(guild, target)


@pytest.mark.asyncio
async def test_equal_role_is_too_high(helper, guild, moderator):
    target = guild.add_member(4, top_role=FakeRole(guild.me.top_role.position))

    assert await helper.try_kick(guild, moderator, target, "reason") is ModResult.TARGET_TOO_HIGH


@pytest.mark.asyncio
async def test_guild_owner_is_too_high(helper, moderator):
    guild = FakeGuild(owner_id=4)
    owner = guild.add_member(4, top_role=FakeRole(0))

    assert await helper.try_ban(guild, moderator, owner, "reason") is ModResult.TARGET_TOO_HIGH
    guild.ban.assert_not_awaited()


@pytest.mark.asyncio
async def test_warn_skips_hierarchy(helper, guild, moderator):
    target = guild.add_member(4, top_role=FakeRole(50))

    result = await helper.try_warn(guild, moderator, target, "reason")

    assert result is ModResult.SUCCESS
    target.send.assert_awaited_once()


def test_check_reports_none_when_allowed(helper, guild, moderator, target):
    for action in ActionType:
        assert helper.check(action, guild, moderator, target) is None


# --------------------------
# Happy paths
# --------------------------

@pytest.mark.asyncio
async def test_kick_success_submits_once_with_reason(helper, modlog, guild, moderator, target):
    result = await helper.try_kick(guild, moderator, target, "Spamming")

    assert result is ModResult.SUCCESS
    guild.kick.assert_awaited_once_with(target, reason="Spamming")
    modlog.record.assert_awaited_once()
    request, recorded = modlog.record.await_args.args
    assert request.action is ActionType.KICK
    assert request.target_id == target.id
    assert request.moderator_id == moderator.id
    assert request.reason == "Spamming"
    assert recorded is ModResult.SUCCESS


@pytest.mark.asyncio
async def test_ban_success_converts_delete_days(helper, modlog, guild, moderator, target):
    result = await helper.try_ban(guild, moderator, target, "Raid", duration_days=3, delete_message_days=2)

    assert result is ModResult.SUCCESS
    guild.ban.assert_awaited_once_with(target, delete_message_seconds=2 * SECONDS_PER_DAY, reason="Raid")
    request = modlog.record.await_args.args[0]
    assert request.ban_duration_days == 3
    assert request.delete_message_days == 2


@pytest.mark.asyncio
async def test_ban_clamps_delete_window(helper, guild, moderator, target):
    await helper.try_ban(guild, moderator, target, "Raid", delete_message_days=30)

    guild.ban.assert_awaited_once_with(target, delete_message_seconds=7 * SECONDS_PER_DAY, reason="Raid")


@pytest.mark.asyncio
async def test_warn_sends_dm_with_reason(helper, guild, moderator, target):
    result = await helper.try_warn(guild, moderator, target, "Be nice")

    assert result is ModResult.SUCCESS
    target.send.assert_awaited_once_with("You have been warned for... \nBe nice")
    assert_no_mutation(guild)


@pytest.mark.asyncio
async def test_unban_success(helper, modlog, guild, moderator):
    banned_user = SimpleNamespace(id=55)

    result = await helper.try_unban(guild, moderator, banned_user, "Appeal accepted")

    assert result is ModResult.SUCCESS
    guild.fetch_ban.assert_awaited_once_with(banned_user)
    guild.unban.assert_awaited_once_with(banned_user, reason="Appeal accepted")
    assert modlog.record.await_args.args[0].action is ActionType.UNBAN


@pytest.mark.asyncio
async def test_unban_ignores_hierarchy(helper, moderator):
    guild = FakeGuild(bot_role=FakeRole(0))

    result = await helper.try_unban(guild, moderator, SimpleNamespace(id=55), "r")

    assert result is ModResult.SUCCESS


# --------------------------
# Unban existence / platform failures
# --------------------------

@pytest.mark.asyncio
async def test_unban_of_user_not_banned(helper, modlog, guild, moderator):
    guild.fetch_ban.side_effect = http_error(discord.NotFound, 404)

    result = await helper.try_unban(guild, moderator, SimpleNamespace(id=55), "r")

    assert result is ModResult.TARGET_NOT_BANNED
    guild.unban.assert_not_awaited()
    modlog.record.assert_not_awaited()


@pytest.mark.asyncio
async def test_unban_lookup_failure_is_action_failed(helper, guild, moderator):
    guild.fetch_ban.side_effect = http_error(discord.HTTPException, 500)

    result = await helper.try_unban(guild, moderator, SimpleNamespace(id=55), "r")

    assert result is ModResult.ACTION_FAILED
    guild.unban.assert_not_awaited()


@pytest.mark.asyncio
async def test_kick_rejected_by_discord_is_action_failed(helper, modlog, guild, moderator, target):
    guild.kick.side_effect = http_error(discord.Forbidden, 403)

    result = await helper.try_kick(guild, moderator, target, "r")

    assert result is ModResult.ACTION_FAILED
    guild.kick.assert_awaited_once()
    modlog.record.assert_not_awaited()


@pytest.mark.asyncio
async def test_warn_with_closed_dms_is_action_failed(helper, guild, moderator, target):
    target.send.side_effect = http_error(discord.Forbidden, 403)

    assert await helper.try_warn(guild, moderator, target, "r") is ModResult.ACTION_FAILED


@pytest.mark.asyncio
async def test_non_discord_errors_propagate(helper, guild, moderator, target):
    guild.ban.side_effect = RuntimeError("bug")

    with pytest.raises(RuntimeError):
        await helper.try_ban(guild, moderator, target, "r")


@pytest.mark.asyncio
async def test_modlog_failure_does_not_hide_completed_action(config, guild, moderator, target):
    broken_modlog = SimpleNamespace(record=AsyncMock(side_effect=RuntimeError("sink down")))
    helper = ModHelper(modlog=broken_modlog, config=config)

    result = await helper.try_ban(guild, moderator, target, "Raid")

    assert result is ModResult.SUCCESS
    guild.ban.assert_awaited_once()
    broken_modlog.record.assert_awaited_once()


def test_default_modlog_is_null(config):
    from huskymod.moderation.modlog import NullModLog

    assert isinstance(ModHelper(config=config).modlog, NullModLog)
