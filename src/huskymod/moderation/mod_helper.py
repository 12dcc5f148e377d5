"""
mod_helper.py
=============

Action gate for manual moderation commands.

ModHelper decides whether a ban, unban, kick or warn may go ahead and reports
the outcome as a :class:`ModResult`. Checks always run in the same order:

1. the bot holds the permission the action needs,
2. the invoking moderator holds the same permission,
3. the bot outranks the target (ban and kick only).

The checks are evaluated synchronously, before any Discord coroutine is
created, so a denied action never touches the API. Once the checks pass the
mutation is awaited; any :class:`discord.DiscordException` it raises is logged
and reported as ``ModResult.ACTION_FAILED`` instead of escaping to the caller.

Quick usage example
    helper = ModHelper(modlog=LoggerModLog())
    result = await helper.try_kick(ctx.guild, ctx.author, member, "Spamming")
    if result.is_success:
        ...
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, Union

import discord

from huskymod.configuration.app_configuration import AppConfig, app_config
from huskymod.datatypes.action_datatypes import (
    ActionType,
    HIERARCHY_CHECKED,
    ModActionRequest,
    REQUIRED_PERMISSION,
)
from huskymod.moderation.mod_result import ModResult
from huskymod.moderation.modlog import ModLog, NullModLog
from huskymod.util.discord_utils import can_interact, clamp_delete_days, has_guild_permission
from huskymod.util.logger import get_logger

logger = get_logger("mod_helper")

SECONDS_PER_DAY = 24 * 60 * 60


class ModHelper:
    """Stateless permission gate in front of Discord moderation calls.

    Every call re-reads live permissions and roles from the objects passed in;
    nothing is cached between invocations.

    Parameters
    ----------
    modlog:
        Sink that records successful actions. Defaults to :class:`NullModLog`.
    config:
        Application configuration used for the warn DM template and the
        message-deletion cap. Defaults to the shared ``app_config``.
    """

    def __init__(self, modlog: Optional[ModLog] = None, config: Optional[AppConfig] = None) -> None:
        self.modlog = modlog or NullModLog()
        self.config = config or app_config

    # --------------------------
    # Gate
    # --------------------------
    def check(
        self,
        action: ActionType,
        guild: discord.Guild,
        moderator: Union[discord.Member, discord.User, None],
        target: Union[discord.Member, discord.User],
    ) -> Optional[ModResult]:
        """Run the permission and hierarchy checks for ``action``.

        Returns
        -------
        ModResult | None
            The first failing check's result, or ``None`` when the action may
            proceed.
        """
        permission = REQUIRED_PERMISSION[action]

        if not has_guild_permission(guild.me, permission):
            return ModResult.BOT_LACKS_PERMISSION

        if not has_guild_permission(moderator, permission):
            return ModResult.ACTOR_LACKS_PERMISSION

        if action in HIERARCHY_CHECKED and not can_interact(guild.me, target):
            return ModResult.TARGET_TOO_HIGH

        return None

    # --------------------------
    # Actions
    # --------------------------
    async def try_ban(
        self,
        guild: discord.Guild,
        moderator: discord.Member,
        member: discord.Member,
        reason: str,
        duration_days: int = 0,
        delete_message_days: int = 0,
    ) -> ModResult:
        """Ban ``member`` if the gate allows it.

        Parameters
        ----------
        duration_days:
            Requested ban length, recorded in the modlog (0 is permanent).
        delete_message_days:
            Days of the member's message history to purge, clamped to the
            configured maximum.
        """
        denied = self.check(ActionType.BAN, guild, moderator, member)
        if denied is not None:
            return self._denied(ActionType.BAN, guild, moderator, member, denied)

        delete_days = clamp_delete_days(delete_message_days, self.config.max_delete_message_days)
        request = self._request(
            ActionType.BAN, guild, moderator, member, reason,
            ban_duration_days=max(0, duration_days or 0),
            delete_message_days=delete_days,
        )
        return await self._submit(
            request,
            lambda: guild.ban(member, delete_message_seconds=delete_days * SECONDS_PER_DAY, reason=reason),
        )

    async def try_unban(
        self,
        guild: discord.Guild,
        moderator: discord.Member,
        user: Union[discord.User, discord.abc.Snowflake],
        reason: str,
    ) -> ModResult:
        """Lift the ban on ``user`` if the gate allows it and a ban exists."""
        denied = self.check(ActionType.UNBAN, guild, moderator, user)
        if denied is not None:
            return self._denied(ActionType.UNBAN, guild, moderator, user, denied)

        try:
            await guild.fetch_ban(user)
        except discord.NotFound:
            logger.info("[MOD HELPER] User %s is not banned in guild %s", user.id, guild.id)
            return ModResult.TARGET_NOT_BANNED
        except discord.DiscordException as exc:
            logger.error("[MOD HELPER] Failed to look up ban for user %s in guild %s: %s", user.id, guild.id, exc)
            return ModResult.ACTION_FAILED

        request = self._request(ActionType.UNBAN, guild, moderator, user, reason)
        return await self._submit(request, lambda: guild.unban(user, reason=reason))

    async def try_kick(
        self,
        guild: discord.Guild,
        moderator: discord.Member,
        member: discord.Member,
        reason: str,
    ) -> ModResult:
        """Kick ``member`` if the gate allows it."""
        denied = self.check(ActionType.KICK, guild, moderator, member)
        if denied is not None:
            return self._denied(ActionType.KICK, guild, moderator, member, denied)

        request = self._request(ActionType.KICK, guild, moderator, member, reason)
        return await self._submit(request, lambda: guild.kick(member, reason=reason))

    async def try_warn(
        self,
        guild: discord.Guild,
        moderator: discord.Member,
        member: discord.Member,
        reason: str,
    ) -> ModResult:
        """Warn ``member`` by direct message if the gate allows it.

        Warning needs the kick permission but is not subject to the role
        hierarchy.
        """
        denied = self.check(ActionType.WARN, guild, moderator, member)
        if denied is not None:
            return self._denied(ActionType.WARN, guild, moderator, member, denied)

        request = self._request(ActionType.WARN, guild, moderator, member, reason)
        # TODO: persist warnings per member once a warnings store exists; only the DM is sent today.
        return await self._submit(request, lambda: member.send(self.config.format_warn_message(reason)))

    # --------------------------
    # Internals
    # --------------------------
    @staticmethod
    def _request(action, guild, moderator, target, reason, **extra) -> ModActionRequest:
        return ModActionRequest(
            action=action,
            guild_id=guild.id,
            moderator_id=getattr(moderator, "id", 0),
            target_id=target.id,
            reason=reason,
            **extra,
        )

    @staticmethod
    def _denied(action, guild, moderator, target, result: ModResult) -> ModResult:
        logger.warning(
            "[MOD HELPER] %s of %s by %s in guild %s denied: %s",
            action, target.id, getattr(moderator, "id", None), guild.id, result,
        )
        return result

    async def _submit(self, request: ModActionRequest, mutation: Callable[[], Awaitable[object]]) -> ModResult:
        try:
            await mutation()
        except discord.DiscordException as exc:
            logger.error(
                "[MOD HELPER] Discord rejected %s of %s in guild %s: %s",
                request.action, request.target_id, request.guild_id, exc,
            )
            return ModResult.ACTION_FAILED

        logger.info(
            "[MOD HELPER] %s of %s by %s in guild %s succeeded (reason: %s)",
            request.action, request.target_id, request.moderator_id, request.guild_id, request.reason,
        )
        try:
            await self.modlog.record(request, ModResult.SUCCESS)
        except Exception as exc:
            logger.error("[MOD HELPER] Failed to record %s of %s in the modlog: %s", request.action, request.target_id, exc)
        return ModResult.SUCCESS
