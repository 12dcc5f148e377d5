"""
Moderation cog: slash commands that kick, warn, ban or unban server members.

Each command resolves its target, hands the action to :class:`ModHelper`, and
replies with the message matching the :class:`ModResult` it gets back. All
permission and hierarchy decisions live in the helper; this module only maps
outcomes to text.

Quick usage example
    # In your bot setup code
    bot.load_extension("huskymod.bot.cogs.moderation_cmds")
"""

from typing import Dict, Optional, Union

import discord
from discord import Option
from discord.ext import commands

from huskymod.configuration.app_configuration import AppConfig, app_config
from huskymod.datatypes.action_datatypes import ActionType
from huskymod.moderation.mod_helper import ModHelper
from huskymod.moderation.mod_result import ModResult
from huskymod.moderation.modlog import LoggerModLog
from huskymod.util.discord_utils import mention, resolve_member
from huskymod.util.logger import get_logger

logger = get_logger("moderation_cog")

USER_NOT_FOUND_MESSAGE = "❌ **Could not find user!** ❌"
GENERIC_ERROR_MESSAGE = "❌ **An error has occurred** ❌"

# Shared wording; {verb} is the command's phrase, {user} the target mention
DEFAULT_MESSAGES: Dict[ModResult, str] = {
    ModResult.BOT_LACKS_PERMISSION: "❌ **I do not have permissions to {verb}!** ❌",
    ModResult.ACTOR_LACKS_PERMISSION: "❌ **You do not have access to this command** ❌",
    ModResult.TARGET_TOO_HIGH: "❌ **Cannot {verb} member, {user} role is above mine!** ❌",
    ModResult.TARGET_NOT_BANNED: "❌ **{user} is not banned!** ❌",
    ModResult.ACTION_FAILED: "❌ **Discord refused to {verb} {user}!** ❌",
}

COMMAND_VERBS: Dict[ActionType, str] = {
    ActionType.KICK: "kick",
    ActionType.WARN: "issue a warning",
    ActionType.BAN: "ban",
    ActionType.UNBAN: "unban",
}

SUCCESS_MESSAGES: Dict[ActionType, str] = {
    ActionType.KICK: "✅ **{user} has been kicked!**",
    ActionType.WARN: "✅ **{user} has been warned!**",
    ActionType.BAN: "✅ **{user} has been banned!**",
    ActionType.UNBAN: "✅ **{user} has been unbanned!**",
}

# Per-command overrides of DEFAULT_MESSAGES
COMMAND_MESSAGES: Dict[ActionType, Dict[ModResult, str]] = {
    ActionType.WARN: {
        ModResult.TARGET_TOO_HIGH: "❌ **Cannot give a warning to member, {user} role is above mine!** ❌",
        ModResult.ACTION_FAILED: "❌ **Could not deliver the warning to {user}, their DMs may be closed!** ❌",
    },
}


def render_result(action: ActionType, result: ModResult, user: Union[discord.abc.Snowflake, int]) -> str:
    """Return the reply text for ``result`` of ``action`` against ``user``.

    Any value without a template (a result added later, or a foreign value)
    renders as the generic error message.
    """
    if result is ModResult.SUCCESS:
        template = SUCCESS_MESSAGES.get(action)
    else:
        template = COMMAND_MESSAGES.get(action, {}).get(result) or DEFAULT_MESSAGES.get(result)

    if template is None:
        logger.error("No reply template for %s result %r", action, result)
        return GENERIC_ERROR_MESSAGE
    return template.format(verb=COMMAND_VERBS.get(action, str(action)), user=mention(user))


class ModerationCog(commands.Cog):
    """Cog containing the gated moderation slash commands.

    Parameters
    ----------
    discord_bot_instance:
        Active :class:`discord.Bot` the cog is attached to.
    mod_helper:
        Action gate to use. Defaults to a :class:`ModHelper` logging to the
        package logger.
    config:
        Configuration providing the default reason. Defaults to ``app_config``.
    """

    def __init__(self, discord_bot_instance, mod_helper: Optional[ModHelper] = None, config: Optional[AppConfig] = None):
        self.discord_bot_instance = discord_bot_instance
        self.config = config or app_config
        self.mod_helper = mod_helper or ModHelper(modlog=LoggerModLog(), config=self.config)
        logger.info("Moderation cog loaded")

    def resolve_reason(self, reason: Optional[str]) -> str:
        """Fall back to the configured default when no reason was given."""
        if reason is None or not reason.strip():
            return self.config.default_reason
        return reason

    async def run_member_action(
        self,
        ctx: discord.ApplicationContext,
        action: ActionType,
        user: discord.User,
        gate,
        **kwargs,
    ) -> Optional[ModResult]:
        """Acknowledge the interaction, resolve ``user`` to a guild member, run
        ``gate`` and reply.

        Returns the gate's result, or ``None`` if the user is not in the guild.
        """
        await ctx.defer()

        member = await resolve_member(ctx.guild, user)
        if member is None:
            await ctx.respond(USER_NOT_FOUND_MESSAGE)
            return None

        result = await gate(ctx.guild, ctx.author, member, **kwargs)
        await ctx.respond(render_result(action, result, user))
        return result

    @commands.slash_command(name="kick", description="Kick a requested user")
    async def kick(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User that you would like to kick", required=True),  # type: ignore
        reason: Option(str, "Reason for kicking the user", required=False, default=None),  # type: ignore
    ) -> None:
        """Kick a member from the guild."""
        await self.run_member_action(
            ctx, ActionType.KICK, user, self.mod_helper.try_kick,
            reason=self.resolve_reason(reason),
        )

    @commands.slash_command(name="warn", description="Issue a warning to a given user")
    async def warn(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User that you would like to issue a warning", required=True),  # type: ignore
        reason: Option(str, "Reason for warning the user", required=False, default=None),  # type: ignore
    ) -> None:
        """Warn a member by direct message."""
        await self.run_member_action(
            ctx, ActionType.WARN, user, self.mod_helper.try_warn,
            reason=self.resolve_reason(reason),
        )

    @commands.slash_command(name="ban", description="Ban a requested user")
    async def ban(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User that you would like to ban", required=True),  # type: ignore
        reason: Option(str, "Reason for banning the user", required=False, default=None),  # type: ignore
        delete_message_days: Option(
            int,
            "Days of the user's messages to delete",
            min_value=0,
            max_value=7,
            required=False,
            default=0,
        ),  # type: ignore
    ) -> None:
        """Ban a member from the guild."""
        await self.run_member_action(
            ctx, ActionType.BAN, user, self.mod_helper.try_ban,
            reason=self.resolve_reason(reason),
            delete_message_days=delete_message_days or 0,
        )

    @commands.slash_command(name="unban", description="Lift the ban on a user")
    async def unban(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "User that you would like to unban", required=True),  # type: ignore
        reason: Option(str, "Reason for unbanning the user", required=False, default=None),  # type: ignore
    ) -> None:
        """Unban a user. The target is not a guild member, so no lookup is done."""
        await ctx.defer()

        if ctx.guild is None:
            await ctx.respond(USER_NOT_FOUND_MESSAGE)
            return

        result = await self.mod_helper.try_unban(ctx.guild, ctx.author, user, self.resolve_reason(reason))
        await ctx.respond(render_result(ActionType.UNBAN, result, user))


def setup(discord_bot_instance):
    """Cog setup entry point used by ``bot.load_extension``."""
    discord_bot_instance.add_cog(ModerationCog(discord_bot_instance))
