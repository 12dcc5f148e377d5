"""
discord_utils.py
================

Low-level Discord utility functions for huskymod.

Stateless helpers for permission lookups, role-hierarchy checks, member
resolution and mentions. Nothing here performs a mutating API call.
"""

from __future__ import annotations

from typing import Optional, Union

import discord

from huskymod.util.logger import get_logger

logger = get_logger("discord_utils")


def has_guild_permission(member: Optional[Union[discord.User, discord.Member]], permission_name: str) -> bool:
    """
    Check whether a member holds a guild-wide permission.

    Args:
        member (discord.User | discord.Member | None): The member to evaluate.
        permission_name (str): Permission flag name, e.g. ``"kick_members"``.

    Returns:
        bool: True if the flag is set. Plain users and ``None`` carry no guild
        permissions and always return False.
    """
    permissions = getattr(member, "guild_permissions", None)
    if permissions is None:
        return False
    return bool(getattr(permissions, permission_name, False))


def can_interact(actor: discord.Member, target: discord.Member) -> bool:
    """
    Check whether ``actor`` may moderate ``target`` under the role hierarchy.

    The guild owner may act on anyone and nobody may act on the guild owner.
    Otherwise the actor's highest role must sit strictly above the target's.

    Args:
        actor (discord.Member): The member performing the action (usually the bot).
        target (discord.Member): The member the action is aimed at.

    Returns:
        bool: True if the action is allowed by the hierarchy.
    """
    owner_id = getattr(actor.guild, "owner_id", None)
    if actor.id == owner_id:
        return True
    if target.id == owner_id:
        return False
    return actor.top_role.position > target.top_role.position


async def resolve_member(guild: Optional[discord.Guild], user: Union[discord.User, discord.Member]) -> Optional[discord.Member]:
    """
    Resolve a user reference to a member of ``guild``.

    Slash command options arrive already resolved to a member when the target
    is in the guild, so that object is used as-is. Otherwise the member cache
    is consulted, then the API.

    Args:
        guild (discord.Guild | None): Guild to look in; ``None`` outside guilds.
        user (discord.User | discord.Member): The user to resolve.

    Returns:
        discord.Member | None: The guild member, or None if the user is not in the guild.
    """
    if guild is None or user is None:
        return None

    if isinstance(user, discord.Member) and getattr(user.guild, "id", None) == guild.id:
        return user

    member = guild.get_member(user.id)
    if member is not None:
        return member

    try:
        return await guild.fetch_member(user.id)
    except discord.NotFound:
        logger.debug("User %s is not a member of guild %s", user.id, guild.id)
        return None


def mention(user: Union[discord.abc.Snowflake, int]) -> str:
    """Return a stable ``<@id>`` mention for a user, member or raw id."""
    user_id = user if isinstance(user, int) else user.id
    return f"<@{user_id}>"


def clamp_delete_days(days: Optional[int], maximum: int) -> int:
    """Clamp a message-deletion window to ``0..maximum`` days."""
    if not days:
        return 0
    return max(0, min(int(days), maximum))
