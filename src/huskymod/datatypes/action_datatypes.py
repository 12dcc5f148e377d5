"""
Action types and data structures for moderation actions.

This module defines the ActionType enum, the permission each action requires,
and the ModActionRequest dataclass describing a single gated action.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet


class ActionType(Enum):
    """Enumeration of supported moderation actions."""

    BAN = "ban"
    UNBAN = "unban"
    KICK = "kick"
    WARN = "warn"

    def __str__(self) -> str:
        return self.value


# Warning shares the kick permission
REQUIRED_PERMISSION: Dict[ActionType, str] = {
    ActionType.BAN: "ban_members",
    ActionType.UNBAN: "ban_members",
    ActionType.KICK: "kick_members",
    ActionType.WARN: "kick_members",
}

HIERARCHY_CHECKED: FrozenSet[ActionType] = frozenset({ActionType.BAN, ActionType.KICK})


@dataclass(slots=True, frozen=True)
class ModActionRequest:
    """A moderation action that passed the gate and was submitted.

    Attributes:
        action: Type of action performed
        guild_id: ID of the guild the action ran in
        moderator_id: ID of the member who invoked the action
        target_id: ID of the user the action is taken against
        reason: Reason attached to the audit log
        ban_duration_days: Requested ban length in days (0 for permanent)
        delete_message_days: Days of message history purged on ban
    """
    action: ActionType
    guild_id: int
    moderator_id: int
    target_id: int
    reason: str
    ban_duration_days: int = 0
    delete_message_days: int = 0
