"""Outcome taxonomy shared by every gated moderation action."""

from __future__ import annotations

from enum import Enum


class ModResult(Enum):
    """Enumeration of moderation action outcomes."""

    SUCCESS = "success"
    BOT_LACKS_PERMISSION = "bot_lacks_permission"
    ACTOR_LACKS_PERMISSION = "actor_lacks_permission"
    TARGET_TOO_HIGH = "target_too_high"          # Target outranks the bot or owns the guild
    TARGET_NOT_BANNED = "target_not_banned"
    ACTION_FAILED = "action_failed"              # Discord rejected the submitted action

    def __str__(self) -> str:
        return self.value

    @property
    def is_success(self) -> bool:
        return self is ModResult.SUCCESS
