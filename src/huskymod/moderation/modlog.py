"""
Moderation-log sinks handed to the action gate.

ModHelper records every successful action through a ModLog. No storage format
is defined yet; the default sink drops records and LoggerModLog writes them to
the package log.
"""

from __future__ import annotations

from typing import Protocol

from huskymod.datatypes.action_datatypes import ModActionRequest
from huskymod.moderation.mod_result import ModResult
from huskymod.util.logger import get_logger

logger = get_logger("modlog")


class ModLog(Protocol):
    """Anything that can record a completed moderation action."""

    async def record(self, request: ModActionRequest, result: ModResult) -> None:
        ...


class NullModLog:
    """Default sink: discards every record."""

    async def record(self, request: ModActionRequest, result: ModResult) -> None:
        return None


class LoggerModLog:
    """Sink that writes one INFO line per recorded action."""

    def __init__(self, log=None) -> None:
        self.log = log or logger

    async def record(self, request: ModActionRequest, result: ModResult) -> None:
        self.log.info(
            "[MODLOG] guild=%s action=%s moderator=%s target=%s result=%s reason=%r",
            request.guild_id,
            request.action,
            request.moderator_id,
            request.target_id,
            result,
            request.reason,
        )
