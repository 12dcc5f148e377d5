"""
Pytest configuration and shared fakes for huskymod tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class FakePermissions:
    def __init__(self, **flags) -> None:
        self.__dict__.update(flags)


class FakeRole:
    def __init__(self, position: int) -> None:
        self.position = position


class FakeMember:
    def __init__(self, *, member_id: int, guild=None, permissions: FakePermissions | None = None, top_role: FakeRole | None = None) -> None:
        self.id = member_id
        self.guild = guild
        self.guild_permissions = permissions or FakePermissions(ban_members=True, kick_members=True)
        self.top_role = top_role or FakeRole(1)
        self.mention = f"<@{member_id}>"
        self.send = AsyncMock()


class FakeGuild:
    """Guild double recording every mutating call."""

    def __init__(self, *, guild_id: int = 100, owner_id: int = 1, bot_permissions: FakePermissions | None = None, bot_role: FakeRole | None = None) -> None:
        self.id = guild_id
        self.owner_id = owner_id
        self.me = FakeMember(
            member_id=999,
            guild=self,
            permissions=bot_permissions,
            top_role=bot_role or FakeRole(10),
        )
        self.members: dict[int, FakeMember] = {}
        self.ban = AsyncMock()
        self.unban = AsyncMock()
        self.kick = AsyncMock()
        self.fetch_ban = AsyncMock(return_value=SimpleNamespace(reason="old"))
        self.fetch_member = AsyncMock(side_effect=self._fetch_member)

    def add_member(self, member_id: int, **kwargs) -> FakeMember:
        member = FakeMember(member_id=member_id, guild=self, **kwargs)
        self.members[member_id] = member
        return member

    def get_member(self, member_id: int):
        return self.members.get(member_id)

    async def _fetch_member(self, member_id: int):
        if member_id not in self.members:
            raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown Member")
        return self.members[member_id]


@pytest.fixture()
def guild() -> FakeGuild:
    return FakeGuild()


@pytest.fixture()
def moderator(guild: FakeGuild) -> FakeMember:
    return guild.add_member(2, top_role=FakeRole(20))


@pytest.fixture()
def target(guild: FakeGuild) -> FakeMember:
    return guild.add_member(3, permissions=FakePermissions(), top_role=FakeRole(5))
