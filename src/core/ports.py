"""Ports (interfaces) used by the core handlers.

Ports define the minimal contracts for storage and chat adapters so that the
core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.models import Binding, CommandContext, RoleMembers, SentMessage


class BindingStorePort(Protocol):
    """Persistence of event bindings. The store does not enforce uniqueness."""

    def insert(self, binding: Binding) -> None:
        ...

    def delete_by_role_id(self, role_id: str) -> None:
        ...

    def list_all(self) -> list[Binding]:
        ...


class ChatPort(Protocol):
    """Chat platform operations required by the handlers.

    Fetch methods raise ``NotFoundError`` or ``ForbiddenError``; every other
    failure surfaces as ``PlatformError``. Guild, channel and message handles
    are opaque to the core.
    """

    async def fetch_guild(self, guild_id: str) -> Any:
        ...

    async def fetch_channel(self, channel_id: str) -> Any:
        ...

    async def fetch_message(self, channel: Any, message_id: str) -> Any:
        ...

    async def add_reaction(self, message: Any, emoji: str) -> None:
        ...

    async def create_role(self, guild: Any, name: str, reason: str) -> str:
        ...

    async def delete_role(self, guild_id: str, role_id: str, reason: str) -> None:
        ...

    async def fetch_role_members(self, guild_id: str, role_id: str) -> RoleMembers:
        ...

    async def add_member_role(self, guild_id: str, user_id: str, role_id: str, reason: str) -> None:
        ...

    async def remove_member_role(self, guild_id: str, user_id: str, role_id: str, reason: str) -> None:
        ...

    async def reply(self, context: CommandContext, text: str) -> None:
        ...

    async def send(self, context: CommandContext, text: str) -> SentMessage:
        ...

    async def delete_message(self, message: SentMessage) -> None:
        ...
