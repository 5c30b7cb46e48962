"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any Discord-specific types. Identifiers are Discord snowflakes
kept as strings, the way they are persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Binding:
    """Association between one announcement message and one event role."""

    guild_id: str
    channel_id: str
    message_id: str
    role_id: str


@dataclass(frozen=True)
class CacheSnapshot:
    """Bindings loaded from the store at a given instant."""

    bindings: tuple[Binding, ...]
    refreshed_at: datetime


@dataclass(frozen=True)
class CommandContext:
    """Minimal view of the chat message that carried a command.

    ``handle`` is the platform message object; only the chat adapter looks
    inside it.
    """

    content: str
    message_id: str
    channel_id: str
    guild_id: Optional[str]
    author_id: str
    author_name: str
    author_is_bot: bool = False
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ReactionEvent:
    """A reaction added to or removed from a message."""

    message_id: str
    channel_id: str
    guild_id: Optional[str]
    user_id: str
    emoji: str
    added: bool


@dataclass(frozen=True)
class SentMessage:
    """A message posted by the bot, kept so it can be deleted later."""

    channel_id: str
    message_id: str
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RoleMembers:
    """A role and the display names of its current holders."""

    mention: str
    display_names: list[str]
