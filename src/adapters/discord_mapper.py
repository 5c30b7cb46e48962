"""Discord-to-core mapping adapter.

This keeps discord.py-specific details out of the core handlers.
"""

from __future__ import annotations

from typing import Any, Optional

from core.models import CommandContext, ReactionEvent


def _optional_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def build_command_context(message: Any) -> CommandContext:
    """Build a core CommandContext from a discord.Message."""

    author = message.author
    guild = getattr(message, "guild", None)
    # Direct messages have no guild; the core treats them as private context.
    guild_id = _optional_id(getattr(guild, "id", None))
    display_name = getattr(author, "display_name", None) or getattr(author, "name", "") or ""

    return CommandContext(
        content=message.content or "",
        message_id=str(message.id),
        channel_id=str(message.channel.id),
        guild_id=guild_id,
        author_id=str(author.id),
        author_name=str(display_name),
        author_is_bot=bool(getattr(author, "bot", False)),
        handle=message,
    )


def build_reaction_event(payload: Any, added: bool) -> ReactionEvent:
    """Build a core ReactionEvent from a discord.RawReactionActionEvent."""

    emoji = getattr(payload.emoji, "name", None) or str(payload.emoji)
    return ReactionEvent(
        message_id=str(payload.message_id),
        channel_id=str(payload.channel_id),
        guild_id=_optional_id(getattr(payload, "guild_id", None)),
        user_id=str(payload.user_id),
        emoji=emoji,
        added=added,
    )
