"""Reaction-driven role assignment.

Reacting with the affirmative status emoji on a bound announcement grants the
bound role; removing the reaction revokes it. There is no user request to
answer here, so failures are only logged.
"""

from __future__ import annotations

import logging
from typing import Optional

from core import replies
from core.cache import BindingCache
from core.config import ReactionConfig
from core.models import ReactionEvent
from core.notices import NoticeTracker
from core.ports import ChatPort

LOGGER = logging.getLogger(__name__)


class ReactionRouter:
    """Grants or revokes event roles from reaction events."""

    def __init__(
        self,
        chat: ChatPort,
        cache: BindingCache,
        reactions: ReactionConfig,
        notices: Optional[NoticeTracker] = None,
    ) -> None:
        self._chat = chat
        self._cache = cache
        self._reactions = reactions
        self._notices = notices

    async def handle(self, event: ReactionEvent) -> None:
        kind = "messageReactionAdd" if event.added else "messageReactionRemove"
        try:
            if self._notices is not None and event.added:
                if await self._notices.dismiss(event.message_id, event.user_id, event.emoji):
                    return

            if event.emoji != self._reactions.affirmative:
                return

            binding = self._cache.get_by_message_id(event.message_id)
            if binding is None:
                return

            if event.added:
                await self._chat.add_member_role(
                    binding.guild_id, event.user_id, binding.role_id, replies.GRANT_REASON
                )
                LOGGER.info("Granted role %s to member %s", binding.role_id, event.user_id)
            else:
                await self._chat.remove_member_role(
                    binding.guild_id, event.user_id, binding.role_id, replies.REVOKE_REASON
                )
                LOGGER.info("Revoked role %s from member %s", binding.role_id, event.user_id)
        except Exception:
            LOGGER.exception(
                "Failed to handle %s event on message %s",
                kind,
                event.message_id,
                extra={"adapter": "DiscordAdapter", "event": kind},
            )
