"""Self-destructing confirmation notices.

After a successful ``create`` the bot posts a notice that its author may
dismiss with a reaction. Each notice owns a timer task: a dismissal cancels
the timer and deletes the notice, expiry only forgets it and leaves the
message in place.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from core.models import SentMessage
from core.ports import ChatPort

LOGGER = logging.getLogger(__name__)


@dataclass
class _PendingNotice:
    message: SentMessage
    author_id: str
    timer: "asyncio.Task[None]"


class NoticeTracker:
    """Tracks notices awaiting an author-only dismissal reaction."""

    def __init__(self, chat: ChatPort, dismiss_emoji: str, timeout_seconds: float = 60.0) -> None:
        self._chat = chat
        self._dismiss_emoji = dismiss_emoji
        self._timeout = timeout_seconds
        self._pending: dict[str, _PendingNotice] = {}

    @property
    def dismiss_emoji(self) -> str:
        return self._dismiss_emoji

    def is_pending(self, message_id: str) -> bool:
        return message_id in self._pending

    def arm(self, message: SentMessage, author_id: str) -> None:
        """Start the dismissal window for a freshly posted notice."""

        previous = self._pending.pop(message.message_id, None)
        if previous is not None:
            previous.timer.cancel()
        timer = asyncio.create_task(self._expire(message.message_id))
        self._pending[message.message_id] = _PendingNotice(message, author_id, timer)

    async def _expire(self, message_id: str) -> None:
        await asyncio.sleep(self._timeout)
        if self._pending.pop(message_id, None) is not None:
            LOGGER.debug("Notice %s was not dismissed and stays in place", message_id)

    async def dismiss(self, message_id: str, user_id: str, emoji: str) -> bool:
        """Delete the notice when its author reacts with the dismissal emoji.

        Returns True when the reaction was consumed.
        """

        if emoji != self._dismiss_emoji:
            return False
        pending: Optional[_PendingNotice] = self._pending.get(message_id)
        if pending is None or pending.author_id != user_id:
            return False

        del self._pending[message_id]
        pending.timer.cancel()
        await self._chat.delete_message(pending.message)
        LOGGER.info("Notice %s dismissed by its author", message_id)
        return True
