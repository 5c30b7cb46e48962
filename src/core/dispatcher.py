"""Routing of chat messages to command handlers."""

from __future__ import annotations

import logging
from typing import Optional

from core import replies
from core.commands import (
    CreateCommand,
    DeleteCommand,
    ParticipantsCommand,
    parse_event_role_command,
)
from core.config import BotConfig
from core.event_roles import (
    EventRoleCreateHandler,
    EventRoleDeleteHandler,
    EventRoleParticipantsHandler,
)
from core.models import CommandContext
from core.ports import ChatPort

LOGGER = logging.getLogger(__name__)

INVITE = "invite"


class EventRoleCommandRouter:
    """Routes ``create``, ``delete`` and ``participants``; ignores anything else."""

    def __init__(
        self,
        create: EventRoleCreateHandler,
        delete: EventRoleDeleteHandler,
        participants: EventRoleParticipantsHandler,
    ) -> None:
        self._create = create
        self._delete = delete
        self._participants = participants

    async def execute(self, context: CommandContext, text: str) -> None:
        command = parse_event_role_command(text)
        if isinstance(command, CreateCommand):
            await self._create.execute(context, command)
        elif isinstance(command, DeleteCommand):
            await self._delete.execute(context, command)
        elif isinstance(command, ParticipantsCommand):
            await self._participants.execute(context, command)
        else:
            LOGGER.debug("Ignoring unknown event-role subcommand %r", command.token)


class CommandDispatcher:
    """Gate for every inbound chat message.

    Only messages starting with the configured prefix and written by a human
    reach a handler. Failures are logged and never propagate to the client.
    """

    def __init__(self, chat: ChatPort, bot_config: BotConfig, event_roles: EventRoleCommandRouter) -> None:
        self._chat = chat
        self._config = bot_config
        self._event_roles = event_roles

    def _split(self, content: str) -> Optional[tuple[str, str]]:
        parts = content.split(maxsplit=2)
        if len(parts) < 2 or parts[0] != self._config.prefix:
            return None
        keyword = parts[1]
        remainder = parts[2] if len(parts) > 2 else ""
        return keyword, remainder

    async def handle_message(self, context: CommandContext) -> None:
        try:
            if context.author_is_bot or not context.content.startswith(self._config.prefix):
                return
            split = self._split(context.content)
            if split is None:
                return
            keyword, remainder = split

            if keyword.lower() == INVITE:
                await self._chat.reply(context, replies.invite_reply(self._config.invite_link))
                return
            if keyword.lower() != self._config.command.lower():
                return

            LOGGER.info("Command from %s: %s", context.author_name, context.content)
            await self._event_roles.execute(context, remainder)
        except Exception:
            LOGGER.exception(
                "Failed to handle message %s",
                context.message_id,
                extra={
                    "adapter": "DiscordAdapter",
                    "code": "MESSAGE_HANDLING_FAILED",
                    "original_message": context.content,
                },
            )
