"""Handlers of the ``event-role`` subcommands.

This module is integration-agnostic. It only relies on ports for storage and
chat operations, and on the binding cache for lookups.

The create flow is a saga with named steps run in a strict order:
1) parse the role name and message reference
2) resolve guild, then channel, then message
3) attach the three status reactions
4) create the role
5) persist the binding and refresh the cache
6) post the confirmation notice and arm its dismissal timer

A failing step ends the flow with its own reply. Earlier steps are never
rolled back: reactions stay when role creation fails, and the role stays when
persistence fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core import replies
from core.cache import BindingCache
from core.commands import CreateCommand, DeleteCommand, ParticipantsCommand
from core.config import ReactionConfig
from core.errors import (
    CommandAborted,
    InputFormatError,
    NotFoundError,
    PersistenceError,
    PlatformError,
    PlatformOperationError,
    ResolutionError,
)
from core.models import Binding, CommandContext
from core.notices import NoticeTracker
from core.ports import BindingStorePort, ChatPort
from core.references import (
    BareId,
    MessageLocation,
    ReferenceProblem,
    RoleMention,
    locate_message,
    parse_binding_reference,
    parse_message_reference,
)

LOGGER = logging.getLogger(__name__)

ADAPTER = "DiscordAdapter"


class CreateStep(str, Enum):
    PARSE = "parse"
    RESOLVE_GUILD = "resolve_guild"
    RESOLVE_CHANNEL = "resolve_channel"
    RESOLVE_MESSAGE = "resolve_message"
    REACT = "react"
    CREATE_ROLE = "create_role"
    PERSIST = "persist"
    CONFIRM = "confirm"


CREATE_STEPS = tuple(CreateStep)

_CREATE_PARSE_REPLIES = {
    ReferenceProblem.MISSING: replies.MISSING_MESSAGE,
    ReferenceProblem.PRIVATE_CONTEXT: replies.PRIVATE_CONTEXT,
    ReferenceProblem.LINK_FORMAT: replies.LINK_FORMAT,
    ReferenceProblem.EMPTY_ID: replies.MESSAGE_NOT_LOCATED,
}

_LOOKUP_PARSE_REPLIES = {
    ReferenceProblem.MISSING: replies.NO_MESSAGE_ID,
    ReferenceProblem.PRIVATE_CONTEXT: replies.PRIVATE_CONTEXT,
    ReferenceProblem.LINK_FORMAT: replies.LINK_FORMAT,
    ReferenceProblem.EMPTY_ID: replies.NO_MESSAGE_ID,
    ReferenceProblem.ROLE_FORMAT: replies.ROLE_FORMAT,
}


def _log_context(command: str, context: CommandContext, **fields: Any) -> dict[str, Any]:
    return {
        "adapter": ADAPTER,
        "command": command,
        "original_message": {"content": context.content, "id": context.message_id},
        **fields,
    }


@dataclass
class _CreateState:
    """Values accumulated while the create saga advances."""

    context: CommandContext
    command: CreateCommand
    location: Optional[MessageLocation] = None
    guild: Any = None
    channel: Any = None
    message: Any = None
    role_id: Optional[str] = None
    binding: Optional[Binding] = None
    completed: tuple[CreateStep, ...] = ()


class EventRoleCreateHandler:
    """Binds an announcement message to a new role."""

    name = "event-role create"

    def __init__(
        self,
        chat: ChatPort,
        store: BindingStorePort,
        cache: BindingCache,
        notices: NoticeTracker,
        reactions: ReactionConfig,
        command_keyword: str = "event-role",
    ) -> None:
        self._chat = chat
        self._store = store
        self._cache = cache
        self._notices = notices
        self._reactions = reactions
        self._command_keyword = command_keyword
        self._steps = {
            CreateStep.PARSE: self._parse,
            CreateStep.RESOLVE_GUILD: self._resolve_guild,
            CreateStep.RESOLVE_CHANNEL: self._resolve_channel,
            CreateStep.RESOLVE_MESSAGE: self._resolve_message,
            CreateStep.REACT: self._react,
            CreateStep.CREATE_ROLE: self._create_role,
            CreateStep.PERSIST: self._persist,
            CreateStep.CONFIRM: self._confirm,
        }

    async def execute(self, context: CommandContext, command: CreateCommand) -> Optional[Binding]:
        """Run every step in order; return the new binding on success."""

        state = _CreateState(context=context, command=command)
        try:
            for step in CREATE_STEPS:
                await self._steps[step](state)
                state.completed = state.completed + (step,)
        except CommandAborted as exc:
            LOGGER.info(
                "%s stopped after steps %s",
                self.name,
                [step.value for step in state.completed],
            )
            await self._chat.reply(context, exc.reply)
            return None

        return state.binding

    async def _parse(self, state: _CreateState) -> None:
        parsed = parse_message_reference(state.command.reference)
        if parsed.problem is ReferenceProblem.MISSING:
            raise InputFormatError(replies.MISSING_MESSAGE)
        if not state.command.role_name:
            raise InputFormatError(replies.MISSING_ROLE_NAME)
        if not parsed.ok:
            raise InputFormatError(_CREATE_PARSE_REPLIES[parsed.problem])

        located = locate_message(parsed.reference, state.context.guild_id, state.context.channel_id)
        if located.location is None:
            raise InputFormatError(_CREATE_PARSE_REPLIES[located.problem])
        state.location = located.location

    async def _resolve_guild(self, state: _CreateState) -> None:
        try:
            state.guild = await self._chat.fetch_guild(state.location.guild_id)
        except PlatformError as exc:
            raise ResolutionError(replies.GUILD_NOT_FOUND) from exc
        if state.guild is None:
            raise ResolutionError(replies.GUILD_NOT_FOUND)

    async def _resolve_channel(self, state: _CreateState) -> None:
        try:
            state.channel = await self._chat.fetch_channel(state.location.channel_id)
        except PlatformError as exc:
            raise ResolutionError(replies.CHANNEL_NOT_FOUND) from exc
        if state.channel is None:
            raise ResolutionError(replies.CHANNEL_NOT_FOUND)

    async def _resolve_message(self, state: _CreateState) -> None:
        try:
            state.message = await self._chat.fetch_message(state.channel, state.location.message_id)
        except PlatformError as exc:
            raise ResolutionError(replies.MESSAGE_NOT_FOUND) from exc
        if state.message is None:
            raise ResolutionError(replies.MESSAGE_NOT_FOUND)

    async def _react(self, state: _CreateState) -> None:
        try:
            for emoji in self._reactions.status_emojis:
                await self._chat.add_reaction(state.message, emoji)
        except PlatformError as exc:
            LOGGER.exception(
                "Cannot react to message %s",
                state.location.message_id,
                extra=_log_context(
                    self.name,
                    state.context,
                    event_message_id=state.location.message_id,
                    guild_id=state.location.guild_id,
                    channel_id=state.location.channel_id,
                ),
            )
            raise PlatformOperationError(replies.REACTION_FAILED) from exc

    async def _create_role(self, state: _CreateState) -> None:
        role_name = state.command.role_name
        try:
            state.role_id = await self._chat.create_role(
                state.guild,
                role_name,
                replies.create_role_reason(state.context.author_name),
            )
        except PlatformError as exc:
            LOGGER.exception(
                "Cannot create role %s",
                role_name,
                extra=_log_context(
                    self.name,
                    state.context,
                    role_name=role_name,
                    event_message_id=state.location.message_id,
                    guild_id=state.location.guild_id,
                    channel_id=state.location.channel_id,
                ),
            )
            raise PlatformOperationError(replies.ROLE_CREATION_FAILED) from exc

    async def _persist(self, state: _CreateState) -> None:
        binding = Binding(
            guild_id=state.location.guild_id,
            channel_id=state.location.channel_id,
            message_id=state.location.message_id,
            role_id=state.role_id,
        )
        try:
            self._store.insert(binding)
        except PersistenceError as exc:
            LOGGER.exception(
                "Cannot persist binding for role %s",
                state.role_id,
                extra=_log_context(self.name, state.context, role_id=state.role_id),
            )
            raise PlatformOperationError(replies.BINDING_NOT_SAVED) from exc
        self._cache.refresh()
        state.binding = binding
        LOGGER.info(
            "Event role %s bound to message %s in guild %s",
            binding.role_id,
            binding.message_id,
            binding.guild_id,
        )

    async def _confirm(self, state: _CreateState) -> None:
        notice = await self._chat.send(
            state.context,
            replies.format_confirmation(self._reactions, self._command_keyword),
        )
        await self._chat.add_reaction(notice.handle, self._notices.dismiss_emoji)
        self._notices.arm(notice, state.context.author_id)


def _resolve_binding(
    cache: BindingCache,
    context: CommandContext,
    arguments: tuple[str, ...],
    usage: str,
) -> Binding:
    """Shared resolution grammar of the delete and participants commands."""

    if len(arguments) != 1:
        raise InputFormatError(usage)

    parsed = parse_binding_reference(arguments[0])
    if not parsed.ok:
        raise InputFormatError(_LOOKUP_PARSE_REPLIES[parsed.problem])

    reference = parsed.reference
    if isinstance(reference, RoleMention):
        binding = cache.get_by_role_id(reference.role_id)
        if binding is None:
            raise ResolutionError(replies.ROLE_NOT_BOUND)
        return binding

    if isinstance(reference, BareId) and not context.guild_id:
        raise InputFormatError(replies.BARE_ID_NEEDS_CHANNEL)
    binding = cache.get_by_message_id(reference.message_id)
    if binding is None:
        raise ResolutionError(replies.MESSAGE_NOT_BOUND)
    return binding


class EventRoleDeleteHandler:
    """Deletes an event role together with its binding."""

    name = "event-role delete"

    def __init__(self, chat: ChatPort, store: BindingStorePort, cache: BindingCache) -> None:
        self._chat = chat
        self._store = store
        self._cache = cache

    async def execute(self, context: CommandContext, command: DeleteCommand) -> None:
        try:
            binding = _resolve_binding(
                self._cache, context, command.arguments, replies.DELETE_USAGE
            )
            await self._delete_role(context, binding)
        except CommandAborted as exc:
            await self._chat.reply(context, exc.reply)
            return

        self._store.delete_by_role_id(binding.role_id)
        self._cache.refresh()
        LOGGER.info("Event role %s deleted from guild %s", binding.role_id, binding.guild_id)
        await self._chat.reply(context, replies.ROLE_DELETED)

    async def _delete_role(self, context: CommandContext, binding: Binding) -> None:
        # A role removed by hand surfaces as NotFoundError and the binding is kept.
        try:
            await self._chat.delete_role(
                binding.guild_id,
                binding.role_id,
                replies.delete_role_reason(context.author_name),
            )
        except NotFoundError:
            raise
        except PlatformError as exc:
            LOGGER.exception(
                "Cannot delete role %s",
                binding.role_id,
                extra=_log_context(
                    self.name,
                    context,
                    role_id=binding.role_id,
                    guild_id=binding.guild_id,
                    event_message_id=binding.message_id,
                ),
            )
            raise PlatformOperationError(replies.ROLE_DELETION_FAILED) from exc


class EventRoleParticipantsHandler:
    """Lists the current holders of an event role."""

    name = "event-role participants"

    def __init__(self, chat: ChatPort, cache: BindingCache) -> None:
        self._chat = chat
        self._cache = cache

    async def execute(self, context: CommandContext, command: ParticipantsCommand) -> None:
        try:
            binding = _resolve_binding(
                self._cache, context, command.arguments, replies.PARTICIPANTS_USAGE
            )
        except CommandAborted as exc:
            await self._chat.reply(context, exc.reply)
            return

        members = await self._chat.fetch_role_members(binding.guild_id, binding.role_id)
        await self._chat.send(context, replies.format_participants(members))
