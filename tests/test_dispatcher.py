from __future__ import annotations

import asyncio

from core import replies
from core.cache import BindingCache
from core.config import BotConfig, ReactionConfig
from core.errors import ForbiddenError
from core.dispatcher import CommandDispatcher, EventRoleCommandRouter
from core.event_roles import (
    EventRoleCreateHandler,
    EventRoleDeleteHandler,
    EventRoleParticipantsHandler,
)
from core.models import Binding
from core.notices import NoticeTracker

from fakes import FakeChat, FakeStore, make_context

BOT = BotConfig(invite_link="https://discord.com/api/oauth2/authorize?client_id=1")


class RecordingRouter:
    def __init__(self, error: Exception | None = None) -> None:
        self.received: list[str] = []
        self.error = error

    async def execute(self, context, text: str) -> None:
        self.received.append(text)
        if self.error is not None:
            raise self.error


def _dispatch(content: str, router=None, chat=None, **context_fields):
    chat = chat or FakeChat()
    router = router or RecordingRouter()
    dispatcher = CommandDispatcher(chat, BOT, router)
    asyncio.run(dispatcher.handle_message(make_context(content, **context_fields)))
    return chat, router


def test_event_role_command_is_forwarded_without_gate_tokens() -> None:
    _, router = _dispatch("+nxc event-role create Raiders 3")

    assert router.received == ["create Raiders 3"]


def test_command_keyword_is_case_insensitive() -> None:
    _, router = _dispatch("+nxc Event-Role participants <@&555>")

    assert router.received == ["participants <@&555>"]


def test_bots_and_unprefixed_messages_are_ignored() -> None:
    _, from_bot = _dispatch("+nxc event-role create Raiders 3", author_is_bot=True)
    _, unprefixed = _dispatch("event-role create Raiders 3")
    _, glued = _dispatch("+nxcevent-role create Raiders 3")

    assert from_bot.received == []
    assert unprefixed.received == []
    assert glued.received == []


def test_unknown_keyword_is_ignored() -> None:
    chat, router = _dispatch("+nxc roles list")

    assert router.received == []
    assert chat.calls == []


def test_invite_replies_with_link() -> None:
    chat, router = _dispatch("+nxc invite")

    assert chat.replies == [replies.invite_reply(BOT.invite_link)]
    assert router.received == []


def test_handler_failure_is_logged_and_swallowed(caplog) -> None:
    _dispatch("+nxc event-role delete <@&555>", router=RecordingRouter(RuntimeError("boom")))

    assert "Failed to handle message 300" in caplog.text
    record = next(record for record in caplog.records if record.levelname == "ERROR")
    assert record.code == "MESSAGE_HANDLING_FAILED"


def test_unknown_subcommand_reaches_no_handler() -> None:
    chat = FakeChat()
    store = FakeStore()
    cache = BindingCache(store)
    reactions = ReactionConfig()
    router = EventRoleCommandRouter(
        create=EventRoleCreateHandler(chat, store, cache, NoticeTracker(chat, reactions.dismiss), reactions),
        delete=EventRoleDeleteHandler(chat, store, cache),
        participants=EventRoleParticipantsHandler(chat, cache),
    )

    _dispatch("+nxc event-role rename Raiders", router=router, chat=chat)
    _dispatch("+nxc event-role delete <@&555>", router=router, chat=chat)

    assert chat.replies == [replies.ROLE_NOT_BOUND]
    assert store.list_calls == 1


def test_forbidden_role_deletion_is_answered_not_swallowed(caplog) -> None:
    chat = FakeChat()
    chat.failures["delete_role"] = ForbiddenError("Missing Permissions")
    store = FakeStore([Binding(guild_id="100", channel_id="200", message_id="3", role_id="555")])
    cache = BindingCache(store)
    reactions = ReactionConfig()
    router = EventRoleCommandRouter(
        create=EventRoleCreateHandler(chat, store, cache, NoticeTracker(chat, reactions.dismiss), reactions),
        delete=EventRoleDeleteHandler(chat, store, cache),
        participants=EventRoleParticipantsHandler(chat, cache),
    )

    _dispatch("+nxc event-role delete <@&555>", router=router, chat=chat)

    assert chat.replies == [replies.ROLE_DELETION_FAILED]
    codes = [getattr(record, "code", None) for record in caplog.records]
    assert "MESSAGE_HANDLING_FAILED" not in codes
    assert [record.command for record in caplog.records if record.levelname == "ERROR"] == [
        "event-role delete"
    ]
