from __future__ import annotations

import asyncio

from core import replies
from core.cache import BindingCache
from core.commands import CreateCommand, parse_event_role_command
from core.config import ReactionConfig
from core.errors import ForbiddenError, NotFoundError
from core.event_roles import EventRoleCreateHandler
from core.models import Binding
from core.notices import NoticeTracker

from fakes import FakeChat, FakeStore, make_context

REACTIONS = ReactionConfig()
MESSAGE_ID = "123456789012345678"


def _chat() -> FakeChat:
    return FakeChat(
        guilds={"100": "guild"},
        channels={"200": "channel"},
        messages={MESSAGE_ID: "announcement"},
        new_role_id="999",
    )


def _handler(chat: FakeChat, store: FakeStore):
    cache = BindingCache(store)
    notices = NoticeTracker(chat, REACTIONS.dismiss, timeout_seconds=60)
    return EventRoleCreateHandler(chat, store, cache, notices, REACTIONS), cache, notices


def _run(handler: EventRoleCreateHandler, text: str, **context_fields):
    context = make_context(text, **context_fields)
    return asyncio.run(handler.execute(context, parse_event_role_command(text)))


def test_create_binds_new_role_to_announcement() -> None:
    chat = _chat()
    store = FakeStore()
    handler, cache, notices = _handler(chat, store)
    expected = Binding(guild_id="100", channel_id="200", message_id=MESSAGE_ID, role_id="999")

    async def scenario():
        text = f"create Raiders {MESSAGE_ID}"
        binding = await handler.execute(make_context(text), parse_event_role_command(text))
        return binding, notices.is_pending("notice-1")

    binding, pending = asyncio.run(scenario())

    assert binding == expected
    assert chat.called("add_reaction") == [
        ("add_reaction", "announcement", "✅"),
        ("add_reaction", "announcement", "\U0001f4c6"),
        ("add_reaction", "announcement", "\U0001f6ab"),
        ("add_reaction", "notice-handle-1", "\U0001f9e8"),
    ]
    assert chat.called("create_role") == [
        ("create_role", "guild", "Raiders", replies.create_role_reason("Ada")),
    ]
    assert store.inserted == [expected]
    assert cache.snapshot is not None
    assert cache.snapshot.bindings == (expected,)
    assert chat.sent == [replies.format_confirmation(REACTIONS)]
    assert chat.replies == []
    assert pending


def test_create_with_deep_link_resolves_linked_channel() -> None:
    chat = FakeChat(
        guilds={"7": "other-guild"},
        channels={"8": "other-channel"},
        messages={"9": "remote-announcement"},
    )
    store = FakeStore()
    handler, _, _ = _handler(chat, store)

    binding = _run(handler, "create Raiders https://discord.com/channels/7/8/9", guild_id=None)

    assert binding == Binding(guild_id="7", channel_id="8", message_id="9", role_id="999")
    assert chat.called("fetch_message") == [("fetch_message", "other-channel", "9")]


def test_bare_id_outside_guild_is_rejected_before_remote_calls() -> None:
    chat = _chat()
    store = FakeStore()
    handler, _, _ = _handler(chat, store)

    binding = _run(handler, f"create Raiders {MESSAGE_ID}", guild_id=None)

    assert binding is None
    assert chat.replies == [replies.PRIVATE_CONTEXT]
    assert chat.remote_calls == []
    assert not store.mutated


def test_link_with_wrong_segment_count_gets_link_format_reply() -> None:
    for link in ("https://discord.com/channels/1/2", "https://discord.com/channels/1/2/3/4"):
        chat = _chat()
        handler, _, _ = _handler(chat, FakeStore())

        assert _run(handler, f"create Raiders {link}") is None
        assert chat.replies == [replies.LINK_FORMAT]
        assert chat.remote_calls == []


def test_missing_reference_and_missing_role_name() -> None:
    chat = _chat()
    handler, _, _ = _handler(chat, FakeStore())

    _run(handler, "create Raiders")
    asyncio.run(
        handler.execute(make_context(), CreateCommand(role_name="", reference=MESSAGE_ID))
    )

    assert chat.replies == [replies.MISSING_MESSAGE, replies.MISSING_ROLE_NAME]
    assert chat.remote_calls == []


def test_unknown_guild_stops_before_channel_lookup() -> None:
    chat = _chat()
    chat.guilds = {}
    handler, _, _ = _handler(chat, FakeStore())

    _run(handler, f"create Raiders {MESSAGE_ID}")

    assert chat.replies == [replies.GUILD_NOT_FOUND]
    assert chat.called("fetch_channel") == []


def test_unreadable_message_gets_message_not_found() -> None:
    chat = _chat()
    chat.failures["fetch_message"] = NotFoundError("Unknown Message")
    handler, _, _ = _handler(chat, FakeStore())

    _run(handler, f"create Raiders {MESSAGE_ID}")

    assert chat.replies == [replies.MESSAGE_NOT_FOUND]
    assert chat.called("add_reaction") == []


def test_reaction_failure_skips_role_creation() -> None:
    chat = _chat()
    chat.failures["add_reaction"] = ForbiddenError("Missing Permissions")
    store = FakeStore()
    handler, _, _ = _handler(chat, store)

    _run(handler, f"create Raiders {MESSAGE_ID}")

    assert chat.replies == [replies.REACTION_FAILED]
    assert chat.called("create_role") == []
    assert not store.mutated


def test_role_failure_keeps_reactions_and_persists_nothing() -> None:
    chat = _chat()
    chat.failures["create_role"] = ForbiddenError("Missing Permissions")
    store = FakeStore()
    handler, _, _ = _handler(chat, store)

    _run(handler, f"create Raiders {MESSAGE_ID}")

    assert chat.replies == [replies.ROLE_CREATION_FAILED]
    assert len(chat.called("add_reaction")) == 3
    assert chat.called("delete_role") == []
    assert not store.mutated


def test_persist_failure_keeps_role_and_skips_confirmation() -> None:
    chat = _chat()
    store = FakeStore()
    store.fail_insert = True
    handler, cache, _ = _handler(chat, store)

    _run(handler, f"create Raiders {MESSAGE_ID}")

    assert chat.replies == [replies.BINDING_NOT_SAVED]
    assert len(chat.called("create_role")) == 1
    assert chat.called("delete_role") == []
    assert chat.sent == []
    assert cache.snapshot is None
