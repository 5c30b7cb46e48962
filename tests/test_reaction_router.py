from __future__ import annotations

import asyncio

from core import replies
from core.cache import BindingCache
from core.config import ReactionConfig
from core.errors import ForbiddenError
from core.models import Binding, ReactionEvent, SentMessage
from core.notices import NoticeTracker
from core.reactions import ReactionRouter

from fakes import FakeChat, FakeStore

REACTIONS = ReactionConfig()
RAIDERS = Binding(guild_id="100", channel_id="200", message_id="3", role_id="555")


def _event(emoji: str = "✅", *, added: bool = True, message_id: str = "3") -> ReactionEvent:
    return ReactionEvent(
        message_id=message_id,
        channel_id="200",
        guild_id="100",
        user_id="42",
        emoji=emoji,
        added=added,
    )


def _router(chat: FakeChat, notices=None) -> ReactionRouter:
    return ReactionRouter(chat, BindingCache(FakeStore([RAIDERS])), REACTIONS, notices)


def test_affirmative_reaction_grants_role() -> None:
    chat = FakeChat()

    asyncio.run(_router(chat).handle(_event()))

    assert chat.calls == [("add_member_role", "100", "42", "555", replies.GRANT_REASON)]


def test_removed_reaction_revokes_role() -> None:
    chat = FakeChat()

    asyncio.run(_router(chat).handle(_event(added=False)))

    assert chat.calls == [("remove_member_role", "100", "42", "555", replies.REVOKE_REASON)]


def test_other_status_emojis_are_ignored() -> None:
    chat = FakeChat()
    router = _router(chat)

    asyncio.run(router.handle(_event(REACTIONS.tentative)))
    asyncio.run(router.handle(_event(REACTIONS.negative, added=False)))

    assert chat.calls == []


def test_unbound_message_is_ignored() -> None:
    chat = FakeChat()

    asyncio.run(_router(chat).handle(_event(message_id="404")))

    assert chat.calls == []


def test_platform_failure_is_logged_not_raised(caplog) -> None:
    chat = FakeChat()
    chat.failures["add_member_role"] = ForbiddenError("Missing Permissions")

    asyncio.run(_router(chat).handle(_event()))

    assert "messageReactionAdd" in caplog.text


def test_dismiss_reaction_on_notice_is_consumed() -> None:
    chat = FakeChat()
    notices = NoticeTracker(chat, REACTIONS.dismiss, timeout_seconds=60)
    router = _router(chat, notices)
    notice = SentMessage(channel_id="200", message_id="900", handle="notice")

    async def scenario() -> None:
        notices.arm(notice, author_id="42")
        await router.handle(_event(REACTIONS.dismiss, message_id="900"))

    asyncio.run(scenario())

    assert chat.calls == [("delete_message", "900")]
