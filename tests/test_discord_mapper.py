from __future__ import annotations

from types import SimpleNamespace

from adapters.discord_mapper import build_command_context, build_reaction_event


def _message(guild=None, **author_fields):
    author = SimpleNamespace(id=42, name="ada", bot=False, **author_fields)
    return SimpleNamespace(
        id=300,
        content="+nxc invite",
        channel=SimpleNamespace(id=200),
        guild=guild,
        author=author,
    )


def test_guild_message_maps_ids_to_strings() -> None:
    message = _message(guild=SimpleNamespace(id=100), display_name="Ada L.")

    context = build_command_context(message)

    assert context.message_id == "300"
    assert context.channel_id == "200"
    assert context.guild_id == "100"
    assert context.author_id == "42"
    assert context.author_name == "Ada L."
    assert context.author_is_bot is False
    assert context.handle is message


def test_direct_message_has_no_guild() -> None:
    context = build_command_context(_message())

    assert context.guild_id is None
    assert context.author_name == "ada"


def test_reaction_payload_uses_emoji_name() -> None:
    payload = SimpleNamespace(
        message_id=3,
        channel_id=200,
        guild_id=100,
        user_id=42,
        emoji=SimpleNamespace(name="✅"),
    )

    event = build_reaction_event(payload, added=False)

    assert event.message_id == "3"
    assert event.guild_id == "100"
    assert event.user_id == "42"
    assert event.emoji == "✅"
    assert event.added is False
