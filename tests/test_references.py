from __future__ import annotations

from core.references import (
    BareId,
    DeepLink,
    MessageLocation,
    ReferenceProblem,
    RoleMention,
    build_message_link,
    locate_message,
    parse_binding_reference,
    parse_message_reference,
)


def test_bare_id_is_accepted_as_is() -> None:
    parsed = parse_message_reference("123456789012345678")

    assert parsed.ok
    assert parsed.reference == BareId("123456789012345678")


def test_deep_link_yields_all_three_ids() -> None:
    parsed = parse_message_reference("https://discord.com/channels/1/2/3")

    assert parsed.reference == DeepLink("1", "2", "3")


def test_empty_reference_is_missing() -> None:
    assert parse_message_reference("   ").problem is ReferenceProblem.MISSING
    assert parse_message_reference(None).problem is ReferenceProblem.MISSING


def test_link_with_two_or_four_segments_is_a_format_error() -> None:
    two = parse_message_reference("https://discord.com/channels/1/2")
    four = parse_message_reference("https://discord.com/channels/1/2/3/4")

    assert two.problem is ReferenceProblem.LINK_FORMAT
    assert four.problem is ReferenceProblem.LINK_FORMAT


def test_private_conversation_link_is_rejected() -> None:
    parsed = parse_message_reference("https://discord.com/channels/@me/2/3")

    assert parsed.problem is ReferenceProblem.PRIVATE_CONTEXT


def test_link_with_empty_segment_is_rejected() -> None:
    parsed = parse_message_reference("https://discord.com/channels/1//3")

    assert parsed.problem is ReferenceProblem.EMPTY_ID


def test_binding_reference_recognises_role_mentions() -> None:
    assert parse_binding_reference("<@&555>").reference == RoleMention("555")
    assert parse_binding_reference("<@&abc>").problem is ReferenceProblem.ROLE_FORMAT
    assert parse_binding_reference("777").reference == BareId("777")


def test_bare_id_borrows_invoking_channel() -> None:
    located = locate_message(BareId("3"), "1", "2")

    assert located.location == MessageLocation("1", "2", "3")


def test_bare_id_without_guild_is_private_context() -> None:
    located = locate_message(BareId("3"), None, "2")

    assert located.location is None
    assert located.problem is ReferenceProblem.PRIVATE_CONTEXT


def test_deep_link_ignores_invoking_channel() -> None:
    located = locate_message(DeepLink("7", "8", "9"), None, "2")

    assert located.location == MessageLocation("7", "8", "9")
    assert build_message_link(located.location) == "https://discord.com/channels/7/8/9"
