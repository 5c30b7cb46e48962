from __future__ import annotations

from core.commands import (
    CreateCommand,
    DeleteCommand,
    ParticipantsCommand,
    UnknownCommand,
    parse_event_role_command,
)


def test_create_takes_role_name_then_reference() -> None:
    command = parse_event_role_command("create Raiders 123456789012345678")

    assert command == CreateCommand(role_name="Raiders", reference="123456789012345678")


def test_subcommand_keyword_is_case_insensitive() -> None:
    assert isinstance(parse_event_role_command("CREATE Raiders 1"), CreateCommand)
    assert isinstance(parse_event_role_command("Delete 1"), DeleteCommand)
    assert isinstance(parse_event_role_command("PARTICIPANTS 1"), ParticipantsCommand)


def test_quoted_role_name_may_contain_spaces() -> None:
    command = parse_event_role_command('create "Raid Night" https://discord.com/channels/1/2/3')

    assert command == CreateCommand(
        role_name="Raid Night",
        reference="https://discord.com/channels/1/2/3",
    )


def test_unbalanced_quote_falls_back_to_plain_split() -> None:
    command = parse_event_role_command('create "Raid 123')

    assert command == CreateCommand(role_name='"Raid', reference="123")


def test_create_without_arguments_has_no_name_or_reference() -> None:
    assert parse_event_role_command("create") == CreateCommand(role_name=None, reference=None)


def test_delete_and_participants_keep_every_argument() -> None:
    assert parse_event_role_command("delete <@&555> extra") == DeleteCommand(("<@&555>", "extra"))
    assert parse_event_role_command("participants") == ParticipantsCommand(())


def test_unknown_subcommand_keeps_its_token() -> None:
    assert parse_event_role_command("rename x") == UnknownCommand("rename")
