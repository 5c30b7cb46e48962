"""Typed grammar of the ``event-role`` command (core domain)."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Optional, Union

CREATE = "create"
DELETE = "delete"
PARTICIPANTS = "participants"


@dataclass(frozen=True)
class CreateCommand:
    role_name: Optional[str]
    reference: Optional[str]


@dataclass(frozen=True)
class DeleteCommand:
    arguments: tuple[str, ...]


@dataclass(frozen=True)
class ParticipantsCommand:
    arguments: tuple[str, ...]


@dataclass(frozen=True)
class UnknownCommand:
    token: str


EventRoleCommand = Union[CreateCommand, DeleteCommand, ParticipantsCommand, UnknownCommand]


def _split_quoted(text: str) -> list[str]:
    # Quotes let role names contain spaces; unbalanced quotes fall back to a
    # plain split rather than rejecting the command.
    try:
        return shlex.split(text)
    except ValueError:
        return text.split()


def parse_event_role_command(text: str) -> EventRoleCommand:
    """Split ``<subcommand> <remainder>`` and build the matching command."""

    subcommand, _, remainder = text.strip().partition(" ")
    keyword = subcommand.lower()

    if keyword == CREATE:
        arguments = _split_quoted(remainder)
        role_name = arguments[0] if arguments else None
        reference = arguments[1] if len(arguments) > 1 else None
        return CreateCommand(role_name=role_name, reference=reference)
    if keyword == DELETE:
        return DeleteCommand(tuple(remainder.split()))
    if keyword == PARTICIPANTS:
        return ParticipantsCommand(tuple(remainder.split()))
    return UnknownCommand(subcommand)
