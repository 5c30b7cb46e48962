"""Parsing of message references and role mentions (core domain).

A message reference is either a bare message id, only meaningful in the
channel the command was sent from, or a deep link of the form
``https://discord.com/channels/<guild>/<channel>/<message>``. Parsers return
a result object instead of raising so each handler can pick its own reply.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

DEEP_LINK_MARKER = "/channels/"
PRIVATE_GUILD = "@me"
ROLE_MENTION_MARKER = "@&"
ROLE_MENTION_PATTERN = re.compile(r"^<@&(\d+)>$")


class ReferenceProblem(str, Enum):
    MISSING = "missing"
    PRIVATE_CONTEXT = "private_context"
    LINK_FORMAT = "link_format"
    EMPTY_ID = "empty_id"
    ROLE_FORMAT = "role_format"


@dataclass(frozen=True)
class BareId:
    message_id: str


@dataclass(frozen=True)
class DeepLink:
    guild_id: str
    channel_id: str
    message_id: str


@dataclass(frozen=True)
class RoleMention:
    role_id: str


MessageReference = Union[BareId, DeepLink]
BindingReference = Union[BareId, DeepLink, RoleMention]


@dataclass(frozen=True)
class MessageLocation:
    """Fully resolved coordinates of a message."""

    guild_id: str
    channel_id: str
    message_id: str


@dataclass(frozen=True)
class ParsedReference:
    reference: Optional[BindingReference]
    problem: Optional[ReferenceProblem] = None

    @property
    def ok(self) -> bool:
        return self.problem is None and self.reference is not None


@dataclass(frozen=True)
class LocatedMessage:
    location: Optional[MessageLocation]
    problem: Optional[ReferenceProblem] = None


def _failed(problem: ReferenceProblem) -> ParsedReference:
    return ParsedReference(None, problem)


def parse_message_reference(raw: Optional[str]) -> ParsedReference:
    """Parse a bare message id or a deep link."""

    value = (raw or "").strip()
    if not value:
        return _failed(ReferenceProblem.MISSING)

    if DEEP_LINK_MARKER.rstrip("/") not in value:
        return ParsedReference(BareId(value))

    _, _, descriptor = value.partition(DEEP_LINK_MARKER)
    segments = descriptor.split("/")
    if len(segments) != 3:
        return _failed(ReferenceProblem.LINK_FORMAT)

    guild_id, channel_id, message_id = segments
    if guild_id.lower() == PRIVATE_GUILD:
        return _failed(ReferenceProblem.PRIVATE_CONTEXT)
    if not guild_id or not channel_id or not message_id:
        return _failed(ReferenceProblem.EMPTY_ID)
    return ParsedReference(DeepLink(guild_id, channel_id, message_id))


def parse_role_mention(raw: str) -> ParsedReference:
    """Parse ``<@&role_id>`` into a role mention."""

    match = ROLE_MENTION_PATTERN.match(raw.strip())
    if not match:
        return _failed(ReferenceProblem.ROLE_FORMAT)
    return ParsedReference(RoleMention(match.group(1)))


def parse_binding_reference(raw: Optional[str]) -> ParsedReference:
    """Parse the argument of the delete and participants commands."""

    value = (raw or "").strip()
    if ROLE_MENTION_MARKER in value:
        return parse_role_mention(value)
    return parse_message_reference(value)


def locate_message(
    reference: MessageReference,
    guild_id: Optional[str],
    channel_id: str,
) -> LocatedMessage:
    """Resolve a reference against the channel the command was sent from.

    A bare id borrows the invoking guild and channel, so it is rejected when
    the command comes from a private conversation.
    """

    if isinstance(reference, DeepLink):
        return LocatedMessage(
            MessageLocation(reference.guild_id, reference.channel_id, reference.message_id)
        )
    if not guild_id:
        return LocatedMessage(None, ReferenceProblem.PRIVATE_CONTEXT)
    if not channel_id or not reference.message_id:
        return LocatedMessage(None, ReferenceProblem.EMPTY_ID)
    return LocatedMessage(MessageLocation(guild_id, channel_id, reference.message_id))


def build_message_link(location: MessageLocation) -> str:
    return (
        f"https://discord.com{DEEP_LINK_MARKER}"
        f"{location.guild_id}/{location.channel_id}/{location.message_id}"
    )
