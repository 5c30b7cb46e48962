"""Validation helpers for config editing."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

INVITE_HOSTS = ("discord.com", "discordapp.com")


@dataclass
class FieldCheck:
    normalized: str | None
    error: str | None = None


def check_prefix(raw_value: str) -> FieldCheck:
    value = raw_value.strip()
    if not value:
        return FieldCheck(None, "prefix is required")
    if any(char.isspace() for char in value):
        return FieldCheck(None, "prefix must be a single token")
    return FieldCheck(value)


def check_command_keyword(raw_value: str) -> FieldCheck:
    value = raw_value.strip().lower()
    if not value:
        return FieldCheck(None, "command is required")
    if not value.replace("-", "a").replace("_", "a").isalnum():
        return FieldCheck(None, "command may only use letters, digits, - and _")
    return FieldCheck(value)


def check_emoji(raw_value: str) -> FieldCheck:
    value = raw_value.strip()
    if not value:
        return FieldCheck(None, "emoji is required")
    if any(char.isspace() for char in value) or value.isascii():
        return FieldCheck(None, "enter a single unicode emoji")
    return FieldCheck(value)


def check_invite_link(raw_value: str) -> FieldCheck:
    value = raw_value.strip()
    if not value:
        return FieldCheck("")
    parsed = urlparse(value)
    if parsed.scheme != "https" or parsed.hostname not in INVITE_HOSTS:
        return FieldCheck(None, "invite_link must be an https://discord.com URL")
    if "client_id=" not in parsed.query:
        return FieldCheck(None, "invite_link is missing client_id")
    return FieldCheck(value)


def distinct_emojis(values: dict[str, str]) -> str | None:
    """Return an error when two reaction roles share the same emoji."""

    seen: dict[str, str] = {}
    for key, emoji in values.items():
        if not emoji:
            continue
        if emoji in seen:
            return f"{key} repeats the {seen[emoji]} emoji"
        seen[emoji] = key
    return None
