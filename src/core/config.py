"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BotConfig:
    """Message gate settings: trigger prefix, command keyword, invite link."""

    prefix: str = "+nxc"
    command: str = "event-role"
    invite_link: str = ""


@dataclass(frozen=True)
class ReactionConfig:
    """Status and dismissal emojis used by the event-role flow."""

    affirmative: str = "✅"
    tentative: str = "\U0001f4c6"
    negative: str = "\U0001f6ab"
    dismiss: str = "\U0001f9e8"
    dismiss_timeout_seconds: float = 60.0

    @property
    def status_emojis(self) -> tuple[str, str, str]:
        return (self.affirmative, self.tentative, self.negative)
