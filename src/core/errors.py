"""Exception hierarchy shared by the core and the adapters."""

from __future__ import annotations


class NexusError(Exception):
    """Base class for nexusbot errors."""


class PersistenceError(NexusError):
    """The binding store could not be read or written."""


class PlatformError(NexusError):
    """A chat platform call failed."""


class NotFoundError(PlatformError):
    """The requested guild, channel, message, role or member does not exist."""


class ForbiddenError(PlatformError):
    """The bot lacks the permission required by the platform call."""


class CommandAborted(NexusError):
    """A command handler stopped early; ``reply`` is shown to the invoker."""

    def __init__(self, reply: str) -> None:
        super().__init__(reply)
        self.reply = reply


class InputFormatError(CommandAborted):
    """Malformed command arguments."""


class ResolutionError(CommandAborted):
    """A guild, channel, message, role or binding could not be resolved."""


class PlatformOperationError(CommandAborted):
    """Reacting, creating or deleting on the platform failed."""
