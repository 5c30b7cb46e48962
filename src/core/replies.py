"""User-facing texts of the event-role commands.

Handlers never build user-facing text inline; every reply and audit
reason is defined here.
"""

from __future__ import annotations

from core.config import ReactionConfig
from core.models import RoleMembers

LINK_EXAMPLE = "https://discord.com/channels/<guildId>/<channelId>/<messageId>"

CREATE_USAGE = "`event-role create <role> <message>`"
DELETE_USAGE = (
    "To delete an event role, use `event-role delete <message|role>` with either "
    "the link to the announcement or the associated role."
)
PARTICIPANTS_USAGE = (
    "To list the participants of an event, use `event-role participants <message|role>` "
    "with either the link to the announcement or the associated role."
)

MISSING_MESSAGE = (
    f"I could not find the event message. Check the command format: {CREATE_USAGE}."
)
MISSING_ROLE_NAME = (
    f"I could not find the name of the role to create. Check the command format: {CREATE_USAGE}."
)
PRIVATE_CONTEXT = "I cannot manage events created in private groups, only servers are supported."
LINK_FORMAT = (
    "I did not recognise the message link. A message link looks like this: "
    f"`{LINK_EXAMPLE}`.\n\n"
    ":bulb: If you run this command in the same channel as the event message, "
    "you can use the message id instead of the link."
)
MESSAGE_NOT_LOCATED = (
    "I was not able to find that message. Check that the link is correct or that the id "
    "is in the right place in the command."
)
BARE_ID_NEEDS_CHANNEL = (
    "When only the message id is given, the command must be run in the same channel as the "
    "event announcement.\n\n"
    ":bulb: To run the command from anywhere, use the message link instead."
)
NO_MESSAGE_ID = (
    "I could not recognise a message id in the command argument. Give the link to the "
    "message or its Discord id."
)
ROLE_FORMAT = "I could not identify a role in your command."

GUILD_NOT_FOUND = (
    "I did not find the server where the event message was posted. I might not be a member "
    "of that server."
)
CHANNEL_NOT_FOUND = (
    "I did not find the channel where the event message was posted. I might not have the "
    "permission to read that channel."
)
MESSAGE_NOT_FOUND = (
    "I did not find the event message. I might not have the permission to read the channel "
    "or its history."
)
REACTION_FAILED = (
    "I did not manage to add reactions to the event message. I might not have the permission "
    "to react to messages in that channel."
)
ROLE_CREATION_FAILED = (
    "I did not manage to create the role for this event. I might not have the permission to "
    "view or create roles on that server."
)
BINDING_NOT_SAVED = (
    "The role was created but I could not register the event. Delete the role from the "
    "server settings and try again."
)
ROLE_DELETION_FAILED = (
    "I did not manage to delete the event role. I might not have the permission to "
    "manage roles on that server, or the role sits above mine."
)

ROLE_NOT_BOUND = "The specified role is not associated with a registered event."
MESSAGE_NOT_BOUND = "The specified message is not registered as an event announcement."
ROLE_DELETED = "OK! I deleted the event role."

GRANT_REASON = "The member reacted to the event announcement."
REVOKE_REASON = "The member removed their reaction to the event announcement."


def create_role_reason(author_name: str) -> str:
    return f"The role creation command was invoked by {author_name}."


def delete_role_reason(author_name: str) -> str:
    return f"The role deletion command was invoked by {author_name}."


def invite_reply(invite_link: str) -> str:
    return (
        "Hey! For now only my creator and a few allowed people can invite me. "
        f"If you are one of them, use this link: {invite_link}."
    )


def format_confirmation(reactions: ReactionConfig, command: str = "event-role") -> str:
    """Explain the status reactions attached to the announcement."""

    seconds = int(reactions.dismiss_timeout_seconds)
    lines = [
        "OK! I added three reactions to the message, meaning respectively:",
        f"{reactions.affirmative} Attending.",
        f"{reactions.tentative} Unavailable, another date?",
        f"{reactions.negative} Not interested.",
        "",
        ":bulb: It may help to edit the announcement so that this legend is shown there too!",
        "",
        f"From now on, anyone reacting with {reactions.affirmative} gets the newly created role.",
        "When the role is no longer needed, remember to delete it, either from the server "
        f"settings or with `{command} delete <message>` and the announcement link.",
        "",
        f"{reactions.dismiss} You can safely delete this message by reacting with this emoji "
        f"within the next {seconds} seconds.",
    ]
    return "\n".join(lines)


def format_participants(members: RoleMembers) -> str:
    names = ", ".join(members.display_names)
    return f"The participants of the event bound to role {members.mention} are: {names}."
