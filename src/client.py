"""Discord client factory for nexusbot.

We explicitly manage the client's lifecycle (run/close) so it is obvious when
the gateway session is opened and when it ends.
"""

from __future__ import annotations

import logging
import os

import discord
from dotenv import load_dotenv


def bot_token() -> str:
    """Read DISCORD_BOT_TOKEN via python-dotenv to keep secrets out of the repo."""

    load_dotenv()
    token = os.getenv("DISCORD_BOT_TOKEN")
    # Fail fast on missing credentials rather than on the first gateway call.
    if not token:
        raise RuntimeError("Missing DISCORD_BOT_TOKEN in environment")
    return token


def build_client() -> discord.Client:
    """Create a discord.py client with the intents the event-role flow needs.

    Message content is required to read text commands, and the members
    intent keeps role holders cached for the participants listing.
    """

    intents = discord.Intents.default()
    intents.message_content = True
    intents.members = True
    intents.reactions = True

    logging.getLogger(__name__).info("Initializing Discord client")

    return discord.Client(intents=intents)
