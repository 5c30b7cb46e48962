"""Application entry point for the nexusbot Discord bot."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.discord_chat import DiscordChat
from adapters.discord_mapper import build_command_context, build_reaction_event
from adapters.mongo_storage import MongoBindingStore
from adapters.sqlite_storage import SQLiteBindingStore
from client import bot_token, build_client
from core.cache import BindingCache
from core.dispatcher import CommandDispatcher, EventRoleCommandRouter
from core.event_roles import (
    EventRoleCreateHandler,
    EventRoleDeleteHandler,
    EventRoleParticipantsHandler,
)
from core.notices import NoticeTracker
from core.ports import BindingStorePort
from core.reactions import ReactionRouter
from core.references import MessageLocation, build_message_link

NAME = "NEXUS"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/nexusbot.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_store() -> BindingStorePort:
    """Select the binding store from configuration."""

    if settings.STORAGE_BACKEND == "sqlite":
        store = SQLiteBindingStore(settings.DB_PATH)
        store.init_db()
        return store
    if settings.STORAGE_BACKEND == "mongo":
        load_dotenv()
        url = os.getenv("MONGODB_URL")
        if not url:
            raise RuntimeError("MONGODB_URL is required when storage.backend=mongo")
        return MongoBindingStore.from_url(url, settings.MONGO_DATABASE, settings.MONGO_COLLECTION)
    raise RuntimeError("storage.backend must be 'sqlite' or 'mongo'")


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting nexusbot")

    store = _build_store()
    logger.info("Selected storage backend - %s", settings.STORAGE_BACKEND)
    cache = BindingCache(store)

    client = build_client()
    chat = DiscordChat(client)
    notices = NoticeTracker(
        chat,
        settings.REACTIONS.dismiss,
        settings.REACTIONS.dismiss_timeout_seconds,
    )
    dispatcher = CommandDispatcher(
        chat,
        settings.BOT,
        EventRoleCommandRouter(
            create=EventRoleCreateHandler(
                chat, store, cache, notices, settings.REACTIONS, settings.BOT.command
            ),
            delete=EventRoleDeleteHandler(chat, store, cache),
            participants=EventRoleParticipantsHandler(chat, cache),
        ),
    )
    reactions = ReactionRouter(chat, cache, settings.REACTIONS, notices)

    @client.event
    async def on_ready() -> None:
        logger.info("Discord client started as %s", client.user)

    @client.event
    async def on_error(event_method: str, *args, **kwargs) -> None:
        logger.exception("Discord client caught an error in %s", event_method)

    @client.event
    async def on_message(message) -> None:
        await dispatcher.handle_message(build_command_context(message))

    def _is_own_reaction(payload) -> bool:
        return client.user is not None and payload.user_id == client.user.id

    @client.event
    async def on_raw_reaction_add(payload) -> None:
        if _is_own_reaction(payload):
            return
        await reactions.handle(build_reaction_event(payload, added=True))

    @client.event
    async def on_raw_reaction_remove(payload) -> None:
        if _is_own_reaction(payload):
            return
        await reactions.handle(build_reaction_event(payload, added=False))

    # Logging handlers come from _configure_logging, not discord.py.
    client.run(bot_token(), log_handler=None)
    logger.info("Discord client stopped")


def _setup() -> None:
    _print_banner()
    from frontend.app import ConfigPanelApp

    ConfigPanelApp().run()


def _list_bindings() -> None:
    store = _build_store()
    bindings = store.list_all()
    if not bindings:
        print("No event bindings registered.")
        return

    for index, binding in enumerate(bindings, start=1):
        link = build_message_link(
            MessageLocation(binding.guild_id, binding.channel_id, binding.message_id)
        )
        print(f"{index}. role {binding.role_id} | {link}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="nexusbot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    subparsers.add_parser("config", help="Launch the config TUI")
    subparsers.add_parser("bindings", help="List registered event bindings")

    args = parser.parse_args(argv)
    if args.command == "config":
        _setup()
        return
    if args.command == "bindings":
        _list_bindings()
        return
    _run()


if __name__ == "__main__":
    main()
