"""Static configuration for nexusbot.

All user-editable settings (bot prefix, reactions, storage, logging) live in a
single JSON file for quick edits without touching Python. Secrets stay in the
environment.
"""

import json
import os

from core.config import BotConfig, ReactionConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Message gate: only "<prefix> <command> ..." messages reach the handlers.
_bot = _CONFIG.get("bot", {})
BOT = BotConfig(
    prefix=_bot.get("prefix", "+nxc"),
    command=_bot.get("command", "event-role"),
    invite_link=_bot.get("invite_link", ""),
)

# Status reactions attached to announcements, plus the notice dismissal emoji.
_reactions = _CONFIG.get("reactions", {})
REACTIONS = ReactionConfig(
    affirmative=_reactions.get("affirmative", "✅"),
    tentative=_reactions.get("tentative", "\U0001f4c6"),
    negative=_reactions.get("negative", "\U0001f6ab"),
    dismiss=_reactions.get("dismiss", "\U0001f9e8"),
    dismiss_timeout_seconds=float(_reactions.get("dismiss_timeout_seconds", 60)),
)

# Storage backend switches adapters without changing core logic.
# - "sqlite": local file, no extra service
# - "mongo": MONGODB_URL from the environment
_storage = _CONFIG.get("storage", {})
STORAGE_BACKEND = _storage.get("backend", "sqlite")
DB_PATH = _resolve_path(_storage.get("sqlite_path", "nexusbot.db"))
MONGO_DATABASE = _storage.get("mongo_database", "nexus")
MONGO_COLLECTION = _storage.get("mongo_collection", "discord-events")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
