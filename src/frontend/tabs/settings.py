"""Settings tab implementation."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.widgets import ContentSwitcher, DataTable, Input, Select, Static, Switch, TextArea

from ..validators import (
    check_command_keyword,
    check_emoji,
    check_invite_link,
    check_prefix,
    distinct_emojis,
)


class SettingsTab(Container):
    """Settings tab for editing the bot gate, reactions, storage, and logging."""

    STORAGE_BACKENDS = ["sqlite", "mongo"]
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
    REACTION_KEYS = ["affirmative", "tentative", "negative", "dismiss"]
    REACTION_DEFAULTS = {
        "affirmative": "✅",
        "tentative": "\U0001f4c6",
        "negative": "\U0001f6ab",
        "dismiss": "\U0001f9e8",
    }

    SECTION_LABELS = [
        ("bot", "Bot", "Prefix, command and invite link"),
        ("reactions", "Reactions", "Status and dismissal emojis"),
        ("storage", "Storage", "Binding store backend"),
        ("logging", "Logging", "Console/file logging + redaction"),
    ]

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._current_section: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="settings-panel"):
            with Horizontal(id="settings-body"):
                with Container(id="settings-left"):
                    yield DataTable(id="settings-table", cursor_type="row")
                with Container(id="settings-right"):
                    with ContentSwitcher(id="settings-forms"):
                        with Container(id="settings-bot"):
                            yield Static("Bot", classes="settings-title")
                            yield Static("prefix", classes="form-label")
                            yield Input(placeholder="+nxc", id="bot-prefix")
                            yield Static("command", classes="form-label")
                            yield Input(placeholder="event-role", id="bot-command")
                            yield Static("invite_link", classes="form-label")
                            yield Input(
                                placeholder="https://discord.com/api/oauth2/authorize?client_id=...",
                                id="bot-invite",
                            )
                            yield Static("", id="bot-error", classes="settings-error")

                        with Container(id="settings-reactions"):
                            yield Static("Reactions", classes="settings-title")
                            for key in self.REACTION_KEYS:
                                yield Static(key, classes="form-label")
                                yield Input(
                                    placeholder=self.REACTION_DEFAULTS[key],
                                    id=f"reactions-{key}",
                                )
                            yield Static("dismiss_timeout_seconds", classes="form-label")
                            yield Input(placeholder="60", id="reactions-timeout")
                            yield Static("", id="reactions-error", classes="settings-error")

                        with Container(id="settings-storage"):
                            yield Static("Storage", classes="settings-title")
                            yield Static("backend", classes="form-label")
                            yield Select(
                                [
                                    ("sqlite", "sqlite"),
                                    ("mongo", "mongo"),
                                ],
                                id="storage-backend",
                                allow_blank=False,
                            )
                            yield Static("sqlite_path", classes="form-label")
                            yield Input(placeholder="nexusbot.db", id="storage-sqlite-path")
                            yield Static("mongo_database", classes="form-label")
                            yield Input(placeholder="nexus", id="storage-mongo-database")
                            yield Static("mongo_collection", classes="form-label")
                            yield Input(placeholder="discord-events", id="storage-mongo-collection")
                            yield Static(
                                "MONGODB_URL is read from the environment.",
                                classes="subtle",
                            )
                            yield Static("", id="storage-error", classes="settings-error")

                        with ScrollableContainer(id="settings-logging"):
                            yield Static("Logging", classes="settings-title")
                            yield Static("enabled", classes="form-label")
                            yield Switch(id="logging-enabled")
                            yield Static("level", classes="form-label")
                            yield Select(
                                [
                                    ("DEBUG", "DEBUG"),
                                    ("INFO", "INFO"),
                                    ("WARNING", "WARNING"),
                                    ("ERROR", "ERROR"),
                                ],
                                id="logging-level",
                                allow_blank=False,
                            )
                            yield Static("console", classes="form-label")
                            yield Switch(id="logging-console")
                            yield Static("file.enabled", classes="form-label")
                            yield Switch(id="logging-file-enabled")
                            yield Static("file.path", classes="form-label")
                            yield Input(placeholder="logs/nexusbot.log", id="logging-file-path")
                            yield Static("file.max_bytes", classes="form-label")
                            yield Input(placeholder="5242880", id="logging-file-max-bytes")
                            yield Static("file.backup_count", classes="form-label")
                            yield Input(placeholder="5", id="logging-file-backup")
                            yield Static("redact.enabled", classes="form-label")
                            yield Switch(id="logging-redact-enabled")
                            yield Static("redact.patterns (one per line)", classes="form-label")
                            yield TextArea(id="logging-redact-patterns")
                            yield Static("", id="logging-error", classes="settings-error")

    def on_mount(self) -> None:
        table = self.query_one("#settings-table", DataTable)
        table.add_column("section", key="section", width=18)
        table.add_column("description", key="description", width=34)
        for key, label, description in self.SECTION_LABELS:
            table.add_row(label, description, key=key)
        table.zebra_stripes = True
        self._table_ready = True
        self._select_section("bot")
        self.reload_from_config()

    def reload_from_config(self) -> None:
        self._loading_form = True
        self._load_bot()
        self._load_reactions()
        self._load_storage()
        self._load_logging()
        self._loading_form = False

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        section_id = self._coerce_row_key(event.row_key)
        self._select_section(section_id)

    def _select_section(self, section_id: str) -> None:
        self._current_section = section_id
        switcher = self.query_one("#settings-forms", ContentSwitcher)
        switcher.current = f"settings-{section_id}"

    def _get_section(self, key: str) -> dict[str, Any]:
        return self.app.config_state.section(key)

    def _update_section(self, key: str, section: dict[str, Any]) -> None:
        self.app.update_config_section(key, section)

    def _load_bot(self) -> None:
        bot = self._get_section("bot")
        self.query_one("#bot-prefix", Input).value = str(bot.get("prefix", "+nxc"))
        self.query_one("#bot-command", Input).value = str(bot.get("command", "event-role"))
        self.query_one("#bot-invite", Input).value = str(bot.get("invite_link", ""))
        self._set_error("bot-error", "")

    def _load_reactions(self) -> None:
        reactions = self._get_section("reactions")
        for key in self.REACTION_KEYS:
            value = reactions.get(key, self.REACTION_DEFAULTS[key])
            self.query_one(f"#reactions-{key}", Input).value = str(value)
        timeout = reactions.get("dismiss_timeout_seconds", 60)
        self.query_one("#reactions-timeout", Input).value = str(timeout)
        self._set_error("reactions-error", "")

    def _load_storage(self) -> None:
        storage = self._get_section("storage")
        backend = storage.get("backend", "sqlite")
        self._set_select_value("#storage-backend", backend, self.STORAGE_BACKENDS, "storage-error")
        self.query_one("#storage-sqlite-path", Input).value = str(
            storage.get("sqlite_path", "nexusbot.db")
        )
        self.query_one("#storage-mongo-database", Input).value = str(
            storage.get("mongo_database", "nexus")
        )
        self.query_one("#storage-mongo-collection", Input).value = str(
            storage.get("mongo_collection", "discord-events")
        )
        self._apply_storage_state(backend)

    def _load_logging(self) -> None:
        logging = self._get_section("logging")
        file_cfg = self._get_subdict(logging, "file")
        redact_cfg = self._get_subdict(logging, "redact")
        enabled = bool(logging.get("enabled", False))
        level = logging.get("level", "INFO")
        console = bool(logging.get("console", True))
        file_enabled = bool(file_cfg.get("enabled", False))
        file_path = file_cfg.get("path", "logs/nexusbot.log")
        file_max = file_cfg.get("max_bytes", 5 * 1024 * 1024)
        file_backup = file_cfg.get("backup_count", 5)
        redact_enabled = bool(redact_cfg.get("enabled", False))
        patterns = redact_cfg.get("patterns", []) or []

        self.query_one("#logging-enabled", Switch).value = enabled
        self._set_select_value("#logging-level", level, self.LOG_LEVELS, "logging-error")
        self.query_one("#logging-console", Switch).value = console
        self.query_one("#logging-file-enabled", Switch).value = file_enabled
        self.query_one("#logging-file-path", Input).value = str(file_path)
        self.query_one("#logging-file-max-bytes", Input).value = str(file_max)
        self.query_one("#logging-file-backup", Input).value = str(file_backup)
        self.query_one("#logging-redact-enabled", Switch).value = redact_enabled
        self.query_one("#logging-redact-patterns", TextArea).text = "\n".join(patterns)
        self._apply_logging_state(file_enabled, redact_enabled)
        if level in self.LOG_LEVELS:
            self._set_error("logging-error", "")

    def _set_select_value(self, selector: str, value: str, allowed: list[str], error_id: str) -> None:
        select = self.query_one(selector, Select)
        if value in allowed:
            select.value = value
            self._set_error(error_id, "")
        else:
            select.value = allowed[0] if allowed else Select.BLANK
            self._set_error(error_id, f"Invalid value: {value}")

    def _set_error(self, error_id: str, message: str) -> None:
        self.query_one(f"#{error_id}", Static).update(message)

    def _apply_storage_state(self, backend: str) -> None:
        self.query_one("#storage-sqlite-path", Input).disabled = backend != "sqlite"
        self.query_one("#storage-mongo-database", Input).disabled = backend != "mongo"
        self.query_one("#storage-mongo-collection", Input).disabled = backend != "mongo"

    def _apply_logging_state(self, file_enabled: bool, redact_enabled: bool) -> None:
        self.query_one("#logging-file-path", Input).disabled = not file_enabled
        self.query_one("#logging-file-max-bytes", Input).disabled = not file_enabled
        self.query_one("#logging-file-backup", Input).disabled = not file_enabled
        self.query_one("#logging-redact-patterns", TextArea).disabled = not redact_enabled

    @on(Input.Changed, "#bot-prefix")
    def _on_bot_prefix(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        check = check_prefix(event.value)
        self._update_checked_field("bot", "prefix", check.normalized, check.error, "bot-error")

    @on(Input.Changed, "#bot-command")
    def _on_bot_command(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        check = check_command_keyword(event.value)
        self._update_checked_field("bot", "command", check.normalized, check.error, "bot-error")

    @on(Input.Changed, "#bot-invite")
    def _on_bot_invite(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        check = check_invite_link(event.value)
        self._update_checked_field("bot", "invite_link", check.normalized, check.error, "bot-error")

    @on(Input.Changed, "#reactions-affirmative")
    @on(Input.Changed, "#reactions-tentative")
    @on(Input.Changed, "#reactions-negative")
    @on(Input.Changed, "#reactions-dismiss")
    def _on_reaction_emoji(self, event: Input.Changed) -> None:
        if self._loading_form or event.input.id is None:
            return
        key = event.input.id[len("reactions-") :]
        check = check_emoji(event.value)
        if check.error or check.normalized is None:
            self._set_error("reactions-error", f"{key}: {check.error}")
            return
        reactions = self._get_section("reactions")
        candidate = dict(reactions)
        candidate[key] = check.normalized
        duplicate = distinct_emojis({name: candidate.get(name, "") for name in self.REACTION_KEYS})
        if duplicate:
            self._set_error("reactions-error", duplicate)
            return
        self._set_error("reactions-error", "")
        reactions[key] = check.normalized
        self._update_section("reactions", reactions)

    @on(Input.Changed, "#reactions-timeout")
    def _on_reaction_timeout(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update_int_field("reactions", "dismiss_timeout_seconds", event.value, "reactions-error")

    @on(Select.Changed, "#storage-backend")
    def _on_storage_backend(self, event: Select.Changed) -> None:
        if self._loading_form or event.value is Select.BLANK:
            return
        storage = self._get_section("storage")
        storage["backend"] = event.value
        self._update_section("storage", storage)
        self._apply_storage_state(event.value)

    @on(Input.Changed, "#storage-sqlite-path")
    def _on_storage_sqlite_path(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update_text_field("storage", "sqlite_path", event.value, "storage-error")

    @on(Input.Changed, "#storage-mongo-database")
    def _on_storage_mongo_database(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update_text_field("storage", "mongo_database", event.value, "storage-error")

    @on(Input.Changed, "#storage-mongo-collection")
    def _on_storage_mongo_collection(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update_text_field("storage", "mongo_collection", event.value, "storage-error")

    @on(Switch.Changed, "#logging-enabled")
    def _on_logging_enabled(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        logging = self._get_section("logging")
        logging["enabled"] = bool(event.value)
        self._update_section("logging", logging)

    @on(Select.Changed, "#logging-level")
    def _on_logging_level(self, event: Select.Changed) -> None:
        if self._loading_form or event.value is Select.BLANK:
            return
        logging = self._get_section("logging")
        logging["level"] = event.value
        self._update_section("logging", logging)

    @on(Switch.Changed, "#logging-console")
    def _on_logging_console(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        logging = self._get_section("logging")
        logging["console"] = bool(event.value)
        self._update_section("logging", logging)

    @on(Switch.Changed, "#logging-file-enabled")
    def _on_logging_file_enabled(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        logging = self._get_section("logging")
        file_cfg = self._get_subdict(logging, "file")
        file_cfg["enabled"] = bool(event.value)
        logging["file"] = file_cfg
        self._update_section("logging", logging)
        redact_enabled = bool(self._get_subdict(logging, "redact").get("enabled", False))
        self._apply_logging_state(bool(event.value), redact_enabled)

    @on(Input.Changed, "#logging-file-path")
    def _on_logging_file_path(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        logging = self._get_section("logging")
        file_cfg = self._get_subdict(logging, "file")
        file_cfg["path"] = event.value
        logging["file"] = file_cfg
        self._update_section("logging", logging)

    @on(Input.Changed, "#logging-file-max-bytes")
    def _on_logging_file_max(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update_nested_int_field(
            "logging",
            ("file", "max_bytes"),
            event.value,
            "logging-error",
        )

    @on(Input.Changed, "#logging-file-backup")
    def _on_logging_file_backup(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update_nested_int_field(
            "logging",
            ("file", "backup_count"),
            event.value,
            "logging-error",
        )

    @on(Switch.Changed, "#logging-redact-enabled")
    def _on_logging_redact_enabled(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        logging = self._get_section("logging")
        redact_cfg = self._get_subdict(logging, "redact")
        redact_cfg["enabled"] = bool(event.value)
        logging["redact"] = redact_cfg
        self._update_section("logging", logging)
        file_enabled = bool(self._get_subdict(logging, "file").get("enabled", False))
        self._apply_logging_state(file_enabled, bool(event.value))

    @on(TextArea.Changed, "#logging-redact-patterns")
    def _on_logging_redact_patterns(self, event: TextArea.Changed) -> None:
        if self._loading_form:
            return
        logging = self._get_section("logging")
        redact_cfg = self._get_subdict(logging, "redact")
        patterns = [line.strip() for line in event.text_area.text.splitlines() if line.strip()]
        redact_cfg["patterns"] = patterns
        logging["redact"] = redact_cfg
        self._update_section("logging", logging)

    def _update_checked_field(
        self,
        section: str,
        key: str,
        value: Optional[str],
        error: Optional[str],
        error_id: str,
    ) -> None:
        if error or value is None:
            self._set_error(error_id, error or f"{key} is invalid")
            return
        self._set_error(error_id, "")
        config = self._get_section(section)
        config[key] = value
        self._update_section(section, config)

    def _update_text_field(self, section: str, key: str, value: str, error_id: str) -> None:
        stripped = value.strip()
        if not stripped:
            self._set_error(error_id, f"{key} is required")
            return
        self._set_error(error_id, "")
        config = self._get_section(section)
        config[key] = stripped
        self._update_section(section, config)

    def _update_int_field(self, section: str, key: str, value: str, error_id: str) -> None:
        parsed = self._parse_int(value, error_id)
        if parsed is None:
            return
        config = self._get_section(section)
        config[key] = parsed
        self._update_section(section, config)

    def _update_nested_int_field(
        self,
        section: str,
        path: tuple[str, str],
        value: str,
        error_id: str,
    ) -> None:
        parsed = self._parse_int(value, error_id)
        if parsed is None:
            return
        config = self._get_section(section)
        nested = self._get_subdict(config, path[0])
        nested[path[1]] = parsed
        config[path[0]] = nested
        self._update_section(section, config)

    def _parse_int(self, value: str, error_id: str) -> Optional[int]:
        stripped = value.strip()
        if not stripped:
            self._set_error(error_id, "")
            return None
        if not stripped.isdigit():
            self._set_error(error_id, "Enter a non-negative integer")
            return None
        self._set_error(error_id, "")
        return int(stripped)

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)

    @staticmethod
    def _get_subdict(parent: dict[str, Any], key: str) -> dict[str, Any]:
        value = parent.get(key)
        if isinstance(value, dict):
            return value
        return {}
