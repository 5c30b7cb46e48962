"""Main Textual app for the nexusbot config panel."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

from .constants import CONFIG_PATH, DEFAULT_DB_NAME, DISCORD_BLURPLE
from .modals import ReloadConfirmScreen, UnsavedChangesScreen
from .state import ConfigState
from .tabs.bindings import BindingsTab
from .tabs.settings import SettingsTab


def _read_config() -> tuple[dict[str, Any] | None, str | None]:
    """Return the parsed config.json, or None and a short status message."""
    try:
        loaded = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None, "config.json missing"
    except json.JSONDecodeError as exc:
        return None, f"config.json error: {exc.msg} (line {exc.lineno})"
    if not isinstance(loaded, dict):
        return None, "config root must be an object"
    return loaded, None


class ConfigPanelApp(App):
    """Config panel with global config state and tabs."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.config_state = ConfigState()

    BINDINGS = [
        ("ctrl+s", "save_config", "Save"),
        ("ctrl+r", "reload_config", "Reload"),
        ("q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("event roles for Discord", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static("", id="header-storage", classes="subtle")
                    yield Static("", id="header-status")
                    yield Horizontal(
                        Button("Save", id="save-btn"),
                        Button("Reload", id="reload-btn"),
                        id="header-actions",
                    )

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(
                    Tab("Settings", id="settings"),
                    Tab("Bindings", id="bindings"),
                    id="tabs",
                )

        with ContentSwitcher(id="content"):
            yield SettingsTab(id="settings")
            yield BindingsTab(id="bindings")
        yield Footer()

    def on_mount(self) -> None:
        self._load_config()
        self._set_active_tab("settings")

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        tab_id = event.tab.id or ""
        if not tab_id:
            label = event.tab.label
            if hasattr(label, "plain"):
                label = label.plain
            tab_id = str(label).strip().lower()
        self._set_active_tab(tab_id)

    def _set_active_tab(self, tab_id: str) -> None:
        switcher = self.query_one("#content", ContentSwitcher)
        switcher.current = tab_id

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save_config()
        elif event.button.id == "reload-btn":
            self.action_reload_config()

    def action_save_config(self) -> None:
        self._save_config()

    def action_reload_config(self) -> None:
        if self.config_state.dirty:
            self.push_screen(ReloadConfirmScreen(), self._handle_reload_choice)
        else:
            self._load_config()

    def action_request_quit(self) -> None:
        if self.config_state.dirty:
            self.push_screen(UnsavedChangesScreen(), self._handle_exit_choice)
        else:
            self.exit()

    def _handle_exit_choice(self, choice: str | None) -> None:
        if choice == "save":
            if self._save_config():
                self.exit()
        elif choice == "discard":
            self.exit()

    def _handle_reload_choice(self, choice: str | None) -> None:
        if choice == "save":
            if self._save_config():
                self._load_config()
        elif choice == "reload":
            self._load_config()

    def _load_config(self) -> None:
        data, error = _read_config()
        self.config_state.data = data
        self.config_state.error = error
        self.config_state.dirty = False
        self._refresh_header()
        self._refresh_tabs()

    def _save_config(self) -> bool:
        if self.config_state.data is None:
            self.config_state.error = "Nothing to save"
            self._refresh_header()
            return False
        try:
            CONFIG_PATH.write_text(
                json.dumps(self.config_state.data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
            self.config_state.dirty = False
            self.config_state.saved_at = datetime.now()
            self.config_state.error = None
            self._refresh_header()
            return True
        except OSError as exc:
            self.config_state.error = f"save failed: {exc.strerror or exc}"
            self._refresh_header()
            return False

    def mark_dirty(self) -> None:
        self.config_state.dirty = True
        self._refresh_header()

    def _refresh_header(self) -> None:
        status = self.query_one("#header-status", Static)
        storage_label = self.query_one("#header-storage", Static)
        save_btn = self.query_one("#save-btn", Button)
        reload_btn = self.query_one("#reload-btn", Button)

        storage_label.update(self._storage_text())
        status.remove_class("status-loaded", "status-modified", "status-error")
        if self.config_state.error:
            status.update(f"config: {self.config_state.error}")
            status.add_class("status-error")
        elif self.config_state.dirty:
            status.update("config: modified *")
            status.add_class("status-modified")
        else:
            if self.config_state.saved_at is not None:
                status.update(f"config: saved {self.config_state.saved_at:%H:%M:%S}")
            else:
                status.update("config: loaded")
            status.add_class("status-loaded")

        save_btn.disabled = self.config_state.data is None or not self.config_state.dirty
        reload_btn.disabled = False

    def _storage_text(self) -> str:
        storage = self.config_state.section("storage")
        if storage.get("backend") == "mongo":
            database = storage.get("mongo_database", "nexus")
            collection = storage.get("mongo_collection", "discord-events")
            return f"mongo: {database}/{collection}"
        return f"db: {storage.get('sqlite_path', DEFAULT_DB_NAME)}"

    def _refresh_tabs(self) -> None:
        for tab in self.query(SettingsTab):
            tab.reload_from_config()
        for tab in self.query(BindingsTab):
            tab.reload_bindings()

    def update_config_section(self, section: str, value: Any) -> None:
        """Update a config section in memory and mark dirty."""
        if self.config_state.data is None:
            self.config_state.data = {}
        self.config_state.data[section] = value
        self.mark_dirty()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("NEXUS", DISCORD_BLURPLE),
            ("BOT > Config Panel", "bold"),
        )
