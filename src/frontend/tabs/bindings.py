"""Bindings tab for viewing and exporting registered event roles."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Static

from adapters.sqlite_storage import SQLiteBindingStore
from core.errors import PersistenceError
from core.references import MessageLocation, build_message_link

from ..constants import DEFAULT_DB_NAME, PROJECT_ROOT


class BindingsTab(Container):
    """Bindings tab to browse the SQLite store and export to JSON/CSV."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._rows: list[dict[str, Any]] = []
        self._table_ready = False

    def compose(self):
        with Vertical(id="bindings-panel"):
            yield Static("Event bindings", id="bindings-title")
            yield DataTable(id="bindings-table", cursor_type="row")
            with Horizontal(id="bindings-actions"):
                yield Button("Refresh", id="bindings-refresh")
                yield Button("Export JSON", id="export-json", variant="success")
                yield Button("Export CSV", id="export-csv")
            yield Static("", id="bindings-output")

    def on_mount(self) -> None:
        table = self.query_one("#bindings-table", DataTable)
        table.add_column("role", key="role_id", width=22)
        table.add_column("guild", key="guild_id", width=22)
        table.add_column("channel", key="channel_id", width=22)
        table.add_column("message", key="message_id", width=22)
        table.zebra_stripes = True
        table.styles.height = "1fr"
        self.query_one("#bindings-actions").styles.height = 3
        self._table_ready = True
        self.reload_bindings()

    @property
    def _db_path(self) -> Path:
        storage = self.app.config_state.section("storage")
        path = Path(str(storage.get("sqlite_path") or DEFAULT_DB_NAME))
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path

    @on(Button.Pressed, "#bindings-refresh")
    def _on_refresh(self) -> None:
        self.reload_bindings()

    @on(Button.Pressed, "#export-json")
    def _on_export_json(self) -> None:
        self._export_rows("json")

    @on(Button.Pressed, "#export-csv")
    def _on_export_csv(self) -> None:
        self._export_rows("csv")

    def reload_bindings(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#bindings-table", DataTable)
        table.clear()
        db_path = self._db_path
        if not db_path.exists():
            self._rows = []
            self._set_output(f"db not found: {db_path}")
            return
        try:
            bindings = SQLiteBindingStore(str(db_path)).list_all()
        except PersistenceError as exc:
            self._rows = []
            self._set_output(f"db error: {exc}")
            return

        self._rows = []
        for index, binding in enumerate(bindings):
            row = asdict(binding)
            row["link"] = build_message_link(
                MessageLocation(binding.guild_id, binding.channel_id, binding.message_id)
            )
            self._rows.append(row)
            table.add_row(
                binding.role_id,
                binding.guild_id,
                binding.channel_id,
                binding.message_id,
                key=f"{index}:{binding.role_id}",
            )
        self._set_output(f"loaded {len(bindings)} bindings from {db_path}")

    def _export_rows(self, fmt: str) -> None:
        if not self._rows:
            self._set_output("No bindings to export.")
            return
        exports_dir = PROJECT_ROOT / "exports"
        exports_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        path = exports_dir / f"bindings-{timestamp}.{fmt}"
        try:
            if fmt == "json":
                path.write_text(json.dumps(self._rows, indent=2, ensure_ascii=True), encoding="utf-8")
            else:
                fieldnames = list(self._rows[0].keys())
                with path.open("w", encoding="utf-8", newline="") as handle:
                    writer = csv.DictWriter(handle, fieldnames=fieldnames)
                    writer.writeheader()
                    writer.writerows(self._rows)
            self._set_output(f"exported {len(self._rows)} bindings to {path}")
        except OSError as exc:
            self._set_output(f"export failed: {exc.strerror or exc}")

    def _set_output(self, message: str) -> None:
        self.query_one("#bindings-output", Static).update(message)
