from __future__ import annotations

import logging

from app import _collect_redaction_values, _RedactingFormatter


def test_formatter_masks_secrets() -> None:
    formatter = _RedactingFormatter(["s3cr3t-token"], fmt="%(message)s")
    record = logging.LogRecord("nexus", logging.INFO, __file__, 1, "token=%s", ("s3cr3t-token",), None)

    assert formatter.format(record) == "token=***"


def test_redaction_reads_named_environment_values(monkeypatch) -> None:
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc")
    monkeypatch.setenv("MONGODB_URL", "mongodb://user:pw@host")

    values = _collect_redaction_values(
        {"redact": {"enabled": True, "patterns": ["DISCORD_BOT_TOKEN", "MONGODB_URL"]}}
    )

    assert values == ["mongodb://user:pw@host", "abc"]
    assert _collect_redaction_values({"redact": {"enabled": False}}) == []
