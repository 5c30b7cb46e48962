"""In-memory projection of the binding store.

The store is the source of truth; the cache only mirrors it. A snapshot is
loaded on the first lookup after construction or ``invalidate()``, and every
handler that mutates the store calls ``refresh()`` right after the write.
There is no TTL and no locking: a concurrent refresh may race, which is
tolerated for low-frequency, human-triggered mutations.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from core.models import Binding, CacheSnapshot
from core.ports import BindingStorePort

LOGGER = logging.getLogger(__name__)

BINDING_KEYS = ("message_id", "role_id")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BindingCache:
    """Lazy, wholesale-invalidated mirror of the bindings."""

    def __init__(
        self,
        store: BindingStorePort,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock
        self._snapshot: Optional[CacheSnapshot] = None

    @property
    def snapshot(self) -> Optional[CacheSnapshot]:
        return self._snapshot

    def invalidate(self) -> None:
        """Discard the snapshot; the next lookup reloads from the store."""

        self._snapshot = None

    def refresh(self) -> CacheSnapshot:
        """Reload every binding from the store, regardless of current state."""

        bindings = tuple(self._store.list_all())
        self._snapshot = CacheSnapshot(bindings=bindings, refreshed_at=self._clock())
        LOGGER.debug("Binding cache refreshed with %s bindings", len(bindings))
        return self._snapshot

    def get_or_load(self, key: str, value: str) -> Optional[Binding]:
        """Return the first binding whose ``key`` field equals ``value``."""

        if key not in BINDING_KEYS:
            raise ValueError(f"Unsupported binding key: {key}")
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = self.refresh()
        for binding in snapshot.bindings:
            if getattr(binding, key) == value:
                return binding
        return None

    def get_by_message_id(self, message_id: str) -> Optional[Binding]:
        return self.get_or_load("message_id", message_id)

    def get_by_role_id(self, role_id: str) -> Optional[Binding]:
        return self.get_or_load("role_id", role_id)
