"""MongoDB storage adapter.

Stores one document per binding using the historical field names
``eventGuildId``, ``eventChannelId``, ``eventMessageId`` and ``eventRoleId``.
"""

from __future__ import annotations

import logging
from typing import Any

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from core.errors import PersistenceError
from core.models import Binding

LOGGER = logging.getLogger(__name__)

DEFAULT_DATABASE = "nexus"
DEFAULT_COLLECTION = "discord-events"


def binding_to_document(binding: Binding) -> dict[str, str]:
    return {
        "eventGuildId": binding.guild_id,
        "eventChannelId": binding.channel_id,
        "eventMessageId": binding.message_id,
        "eventRoleId": binding.role_id,
    }


def document_to_binding(document: dict[str, Any]) -> Binding:
    return Binding(
        guild_id=str(document.get("eventGuildId", "")),
        channel_id=str(document.get("eventChannelId", "")),
        message_id=str(document.get("eventMessageId", "")),
        role_id=str(document.get("eventRoleId", "")),
    )


class MongoBindingStore:
    """BindingStorePort backed by a MongoDB collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    @classmethod
    def from_url(
        cls,
        url: str,
        database: str = DEFAULT_DATABASE,
        collection: str = DEFAULT_COLLECTION,
    ) -> "MongoBindingStore":
        LOGGER.info("Connecting to MongoDB database %s", database)
        client: MongoClient = MongoClient(url)
        return cls(client[database][collection])

    def insert(self, binding: Binding) -> None:
        try:
            self._collection.insert_one(binding_to_document(binding))
        except PyMongoError as exc:
            raise PersistenceError(f"Cannot insert binding: {exc}") from exc

    def delete_by_role_id(self, role_id: str) -> None:
        try:
            self._collection.delete_one({"eventRoleId": role_id})
        except PyMongoError as exc:
            raise PersistenceError(f"Cannot delete binding of role {role_id}: {exc}") from exc

    def list_all(self) -> list[Binding]:
        try:
            documents = list(self._collection.find())
        except PyMongoError as exc:
            raise PersistenceError(f"Cannot list bindings: {exc}") from exc
        return [document_to_binding(document) for document in documents]
