from __future__ import annotations

from typing import Any, Optional

import pytest
from pymongo.errors import PyMongoError

from adapters.mongo_storage import (
    MongoBindingStore,
    binding_to_document,
    document_to_binding,
)
from core.errors import PersistenceError
from core.models import Binding

RAIDERS = Binding(guild_id="1", channel_id="2", message_id="3", role_id="555")


class FakeCollection:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.documents: list[dict[str, Any]] = []
        self.error = error

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def insert_one(self, document: dict[str, Any]) -> None:
        self._check()
        self.documents.append({"_id": len(self.documents), **document})

    def delete_one(self, query: dict[str, Any]) -> None:
        self._check()
        for index, document in enumerate(self.documents):
            if all(document.get(key) == value for key, value in query.items()):
                del self.documents[index]
                return

    def find(self) -> list[dict[str, Any]]:
        self._check()
        return list(self.documents)


def test_documents_use_historical_field_names() -> None:
    assert binding_to_document(RAIDERS) == {
        "eventGuildId": "1",
        "eventChannelId": "2",
        "eventMessageId": "3",
        "eventRoleId": "555",
    }


def test_document_ids_are_read_back_as_strings() -> None:
    document = {
        "_id": "abc",
        "eventGuildId": 1,
        "eventChannelId": 2,
        "eventMessageId": 3,
        "eventRoleId": 555,
    }

    assert document_to_binding(document) == RAIDERS


def test_insert_list_and_delete() -> None:
    collection = FakeCollection()
    store = MongoBindingStore(collection)

    store.insert(RAIDERS)
    assert store.list_all() == [RAIDERS]

    store.delete_by_role_id("555")
    assert store.list_all() == []


def test_driver_errors_become_persistence_errors() -> None:
    store = MongoBindingStore(FakeCollection(error=PyMongoError("down")))

    with pytest.raises(PersistenceError):
        store.insert(RAIDERS)
    with pytest.raises(PersistenceError):
        store.list_all()
    with pytest.raises(PersistenceError):
        store.delete_by_role_id("555")
