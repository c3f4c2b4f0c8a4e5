from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

import database
from database import BOOKS_COLLECTION, get_db_connection, initialize_database


def test_get_db_connection_pings_and_returns_database(monkeypatch):
    client = MagicMock()
    client_cls = MagicMock(return_value=client)
    monkeypatch.setattr(database, "MongoClient", client_cls)

    db = get_db_connection("mongodb://localhost:27017", "lib", 1500)

    client_cls.assert_called_once_with("mongodb://localhost:27017", serverSelectionTimeoutMS=1500)
    client.admin.command.assert_called_once_with("ping")
    client.__getitem__.assert_called_once_with("lib")
    assert db is client.__getitem__.return_value


def test_get_db_connection_closes_client_when_unreachable(monkeypatch):
    client = MagicMock()
    client.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
    monkeypatch.setattr(database, "MongoClient", MagicMock(return_value=client))

    with pytest.raises(ServerSelectionTimeoutError):
        get_db_connection("mongodb://unreachable:27017", "lib", 10)
    client.close.assert_called_once()


def test_initialize_database_returns_books_collection():
    db = MagicMock()
    assert initialize_database(db) is db.__getitem__.return_value
    db.__getitem__.assert_called_once_with(BOOKS_COLLECTION)
