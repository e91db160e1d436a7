"""Shared test fixtures for the dicebox test suite.

FakeDynamoDB
    An in-memory stand-in for a boto3 DynamoDB client. It implements the
    handful of operations dicebox uses (ListTables, CreateTable, PutItem,
    GetItem and the ``table_exists`` waiter) and raises real botocore
    ``ClientError`` instances with DynamoDB error codes, so the code under
    test exercises the same error paths it would against AWS.

client
    An AsyncClient wired to the FastAPI app with settings and backend
    injected through dependency overrides. The lifespan does not run under
    ASGITransport, so no real boto3 client is ever built.
"""

from __future__ import annotations

import threading

import pytest
from botocore.exceptions import ClientError
from httpx import ASGITransport, AsyncClient

from dicebox.backend import Backend, BackendKind
from dicebox.config import Settings
from dicebox.dependencies import get_backend, get_settings
from dicebox.main import app

TABLE_NAME = "dice-rolls"


def client_error(code: str, operation: str, message: str = "") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message or code}}, operation)


class _Waiter:
    def __init__(self, db: FakeDynamoDB) -> None:
        self._db = db

    def wait(self, TableName: str, **kwargs) -> None:
        if TableName not in self._db.tables:
            raise AssertionError(f"waited on a table that was never created: {TableName}")


class FakeDynamoDB:
    """Thread-safe in-memory DynamoDB client double."""

    def __init__(self, tables: tuple[str, ...] = ()) -> None:
        self._lock = threading.Lock()
        self.tables: dict[str, dict[tuple[str, str], dict]] = {name: {} for name in tables}
        self.descriptions: dict[str, dict] = {}
        self.calls: list[str] = []
        self.create_calls = 0

    def _record(self, operation: str) -> None:
        with self._lock:
            self.calls.append(operation)

    def list_tables(self, Limit: int = 100, **kwargs) -> dict:
        self._record("ListTables")
        with self._lock:
            return {"TableNames": sorted(self.tables)[:Limit]}

    def create_table(self, TableName: str, KeySchema, AttributeDefinitions, BillingMode) -> dict:
        self._record("CreateTable")
        with self._lock:
            self.create_calls += 1
            if TableName in self.tables:
                raise client_error(
                    "ResourceInUseException", "CreateTable", f"Table already exists: {TableName}"
                )
            self.tables[TableName] = {}
            description = {
                "TableName": TableName,
                "TableStatus": "ACTIVE",
                "KeySchema": KeySchema,
                "AttributeDefinitions": AttributeDefinitions,
                "BillingModeSummary": {"BillingMode": BillingMode},
            }
            self.descriptions[TableName] = description
        return {"TableDescription": description}

    def get_waiter(self, name: str) -> _Waiter:
        assert name == "table_exists"
        return _Waiter(self)

    def _key_names(self, table_name: str) -> tuple[str, str]:
        schema = self.descriptions.get(table_name, {}).get("KeySchema")
        if not schema:
            return ("name", "createdAt")
        by_type = {k["KeyType"]: k["AttributeName"] for k in schema}
        return by_type["HASH"], by_type["RANGE"]

    def put_item(self, TableName: str, Item: dict) -> dict:
        self._record("PutItem")
        with self._lock:
            if TableName not in self.tables:
                raise client_error("ResourceNotFoundException", "PutItem")
            hash_key, range_key = self._key_names(TableName)
            key = (Item[hash_key]["S"], Item[range_key]["S"])
            self.tables[TableName][key] = dict(Item)
        return {}

    def get_item(self, TableName: str, Key: dict) -> dict:
        self._record("GetItem")
        with self._lock:
            if TableName not in self.tables:
                raise client_error("ResourceNotFoundException", "GetItem")
            hash_key, range_key = self._key_names(TableName)
            item = self.tables[TableName].get((Key[hash_key]["S"], Key[range_key]["S"]))
        return {"Item": dict(item)} if item is not None else {}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of Settings."""
    for name in ("TABLE_NAME", "DYNAMODB_CONFIG", "RECORD_NAME", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_db() -> FakeDynamoDB:
    return FakeDynamoDB()


@pytest.fixture
def settings() -> Settings:
    return Settings(table_name=TABLE_NAME)


@pytest.fixture
async def client(fake_db, settings):
    """AsyncClient wired to the app with an in-memory DynamoDB backend."""
    backend = Backend(kind=BackendKind.local, client=fake_db)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_backend] = lambda: backend

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.pop(get_settings, None)
    app.dependency_overrides.pop(get_backend, None)
