"""
Pytest configuration and fixtures for Keysmith tests.

Provides an in-memory stand-in for the Supabase table and auth APIs,
a Keysmith instance wired to it, and an HTTP client for the FastAPI app.
"""

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import httpx
import pytest
from postgrest.exceptions import APIError
from supabase_auth.errors import AuthApiError

from keysmith.api import create_app
from keysmith.client import Keysmith
from keysmith.config import KeysmithConfig
from keysmith.utils.supabase import KeysmithSupabaseClient

# Columns that must be unique per table, as in sql/001_initial_schema.sql
UNIQUE_CONSTRAINTS: Dict[str, List[Tuple[str, ...]]] = {
    "keysmith_users": [("username",), ("supabase_auth_id",)],
    "keysmith_permissions": [("user_id", "repository_id")],
    "keysmith_api_keys": [("key_hash",)],
}


class FakeQuery:
    """Chainable query builder evaluated against in-memory rows."""

    def __init__(self, store: "FakeSupabase", table: str) -> None:
        self.store = store
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List[Tuple[str, Any]] = []
        self.ordering: List[Tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._offset = 0

    def select(self, columns: str = "*") -> "FakeQuery":
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.ordering.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def offset(self, count: int) -> "FakeQuery":
        self._offset = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(
            row.get(column) is not None and str(row.get(column)) == str(value)
            for column, value in self.filters
        )

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.columns == "*":
            return copy.deepcopy(row)
        wanted = [column.strip() for column in self.columns.split(",")]
        return {column: copy.deepcopy(row.get(column)) for column in wanted}

    async def execute(self) -> SimpleNamespace:
        rows = self.store.tables.setdefault(self.table, [])
        self.store.calls.append((self.table, self.operation))

        if self.operation == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid4()))
            self.store.check_unique(self.table, row)
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=1)

        matched = [row for row in rows if self._matches(row)]

        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(matched), count=len(matched))

        if self.operation == "delete":
            self.store.tables[self.table] = [row for row in rows if row not in matched]
            return SimpleNamespace(data=copy.deepcopy(matched), count=len(matched))

        for column, desc in reversed(self.ordering):
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        matched = matched[self._offset:]
        if self._limit is not None:
            matched = matched[: self._limit]
        data = [self._project(row) for row in matched]
        return SimpleNamespace(data=data, count=len(data))


class FakeAuthAdmin:
    def __init__(self, auth: "FakeAuth") -> None:
        self.auth = auth

    async def create_user(self, attributes: Dict[str, Any]) -> SimpleNamespace:
        user = SimpleNamespace(id=uuid4(), email=attributes["email"])
        self.auth.created.append(attributes)
        return SimpleNamespace(user=user)

    async def delete_user(self, user_id: str, should_soft_delete: bool = False) -> None:
        self.auth.deleted.append(user_id)


class FakeAuth:
    """Stand-in for the Supabase auth client: issues and resolves tokens."""

    def __init__(self) -> None:
        self.admin = FakeAuthAdmin(self)
        self.created: List[Dict[str, Any]] = []
        self.deleted: List[str] = []
        self.tokens: Dict[str, UUID] = {}

    def issue_token(self, supabase_auth_id: UUID) -> str:
        token = f"token-{uuid4()}"
        self.tokens[token] = supabase_auth_id
        return token

    async def get_user(self, token: str) -> SimpleNamespace:
        if token not in self.tokens:
            raise AuthApiError("invalid JWT", 401, "bad_jwt")
        return SimpleNamespace(user=SimpleNamespace(id=self.tokens[token]))


class FakeSupabase:
    """In-memory replacement for supabase.AsyncClient."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str]] = []
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.get(name, [])

    def check_unique(self, table: str, row: Dict[str, Any]) -> None:
        for columns in UNIQUE_CONSTRAINTS.get(table, []):
            values = tuple(row.get(column) for column in columns)
            if None in values:
                continue
            for existing in self.tables.get(table, []):
                if tuple(existing.get(column) for column in columns) == values:
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint on {", ".join(columns)}',
                        "hint": None,
                        "details": None,
                    })


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client with chainable query builders."""
    client = AsyncMock()

    auth_client = AsyncMock()
    auth_client.admin = AsyncMock()
    client.auth = auth_client

    query_builders = {}

    def table_mock(table_name: str):
        if table_name not in query_builders:
            query_builder = Mock()
            for method in ("select", "insert", "update", "delete", "eq", "limit", "offset", "order"):
                setattr(query_builder, method, Mock(return_value=query_builder))
            query_builder.execute = AsyncMock(return_value=Mock(data=[], count=0))
            query_builders[table_name] = query_builder
        return query_builders[table_name]

    client.table = Mock(side_effect=table_mock)
    client._query_builders = query_builders

    return client


@pytest.fixture
def mock_keysmith_supabase_client(mock_supabase_client, keysmith_config):
    """Create a KeysmithSupabaseClient around the mock client."""
    return KeysmithSupabaseClient(config=keysmith_config, client=mock_supabase_client)


@pytest.fixture
def keysmith_config():
    """Create a test KeysmithConfig."""
    return KeysmithConfig(
        supabase_url="https://test.supabase.co",
        supabase_key="test-service-key-12345678901234567890",
        db_schema="public",
        debug=True,
    )


@pytest.fixture
def fake_supabase():
    """Create an empty in-memory Supabase."""
    return FakeSupabase()


@pytest.fixture
def keysmith(keysmith_config, fake_supabase):
    """Create a Keysmith instance backed by the in-memory Supabase."""
    client = KeysmithSupabaseClient(config=keysmith_config, client=fake_supabase)
    return Keysmith(config=keysmith_config, client=client)


@pytest.fixture
def make_user(keysmith):
    """Factory creating user accounts."""
    counter = iter(range(1, 1000))

    async def _make_user(username: Optional[str] = None, name: Optional[str] = None):
        return await keysmith.users.create(
            username or f"user{next(counter)}@example.com", name=name
        )

    return _make_user


@pytest.fixture
def make_repository(keysmith, make_user):
    """Factory creating repositories; the creator gets full access."""

    async def _make_repository(name: str = "Mobile app", created_by=None):
        if created_by is None:
            created_by = await make_user()
        return await keysmith.repositories.create(name, created_by=created_by.id)

    return _make_repository


@pytest.fixture
def auth_headers(fake_supabase):
    """Bearer headers for a user account."""

    def _auth_headers(user) -> Dict[str, str]:
        token = fake_supabase.auth.issue_token(user.supabase_auth_id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def app(keysmith):
    """FastAPI app serving the test Keysmith instance."""
    return create_app(keysmith=keysmith)


@pytest.fixture
async def http(app):
    """HTTP client bound to the app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

