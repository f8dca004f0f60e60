# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the Supabase client (FakeSupabase) that
#   understands the query builder calls the services make
# - Sample households, members and worship rows
# =============================================================================

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient

USER_ID = "11111111-1111-4111-8111-111111111111"
OTHER_USER_ID = "22222222-2222-4222-8222-222222222222"
HOUSEHOLD_ID = "33333333-3333-4333-8333-333333333333"
HEAD_ID = "44444444-4444-4444-8444-444444444444"
WIFE_ID = "55555555-5555-4555-8555-555555555555"
GRANDFATHER_ID = "66666666-6666-4666-8666-666666666666"


# =============================================================================
# Fake Supabase client
# =============================================================================

class FakeAPIError(Exception):
    """Mimics postgrest.APIError: carries .message and .code."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data: Any, count: int | None = None):
        self.data = data
        self.count = count


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


class FakeQuery:
    """Records a chained PostgREST query and runs it against FakeSupabase.tables."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.count_mode: str | None = None
        self.head = False
        self.filters: list[Callable[[dict], bool]] = []
        self.orders: list[tuple[str, bool]] = []
        self.bounds: tuple[int, int] | None = None
        self.max_rows: int | None = None
        self.want_single = False

    # --- actions -----------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None, head: bool = False):
        self.columns = columns
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    # --- filters -----------------------------------------------------------

    def _value(self, row: dict, column: str) -> Any:
        # "households.created_by" reads through an embedded !inner relation
        if "." not in column:
            return row.get(column)
        relation, field = column.split(".", 1)
        parent = self.db.find(relation, row.get("household_id"))
        return parent.get(field) if parent else None

    def eq(self, column, value):
        self.filters.append(lambda row: _text(self._value(row, column)) == _text(value))
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: _text(row.get(column)) != _text(value))
        return self

    def in_(self, column, values):
        allowed = {_text(v) for v in values}
        self.filters.append(lambda row: _text(row.get(column)) in allowed)
        return self

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        self.filters.append(lambda row: needle in (row.get(column) or "").lower())
        return self

    def gte(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None and str(row[column]) >= str(value)
        )
        return self

    def or_(self, expression):
        clauses = []
        for clause in expression.split(","):
            column, _op, pattern = clause.split(".", 2)
            clauses.append((column, pattern.strip("%").lower()))
        self.filters.append(
            lambda row: any(needle in (row.get(col) or "").lower() for col, needle in clauses)
        )
        return self

    # --- modifiers ---------------------------------------------------------

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def range(self, start, end):
        self.bounds = (start, end)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def single(self):
        self.want_single = True
        return self

    # --- execution ---------------------------------------------------------

    def _matching(self) -> list[dict]:
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def _embed(self, row: dict) -> dict:
        row = dict(row)
        if "family_member:family_members" in self.columns:
            member = self.db.find("family_members", row.get("family_member_id"))
            row["family_member"] = {"full_name": member["full_name"]} if member else None
        return row

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table, self.action))
        self.db.raise_if_failing(self.table, self.action)

        if self.action == "insert":
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.insert(self.table, record) for record in records]
            return FakeResponse([dict(r) for r in inserted])

        matching = self._matching()

        if self.action == "update":
            for row in matching:
                row.update(self.payload)
            return FakeResponse([dict(r) for r in matching])

        if self.action == "delete":
            rows = self.db.tables[self.table]
            self.db.tables[self.table] = [r for r in rows if r not in matching]
            return FakeResponse([dict(r) for r in matching])

        for column, desc in reversed(self.orders):
            matching = sorted(
                matching,
                key=lambda r: (r.get(column) is None, r.get(column)),
                reverse=desc,
            )
        total = len(matching)
        if self.bounds:
            matching = matching[self.bounds[0]:self.bounds[1] + 1]
        if self.max_rows is not None:
            matching = matching[:self.max_rows]
        if self.db.max_rows is not None:
            matching = matching[:self.db.max_rows]
        if self.head:
            matching = []

        data = [self._embed(r) for r in matching]
        count = total if self.count_mode == "exact" else None

        if self.want_single:
            if len(data) != 1:
                raise FakeAPIError(
                    "JSON object requested, multiple (or no) rows returned", code="PGRST116"
                )
            return FakeResponse(data[0], count)
        return FakeResponse(data, count)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.calls.append((f"rpc:{self.name}", "call"))
        self.db.rpc_calls.append((self.name, self.params))
        self.db.raise_if_failing(f"rpc:{self.name}", "call")
        handler = getattr(self.db, f"_rpc_{self.name}")
        return FakeResponse(handler(**self.params))


class FakeSupabase:
    """
    In-memory Supabase client.

    Tables are lists of dicts. The three database functions the services
    call (create_household_with_head, transfer_headship,
    delete_household_cascade) are emulated.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {
            "households": [],
            "family_members": [],
            "worship_history": [],
        }
        self.calls: list[tuple[str, str]] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.failures: dict[tuple[str, str], str] = {}
        # Server-side row cap like PostgREST max-rows; counts ignore it
        self.max_rows: int | None = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # --- client API --------------------------------------------------------

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRpc:
        return FakeRpc(self, name, params)

    # --- helpers for tests -------------------------------------------------

    def fail(self, table: str, action: str, message: str) -> None:
        """Make the next matching execute() raise FakeAPIError(message)."""
        self.failures[(table, action)] = message

    def raise_if_failing(self, table: str, action: str) -> None:
        message = self.failures.pop((table, action), None)
        if message:
            raise FakeAPIError(message)

    def insert(self, table: str, record: dict) -> dict:
        self._clock += timedelta(minutes=1)
        row = {"id": str(uuid4()), "created_at": self._clock.isoformat(), **record}
        self.tables.setdefault(table, []).append(row)
        return row

    def find(self, table: str, record_id: Any) -> dict | None:
        for row in self.tables.get(table, []):
            if str(row["id"]) == str(record_id):
                return row
        return None

    # --- emulated database functions ---------------------------------------

    def _rpc_create_household_with_head(self, household_data: dict, head_data: dict):
        household = self.insert("households", dict(household_data))
        head = self.insert("family_members", {**head_data, "household_id": household["id"]})
        household["head_of_household_id"] = head["id"]
        return {"household_id": household["id"], "head_id": head["id"]}

    def _rpc_transfer_headship(self, household_id: str, new_head_id: str):
        for member in self.tables["family_members"]:
            if member["household_id"] == household_id:
                member["is_head_of_household"] = member["id"] == new_head_id
        self.find("households", household_id)["head_of_household_id"] = new_head_id
        return None

    def _rpc_delete_household_cascade(self, p_household_id: str):
        for table in ("worship_history", "family_members"):
            self.tables[table] = [
                r for r in self.tables[table] if r.get("household_id") != p_household_id
            ]
        self.tables["households"] = [
            r for r in self.tables["households"] if r["id"] != p_household_id
        ]
        return None


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db(monkeypatch):
    """Empty FakeSupabase installed as the service-role client."""
    db = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", db)
    return db


@pytest.fixture
def sample_household():
    """A household owned by USER_ID, headed by HEAD_ID."""
    return {
        "id": HOUSEHOLD_ID,
        "household_name": "Gia đình Nguyễn Văn An",
        "address": "12 Lê Lợi",
        "province_code": "79",
        "ward_code": "26734",
        "phone": "0901234567",
        "notes": None,
        "head_of_household_id": HEAD_ID,
        "created_by": USER_ID,
        "created_at": "2024-01-15T10:00:00+00:00",
        "updated_at": "2024-01-15T10:00:00+00:00",
    }


@pytest.fixture
def sample_members():
    """Head, his wife and a deceased grandfather, in insertion order."""
    return [
        {
            "id": WIFE_ID,
            "household_id": HOUSEHOLD_ID,
            "full_name": "Trần Thị Bình",
            "dharma_name": "Diệu Hạnh",
            "birth_year": 1986,
            "gender": "nu",
            "relationship_role": "vo",
            "is_head_of_household": False,
            "is_alive": True,
            "hometown_address": "Thôn 3",
            "hometown_province_code": "48",
            "hometown_ward_code": "20194",
            "created_at": "2024-01-15T10:05:00+00:00",
        },
        {
            "id": HEAD_ID,
            "household_id": HOUSEHOLD_ID,
            "full_name": "Nguyễn Văn An",
            "dharma_name": None,
            "birth_year": 1984,
            "gender": "nam",
            "relationship_role": "chu_ho",
            "is_head_of_household": True,
            "is_alive": True,
            "hometown_address": "12 Lê Lợi",
            "hometown_province_code": "79",
            "hometown_ward_code": "26734",
            "created_at": "2024-01-15T10:00:00+00:00",
        },
        {
            "id": GRANDFATHER_ID,
            "household_id": HOUSEHOLD_ID,
            "full_name": "Nguyễn Văn Cường",
            "dharma_name": None,
            "birth_year": 1930,
            "gender": "nam",
            "relationship_role": "cha",
            "is_head_of_household": False,
            "is_alive": False,
            "hometown_address": None,
            "hometown_province_code": None,
            "hometown_ward_code": None,
            "created_at": "2024-01-15T09:00:00+00:00",
        },
    ]


@pytest.fixture
def seeded_db(fake_db, sample_household, sample_members):
    """FakeSupabase holding the sample household and its members."""
    fake_db.tables["households"].append(dict(sample_household))
    fake_db.tables["family_members"].extend(dict(m) for m in sample_members)
    return fake_db
