# tests/conftest.py
# In-memory stand-ins for the Supabase client and the HTTP session

import os
import sys
from types import SimpleNamespace

# Add project root to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import requests

from session_repair.config import Config
from session_repair.registry import SessionRegistry
from session_repair.storage import SupabaseStorageManager
from session_repair.verifier import UrlVerifier

SUPABASE_URL = "https://proj.supabase.co"
BUCKET = "interview-videos"
PUBLIC_BASE = f"{SUPABASE_URL}/storage/v1/object/public/{BUCKET}"


def public_url(path):
    return f"{PUBLIC_BASE}/{path}"


class FakeQuery:
    """Chainable query builder over the fake tables"""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = None
        self.payload = None
        self.count_mode = None
        self.on_conflict = None
        self.filters = []

    def select(self, columns="*", count=None):
        self.op = "select"
        self.count_mode = count
        return self

    def update(self, values):
        self.op = "update"
        self.payload = dict(values)
        return self

    def upsert(self, row, on_conflict=None):
        self.op = "upsert"
        self.payload = dict(row)
        self.on_conflict = on_conflict
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        error = self.client.failures.get((self.table, self.op))
        if error is not None:
            raise error

        rows = self.client.tables.setdefault(self.table, [])

        if self.op == "select":
            data = [dict(row) for row in rows if self._matches(row)]
            count = len(data) if self.count_mode == "exact" else None
            return SimpleNamespace(data=data, count=count)

        self.client.writes.append((self.table, self.op, dict(self.payload), list(self.filters)))

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated, count=None)

        if self.op == "upsert":
            key = self.on_conflict
            for row in rows:
                if key and row.get(key) == self.payload.get(key):
                    row.update(self.payload)
                    return SimpleNamespace(data=[dict(row)], count=None)
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[dict(self.payload)], count=None)

        raise AssertionError(f"unexpected operation {self.op}")


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def list(self, path=None, options=None):
        self.storage.list_calls.append((self.name, path, options))
        if self.storage.list_error is not None:
            raise self.storage.list_error
        items = list(self.storage.folders.get(path, []))
        limit = (options or {}).get("limit")
        return items[:limit] if limit else items

    def get_public_url(self, path):
        return f"{SUPABASE_URL}/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.folders = {}
        self.list_calls = []
        self.list_error = None

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabaseClient:
    """Minimal Supabase client: tables, storage, and a log of writes"""

    def __init__(self):
        self.tables = {"interview_sessions": [], "conversions": []}
        self.storage = FakeStorage()
        self.failures = {}
        self.writes = []

    def table(self, name):
        return FakeQuery(self, name)

    # Helpers for test setup
    def add_session(self, id, user_email, status="processing", video_url=None):
        self.tables["interview_sessions"].append({
            "id": id,
            "user_email": user_email,
            "status": status,
            "video_url": video_url,
            "updated_at": "2024-01-01T00:00:00+00:00",
        })

    def add_converted(self, *names):
        folder = self.storage.folders.setdefault("converted", [])
        for name in names:
            folder.append({"name": name, "created_at": "2024-01-02T00:00:00Z"})

    def session(self, id):
        return next(row for row in self.tables["interview_sessions"] if row["id"] == id)

    def writes_for(self, table):
        return [w for w in self.writes if w[0] == table]


class FakeHttpSession:
    """Answers HEAD requests from a status map; unknown URLs return 200"""

    def __init__(self):
        self.statuses = {}
        self.errors = {}
        self.requests = []
        self.closed = False

    def head(self, url, timeout=None, allow_redirects=True):
        self.requests.append((url, timeout))
        if url in self.errors:
            raise self.errors[url]
        return SimpleNamespace(status_code=self.statuses.get(url, 200))

    def close(self):
        self.closed = True


@pytest.fixture
def supabase():
    return FakeSupabaseClient()


@pytest.fixture
def http():
    return FakeHttpSession()


@pytest.fixture
def config():
    return Config(
        load_env=False,
        SUPABASE_URL=SUPABASE_URL,
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
        STORAGE_BUCKET=BUCKET,
        SESSIONS_TABLE="interview_sessions",
        CONVERSIONS_TABLE="conversions",
        CONVERTED_FOLDER="converted",
        LIST_LIMIT="1000",
        HEAD_TIMEOUT=None,
        LOG_LEVEL="INFO",
    )


@pytest.fixture
def collaborators(supabase, http):
    """Real registry/storage/verifier wired to the fakes"""
    return {
        "registry": SessionRegistry(supabase),
        "storage": SupabaseStorageManager(bucket_name=BUCKET, client=supabase),
        "verifier": UrlVerifier(session=http),
    }


@pytest.fixture
def transport_error():
    return requests.exceptions.ConnectionError("connection refused")
