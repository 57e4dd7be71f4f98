"""
Shared pytest fixtures.

Key patterns:

1. Fake collaborators: an in-memory store with call counters and a failure
   switch, and an in-memory cache whose operations can be made to fail
2. DI Override: app.dependency_overrides injects the test gateway
3. Isolation: every test gets fresh fakes and a temp-dir LocalCache

Fixture Hierarchy:
    fake_store + memory_cache → service → test_app → client
"""
import os
import tempfile

import pytest

# Settings are read at import time; these must be set before any
# symptom_svc.core import.
TEST_API_KEY = "test-api-key-for-testing-purposes-12345678"
os.environ.setdefault("SYMPTOM_SVC_API_KEY", TEST_API_KEY)
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SYMPTOM_SVC_CACHE_DIR", tempfile.mkdtemp(prefix="symptom-cache-"))

from fastapi import FastAPI
from fastapi.testclient import TestClient

from symptom_svc.core import dependencies as deps
from symptom_svc.core.auth import verify_api_key
from symptom_svc.core.exceptions import CacheUnavailableError, RemoteUnavailableError, setup_exception_handlers
from symptom_svc.core.middleware import LoggingMiddleware
from symptom_svc.services import SymptomService
from symptom_svc.storage import LocalCache


class FakeStore:
    """In-memory stand-in for SupabaseClient."""

    def __init__(self):
        self.rows = []
        self.next_id = 1
        self.fail = False
        self.calls = {"select_by_user": 0, "insert": 0, "delete": 0, "probe": 0}

    def _check(self, op):
        self.calls[op] += 1
        if self.fail:
            raise RemoteUnavailableError(reason="store offline")

    @property
    def total_calls(self):
        return sum(self.calls.values())

    async def select_by_user(self, user_name):
        self._check("select_by_user")
        rows = [dict(r) for r in self.rows if r["user_name"] == user_name]
        return sorted(rows, key=lambda r: (r["created_at"], r["id"]), reverse=True)

    async def insert(self, record):
        self._check("insert")
        row = dict(record, id=self.next_id)
        self.next_id += 1
        self.rows.append(row)
        return dict(row)

    async def delete(self, record_id):
        self._check("delete")
        self.rows = [r for r in self.rows if str(r["id"]) != str(record_id)]

    async def probe(self):
        self._check("probe")


class MemoryCache:
    """In-memory stand-in for LocalCache with switchable failures."""

    def __init__(self):
        self.data = {}
        self.fail_get = False
        self.fail_set = False
        self.fail_remove = False

    def get(self, key):
        if self.fail_get:
            raise CacheUnavailableError(reason="storage disabled")
        return self.data.get(key)

    def set(self, key, value):
        if self.fail_set:
            raise CacheUnavailableError(reason="quota exceeded")
        self.data[key] = value

    def remove(self, key):
        if self.fail_remove:
            raise CacheUnavailableError(reason="storage disabled")
        self.data.pop(key, None)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def memory_cache():
    return MemoryCache()


@pytest.fixture
def local_cache(tmp_path):
    """A LocalCache in a fresh temp directory."""
    return LocalCache(db_path=str(tmp_path / "cache" / "local_cache.db"))


@pytest.fixture
def service(fake_store, memory_cache):
    return SymptomService(store_client=fake_store, local_cache=memory_cache)


@pytest.fixture
def draft():
    """A form draft as a browser would post it: numbers as text."""
    return {
        "date": "2025-01-01",
        "time": "10:00",
        "activity": "climbing stairs",
        "heart_rate": "140",
        "dizziness": "",
        "ecg_taken": "true",
        "notes": None,
    }


@pytest.fixture
def test_app(service):
    """
    FastAPI app with the real routers and the test gateway injected.

    The production lifespan is not attached, so nothing probes the network.
    """
    from symptom_svc.api.routers import health_router, session_router, symptoms_router

    app = FastAPI(title="Symptom Tracker API Test")
    setup_exception_handlers(app)
    app.add_middleware(LoggingMiddleware)
    app.state.symptom_service = service

    app.dependency_overrides[deps.get_symptom_service] = lambda: service

    async def skip_auth():
        return TEST_API_KEY
    app.dependency_overrides[verify_api_key] = skip_auth

    app.include_router(health_router)
    app.include_router(symptoms_router)
    app.include_router(session_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    return TestClient(test_app)
