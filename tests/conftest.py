import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT", "10000/minute")
os.environ.setdefault("JOB_DELAY_SECONDS", "0")

import pytest
from fastapi.testclient import TestClient

from hockey_cms.config import settings
from hockey_cms.database.supabase_client import get_service_supabase, get_supabase
from hockey_cms.main import app
from hockey_cms.modules.auth.service import clear_auth_cache
from hockey_cms.modules.generation.gemini_client import get_gemini_client
from tests.fakes import FakeGemini, FakeSupabase

EDITOR_TOKEN = "editor-token"
EDITOR_ID = "6f1d0c8e-1b7a-4c55-9a43-2f0e5d7b9c10"


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch):
    clear_auth_cache()
    monkeypatch.setattr(settings, "admin_auth_required", True)
    monkeypatch.setattr(settings, "job_delay_seconds", 0)
    monkeypatch.setattr(settings, "job_runner_token", None)
    yield
    clear_auth_cache()


@pytest.fixture
def db():
    fake = FakeSupabase()
    fake.users[EDITOR_TOKEN] = {"id": EDITOR_ID, "email": "editor@example.com"}
    return fake


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def client(db, gemini):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_gemini_client] = lambda: gemini
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {EDITOR_TOKEN}"}
