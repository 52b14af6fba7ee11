"""Pytest configuration and fixtures."""

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.config.settings import settings
from app.core.llm_client import get_llm
from app.database.supabase_client import get_service_supabase, get_session_supabase, get_supabase
from app.main import app, limiter
from app.modules.auth.service import clear_auth_cache
from app.modules.food.analyzer import get_food_analyzer
from app.modules.food.schemas import AnalysisResult

SUPABASE_TEST_URL = "https://test.supabase.co"


class FakeResult:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Chainable stand-in for the postgrest query builder."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_to = None

    def select(self, *args, **kwargs):
        self.action = "select"
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

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_to = count
        return self

    def execute(self):
        if self.db.fail_tables and self.table in self.db.fail_tables:
            raise RuntimeError(f"connection to {self.table} failed")
        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            rows.extend(copy.deepcopy(new_rows))
            return FakeResult(copy.deepcopy(new_rows))

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.action == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResult(copy.deepcopy(matched))

        if self.action == "delete":
            self.db.tables[self.table] = [row for row in rows if row not in matched]
            return FakeResult(copy.deepcopy(matched))

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self.limit_to is not None:
            matched = matched[:self.limit_to]
        return FakeResult(copy.deepcopy(matched))


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, content, file_options=None):
        self.storage.objects[(self.name, path)] = content
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"{SUPABASE_TEST_URL}/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
        return [{"name": p} for p in paths]


class FakeStorage:
    def __init__(self):
        self.objects: Dict[tuple, bytes] = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuth:
    """
    Supabase Auth double: tokens map to users, sign-ups are remembered.

    Signing in writes the session token into the owning client's headers,
    as supabase-py does on SIGNED_IN.
    """

    def __init__(self, owner: "FakeSupabase", tokens=None, accounts=None):
        self.owner = owner
        self.tokens: Dict[str, SimpleNamespace] = {} if tokens is None else tokens
        self.accounts: Dict[str, Dict[str, str]] = {} if accounts is None else accounts

    def add_token(self, token: str, user_id: str, email: str):
        self.tokens[token] = SimpleNamespace(id=user_id, email=email)

    def get_user(self, jwt=None):
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.accounts:
            raise Exception("User already registered")
        user_id = f"auth-{len(self.accounts) + 1}"
        self.accounts[email] = {"id": user_id, "password": credentials["password"]}
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email), session=None)

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if not account or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = f"token-{account['id']}"
        self.add_token(token, account["id"], credentials["email"])
        self.owner.headers["Authorization"] = f"Bearer {token}"
        return SimpleNamespace(
            user=SimpleNamespace(id=account["id"], email=credentials["email"]),
            session=SimpleNamespace(access_token=token),
        )


class FakeSupabase:
    """In-memory Supabase client covering the calls the services make."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.storage = FakeStorage()
        self.auth = FakeAuth(self)
        self.fail_tables = set()
        self.headers: Dict[str, str] = {"Authorization": "Bearer anon-key"}
        self.sessions: List["FakeSupabase"] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.get(name, [])

    def seed(self, name: str, *rows: Dict[str, Any]):
        self.tables.setdefault(name, []).extend(copy.deepcopy(list(rows)))

    def session_client(self) -> "FakeSupabase":
        """Separate client sharing this project's auth users, like a fresh create_client"""
        session = FakeSupabase()
        session.auth = FakeAuth(session, self.auth.tokens, self.auth.accounts)
        self.sessions.append(session)
        return session


class StubAnalyzer:
    """Food analyzer replacement returning a fixed result."""

    def __init__(self):
        self.result = AnalysisResult(
            food_name="Caesar Salad",
            ingredients=["romaine lettuce", "parmesan cheese", "croutons", "eggs"],
            is_safe=False,
            unsafe_reasons=["Contains eggs which you're allergic to"],
            description="A classic Caesar salad.",
            safety_reason="This food may not be safe: Contains eggs which you're allergic to. A classic Caesar salad.",
        )
        self.error: Optional[Exception] = None
        self.calls: List[Dict[str, Any]] = []

    def analyze(self, image_bytes, profile, model=None, content_type="image/jpeg"):
        self.calls.append({
            "image_bytes": image_bytes,
            "profile": profile,
            "model": model,
            "content_type": content_type,
        })
        if self.error is not None:
            raise self.error
        return self.result


def completion(content: Optional[str]):
    """Shape of an openai chat completion with a single choice"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    supabase = FakeSupabase()
    supabase.auth.add_token("token-alice", "user-alice", "alice@example.com")
    supabase.auth.add_token("token-bob", "user-bob", "bob@example.com")
    return supabase


@pytest.fixture
def analyzer() -> StubAnalyzer:
    return StubAnalyzer()


@pytest.fixture
def fake_llm() -> MagicMock:
    llm = MagicMock()
    llm.chat.completions.create.return_value = completion("Yes, that is fine to eat.")
    return llm


@pytest.fixture
def client(fake_supabase, analyzer, fake_llm, monkeypatch):
    """
    TestClient with Supabase, the analyzer and the LLM replaced.

    Background tasks run before TestClient returns, so async uploads are
    fully analysed by the time the response is available.
    """
    monkeypatch.setattr(settings, "s3_bucket_name", None)
    monkeypatch.setattr(settings, "scan_processing_mode", "async")
    monkeypatch.setattr(settings, "allow_dev_auth_fallback", False)
    clear_auth_cache()
    limiter.reset()
    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_service_supabase] = lambda: fake_supabase
    app.dependency_overrides[get_session_supabase] = fake_supabase.session_client
    app.dependency_overrides[get_food_analyzer] = lambda: analyzer
    app.dependency_overrides[get_llm] = lambda: fake_llm
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def alice():
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob():
    return {"Authorization": "Bearer token-bob"}


@pytest.fixture
def alice_profile(client, alice):
    """Alice with an egg and peanut allergy profile"""
    response = client.put(
        "/api/dietary-profile/user-alice",
        json={"allergies": ["eggs", "peanuts"], "dietaryPreferences": [], "healthRestrictions": []},
        headers=alice,
    )
    assert response.status_code == 200
    return response.json()
