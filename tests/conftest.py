"""Shared fixtures: test settings, in-memory Supabase, API clients and seeded accounts."""

import os

os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256-signing")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CSRF_ENABLED", "true")

from typing import Any, Callable, Dict  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from linkup.core.csrf import CSRF_HEADER  # noqa: E402
from linkup.core.security import hash_password  # noqa: E402
from linkup.database.supabase_client import get_supabase  # noqa: E402
from linkup.main import app  # noqa: E402
from linkup.modules.auth.revocation import clear_revocation_cache  # noqa: E402
from tests.fake_supabase import FakeSupabase  # noqa: E402

PASSWORD = "Passw0rd!"


@pytest.fixture
def fake_db() -> FakeSupabase:
    """In-memory database wired into every route."""
    db = FakeSupabase()
    app.dependency_overrides[get_supabase] = lambda: db
    clear_revocation_cache()
    yield db
    app.dependency_overrides.pop(get_supabase, None)
    clear_revocation_cache()


@pytest.fixture
def make_client(fake_db: FakeSupabase) -> Callable[[], TestClient]:
    """Factory for independent clients, each with its own cookie jar."""
    clients = []

    def factory() -> TestClient:
        test_client = TestClient(app)
        clients.append(test_client)
        return test_client

    yield factory
    for test_client in clients:
        test_client.close()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


def csrf_headers(test_client: TestClient) -> Dict[str, str]:
    """Fetch a fresh CSRF token; the matching cookie lands in the client's jar."""
    response = test_client.get("/auth/csrf")
    return {CSRF_HEADER: response.headers[CSRF_HEADER]}


def send(test_client: TestClient, method: str, url: str, **kwargs):
    """Mutating request carrying a valid CSRF token."""
    headers = {**csrf_headers(test_client), **kwargs.pop("headers", {})}
    return test_client.request(method, url, headers=headers, **kwargs)


def login_user(test_client: TestClient, email: str, password: str = PASSWORD):
    return test_client.post("/auth/users/login", json={"email": email, "password": password})


def login_company(test_client: TestClient, recruiter_mail: str, password: str = PASSWORD):
    return test_client.post(
        "/auth/companies/login", json={"recruiter_mail": recruiter_mail, "password": password}
    )


@pytest.fixture
def seed_user(fake_db: FakeSupabase) -> Callable[..., Dict[str, Any]]:
    """Insert a user_ row with a known password."""

    def factory(email: str = "alice@example.com", role: str = "user", **fields) -> Dict[str, Any]:
        row = {
            "email": email.lower(),
            "password": hash_password(PASSWORD),
            "firstname": fields.pop("firstname", "Alice"),
            "lastname": fields.pop("lastname", "Martin"),
            "phone": "",
            "role": role,
        }
        row.update(fields)
        return fake_db.insert("user_", row)[0]

    return factory


@pytest.fixture
def seed_company(fake_db: FakeSupabase) -> Callable[..., Dict[str, Any]]:
    """Insert a company row with a known password."""

    def factory(recruiter_mail: str = "hr@acme.io", name: str = "Acme", **fields) -> Dict[str, Any]:
        row = {
            "name": name,
            "description": "We build rockets and software.",
            "recruiter_mail": recruiter_mail.lower(),
            "password": hash_password(PASSWORD),
            "industry": "Tech",
            "city": "Paris",
        }
        row.update(fields)
        return fake_db.insert("company", row)[0]

    return factory


@pytest.fixture
def seed_job(fake_db: FakeSupabase) -> Callable[..., Dict[str, Any]]:
    def factory(id_company: int, title: str = "Python Developer", **fields) -> Dict[str, Any]:
        row = {
            "id_company": id_company,
            "title": title,
            "description": "Build APIs in python with docker and sql",
            "location": "Paris",
            "contract_type": "CDI",
            "industry": "Tech",
            "experience": "senior",
            "published_at": fields.pop("published_at", "2026-01-10T09:00:00+00:00"),
        }
        row.update(fields)
        return fake_db.insert("job_offer", row)[0]

    return factory


@pytest.fixture
def user_client(make_client, seed_user):
    """Logged-in candidate client and its user row."""
    user = seed_user()
    test_client = make_client()
    assert login_user(test_client, user["email"]).status_code == 200
    return test_client, user


@pytest.fixture
def company_client(make_client, seed_company):
    """Logged-in company client and its company row."""
    company = seed_company()
    test_client = make_client()
    assert login_company(test_client, company["recruiter_mail"]).status_code == 200
    return test_client, company


@pytest.fixture
def admin_client(make_client, seed_user):
    """Logged-in admin client and its user row."""
    admin = seed_user(email="admin@linkup.io", role="admin", firstname="Ada")
    test_client = make_client()
    assert login_user(test_client, admin["email"]).status_code == 200
    return test_client, admin
