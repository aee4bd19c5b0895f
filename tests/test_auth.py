"""
API tests for sign-up, login, identity and logout.

The session is carried by the httpOnly "token" cookie set at login.
"""

import pytest

from linkup.config import settings
from linkup.core.rate_limit import limiter

from tests.conftest import PASSWORD, login_company, login_user, send


def _set_cookie_headers(response):
    return [value.lower() for value in response.headers.get_list("set-cookie")]


class TestUserSignup:
    """Candidate account creation."""

    def test_signup_creates_account(self, client, fake_db):
        """Should register the user with a hashed password and lower-cased email."""
        response = client.post("/auth/users/signup", json={
            "email": "Bob@Example.com",
            "password": PASSWORD,
            "firstname": "Bob",
            "lastname": "Durand",
        })

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "bob@example.com"
        stored = fake_db.rows("user_")[0]
        assert stored["password"] != PASSWORD
        assert stored["password"].startswith("$2")
        assert stored["role"] == "user"

    def test_signup_duplicate_email_conflicts(self, client, seed_user):
        """Should answer 409 when the email is taken."""
        seed_user(email="bob@example.com")
        response = client.post("/auth/users/signup", json={
            "email": "bob@example.com",
            "password": PASSWORD,
            "firstname": "Bob",
            "lastname": "Durand",
        })
        assert response.status_code == 409

    def test_signup_rejects_weak_password(self, client):
        """Should refuse passwords without digits or special characters."""
        response = client.post("/auth/users/signup", json={
            "email": "bob@example.com",
            "password": "password",
            "firstname": "Bob",
            "lastname": "Durand",
        })
        assert response.status_code == 422

    def test_signup_rejects_password_over_bcrypt_limit(self, client, fake_db):
        """Should answer 422, not 500, when the password exceeds 72 bytes."""
        response = client.post("/auth/users/signup", json={
            "email": "bob@example.com",
            "password": "Aa1!" + "x" * 80,
            "firstname": "Bob",
            "lastname": "Durand",
        })
        assert response.status_code == 422
        assert fake_db.rows("user_") == []

    def test_signup_limit_counts_bytes(self, client):
        """Multi-byte characters count for their UTF-8 length."""
        response = client.post("/auth/users/signup", json={
            "email": "bob@example.com",
            "password": "Aa1!" + "é" * 35,
            "firstname": "Bob",
            "lastname": "Durand",
        })
        assert response.status_code == 422

    def test_password_of_exactly_72_bytes_can_log_in(self, client):
        password = "Aa1!" + "x" * 68
        response = client.post("/auth/users/signup", json={
            "email": "bob@example.com",
            "password": password,
            "firstname": "Bob",
            "lastname": "Durand",
        })
        assert response.status_code == 201
        assert login_user(client, "bob@example.com", password).status_code == 200


class TestCompanySignup:
    """Company account creation."""

    def test_signup_creates_company(self, client, fake_db):
        response = client.post("/auth/companies/signup", json={
            "name": "Globex",
            "description": "Industrial automation company",
            "recruiter_mail": "jobs@globex.com",
            "password": PASSWORD,
        })

        assert response.status_code == 201
        assert response.json()["email"] == "jobs@globex.com"
        assert fake_db.rows("company")[0]["industry"] == "Technology"

    def test_company_name_is_unique_ignoring_case(self, client, seed_company):
        """Should answer 409 for a name differing only by case."""
        seed_company(name="Globex")
        response = client.post("/auth/companies/signup", json={
            "name": "GLOBEX",
            "description": "Industrial automation company",
            "recruiter_mail": "other@globex.com",
            "password": PASSWORD,
        })
        assert response.status_code == 409


class TestLogin:
    """Credential checks and session cookie."""

    def test_user_login_sets_http_only_cookie(self, client, seed_user):
        """Should issue the session JWT as an httpOnly cookie, never in the body."""
        user = seed_user()
        response = login_user(client, user["email"])

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "user"
        assert body["id"] == user["id_user"]
        assert "token" not in body
        session_cookies = [c for c in _set_cookie_headers(response) if c.startswith("token=")]
        assert session_cookies and "httponly" in session_cookies[0]
        assert "samesite=lax" in session_cookies[0]

    def test_wrong_password_is_rejected_without_cookie(self, client, seed_user):
        user = seed_user()
        response = login_user(client, user["email"], "Wr0ngPass!")

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"
        assert not [c for c in _set_cookie_headers(response) if c.startswith("token=")]

    def test_unknown_account_gets_same_error(self, client):
        """Should not reveal whether the account exists."""
        response = login_user(client, "nobody@example.com")
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_email_lookup_ignores_case(self, client, seed_user, seed_company):
        """Stored addresses are lower-case; the lookup itself is an exact match."""
        user = seed_user()
        company = seed_company()

        assert login_user(client, user["email"].upper()).status_code == 200
        assert login_company(client, company["recruiter_mail"].upper()).status_code == 200

    def test_admin_login_reports_admin_role(self, client, seed_user):
        admin = seed_user(email="root@linkup.io", role="admin")
        response = login_user(client, admin["email"])
        assert response.json()["role"] == "admin"

    def test_company_login(self, client, seed_company):
        company = seed_company()
        response = login_company(client, company["recruiter_mail"])

        assert response.status_code == 200
        assert response.json()["role"] == "company"
        assert response.json()["name"] == "Acme"


class TestWhoAmI:
    """Identity behind the session cookie."""

    def test_requires_session(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401

    def test_returns_user_profile_without_password(self, user_client):
        test_client, user = user_client
        response = test_client.get("/auth/me")

        assert response.status_code == 200
        body = response.json()
        assert body["role"] == "user"
        assert body["profile"]["email"] == user["email"]
        assert "password" not in body["profile"]

    def test_returns_company_profile(self, company_client):
        test_client, company = company_client
        body = test_client.get("/auth/me").json()
        assert body["role"] == "company"
        assert body["profile"]["id_company"] == company["id_company"]

    def test_forged_token_is_rejected(self, client):
        client.cookies.set("token", "not-a-jwt")
        response = client.get("/auth/me")
        assert response.status_code == 401


class TestLogout:
    """Server-side revocation on logout."""

    def test_logout_revokes_token(self, user_client, fake_db):
        """A token presented again after logout must be refused."""
        test_client, _ = user_client
        token = test_client.cookies.get("token")

        response = send(test_client, "POST", "/auth/users/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"
        assert len(fake_db.rows("revoked_token")) == 1
        assert test_client.get("/auth/me").status_code == 401

        test_client.cookies.set("token", token)
        replay = test_client.get("/auth/me")
        assert replay.status_code == 401
        assert replay.json()["detail"] == "Token revoked"

    def test_logout_without_session_succeeds(self, client, fake_db):
        response = send(client, "POST", "/auth/companies/logout")
        assert response.status_code == 200
        assert fake_db.rows("revoked_token") == []

    def test_logout_twice_revokes_once(self, company_client, fake_db):
        test_client, _ = company_client
        token = test_client.cookies.get("token")
        send(test_client, "POST", "/auth/companies/logout")
        test_client.cookies.set("token", token)

        response = send(test_client, "POST", "/auth/companies/logout")

        assert response.status_code == 200
        assert len(fake_db.rows("revoked_token")) == 1

    def test_logout_requires_csrf_token(self, user_client):
        test_client, _ = user_client
        response = test_client.post("/auth/users/logout")
        assert response.status_code == 403


class TestAuthRateLimit:
    """Login and signup are throttled per client address."""

    @pytest.fixture
    def throttled(self, monkeypatch):
        monkeypatch.setattr(limiter, "enabled", True)
        monkeypatch.setattr(settings, "auth_rate_limit", "2/minute")
        limiter.reset()
        yield
        limiter.reset()

    def test_login_throttled_after_limit(self, throttled, client, seed_user):
        user = seed_user()

        statuses = [login_user(client, user["email"], "Wr0ngPass!").status_code for _ in range(4)]

        assert statuses == [401, 401, 429, 429]

    def test_limit_applies_per_route(self, throttled, client, seed_user, seed_company):
        user = seed_user()
        company = seed_company()
        for _ in range(2):
            login_user(client, user["email"], "Wr0ngPass!")

        assert login_user(client, user["email"]).status_code == 429
        assert login_company(client, company["recruiter_mail"]).status_code == 200
