"""Double-submit cookie CSRF checks."""

from linkup.core.csrf import CSRF_HEADER

from tests.conftest import csrf_headers


class TestTokenIssuing:
    """Every response carries a fresh token."""

    def test_token_in_header_and_cookie(self, client):
        response = client.get("/auth/csrf")

        assert response.status_code == 204
        token = response.headers[CSRF_HEADER]
        assert len(token) == 32
        assert client.cookies.get("csrf_token") == token

    def test_token_rotates_on_each_response(self, client):
        first = client.get("/").headers[CSRF_HEADER]
        second = client.get("/").headers[CSRF_HEADER]
        assert first != second

    def test_header_is_exposed_to_browsers(self, client):
        response = client.get("/", headers={"Origin": "http://localhost:3000"})
        assert CSRF_HEADER.lower() in response.headers["access-control-expose-headers"].lower()


class TestValidation:
    """Mutating requests must echo the cookie in the X-CSRF-Token header."""

    def test_missing_header_is_forbidden(self, user_client):
        test_client, _ = user_client
        response = test_client.put("/users/me", json={"city": "Lyon"})

        assert response.status_code == 403
        assert response.json()["detail"] == "CSRF token missing"
        # the rejection hands out a token the client can retry with
        assert CSRF_HEADER in response.headers

    def test_mismatched_header_is_forbidden(self, user_client):
        test_client, _ = user_client
        test_client.get("/auth/csrf")
        response = test_client.put("/users/me", json={"city": "Lyon"}, headers={CSRF_HEADER: "0" * 32})

        assert response.status_code == 403
        assert response.json()["detail"] == "CSRF token invalid"

    def test_matching_token_passes(self, user_client):
        test_client, _ = user_client
        response = test_client.put("/users/me", json={"city": "Lyon"}, headers=csrf_headers(test_client))

        assert response.status_code == 200
        assert response.json()["city"] == "Lyon"

    def test_safe_methods_are_not_checked(self, client):
        assert client.get("/jobs").status_code == 200

    def test_login_and_signup_are_exempt(self, client):
        """Login must work before any token has been issued."""
        response = client.post("/auth/users/login", json={"email": "x@example.com", "password": "Passw0rd!"})
        assert response.status_code == 401
