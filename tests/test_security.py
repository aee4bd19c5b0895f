"""Password hashing and session JWT helpers."""

from datetime import timedelta

from jose import jwt

from linkup.config import settings
from linkup.core.log_sanitizer import MASK, sanitize_for_logging
from linkup.core.security import create_access_token, decode_token, hash_password, verify_password


class TestPasswords:
    def test_hash_round_trip(self):
        hashed = hash_password("Passw0rd!")
        assert hashed != "Passw0rd!"
        assert verify_password("Passw0rd!", hashed)
        assert not verify_password("passw0rd!", hashed)

    def test_malformed_hash_never_matches(self):
        assert verify_password("Passw0rd!", "not-a-bcrypt-hash") is False
        assert verify_password("Passw0rd!", None) is False


class TestTokens:
    """Session JWT claims and verification."""

    def test_token_carries_identity_and_jti(self):
        payload = decode_token(create_access_token(42, "company", "hr@acme.io"))

        assert payload["sub"] == "42"
        assert payload["role"] == "company"
        assert payload["email"] == "hr@acme.io"
        assert payload["jti"]

    def test_each_token_gets_its_own_jti(self):
        first = decode_token(create_access_token(1, "user", "a@example.com"))
        second = decode_token(create_access_token(1, "user", "a@example.com"))
        assert first["jti"] != second["jti"]

    def test_expired_token_is_rejected(self):
        token = create_access_token(1, "user", "a@example.com", expires_delta=timedelta(seconds=-5))
        assert decode_token(token) is None

    def test_token_signed_with_other_secret_is_rejected(self):
        token = jwt.encode({"sub": "1", "jti": "x"}, "another-secret-of-sufficient-length!!", algorithm="HS256")
        assert decode_token(token) is None

    def test_token_without_jti_is_rejected(self):
        token = jwt.encode({"sub": "1"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        assert decode_token(token) is None


class TestLogSanitizer:
    def test_masks_credentials(self):
        cleaned = sanitize_for_logging({"email": "a@example.com", "password": "x", "nested": {"csrf_token": "y"}})
        assert cleaned == {"email": "a@example.com", "password": MASK, "nested": {"csrf_token": MASK}}

    def test_masks_jwts_inside_strings(self):
        token = create_access_token(1, "user", "a@example.com")
        assert token not in sanitize_for_logging(f"cookie was {token}")
