"""Maintenance script and startup configuration checks."""

from datetime import datetime, timedelta, timezone

import pytest

from linkup.config import settings
from linkup.config.settings import Settings
from linkup.database.supabase_client import SupabaseClient
from linkup.scripts import maintenance

from tests.fake_supabase import FakeSupabase


@pytest.fixture
def db(monkeypatch) -> FakeSupabase:
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_client", fake)
    return fake


class TestMaintenance:
    def test_purges_expired_tokens(self, db):
        past = (datetime.now(timezone.utc) - timedelta(days=2)).isoformat()
        db.insert("revoked_token", {"jti": "old", "expires_at": past})

        maintenance.main(["--skip-admin"])

        assert db.rows("revoked_token") == []

    def test_default_admin_disabled_by_default(self, db):
        assert maintenance.create_default_admin() is False
        assert db.rows("user_") == []

    def test_creates_default_admin_once(self, db, monkeypatch):
        monkeypatch.setattr(settings, "create_default_admin", True)
        monkeypatch.setattr(settings, "default_admin_password", "Adm1n-Passw0rd")

        assert maintenance.create_default_admin() is True
        assert maintenance.create_default_admin() is False

        admins = db.rows("user_")
        assert len(admins) == 1
        assert admins[0]["role"] == "admin"
        assert admins[0]["email"] == "admin@linkup.io"


class TestSettingsValidation:
    """Problems that must stop the server at startup."""

    def test_valid_configuration(self):
        assert settings.validate_required() == []

    def test_short_secret_and_bad_url(self):
        broken = Settings(supabase_url="example.supabase.co", supabase_service_role_key="key", jwt_secret="short")
        problems = broken.validate_required()
        assert any("SUPABASE_URL" in p for p in problems)
        assert any("JWT_SECRET" in p for p in problems)

    def test_default_admin_needs_password(self):
        broken = Settings(create_default_admin=True, default_admin_password=None)
        assert any("DEFAULT_ADMIN_PASSWORD" in p for p in broken.validate_required())

    def test_cors_origins_include_frontend_url(self):
        configured = Settings(cors_origins="http://a.test", frontend_url="https://app.test, https://www.app.test")
        assert configured.get_cors_origins_list() == ["http://a.test", "https://app.test", "https://www.app.test"]


class TestSupabaseClient:
    def test_missing_credentials_fail_on_first_use(self, monkeypatch):
        SupabaseClient.reset_client()
        monkeypatch.setattr(settings, "supabase_service_role_key", "")
        with pytest.raises(RuntimeError):
            SupabaseClient.get_client()
