from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List

JWT_SECRET_MIN_LENGTH = 32


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_anon_key: Optional[str] = None

    # JWT / session cookie
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = 7
    auth_cookie_name: str = "token"
    csrf_cookie_name: str = "csrf_token"
    csrf_enabled: bool = True
    bcrypt_rounds: int = 10

    # Default admin created at startup
    create_default_admin: bool = False
    default_admin_email: str = "admin@linkup.io"
    default_admin_password: Optional[str] = None
    default_admin_firstname: str = "Admin"
    default_admin_lastname: str = "User"
    default_admin_phone: str = "0123456789"

    # App
    app_name: str = "linkup-backend"
    debug: bool = False
    environment: str = "development"  # development | test | production
    port: int = 3000
    log_level: str = "INFO"
    frontend_url: Optional[str] = None
    cors_origins: str = "http://localhost:3000,http://localhost:3001,http://127.0.0.1:3000,http://127.0.0.1:3001"
    cors_origin_regex: Optional[str] = r"https://.*\.vercel\.app"
    rate_limit: str = "1000/15minutes"  # slowapi format
    auth_rate_limit: str = "100/15minutes"
    rate_limit_enabled: bool = True
    max_request_size: int = 2 * 1024 * 1024

    # Client side (Python port of the frontend API client)
    api_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("linkup_api_url", "next_public_api_url", "api_url"),
    )
    auth_check_timeout: float = 10.0
    request_timeout: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def jwt_max_age_seconds(self) -> int:
        return self.jwt_expires_days * 24 * 60 * 60

    def get_cors_origins_list(self) -> List[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        if self.frontend_url:
            origins.extend(u.strip() for u in self.frontend_url.split(",") if u.strip())
        return origins

    def validate_required(self) -> List[str]:
        """Return the list of configuration problems that must stop the server."""
        problems = []
        if not self.supabase_url.startswith(("http://", "https://")):
            problems.append("SUPABASE_URL must be a valid URL")
        if not self.supabase_service_role_key:
            problems.append("SUPABASE_SERVICE_ROLE_KEY is required")
        if len(self.jwt_secret) < JWT_SECRET_MIN_LENGTH:
            problems.append(f"JWT_SECRET must be at least {JWT_SECRET_MIN_LENGTH} characters")
        if self.environment not in ("development", "test", "production"):
            problems.append("ENVIRONMENT must be one of development, test, production")
        if self.create_default_admin and (not self.default_admin_password or len(self.default_admin_password) < 8):
            problems.append("DEFAULT_ADMIN_PASSWORD (8+ characters) is required when CREATE_DEFAULT_ADMIN=true")
        return problems

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
