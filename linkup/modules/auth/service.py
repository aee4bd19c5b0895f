from supabase import Client
from linkup.config import settings
from linkup.core.security import hash_password, verify_password, create_access_token, decode_token
from linkup.modules.auth.revocation import RevocationStore
from linkup.modules.auth.schemas import (
    LoginRequest, CompanyLoginRequest, UserSignupRequest, CompanySignupRequest,
    SessionResponse, SignupResponse, WhoAmIResponse
)
from linkup.modules.companies.service import CompanyService
from linkup.modules.users.service import UserService, normalize_email
from fastapi import HTTPException
from typing import Any, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

# Compared against when the account does not exist, so both failure paths cost one bcrypt check
_DUMMY_HASH = hash_password("linkup-dummy-password")


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)
        self.companies = CompanyService(supabase)
        self.revocations = RevocationStore(supabase)

    def signup_user(self, signup_data: UserSignupRequest) -> SignupResponse:
        """Register a candidate account"""
        user = self.users.create_user(
            email=signup_data.email,
            password_hash=hash_password(signup_data.password),
            firstname=signup_data.firstname,
            lastname=signup_data.lastname,
            phone=signup_data.phone,
            bio_pro=signup_data.bio_pro,
            city=signup_data.city,
            country=signup_data.country,
        )
        return SignupResponse(id=user.id_user, email=user.email, message="User registered successfully")

    def signup_company(self, signup_data: CompanySignupRequest) -> SignupResponse:
        """Register a company account"""
        company = self.companies.create_company(signup_data, hash_password(signup_data.password))
        return SignupResponse(
            id=company.id_company,
            email=company.recruiter_mail,
            message="Company registered successfully",
        )

    def login_user(self, login_data: LoginRequest) -> Tuple[str, SessionResponse]:
        """Check candidate/admin credentials and issue a session token"""
        row = self.users.find_by_email_for_auth(login_data.email)
        if not row:
            verify_password(login_data.password, _DUMMY_HASH)
            logger.info("Failed user login: unknown account")
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
        if not verify_password(login_data.password, row.get("password")):
            logger.info("Failed user login for id=%s", row["id_user"])
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

        role = row.get("role") or "user"
        token = create_access_token(row["id_user"], role, row["email"])
        name = " ".join(part for part in (row.get("firstname"), row.get("lastname")) if part)
        logger.info("User id=%s logged in (role=%s)", row["id_user"], role)
        return token, SessionResponse(id=row["id_user"], email=row["email"], role=role, name=name or None)

    def login_company(self, login_data: CompanyLoginRequest) -> Tuple[str, SessionResponse]:
        """Check company credentials and issue a session token"""
        row = self.companies.find_by_mail_for_auth(login_data.recruiter_mail)
        if not row:
            verify_password(login_data.password, _DUMMY_HASH)
            logger.info("Failed company login: unknown account")
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
        if not verify_password(login_data.password, row.get("password")):
            logger.info("Failed company login for id=%s", row["id_company"])
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

        token = create_access_token(row["id_company"], "company", row["recruiter_mail"])
        logger.info("Company id=%s logged in", row["id_company"])
        return token, SessionResponse(
            id=row["id_company"],
            email=row["recruiter_mail"],
            role="company",
            name=row.get("name"),
        )

    def whoami(self, identity: Dict[str, Any]) -> WhoAmIResponse:
        """Full profile behind the session, whatever the account type"""
        if identity["role"] == "company":
            profile = self.companies.get_company_by_id(identity["id"])
        else:
            profile = self.users.get_user_by_id(identity["id"])
        return WhoAmIResponse(role=identity["role"], profile=profile.model_dump(mode="json"))

    def logout(self, token: Optional[str]) -> bool:
        """Revoke the session token. Missing, invalid or already revoked tokens are a no-op."""
        if not token:
            return False
        payload = decode_token(token)
        if payload is None:
            return False
        if self.revocations.is_revoked(payload["jti"]):
            return False
        self.revocations.revoke(payload["jti"], float(payload["exp"]))
        logger.info("Revoked session jti=%s for %s id=%s", payload["jti"], payload.get("role"), payload["sub"])
        return True

    def ensure_default_admin(self) -> bool:
        """Create the configured admin account when it does not exist yet"""
        if not settings.create_default_admin:
            return False
        email = normalize_email(settings.default_admin_email)
        if self.users.find_by_email_for_auth(email):
            logger.info("Default admin already exists")
            return False
        self.users.create_user(
            email=email,
            password_hash=hash_password(settings.default_admin_password),
            firstname=settings.default_admin_firstname,
            lastname=settings.default_admin_lastname,
            role="admin",
            phone=settings.default_admin_phone,
        )
        logger.info("Default admin account created")
        return True
