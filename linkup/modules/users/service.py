from supabase import Client
from linkup.core.pagination import Pagination, paginated_response, sanitize_search_param
from linkup.core.security import hash_password
from linkup.core.supabase_errors import to_http_exception
from linkup.modules.users.models import (
    USER_TABLE, USER_PUBLIC_COLUMNS, USER_AUTH_COLUMNS, USER_UPDATABLE_FIELDS
)
from linkup.modules.users.schemas import UserUpdate, UserResponse, PublicUserResponse
from typing import Any, Dict, List, Optional, Iterable
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return str(email).strip().lower()


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_one(self, column: str, value: Any, columns: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(USER_TABLE)\
            .select(columns)\
            .eq(column, value)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def find_by_email_for_auth(self, email: str) -> Optional[Dict[str, Any]]:
        """User row including the password hash, for credential checks only"""
        try:
            return self._fetch_one("email", normalize_email(email), USER_AUTH_COLUMNS)
        except Exception as e:
            logger.error(f"[find_by_email_for_auth] error: {e}")
            raise HTTPException(status_code=500, detail="Authentication failed")

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            return self._fetch_one("email", normalize_email(email), USER_PUBLIC_COLUMNS)
        except Exception as e:
            logger.error(f"[find_by_email] error: {e}")
            return None

    def get_user_by_id(self, user_id: int) -> UserResponse:
        """Get user profile by ID"""
        try:
            row = self._fetch_one("id_user", user_id, USER_PUBLIC_COLUMNS)
        except Exception as e:
            raise to_http_exception(e, "Fetching user")
        if not row:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**row)

    def get_public_profile(self, user_id: int) -> PublicUserResponse:
        return PublicUserResponse(**self.get_user_by_id(user_id).model_dump())

    def create_user(
        self,
        email: str,
        password_hash: str,
        firstname: str,
        lastname: str,
        role: str = "user",
        phone: Optional[str] = None,
        bio_pro: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
    ) -> UserResponse:
        """Insert a user row; the caller hashes the password"""
        normalized = normalize_email(email)
        if self.find_by_email(normalized):
            raise HTTPException(status_code=409, detail="An account with this email already exists")
        insert_data = {
            "email": normalized,
            "password": password_hash,
            "firstname": firstname or "",
            "lastname": lastname or "",
            "role": role,
            "phone": phone or "",
            "bio_pro": bio_pro,
            "city": city,
            "country": country,
        }
        try:
            result = self.supabase.table(USER_TABLE).insert(insert_data).execute()
        except Exception as e:
            raise to_http_exception(e, "Creating user")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create user")
        row = {k: v for k, v in result.data[0].items() if k != "password"}
        logger.info("Created user id=%s role=%s", row.get("id_user"), role)
        return UserResponse(**row)

    def list_users(
        self,
        pagination: Pagination,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Paginated user list, searchable on first name, last name and email"""
        try:
            query = self.supabase.table(USER_TABLE).select(USER_PUBLIC_COLUMNS, count="exact")
            term = sanitize_search_param(search)
            if term:
                query = query.or_(
                    f"firstname.ilike.%{term}%,lastname.ilike.%{term}%,email.ilike.%{term}%"
                )
            if role:
                query = query.eq("role", role)
            result = query.order("created_at", desc=True)\
                .range(pagination.offset, pagination.range_end)\
                .execute()
            items = [UserResponse(**row).model_dump() for row in result.data or []]
            return paginated_response(items, pagination, result.count)
        except HTTPException:
            raise
        except Exception as e:
            raise to_http_exception(e, "Listing users")

    def list_candidates(self, limit: int = 100) -> List[Dict[str, Any]]:
        """Candidate profiles (role user) used by the matching service"""
        try:
            result = self.supabase.table(USER_TABLE)\
                .select(USER_PUBLIC_COLUMNS)\
                .eq("role", "user")\
                .limit(limit)\
                .execute()
            return result.data or []
        except Exception as e:
            raise to_http_exception(e, "Listing candidates")

    def update_user(
        self,
        user_id: int,
        user_data: UserUpdate,
        allowed_fields: Iterable[str] = USER_UPDATABLE_FIELDS,
    ) -> UserResponse:
        """Update whitelisted profile fields; an empty update returns the current profile"""
        allowed = set(allowed_fields)
        update_data = {
            key: value
            for key, value in user_data.model_dump(exclude_unset=True).items()
            if key in allowed and value is not None
        }
        if not update_data:
            return self.get_user_by_id(user_id)
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(USER_TABLE)\
                .update(update_data)\
                .eq("id_user", user_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Updating user")
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**{k: v for k, v in result.data[0].items() if k != "password"})

    def change_password(self, user_id: int, new_password: str) -> bool:
        try:
            result = self.supabase.table(USER_TABLE)\
                .update({
                    "password": hash_password(new_password),
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id_user", user_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Changing password")
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return True

    def delete_user(self, user_id: int) -> bool:
        """Delete user"""
        try:
            result = self.supabase.table(USER_TABLE)\
                .delete()\
                .eq("id_user", user_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Deleting user")
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return True
