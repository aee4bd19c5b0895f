from fastapi import APIRouter, Depends
from linkup.core.dependencies import require_role, get_current_identity, ROLE_USER, ROLE_ADMIN
from linkup.core.pagination import Pagination, get_pagination
from linkup.database.supabase_client import get_supabase
from linkup.modules.users.schemas import UserUpdate, UserResponse, PublicUserResponse
from linkup.modules.users.service import UserService
from supabase import Client
from typing import Any, Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: Dict = Depends(require_role(ROLE_USER, ROLE_ADMIN)),
    service: UserService = Depends(get_user_service)
):
    """Full profile of the logged-in candidate or admin"""
    return service.get_user_by_id(identity["id"])


@router.put("/me", response_model=UserResponse)
async def update_me(
    user_data: UserUpdate,
    identity: Dict = Depends(require_role(ROLE_USER, ROLE_ADMIN)),
    service: UserService = Depends(get_user_service)
):
    """Update own profile (whitelisted fields only)"""
    return service.update_user(identity["id"], user_data)


@router.get("")
async def list_users(
    search: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    identity: Dict = Depends(require_role(ROLE_ADMIN)),
    service: UserService = Depends(get_user_service)
) -> Dict[str, Any]:
    """Paginated user list (admin)"""
    return service.list_users(pagination, search=search)


@router.get("/{user_id}", response_model=PublicUserResponse)
async def get_user(
    user_id: int,
    identity: Dict = Depends(get_current_identity),
    service: UserService = Depends(get_user_service)
):
    """Public profile of a candidate, visible to any logged-in account"""
    return service.get_public_profile(user_id)
