from fastapi import APIRouter, Depends, HTTPException
from linkup.core.dependencies import require_role, ROLE_USER, ROLE_COMPANY, ROLE_ADMIN
from linkup.database.supabase_client import get_supabase
from linkup.modules.applications.schemas import ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse
from linkup.modules.applications.service import ApplicationService
from supabase import Client
from typing import Any, Dict, List, Optional

router = APIRouter(prefix="/applications", tags=["applications"])


def get_application_service(supabase: Client = Depends(get_supabase)) -> ApplicationService:
    return ApplicationService(supabase)


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply(
    application_data: ApplicationCreate,
    identity: Dict = Depends(require_role(ROLE_USER)),
    service: ApplicationService = Depends(get_application_service)
):
    """Apply to a job offer as the logged-in candidate"""
    return service.create_application(identity["id"], application_data)


@router.get("/my")
async def my_applications(
    identity: Dict = Depends(require_role(ROLE_USER)),
    service: ApplicationService = Depends(get_application_service)
) -> List[Dict[str, Any]]:
    return service.list_for_user(identity["id"])


@router.get("/company")
async def company_applications(
    status: Optional[str] = None,
    job_id: Optional[int] = None,
    identity: Dict = Depends(require_role(ROLE_COMPANY)),
    service: ApplicationService = Depends(get_application_service)
) -> List[Dict[str, Any]]:
    """Applications received by the logged-in company"""
    return service.list_for_company(identity["id"], status=status, job_id=job_id)


@router.get("/stats")
async def application_stats(
    identity: Dict = Depends(require_role(ROLE_USER, ROLE_COMPANY, ROLE_ADMIN)),
    service: ApplicationService = Depends(get_application_service)
) -> Dict[str, int]:
    """Application counts scoped to the caller (own applications, own job offers, or everything for admins)"""
    if identity["role"] == ROLE_COMPANY:
        return service.get_stats(company_id=identity["id"])
    if identity["role"] == ROLE_USER:
        return service.get_stats(user_id=identity["id"])
    return service.get_stats()


@router.put("/{job_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    job_id: int,
    status_data: ApplicationStatusUpdate,
    identity: Dict = Depends(require_role(ROLE_COMPANY, ROLE_ADMIN)),
    service: ApplicationService = Depends(get_application_service)
):
    """Move a candidate's application through the hiring pipeline"""
    if status_data.id_user is None:
        raise HTTPException(status_code=400, detail="id_user is required")
    return service.update_status(
        status_data.id_user, job_id, status_data.status, status_data.notes, identity=identity
    )


@router.delete("/{job_id}")
async def withdraw_application(
    job_id: int,
    identity: Dict = Depends(require_role(ROLE_USER)),
    service: ApplicationService = Depends(get_application_service)
):
    service.remove_application(identity["id"], job_id)
    return {"message": "Application withdrawn"}
