from fastapi import APIRouter, Depends, HTTPException
from linkup.core.dependencies import require_role, ROLE_ADMIN
from linkup.core.pagination import Pagination, get_pagination
from linkup.database.supabase_client import get_supabase
from linkup.modules.admin.service import AdminService
from linkup.modules.applications.schemas import AdminApplicationCreate, ApplicationStatusUpdate, ApplicationResponse
from linkup.modules.auth.schemas import CompanySignupRequest
from linkup.modules.companies.schemas import CompanyUpdate, CompanyResponse
from linkup.modules.filters.schemas import FilterCreate, FilterUpdate, FilterResponse
from linkup.modules.jobs.schemas import AdminJobCreate, JobUpdate, JobResponse
from linkup.modules.messages.schemas import AdminMessageCreate, MessageResponse
from linkup.modules.users.schemas import AdminUserCreate, AdminUserUpdate, PasswordChange, UserResponse
from supabase import Client
from typing import Any, Dict, List, Optional

# Every route of this router requires an admin session
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_role(ROLE_ADMIN))])

STAT_SECTIONS = ("users", "companies", "jobs", "applications")


def get_admin_service(supabase: Client = Depends(get_supabase)) -> AdminService:
    return AdminService(supabase)


@router.get("/dashboard")
async def dashboard(service: AdminService = Depends(get_admin_service)) -> Dict[str, Any]:
    """Platform-wide totals for the admin dashboard"""
    return service.get_dashboard()


@router.get("/stats/{section}")
async def section_stats(
    section: str,
    service: AdminService = Depends(get_admin_service)
) -> Dict[str, Any]:
    if section == "dashboard":
        return service.get_dashboard()
    if section not in STAT_SECTIONS:
        raise HTTPException(status_code=404, detail="Unknown statistics section")
    return {
        "users": service.get_user_stats,
        "companies": service.get_company_stats,
        "jobs": service.get_job_stats,
        "applications": service.get_application_stats,
    }[section]()


# Users

@router.get("/users")
async def list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    service: AdminService = Depends(get_admin_service)
) -> Dict[str, Any]:
    return service.list_users(pagination, search=search, role=role)


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: AdminUserCreate,
    service: AdminService = Depends(get_admin_service)
):
    return service.create_user(user_data)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: AdminUserUpdate,
    service: AdminService = Depends(get_admin_service)
):
    """Update any profile field except the password"""
    return service.update_user(user_id, user_data)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    identity: Dict = Depends(require_role(ROLE_ADMIN)),
    service: AdminService = Depends(get_admin_service)
):
    service.delete_user(user_id, identity["id"])
    return {"message": "User deleted successfully"}


@router.put("/users/{user_id}/password")
async def change_user_password(
    user_id: int,
    password_data: PasswordChange,
    service: AdminService = Depends(get_admin_service)
):
    service.change_user_password(user_id, password_data.new_password)
    return {"message": "Password updated successfully"}


# Companies

@router.get("/companies")
async def list_companies(
    search: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    service: AdminService = Depends(get_admin_service)
) -> Dict[str, Any]:
    return service.list_companies(pagination, search=search)


@router.post("/companies", response_model=CompanyResponse, status_code=201)
async def create_company(
    company_data: CompanySignupRequest,
    service: AdminService = Depends(get_admin_service)
):
    return service.create_company(company_data)


@router.put("/companies/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: int,
    company_data: CompanyUpdate,
    service: AdminService = Depends(get_admin_service)
):
    return service.update_company(company_id, company_data)


@router.delete("/companies/{company_id}")
async def delete_company(
    company_id: int,
    service: AdminService = Depends(get_admin_service)
):
    service.delete_company(company_id)
    return {"message": "Company deleted successfully"}


# Jobs

@router.get("/jobs")
async def list_jobs(
    q: Optional[str] = None,
    location: Optional[str] = None,
    contract_type: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    service: AdminService = Depends(get_admin_service)
) -> Dict[str, Any]:
    return service.list_jobs(pagination, q=q, location=location, contract_type=contract_type)


@router.post("/jobs", response_model=JobResponse, status_code=201)
async def create_job(
    job_data: AdminJobCreate,
    service: AdminService = Depends(get_admin_service)
):
    return service.create_job(job_data)


@router.put("/jobs/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    job_data: JobUpdate,
    service: AdminService = Depends(get_admin_service)
):
    return service.update_job(job_id, job_data)


@router.delete("/jobs/{job_id}")
async def delete_job(
    job_id: int,
    service: AdminService = Depends(get_admin_service)
):
    service.delete_job(job_id)
    return {"message": "Job deleted successfully"}


# Applications (composite key: candidate id + job id)

@router.get("/applications")
async def list_applications(
    status: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    service: AdminService = Depends(get_admin_service)
) -> Dict[str, Any]:
    return service.list_applications(pagination, status=status)


@router.post("/applications", response_model=ApplicationResponse, status_code=201)
async def create_application(
    application_data: AdminApplicationCreate,
    service: AdminService = Depends(get_admin_service)
):
    return service.create_application(application_data)


@router.put("/applications/{user_id}/{job_id}", response_model=ApplicationResponse)
async def update_application(
    user_id: int,
    job_id: int,
    status_data: ApplicationStatusUpdate,
    service: AdminService = Depends(get_admin_service)
):
    return service.update_application(user_id, job_id, status_data.status, status_data.notes)


@router.delete("/applications/{user_id}/{job_id}")
async def delete_application(
    user_id: int,
    job_id: int,
    service: AdminService = Depends(get_admin_service)
):
    service.delete_application(user_id, job_id)
    return {"message": "Application deleted successfully"}


# Messages

@router.get("/messages")
async def list_messages(
    pagination: Pagination = Depends(get_pagination),
    service: AdminService = Depends(get_admin_service)
) -> Dict[str, Any]:
    return service.list_messages(pagination)


@router.post("/messages", response_model=MessageResponse, status_code=201)
async def create_message(
    message_data: AdminMessageCreate,
    service: AdminService = Depends(get_admin_service)
):
    return service.create_message(message_data)


@router.delete("/messages/{message_id}")
async def delete_message(
    message_id: int,
    service: AdminService = Depends(get_admin_service)
):
    service.delete_message(message_id)
    return {"message": "Message deleted successfully"}


# Filters

@router.get("/filters", response_model=List[FilterResponse])
async def list_filters(service: AdminService = Depends(get_admin_service)):
    """All filters, including inactive ones"""
    return service.filters.list_filters(active_only=False)


@router.post("/filters", response_model=FilterResponse, status_code=201)
async def create_filter(
    filter_data: FilterCreate,
    service: AdminService = Depends(get_admin_service)
):
    return service.filters.create_filter(filter_data)


@router.put("/filters/{filter_id}", response_model=FilterResponse)
async def update_filter(
    filter_id: int,
    filter_data: FilterUpdate,
    service: AdminService = Depends(get_admin_service)
):
    return service.filters.update_filter(filter_id, filter_data)


@router.delete("/filters/{filter_id}")
async def delete_filter(
    filter_id: int,
    service: AdminService = Depends(get_admin_service)
):
    service.filters.delete_filter(filter_id)
    return {"message": "Filter deleted successfully"}
