from fastapi import APIRouter, Depends
from linkup.core.dependencies import require_role, ROLE_COMPANY
from linkup.core.pagination import Pagination, get_pagination
from linkup.database.supabase_client import get_supabase
from linkup.modules.companies.schemas import CompanyUpdate, CompanyResponse, CompanyStatsResponse, CompanyWithJobsResponse
from linkup.modules.companies.service import CompanyService
from supabase import Client
from typing import Any, Dict, Optional

router = APIRouter(prefix="/companies", tags=["companies"])


def get_company_service(supabase: Client = Depends(get_supabase)) -> CompanyService:
    return CompanyService(supabase)


@router.get("/me", response_model=CompanyResponse)
async def get_me(
    identity: Dict = Depends(require_role(ROLE_COMPANY)),
    service: CompanyService = Depends(get_company_service)
):
    """Profile of the logged-in company"""
    return service.get_company_by_id(identity["id"])


@router.put("/me", response_model=CompanyResponse)
async def update_me(
    company_data: CompanyUpdate,
    identity: Dict = Depends(require_role(ROLE_COMPANY)),
    service: CompanyService = Depends(get_company_service)
):
    return service.update_company(identity["id"], company_data)


@router.get("/me/stats", response_model=CompanyStatsResponse)
async def get_my_stats(
    identity: Dict = Depends(require_role(ROLE_COMPANY)),
    service: CompanyService = Depends(get_company_service)
):
    """Dashboard figures: offers, applications, interviews and hires"""
    return service.get_dashboard_stats(identity["id"])


@router.get("")
async def list_companies(
    search: Optional[str] = None,
    industry: Optional[str] = None,
    city: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    service: CompanyService = Depends(get_company_service)
) -> Dict[str, Any]:
    """Public, paginated company directory"""
    return service.list_companies(pagination, search=search, industry=industry, city=city)


@router.get("/{company_id}", response_model=CompanyWithJobsResponse)
async def get_company(
    company_id: int,
    service: CompanyService = Depends(get_company_service)
):
    """Company profile with its job offers"""
    return service.get_company_with_jobs(company_id)
