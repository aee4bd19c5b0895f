from fastapi import APIRouter, Depends
from linkup.core.dependencies import require_role, ROLE_COMPANY, ROLE_ADMIN
from linkup.core.pagination import Pagination, get_pagination
from linkup.database.supabase_client import get_supabase
from linkup.modules.jobs.schemas import JobCreate, JobUpdate, JobResponse
from linkup.modules.jobs.service import JobService
from supabase import Client
from typing import Any, Dict, Optional

router = APIRouter(prefix="/jobs", tags=["jobs"])


def get_job_service(supabase: Client = Depends(get_supabase)) -> JobService:
    return JobService(supabase)


@router.get("")
async def list_jobs(
    q: Optional[str] = None,
    location: Optional[str] = None,
    contract_type: Optional[str] = None,
    industry: Optional[str] = None,
    id_company: Optional[int] = None,
    pagination: Pagination = Depends(get_pagination),
    service: JobService = Depends(get_job_service)
) -> Dict[str, Any]:
    """Public job search"""
    return service.list_jobs(
        pagination,
        q=q,
        location=location,
        contract_type=contract_type,
        industry=industry,
        id_company=id_company,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    service: JobService = Depends(get_job_service)
):
    return service.get_job(job_id)


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job_data: JobCreate,
    identity: Dict = Depends(require_role(ROLE_COMPANY)),
    service: JobService = Depends(get_job_service)
):
    """Publish a job offer for the logged-in company"""
    return service.create_job(identity["id"], job_data)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    job_data: JobUpdate,
    identity: Dict = Depends(require_role(ROLE_COMPANY, ROLE_ADMIN)),
    service: JobService = Depends(get_job_service)
):
    return service.update_job(job_id, job_data, identity)


@router.delete("/{job_id}")
async def delete_job(
    job_id: int,
    identity: Dict = Depends(require_role(ROLE_COMPANY, ROLE_ADMIN)),
    service: JobService = Depends(get_job_service)
):
    service.delete_job(job_id, identity)
    return {"message": "Job deleted successfully"}
