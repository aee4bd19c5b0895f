from fastapi import APIRouter, Depends
from linkup.core.dependencies import require_role, ROLE_USER, ROLE_COMPANY, ROLE_ADMIN
from linkup.database.supabase_client import get_supabase
from linkup.modules.matching.service import MatchingService, DEFAULT_JOBS_LIMIT, DEFAULT_CANDIDATES_LIMIT
from supabase import Client
from typing import Any, Dict, List

router = APIRouter(prefix="/matching", tags=["matching"])


def get_matching_service(supabase: Client = Depends(get_supabase)) -> MatchingService:
    return MatchingService(supabase)


@router.get("/jobs")
async def matching_jobs(
    limit: int = DEFAULT_JOBS_LIMIT,
    identity: Dict = Depends(require_role(ROLE_USER)),
    service: MatchingService = Depends(get_matching_service)
) -> List[Dict[str, Any]]:
    """Job offers ranked for the logged-in candidate"""
    return service.matching_jobs(identity["id"], limit)


@router.get("/jobs/{job_id}")
async def match_job(
    job_id: int,
    identity: Dict = Depends(require_role(ROLE_USER)),
    service: MatchingService = Depends(get_matching_service)
) -> Dict[str, Any]:
    return service.match_job(identity["id"], job_id)


@router.get("/jobs/{job_id}/candidates")
async def matching_candidates(
    job_id: int,
    limit: int = DEFAULT_CANDIDATES_LIMIT,
    identity: Dict = Depends(require_role(ROLE_COMPANY, ROLE_ADMIN)),
    service: MatchingService = Depends(get_matching_service)
) -> List[Dict[str, Any]]:
    """Candidates ranked for one of the company's job offers"""
    return service.matching_candidates(job_id, identity, limit)
