from supabase import Client
from linkup.modules.jobs.service import JobService
from linkup.modules.matching.scoring import calculate_matching_score
from linkup.modules.users.service import UserService
from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

DEFAULT_JOBS_LIMIT = 50
DEFAULT_CANDIDATES_LIMIT = 100


def _bounded(limit: int, default: int) -> int:
    if limit is None or limit < 1:
        return default
    return min(limit, 200)


class MatchingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)
        self.jobs = JobService(supabase)

    def matching_jobs(self, user_id: int, limit: int = DEFAULT_JOBS_LIMIT) -> List[Dict[str, Any]]:
        """Recent job offers ranked by compatibility with the candidate"""
        candidate = self.users.get_user_by_id(user_id).model_dump(mode="json")
        jobs = self.jobs.list_all(_bounded(limit, DEFAULT_JOBS_LIMIT))
        ranked = [
            {**job, "matching": calculate_matching_score(candidate, job).model_dump()}
            for job in jobs
        ]
        ranked.sort(key=lambda item: item["matching"]["score"], reverse=True)
        logger.debug("Scored %s jobs for user id=%s", len(ranked), user_id)
        return ranked

    def match_job(self, user_id: int, job_id: int) -> Dict[str, Any]:
        candidate = self.users.get_user_by_id(user_id).model_dump(mode="json")
        job = self.jobs.get_job_row(job_id)
        return {
            "id_job_offer": job_id,
            "id_user": user_id,
            "matching": calculate_matching_score(candidate, job).model_dump(),
        }

    def matching_candidates(
        self,
        job_id: int,
        identity: Dict[str, Any],
        limit: int = DEFAULT_CANDIDATES_LIMIT,
    ) -> List[Dict[str, Any]]:
        """Candidates ranked by compatibility with a job offer (owning company or admin)"""
        job = self.jobs.get_job_row(job_id)
        self.jobs.ensure_can_manage(job, identity)
        candidates = self.users.list_candidates(_bounded(limit, DEFAULT_CANDIDATES_LIMIT))
        ranked = [
            {**candidate, "matching": calculate_matching_score(candidate, job).model_dump()}
            for candidate in candidates
        ]
        ranked.sort(key=lambda item: item["matching"]["score"], reverse=True)
        return ranked
