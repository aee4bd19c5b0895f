from supabase import Client
from linkup.core.pagination import Pagination, paginated_response
from linkup.core.supabase_errors import to_http_exception, is_unique_violation
from linkup.core.timestamps import parse_timestamp
from linkup.modules.applications.models import APPLY_TABLE, APPLICATION_STATUSES, CANDIDATE_SUMMARY_COLUMNS
from linkup.modules.applications.schemas import ApplicationCreate, ApplicationResponse
from linkup.modules.jobs.models import JOB_TABLE, JOB_COLUMNS
from linkup.modules.jobs.service import JobService
from linkup.modules.matching.scoring import calculate_matching_score
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

RECENT_DAYS = 7


class ApplicationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.jobs = JobService(supabase)

    def _attach_jobs(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        job_ids = sorted({row["id_job_offer"] for row in rows})
        if not job_ids:
            return rows
        result = self.supabase.table(JOB_TABLE)\
            .select(JOB_COLUMNS)\
            .in_("id_job_offer", job_ids)\
            .execute()
        jobs = self.jobs.attach_companies(result.data or [])
        by_id = {job["id_job_offer"]: job for job in jobs}
        for row in rows:
            row["job_offer"] = by_id.get(row["id_job_offer"])
        return rows

    def _attach_candidates(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        user_ids = sorted({row["id_user"] for row in rows})
        if not user_ids:
            return rows
        result = self.supabase.table("user_")\
            .select(CANDIDATE_SUMMARY_COLUMNS)\
            .in_("id_user", user_ids)\
            .execute()
        by_id = {user["id_user"]: user for user in result.data or []}
        for row in rows:
            row["user_"] = by_id.get(row["id_user"])
        return rows

    def _find(self, user_id: int, job_id: int) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(APPLY_TABLE)\
            .select("*")\
            .eq("id_user", user_id)\
            .eq("id_job_offer", job_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def create_application(self, user_id: int, application_data: ApplicationCreate,
                           status: str = "pending") -> ApplicationResponse:
        """Apply to a job offer; one application per (candidate, job)"""
        self.jobs.get_job_row(application_data.id_job_offer)
        try:
            if self._find(user_id, application_data.id_job_offer):
                raise HTTPException(status_code=409, detail="You have already applied to this job")
            result = self.supabase.table(APPLY_TABLE).insert({
                "id_user": user_id,
                "id_job_offer": application_data.id_job_offer,
                "status": status,
                "notes": application_data.notes,
                "application_date": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="You have already applied to this job")
            raise to_http_exception(e, "Creating application")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create application")
        logger.info("User id=%s applied to job id=%s", user_id, application_data.id_job_offer)
        return ApplicationResponse(**result.data[0])

    def list_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        """Applications of a candidate with the job offers they target"""
        try:
            result = self.supabase.table(APPLY_TABLE)\
                .select("*")\
                .eq("id_user", user_id)\
                .order("application_date", desc=True)\
                .execute()
            return self._attach_jobs(result.data or [])
        except Exception as e:
            raise to_http_exception(e, "Listing applications")

    def list_for_company(
        self,
        company_id: int,
        status: Optional[str] = None,
        job_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Applications received on the company's job offers, with candidate and match score"""
        if status is not None and status not in APPLICATION_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status filter")
        try:
            job_ids = self.jobs.list_company_job_ids(company_id)
            if not job_ids or (job_id is not None and job_id not in job_ids):
                return []
            query = self.supabase.table(APPLY_TABLE)\
                .select("*")\
                .in_("id_job_offer", job_ids)
            if status:
                query = query.eq("status", status)
            if job_id is not None:
                query = query.eq("id_job_offer", job_id)
            result = query.order("application_date", desc=True).execute()
            rows = self._attach_candidates(self._attach_jobs(result.data or []))
        except Exception as e:
            raise to_http_exception(e, "Listing company applications")

        for row in rows:
            if row.get("user_") and row.get("job_offer"):
                row["matching"] = calculate_matching_score(row["user_"], row["job_offer"]).model_dump()
        return rows

    def update_status(
        self,
        user_id: int,
        job_id: int,
        status: str,
        notes: Optional[str] = None,
        identity: Optional[Dict[str, Any]] = None,
    ) -> ApplicationResponse:
        """Change an application's status; companies may only touch their own job offers"""
        if identity is not None:
            self.jobs.ensure_can_manage(self.jobs.get_job_row(job_id), identity)
        update_data: Dict[str, Any] = {"status": status}
        if notes is not None:
            update_data["notes"] = notes
        try:
            result = self.supabase.table(APPLY_TABLE)\
                .update(update_data)\
                .eq("id_user", user_id)\
                .eq("id_job_offer", job_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Updating application")
        if not result.data:
            raise HTTPException(status_code=404, detail="Application not found")
        logger.info("Application user=%s job=%s set to %s", user_id, job_id, status)
        return ApplicationResponse(**result.data[0])

    def remove_application(self, user_id: int, job_id: int) -> bool:
        """Delete an application (candidate withdrawal or admin removal)"""
        try:
            result = self.supabase.table(APPLY_TABLE)\
                .delete()\
                .eq("id_user", user_id)\
                .eq("id_job_offer", job_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Deleting application")
        if not result.data:
            raise HTTPException(status_code=404, detail="Application not found")
        return True

    def get_stats(self, user_id: Optional[int] = None, company_id: Optional[int] = None) -> Dict[str, int]:
        """Counts per status plus applications of the last 7 days"""
        stats = {"total": 0, **{status: 0 for status in APPLICATION_STATUSES}, "recent": 0}
        try:
            query = self.supabase.table(APPLY_TABLE).select("status, application_date")
            if user_id is not None:
                query = query.eq("id_user", user_id)
            if company_id is not None:
                job_ids = self.jobs.list_company_job_ids(company_id)
                if not job_ids:
                    return stats
                query = query.in_("id_job_offer", job_ids)
            rows = query.execute().data or []
        except Exception as e:
            raise to_http_exception(e, "Computing application stats")

        since = datetime.now(timezone.utc) - timedelta(days=RECENT_DAYS)
        stats["total"] = len(rows)
        for row in rows:
            if row.get("status") in stats:
                stats[row["status"]] += 1
            applied_at = parse_timestamp(row.get("application_date"))
            if applied_at and applied_at >= since:
                stats["recent"] += 1
        return stats

    def list_all(self, pagination: Pagination, status: Optional[str] = None) -> Dict[str, Any]:
        """Every application, paginated (admin)"""
        try:
            query = self.supabase.table(APPLY_TABLE).select("*", count="exact")
            if status:
                query = query.eq("status", status)
            result = query.order("application_date", desc=True)\
                .range(pagination.offset, pagination.range_end)\
                .execute()
            rows = self._attach_candidates(self._attach_jobs(result.data or []))
            return paginated_response(rows, pagination, result.count)
        except Exception as e:
            raise to_http_exception(e, "Listing applications")
