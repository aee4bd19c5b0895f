from supabase import Client
from linkup.core.pagination import Pagination, paginated_response, sanitize_search_param, SHORT_SEARCH_MAX_LENGTH
from linkup.core.supabase_errors import to_http_exception
from linkup.modules.jobs.models import JOB_TABLE, JOB_COLUMNS, JOB_UPDATABLE_FIELDS
from linkup.modules.jobs.schemas import JobCreate, JobUpdate, JobResponse, check_salary_range
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

COMPANY_SUMMARY_COLUMNS = "id_company, name, logo, industry, city"


class JobService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def attach_companies(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Add a company summary to each job row (one extra query for the whole page)"""
        company_ids = sorted({row["id_company"] for row in rows if row.get("id_company") is not None})
        if not company_ids:
            return rows
        result = self.supabase.table("company")\
            .select(COMPANY_SUMMARY_COLUMNS)\
            .in_("id_company", company_ids)\
            .execute()
        by_id = {company["id_company"]: company for company in result.data or []}
        for row in rows:
            row["company"] = by_id.get(row.get("id_company"))
        return rows

    def get_job_row(self, job_id: int) -> Dict[str, Any]:
        try:
            result = self.supabase.table(JOB_TABLE)\
                .select(JOB_COLUMNS)\
                .eq("id_job_offer", job_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Fetching job")
        if not result.data:
            raise HTTPException(status_code=404, detail="Job not found")
        return result.data[0]

    def get_job(self, job_id: int) -> JobResponse:
        """Get one job offer with its company summary"""
        row = self.get_job_row(job_id)
        try:
            self.attach_companies([row])
        except Exception as e:
            raise to_http_exception(e, "Fetching job company")
        return JobResponse(**row)

    def list_jobs(
        self,
        pagination: Pagination,
        q: Optional[str] = None,
        location: Optional[str] = None,
        contract_type: Optional[str] = None,
        industry: Optional[str] = None,
        id_company: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Paginated job search, most recent first"""
        try:
            query = self.supabase.table(JOB_TABLE).select(JOB_COLUMNS, count="exact")
            term = sanitize_search_param(q)
            if term:
                query = query.or_(f"title.ilike.%{term}%,description.ilike.%{term}%")
            location = sanitize_search_param(location, SHORT_SEARCH_MAX_LENGTH)
            if location:
                query = query.ilike("location", f"%{location}%")
            contract_type = sanitize_search_param(contract_type, SHORT_SEARCH_MAX_LENGTH)
            if contract_type:
                query = query.ilike("contract_type", contract_type)
            industry = sanitize_search_param(industry, SHORT_SEARCH_MAX_LENGTH)
            if industry:
                query = query.ilike("industry", f"%{industry}%")
            if id_company is not None:
                query = query.eq("id_company", id_company)
            result = query.order("published_at", desc=True)\
                .range(pagination.offset, pagination.range_end)\
                .execute()
            rows = self.attach_companies(result.data or [])
            items = [JobResponse(**row).model_dump() for row in rows]
            return paginated_response(items, pagination, result.count)
        except HTTPException:
            raise
        except Exception as e:
            raise to_http_exception(e, "Listing jobs")

    def list_all(self, limit: int = 200) -> List[Dict[str, Any]]:
        """Raw job rows with company summary, used for matching"""
        try:
            result = self.supabase.table(JOB_TABLE)\
                .select(JOB_COLUMNS)\
                .order("published_at", desc=True)\
                .limit(limit)\
                .execute()
            return self.attach_companies(result.data or [])
        except Exception as e:
            raise to_http_exception(e, "Listing jobs")

    def list_company_job_ids(self, company_id: int) -> List[int]:
        result = self.supabase.table(JOB_TABLE)\
            .select("id_job_offer")\
            .eq("id_company", company_id)\
            .execute()
        return [row["id_job_offer"] for row in result.data or []]

    def create_job(self, company_id: int, job_data: JobCreate) -> JobResponse:
        """Publish a job offer for the given company"""
        insert_data = job_data.model_dump(exclude={"id_company"}, exclude_none=True)
        insert_data["id_company"] = company_id
        insert_data["published_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(JOB_TABLE).insert(insert_data).execute()
        except Exception as e:
            raise to_http_exception(e, "Creating job")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create job")
        logger.info("Company id=%s published job id=%s", company_id, result.data[0].get("id_job_offer"))
        return JobResponse(**result.data[0])

    def ensure_can_manage(self, job: Dict[str, Any], identity: Dict[str, Any]) -> None:
        if identity.get("role") == "admin":
            return
        if identity.get("role") == "company" and job.get("id_company") == identity.get("id"):
            return
        raise HTTPException(status_code=403, detail="You can only manage your own job offers")

    def update_job(self, job_id: int, job_data: JobUpdate, identity: Dict[str, Any]) -> JobResponse:
        """Update a job offer (owning company or admin)"""
        job = self.get_job_row(job_id)
        self.ensure_can_manage(job, identity)
        update_data = {
            key: value
            for key, value in job_data.model_dump(exclude_unset=True).items()
            if key in JOB_UPDATABLE_FIELDS and value is not None
        }
        if not update_data:
            return JobResponse(**job)
        try:
            check_salary_range(
                update_data.get("salary_min", job.get("salary_min")),
                update_data.get("salary_max", job.get("salary_max")),
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            result = self.supabase.table(JOB_TABLE)\
                .update(update_data)\
                .eq("id_job_offer", job_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Updating job")
        if not result.data:
            raise HTTPException(status_code=404, detail="Job not found")
        return JobResponse(**result.data[0])

    def delete_job(self, job_id: int, identity: Dict[str, Any]) -> bool:
        """Delete a job offer (owning company or admin)"""
        job = self.get_job_row(job_id)
        self.ensure_can_manage(job, identity)
        try:
            self.supabase.table(JOB_TABLE)\
                .delete()\
                .eq("id_job_offer", job_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Deleting job")
        logger.info("Deleted job id=%s (by %s id=%s)", job_id, identity.get("role"), identity.get("id"))
        return True
