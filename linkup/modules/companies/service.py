from supabase import Client
from linkup.core.pagination import Pagination, paginated_response, sanitize_search_param, SHORT_SEARCH_MAX_LENGTH
from linkup.core.supabase_errors import to_http_exception
from linkup.modules.auth.schemas import CompanySignupRequest
from linkup.modules.companies.models import (
    COMPANY_TABLE, COMPANY_PUBLIC_COLUMNS, COMPANY_AUTH_COLUMNS, COMPANY_UPDATABLE_FIELDS
)
from linkup.modules.applications.models import APPLY_TABLE
from linkup.modules.companies.schemas import CompanyUpdate, CompanyResponse, CompanyStatsResponse, CompanyWithJobsResponse
from linkup.modules.jobs.models import JOB_TABLE
from typing import Any, Dict, Iterable, List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch_one(self, column: str, value: Any, columns: str = COMPANY_PUBLIC_COLUMNS) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(COMPANY_TABLE)\
            .select(columns)\
            .eq(column, value)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def find_by_mail_for_auth(self, recruiter_mail: str) -> Optional[Dict[str, Any]]:
        """Company row including the password hash, for credential checks only"""
        try:
            return self._fetch_one("recruiter_mail", str(recruiter_mail).strip().lower(), COMPANY_AUTH_COLUMNS)
        except Exception as e:
            logger.error(f"[find_by_mail_for_auth] error: {e}")
            raise HTTPException(status_code=500, detail="Authentication failed")

    def get_company_by_id(self, company_id: int) -> CompanyResponse:
        """Get company by ID"""
        try:
            row = self._fetch_one("id_company", company_id)
        except Exception as e:
            raise to_http_exception(e, "Fetching company")
        if not row:
            raise HTTPException(status_code=404, detail="Company not found")
        return CompanyResponse(**row)

    def get_company_with_jobs(self, company_id: int) -> CompanyWithJobsResponse:
        company = self.get_company_by_id(company_id)
        try:
            jobs = self.supabase.table(JOB_TABLE)\
                .select("*")\
                .eq("id_company", company_id)\
                .order("published_at", desc=True)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Fetching company jobs")
        return CompanyWithJobsResponse(**company.model_dump(), jobs=jobs.data or [])

    def create_company(self, company_data: CompanySignupRequest, password_hash: str) -> CompanyResponse:
        """Create a company account; recruiter mail and (case-insensitive) name must be unique"""
        normalized_mail = str(company_data.recruiter_mail).strip().lower()
        try:
            existing_mail = self.supabase.table(COMPANY_TABLE)\
                .select("id_company")\
                .eq("recruiter_mail", normalized_mail)\
                .limit(1)\
                .execute()
            if existing_mail.data:
                raise HTTPException(status_code=409, detail="An account with this email already exists")

            existing_name = self.supabase.table(COMPANY_TABLE)\
                .select("id_company")\
                .ilike("name", company_data.name.strip())\
                .limit(1)\
                .execute()
            if existing_name.data:
                raise HTTPException(status_code=409, detail="A company with this name already exists")

            insert_data = company_data.model_dump(exclude={"password", "recruiter_mail"})
            insert_data.update({
                "recruiter_mail": normalized_mail,
                "password": password_hash,
                "industry": company_data.industry or "Technology",
            })
            result = self.supabase.table(COMPANY_TABLE).insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create company")
            row = {k: v for k, v in result.data[0].items() if k != "password"}
            logger.info("Created company id=%s", row.get("id_company"))
            return CompanyResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise to_http_exception(e, "Creating company")

    def list_companies(
        self,
        pagination: Pagination,
        search: Optional[str] = None,
        industry: Optional[str] = None,
        city: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Paginated company list with optional name/description search and industry/city filters"""
        try:
            query = self.supabase.table(COMPANY_TABLE).select(COMPANY_PUBLIC_COLUMNS, count="exact")
            term = sanitize_search_param(search)
            if term:
                query = query.or_(f"name.ilike.%{term}%,description.ilike.%{term}%")
            industry = sanitize_search_param(industry, SHORT_SEARCH_MAX_LENGTH)
            if industry:
                query = query.ilike("industry", f"%{industry}%")
            city = sanitize_search_param(city, SHORT_SEARCH_MAX_LENGTH)
            if city:
                query = query.ilike("city", f"%{city}%")
            result = query.order("created_at", desc=True)\
                .range(pagination.offset, pagination.range_end)\
                .execute()
            items = [CompanyResponse(**row).model_dump() for row in result.data or []]
            return paginated_response(items, pagination, result.count)
        except HTTPException:
            raise
        except Exception as e:
            raise to_http_exception(e, "Listing companies")

    def update_company(
        self,
        company_id: int,
        company_data: CompanyUpdate,
        allowed_fields: Iterable[str] = COMPANY_UPDATABLE_FIELDS,
    ) -> CompanyResponse:
        """Update company"""
        allowed = set(allowed_fields)
        update_data = {
            key: value
            for key, value in company_data.model_dump(exclude_unset=True).items()
            if key in allowed and value is not None
        }
        if "founded_year" in update_data and not 1800 <= update_data["founded_year"] <= datetime.now().year:
            raise HTTPException(status_code=400, detail="Founded year must be between 1800 and the current year")
        if not update_data:
            return self.get_company_by_id(company_id)
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(COMPANY_TABLE)\
                .update(update_data)\
                .eq("id_company", company_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Updating company")
        if not result.data:
            raise HTTPException(status_code=404, detail="Company not found")
        return CompanyResponse(**{k: v for k, v in result.data[0].items() if k != "password"})

    def delete_company(self, company_id: int) -> bool:
        """Delete company"""
        try:
            result = self.supabase.table(COMPANY_TABLE)\
                .delete()\
                .eq("id_company", company_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Deleting company")
        if not result.data:
            raise HTTPException(status_code=404, detail="Company not found")
        return True

    def get_dashboard_stats(self, company_id: int) -> CompanyStatsResponse:
        """Offers, applications received this week, interviews and hires of one company.

        An offer stays active until one of its candidates is accepted. The week
        starts on Sunday 00:00 UTC.
        """
        try:
            jobs = self.supabase.table(JOB_TABLE)\
                .select("id_job_offer", count="exact")\
                .eq("id_company", company_id)\
                .execute()
            job_ids = [row["id_job_offer"] for row in jobs.data or []]
            total_jobs = jobs.count if jobs.count is not None else len(job_ids)
            if not job_ids:
                return CompanyStatsResponse(total_jobs=total_jobs)

            now = datetime.now(timezone.utc)
            week_start = (now - timedelta(days=(now.weekday() + 1) % 7))\
                .replace(hour=0, minute=0, second=0, microsecond=0)

            total_applications = self._count_applications(job_ids)
            new_applications = self._count_applications(job_ids, since=week_start.isoformat())
            interviews = self._count_applications(job_ids, status="interview")
            accepted = self.supabase.table(APPLY_TABLE)\
                .select("id_job_offer")\
                .in_("id_job_offer", job_ids)\
                .eq("status", "accepted")\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Computing company stats")

        accepted_rows = accepted.data or []
        filled = {row["id_job_offer"] for row in accepted_rows}
        return CompanyStatsResponse(
            total_jobs=total_jobs,
            active_jobs=max(0, total_jobs - len(filled)),
            total_applications=total_applications,
            new_applications=new_applications,
            interviews_scheduled=interviews,
            hired_candidates=len(accepted_rows),
        )

    def _count_applications(self, job_ids: List[int], status: Optional[str] = None,
                            since: Optional[str] = None) -> int:
        query = self.supabase.table(APPLY_TABLE)\
            .select("id_user", count="exact")\
            .in_("id_job_offer", job_ids)
        if status:
            query = query.eq("status", status)
        if since:
            query = query.gte("application_date", since)
        return query.limit(1).execute().count or 0
