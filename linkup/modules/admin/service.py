from supabase import Client
from linkup.core.pagination import Pagination
from linkup.core.security import hash_password
from linkup.core.supabase_errors import to_http_exception
from linkup.modules.applications.models import APPLY_TABLE, APPLICATION_STATUSES
from linkup.modules.applications.schemas import AdminApplicationCreate, ApplicationCreate, ApplicationResponse
from linkup.modules.applications.service import ApplicationService
from linkup.modules.auth.schemas import CompanySignupRequest
from linkup.modules.companies.models import COMPANY_TABLE, COMPANY_UPDATABLE_FIELDS
from linkup.modules.companies.schemas import CompanyUpdate, CompanyResponse
from linkup.modules.companies.service import CompanyService
from linkup.modules.filters.service import FilterService
from linkup.modules.jobs.models import JOB_TABLE
from linkup.modules.jobs.schemas import AdminJobCreate, JobResponse, JobUpdate
from linkup.modules.jobs.service import JobService
from linkup.modules.messages.schemas import AdminMessageCreate, MessageCreate, MessageResponse
from linkup.modules.messages.service import MessageService
from linkup.modules.users.models import USER_TABLE, USER_UPDATABLE_FIELDS
from linkup.modules.users.schemas import AdminUserCreate, AdminUserUpdate, UserResponse
from linkup.modules.users.service import UserService
from typing import Any, Dict, Iterable, List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
from collections import Counter
import logging

logger = logging.getLogger(__name__)

RECENT_DAYS = 30
# PostgREST db-max-rows default; breakdowns page through tables in chunks of this size
PAGE_SIZE = 1000
UNSPECIFIED = "Unspecified"
ADMIN_USER_FIELDS = USER_UPDATABLE_FIELDS + ("role",)
ADMIN_SYSTEM_IDENTITY = {"role": "admin", "id": None}


def _breakdown(rows: Iterable[Dict[str, Any]], column: str, default: str = UNSPECIFIED) -> Dict[str, int]:
    return dict(Counter(str(row.get(column) or default) for row in rows))


class AdminService:
    """Back-office operations and aggregated statistics"""

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)
        self.companies = CompanyService(supabase)
        self.jobs = JobService(supabase)
        self.applications = ApplicationService(supabase)
        self.messages = MessageService(supabase)
        self.filters = FilterService(supabase)

    def _count(self, table: str, key: str, since_column: Optional[str] = None) -> int:
        """Exact row count from the Content-Range header, optionally limited to the recent window"""
        try:
            query = self.supabase.table(table).select(key, count="exact")
            if since_column:
                query = query.gt(since_column, self._since().isoformat())
            result = query.limit(1).execute()
        except Exception as e:
            raise to_http_exception(e, f"Counting {table}")
        return result.count or 0

    def _rows(self, table: str, columns: str) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        try:
            while True:
                page = self.supabase.table(table)\
                    .select(columns)\
                    .range(len(rows), len(rows) + PAGE_SIZE - 1)\
                    .execute().data or []
                rows.extend(page)
                if len(page) < PAGE_SIZE:
                    return rows
        except Exception as e:
            raise to_http_exception(e, f"Reading {table}")

    @staticmethod
    def _since() -> datetime:
        return datetime.now(timezone.utc) - timedelta(days=RECENT_DAYS)

    # Statistics

    def get_dashboard(self) -> Dict[str, Any]:
        """Totals per entity, applications per status and sign-ups of the last 30 days"""
        applications = self._rows(APPLY_TABLE, "status")
        try:
            messages_total = self.messages.count_messages()
        except Exception as e:
            raise to_http_exception(e, "Counting messages")

        by_status = {status: 0 for status in APPLICATION_STATUSES}
        by_status.update(_breakdown(applications, "status", "pending"))
        return {
            "totals": {
                "users": self._count(USER_TABLE, "id_user"),
                "companies": self._count(COMPANY_TABLE, "id_company"),
                "jobs": self._count(JOB_TABLE, "id_job_offer"),
                "applications": self._count(APPLY_TABLE, "id_user"),
                "messages": messages_total,
            },
            "applications_by_status": by_status,
            "recent": {
                "users": self._count(USER_TABLE, "id_user", "created_at"),
                "companies": self._count(COMPANY_TABLE, "id_company", "created_at"),
                "jobs": self._count(JOB_TABLE, "id_job_offer", "published_at"),
                "applications": self._count(APPLY_TABLE, "id_user", "application_date"),
            },
        }

    def get_user_stats(self) -> Dict[str, Any]:
        return {
            "total": self._count(USER_TABLE, "id_user"),
            "by_role": _breakdown(self._rows(USER_TABLE, "role"), "role", "user"),
            "recent": self._count(USER_TABLE, "id_user", "created_at"),
        }

    def get_company_stats(self) -> Dict[str, Any]:
        return {
            "total": self._count(COMPANY_TABLE, "id_company"),
            "by_industry": _breakdown(self._rows(COMPANY_TABLE, "industry"), "industry"),
            "recent": self._count(COMPANY_TABLE, "id_company", "created_at"),
        }

    def get_job_stats(self) -> Dict[str, Any]:
        jobs = self._rows(JOB_TABLE, "contract_type, remote")
        return {
            "total": self._count(JOB_TABLE, "id_job_offer"),
            "by_contract_type": _breakdown(jobs, "contract_type"),
            "by_remote": {
                "remote": sum(1 for job in jobs if job.get("remote") is True),
                "on_site": sum(1 for job in jobs if job.get("remote") is False),
            },
            "recent": self._count(JOB_TABLE, "id_job_offer", "published_at"),
        }

    def get_application_stats(self) -> Dict[str, Any]:
        return {
            "total": self._count(APPLY_TABLE, "id_user"),
            "by_status": _breakdown(self._rows(APPLY_TABLE, "status"), "status", "pending"),
            "recent": self._count(APPLY_TABLE, "id_user", "application_date"),
        }

    # Users

    def list_users(self, pagination: Pagination, search: Optional[str] = None,
                   role: Optional[str] = None) -> Dict[str, Any]:
        return self.users.list_users(pagination, search=search, role=role)

    def create_user(self, user_data: AdminUserCreate) -> UserResponse:
        user = self.users.create_user(
            email=user_data.email,
            password_hash=hash_password(user_data.password),
            firstname=user_data.firstname,
            lastname=user_data.lastname,
            role=user_data.role,
            phone=user_data.phone,
        )
        logger.info("Admin created user id=%s role=%s", user.id_user, user.role)
        return user

    def update_user(self, user_id: int, user_data: AdminUserUpdate) -> UserResponse:
        return self.users.update_user(user_id, user_data, allowed_fields=ADMIN_USER_FIELDS)

    def delete_user(self, user_id: int, admin_id: Any) -> bool:
        if user_id == admin_id:
            raise HTTPException(status_code=400, detail="You cannot delete your own account")
        return self.users.delete_user(user_id)

    def change_user_password(self, user_id: int, new_password: str) -> bool:
        changed = self.users.change_password(user_id, new_password)
        logger.info("Admin reset password of user id=%s", user_id)
        return changed

    # Companies

    def list_companies(self, pagination: Pagination, search: Optional[str] = None) -> Dict[str, Any]:
        return self.companies.list_companies(pagination, search=search)

    def create_company(self, company_data: CompanySignupRequest) -> CompanyResponse:
        return self.companies.create_company(company_data, hash_password(company_data.password))

    def update_company(self, company_id: int, company_data: CompanyUpdate) -> CompanyResponse:
        return self.companies.update_company(company_id, company_data, allowed_fields=COMPANY_UPDATABLE_FIELDS)

    def delete_company(self, company_id: int) -> bool:
        return self.companies.delete_company(company_id)

    # Jobs

    def list_jobs(self, pagination: Pagination, q: Optional[str] = None, location: Optional[str] = None,
                  contract_type: Optional[str] = None) -> Dict[str, Any]:
        return self.jobs.list_jobs(pagination, q=q, location=location, contract_type=contract_type)

    def create_job(self, job_data: AdminJobCreate) -> JobResponse:
        self.companies.get_company_by_id(job_data.id_company)
        return self.jobs.create_job(job_data.id_company, job_data)

    def update_job(self, job_id: int, job_data: JobUpdate) -> JobResponse:
        return self.jobs.update_job(job_id, job_data, ADMIN_SYSTEM_IDENTITY)

    def delete_job(self, job_id: int) -> bool:
        return self.jobs.delete_job(job_id, ADMIN_SYSTEM_IDENTITY)

    # Applications

    def list_applications(self, pagination: Pagination, status: Optional[str] = None) -> Dict[str, Any]:
        return self.applications.list_all(pagination, status=status)

    def create_application(self, application_data: AdminApplicationCreate) -> ApplicationResponse:
        self.users.get_user_by_id(application_data.id_user)
        return self.applications.create_application(
            application_data.id_user,
            ApplicationCreate(id_job_offer=application_data.id_job_offer, notes=application_data.notes),
            status=application_data.status,
        )

    def update_application(self, user_id: int, job_id: int, status: str,
                           notes: Optional[str] = None) -> ApplicationResponse:
        return self.applications.update_status(user_id, job_id, status, notes)

    def delete_application(self, user_id: int, job_id: int) -> bool:
        return self.applications.remove_application(user_id, job_id)

    # Messages

    def list_messages(self, pagination: Pagination) -> Dict[str, Any]:
        return self.messages.list_all(pagination)

    def create_message(self, message_data: AdminMessageCreate) -> MessageResponse:
        self.users.get_user_by_id(message_data.id_sender)
        return self.messages.send_message(
            message_data.id_sender,
            MessageCreate(
                id_receiver=message_data.id_receiver,
                content=message_data.content,
                message_type=message_data.message_type,
            ),
        )

    def delete_message(self, message_id: int) -> bool:
        return self.messages.delete_message(message_id)
