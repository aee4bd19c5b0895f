from supabase import Client
from linkup.core.supabase_errors import to_http_exception
from linkup.modules.filters.models import FILTER_TABLE
from linkup.modules.filters.schemas import FilterCreate, FilterUpdate, FilterResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class FilterService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_filters(self, active_only: bool = True) -> List[FilterResponse]:
        """Search filters, active ones only unless asked otherwise"""
        try:
            query = self.supabase.table(FILTER_TABLE).select("*")
            if active_only:
                query = query.eq("is_active", True)
            result = query.order("name").execute()
        except Exception as e:
            raise to_http_exception(e, "Listing filters")
        return [FilterResponse(**row) for row in result.data or []]

    def create_filter(self, filter_data: FilterCreate) -> FilterResponse:
        try:
            result = self.supabase.table(FILTER_TABLE).insert(filter_data.model_dump()).execute()
        except Exception as e:
            raise to_http_exception(e, "Creating filter")
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create filter")
        logger.info("Created filter %s (%s)", filter_data.name, filter_data.type)
        return FilterResponse(**result.data[0])

    def update_filter(self, filter_id: int, filter_data: FilterUpdate) -> FilterResponse:
        update_data = filter_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        try:
            result = self.supabase.table(FILTER_TABLE)\
                .update(update_data)\
                .eq("id_filter", filter_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Updating filter")
        if not result.data:
            raise HTTPException(status_code=404, detail="Filter not found")
        return FilterResponse(**result.data[0])

    def delete_filter(self, filter_id: int) -> bool:
        try:
            result = self.supabase.table(FILTER_TABLE)\
                .delete()\
                .eq("id_filter", filter_id)\
                .execute()
        except Exception as e:
            raise to_http_exception(e, "Deleting filter")
        if not result.data:
            raise HTTPException(status_code=404, detail="Filter not found")
        return True
