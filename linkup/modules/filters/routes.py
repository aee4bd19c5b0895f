from fastapi import APIRouter, Depends
from linkup.database.supabase_client import get_supabase
from linkup.modules.filters.schemas import FilterResponse
from linkup.modules.filters.service import FilterService
from supabase import Client
from typing import List

router = APIRouter(prefix="/filters", tags=["filters"])


def get_filter_service(supabase: Client = Depends(get_supabase)) -> FilterService:
    return FilterService(supabase)


@router.get("", response_model=List[FilterResponse])
async def list_filters(service: FilterService = Depends(get_filter_service)):
    """Active search filters for the job board"""
    return service.list_filters(active_only=True)
