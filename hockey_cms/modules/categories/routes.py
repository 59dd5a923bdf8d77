from fastapi import APIRouter, Depends
from hockey_cms.core.dependencies import require_editor
from hockey_cms.core.responses import envelope
from hockey_cms.database.supabase_client import get_supabase
from hockey_cms.modules.categories.schemas import CategoryCreate, CategoryUpdate
from hockey_cms.modules.categories.service import CategoryService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/categories", tags=["categories"])


def get_category_service(supabase: Client = Depends(get_supabase)) -> CategoryService:
    return CategoryService(supabase)


@router.get("")
async def list_categories(
    active: Optional[bool] = None,
    service: CategoryService = Depends(get_category_service)
):
    """Categories ordered by display_order then name; ?active=true for active only"""
    rows = service.list_categories(active_only=bool(active))
    return envelope(rows, count=len(rows))


@router.get("/{category_id}")
async def get_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service)
):
    return envelope(service.get_category(category_id))


@router.post("", status_code=201)
async def create_category(
    category_data: CategoryCreate,
    user: Optional[Dict] = Depends(require_editor),
    service: CategoryService = Depends(get_category_service)
):
    return envelope(service.create_category(category_data))


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    user: Optional[Dict] = Depends(require_editor),
    service: CategoryService = Depends(get_category_service)
):
    return envelope(service.update_category(category_id, category_data))


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    user: Optional[Dict] = Depends(require_editor),
    service: CategoryService = Depends(get_category_service)
):
    service.delete_category(category_id)
    return envelope(message="Category deleted successfully")
