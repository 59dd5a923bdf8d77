from supabase import Client
from hockey_cms.core.responses import database_error
from hockey_cms.core.status import utc_now_iso
from hockey_cms.modules.categories.schemas import CategoryCreate, CategoryUpdate
from typing import List, Dict, Any
from fastapi import HTTPException
import logging
import re

logger = logging.getLogger(__name__)

CATEGORY_CONFLICT = "A category with this name or slug already exists."


def slugify(s: str) -> str:
    s = (s or "").strip().lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return re.sub(r"-+", "-", s).strip("-")


class CategoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_categories(self, active_only: bool = False) -> List[Dict[str, Any]]:
        try:
            query = self.supabase.table("categories").select("*")
            if active_only:
                query = query.eq("is_active", True)
            result = query.order("display_order").order("name").execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching categories: {e}")
            raise database_error(e)

    def get_category(self, category_id: int) -> Dict[str, Any]:
        try:
            result = self.supabase.table("categories").select("*").eq("id", category_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Category not found")
            return result.data
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def create_category(self, category_data: CategoryCreate) -> Dict[str, Any]:
        """Create a category; the slug is derived from the name"""
        record = category_data.model_dump(exclude_none=True)
        record["slug"] = slugify(category_data.name)
        try:
            result = self.supabase.table("categories").insert(record).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create category")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating category: {e}")
            raise database_error(e, conflict_detail=CATEGORY_CONFLICT)

    def update_category(self, category_id: int, category_data: CategoryUpdate) -> Dict[str, Any]:
        update_data = category_data.model_dump(exclude_unset=True)
        update_data["name"] = category_data.name
        update_data["slug"] = slugify(category_data.name)
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("categories").update(update_data).eq("id", category_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Category not found")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating category {category_id}: {e}")
            raise database_error(e, conflict_detail=CATEGORY_CONFLICT)

    def delete_category(self, category_id: int) -> bool:
        try:
            result = self.supabase.table("categories").delete().eq("id", category_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Category not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)
