from supabase import Client
from hockey_cms.core.content_types import ContentType, normalize_content_type, spellings
from hockey_cms.core.responses import database_error
from hockey_cms.core.status import utc_now_iso
from hockey_cms.modules.prompts.schemas import PromptCreate, PromptUpdate, PromptSaveDb
from typing import List, Optional, Dict, Any, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

VALID_CONTENT_TYPES = ", ".join(t.value for t in ContentType)


def _content_type_or_400(raw: str) -> ContentType:
    try:
        return normalize_content_type(raw)
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid content_type. Must be one of: {VALID_CONTENT_TYPES}"
        )


class PromptService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_prompts(self, limit: int = 20, offset: int = 0) -> Tuple[List[Dict[str, Any]], int]:
        """Newest first with the total row count"""
        try:
            result = self.supabase.table("prompts")\
                .select("*", count="exact")\
                .order("id", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return result.data or [], result.count or 0
        except Exception as e:
            logger.error(f"Error fetching prompts: {e}")
            raise database_error(e)

    def get_prompt(self, prompt_id: int) -> Dict[str, Any]:
        try:
            result = self.supabase.table("prompts").select("*").eq("id", prompt_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Prompt not found")
            return result.data
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def create_prompt(self, prompt_data: PromptCreate) -> Dict[str, Any]:
        record = prompt_data.model_dump(exclude_none=True)
        record["content_type"] = _content_type_or_400(prompt_data.content_type).value
        try:
            result = self.supabase.table("prompts").insert(record).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create prompt")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating prompt: {e}")
            raise database_error(e)

    def update_prompt(self, prompt_id: int, prompt_data: PromptUpdate) -> Dict[str, Any]:
        update_data = prompt_data.model_dump(exclude_unset=True)
        if update_data.get("content_type"):
            update_data["content_type"] = _content_type_or_400(update_data["content_type"]).value
        if "prompt_content" in update_data:
            content = (update_data["prompt_content"] or "").strip()
            if not content:
                raise HTTPException(status_code=400, detail="Prompt content is required")
            update_data["prompt_content"] = content
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("prompts").update(update_data).eq("id", prompt_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Prompt not found")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating prompt {prompt_id}: {e}")
            raise database_error(e)

    def delete_prompt(self, prompt_id: int) -> bool:
        try:
            result = self.supabase.table("prompts").delete().eq("id", prompt_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Prompt not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def find_active_prompt(self, content_type: ContentType) -> Optional[Dict[str, Any]]:
        """Active prompt for a content type, matching legacy spellings too"""
        try:
            result = self.supabase.table("prompts")\
                .select("*")\
                .in_("content_type", spellings(content_type))\
                .eq("is_active", True)\
                .order("id", desc=True)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise database_error(e)
        return result.data[0] if result.data else None

    def get_active_prompt(self, raw_content_type: str) -> Dict[str, Any]:
        content_type = _content_type_or_400(raw_content_type)
        prompt = self.find_active_prompt(content_type)
        if not prompt:
            raise HTTPException(
                status_code=404,
                detail=f"No active prompt found for content type: {content_type.value}"
            )
        return prompt

    def save_prompt_to_db(self, prompt_data: PromptSaveDb, user_id: str) -> Dict[str, Any]:
        """Prompt builder save; unique per (name, category)"""
        record = {
            "name": prompt_data.name,
            "category": prompt_data.category,
            "prompt_content": prompt_data.prompt_content,
            "selections": prompt_data.selections,
            "created_by": user_id,
        }
        try:
            result = self.supabase.table("prompts").insert(record).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save prompt")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving prompt to database: {e}")
            raise database_error(
                e,
                conflict_detail=f'A prompt with name "{prompt_data.name}" already exists in {prompt_data.category} category'
            )
