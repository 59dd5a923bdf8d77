from supabase import Client
from hockey_cms.core.collection import ilike_any
from hockey_cms.core.responses import database_error
from hockey_cms.core.status import utc_now_iso
from hockey_cms.modules.source_content.schemas import IngestStatus, SourceContentCreate, SourceContentUpdate
from hockey_cms.modules.source_content.text_processing import count_words, process_text
from typing import List, Optional, Dict, Any, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

TITLE_WORDS = 10


def derive_title(content_text: str) -> str:
    """First ten words of the text, with an ellipsis when there are more"""
    words = content_text.split()
    title = " ".join(words[:TITLE_WORDS])
    if len(words) > TITLE_WORDS:
        title += "..."
    return title


class SourceContentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_sources(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        theme: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        try:
            query = self.supabase.table("ingested").select("*", count="exact")
            if status:
                query = query.eq("status", status)
            if theme:
                query = query.eq("theme", theme)
            if category:
                query = query.eq("category", category)
            if search:
                query = query.or_(ilike_any(("title", "content_text"), search))
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return result.data or [], result.count or 0
        except Exception as e:
            logger.error(f"Error fetching ingested content: {e}")
            raise database_error(e)

    def get_source(self, source_id: int) -> Dict[str, Any]:
        try:
            result = self.supabase.table("ingested").select("*").eq("id", source_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Ingested content not found")
            return result.data
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def create_source(self, source_data: SourceContentCreate) -> Dict[str, Any]:
        record = source_data.model_dump(exclude_none=True)
        record["title"] = (source_data.title or "").strip() or derive_title(source_data.content_text)
        record["word_count"] = count_words(source_data.content_text)
        record["char_count"] = len(source_data.content_text)
        record["status"] = IngestStatus.READY.value
        try:
            result = self.supabase.table("ingested").insert(record).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save source content")
            logger.info(f"Ingested source content {result.data[0].get('id')}")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving source content: {e}")
            raise database_error(e)

    def update_source(self, source_id: int, source_data: SourceContentUpdate) -> Dict[str, Any]:
        update_data = source_data.model_dump(mode="json", exclude_unset=True)
        if "content_text" in update_data:
            content = (update_data["content_text"] or "").strip()
            if not content:
                raise HTTPException(status_code=400, detail="content_text must not be empty")
            update_data["content_text"] = content
            update_data["word_count"] = count_words(content)
            update_data["char_count"] = len(content)
        return self._write(source_id, update_data)

    def set_status(self, source_id: int, status: IngestStatus) -> Dict[str, Any]:
        return self._write(source_id, {"status": status.value})

    def _write(self, source_id: int, update_data: Dict[str, Any]) -> Dict[str, Any]:
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("ingested").update(update_data).eq("id", source_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Ingested content not found")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating ingested content {source_id}: {e}")
            raise database_error(e)

    def delete_source(self, source_id: int) -> bool:
        try:
            result = self.supabase.table("ingested").delete().eq("id", source_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Ingested content not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def process_source(self, source_id: int) -> Dict[str, Any]:
        """Run the cleanup pipeline over content_text and store the result"""
        source = self.get_source(source_id)
        result = process_text(source.get("content_text") or "")
        if not result["processedText"]:
            raise HTTPException(status_code=400, detail="Source content is empty after processing")
        updated = self._write(source_id, {
            "processed_text": result["processedText"],
            "word_count": result["wordCount"],
            "char_count": result["charCount"],
            "processing_time_ms": result["processingTime"],
            "processed_at": utc_now_iso(),
        })
        logger.info(f"Processed source content {source_id}: {result['wordCount']} words, {len(result['chunks'])} chunk(s)")
        return {
            "source": updated,
            "chunks": result["chunks"],
            "steps": result["steps"],
        }
