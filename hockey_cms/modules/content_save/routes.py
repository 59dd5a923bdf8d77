from fastapi import APIRouter, Depends
from hockey_cms.core.dependencies import require_editor
from hockey_cms.core.responses import envelope
from hockey_cms.database.supabase_client import get_service_supabase
from hockey_cms.modules.content_save.schemas import SaveItemsRequest, SaveMarkdownRequest
from hockey_cms.modules.content_save.service import ContentSaveService
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["content-save"])


def get_content_save_service(supabase: Client = Depends(get_service_supabase)) -> ContentSaveService:
    return ContentSaveService(supabase)


def _created_by(request_value: Optional[str], user: Optional[Dict]) -> Optional[str]:
    if request_value:
        return request_value
    return user.get("id") if user else None


@router.post("/trivia/save")
async def save_trivia(
    request: SaveItemsRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: ContentSaveService = Depends(get_content_save_service)
):
    """Save reviewed trivia items, each into the table for its question_type"""
    result = service.save_trivia(
        request.items_to_save,
        request.source_content_id,
        _created_by(request.created_by, user),
        question_type=request.content_type,
    )
    return envelope(result["data"], count=result["count"], tables=result["tables"])


@router.post("/trivia/save-markdown/{question_type}")
async def save_trivia_markdown(
    question_type: str,
    request: SaveMarkdownRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: ContentSaveService = Depends(get_content_save_service)
):
    """Parse readable Markdown trivia and save the questions as drafts"""
    result = service.save_trivia_markdown(
        question_type,
        request.content,
        request.source_content_id,
        _created_by(request.created_by, user),
    )
    return envelope(result["data"], count=result["count"], tables=result["tables"])


@router.post("/uni-content/save")
async def save_uni_content(
    request: SaveItemsRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: ContentSaveService = Depends(get_content_save_service)
):
    """Save stats, motivational, greetings and wisdom items"""
    result = service.save_collection_items(
        request.items_to_save,
        request.source_content_id,
        _created_by(request.created_by, user),
        content_type=request.content_type,
    )
    return envelope(result["data"], count=result["count"], tables=result["tables"])
