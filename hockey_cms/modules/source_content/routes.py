from fastapi import APIRouter, Depends, Query
from hockey_cms.core.dependencies import require_editor
from hockey_cms.core.responses import envelope
from hockey_cms.database.supabase_client import get_supabase
from hockey_cms.modules.source_content.schemas import (
    SourceContentCreate, SourceContentUpdate, PreviewProcessingRequest
)
from hockey_cms.modules.source_content.service import SourceContentService
from hockey_cms.modules.source_content.text_processing import process_text
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/source-content", tags=["source-content"])


def get_source_content_service(supabase: Client = Depends(get_supabase)) -> SourceContentService:
    return SourceContentService(supabase)


@router.get("")
async def list_source_content(
    status: Optional[str] = None,
    search: Optional[str] = None,
    theme: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: Optional[Dict] = Depends(require_editor),
    service: SourceContentService = Depends(get_source_content_service)
):
    rows, count = service.list_sources(
        status=status, search=search, theme=theme, category=category, limit=limit, offset=offset
    )
    return envelope(rows, count=count)


@router.post("/preview-processing")
async def preview_processing(
    request: PreviewProcessingRequest,
    user: Optional[Dict] = Depends(require_editor)
):
    """Run the cleanup pipeline without storing anything"""
    return envelope(process_text(request.text))


@router.get("/{source_id}")
async def get_source_content(
    source_id: int,
    user: Optional[Dict] = Depends(require_editor),
    service: SourceContentService = Depends(get_source_content_service)
):
    return envelope(service.get_source(source_id))


@router.post("", status_code=201)
async def create_source_content(
    source_data: SourceContentCreate,
    user: Optional[Dict] = Depends(require_editor),
    service: SourceContentService = Depends(get_source_content_service)
):
    return envelope(service.create_source(source_data), message="Source content saved successfully")


@router.put("/{source_id}")
async def update_source_content(
    source_id: int,
    source_data: SourceContentUpdate,
    user: Optional[Dict] = Depends(require_editor),
    service: SourceContentService = Depends(get_source_content_service)
):
    return envelope(service.update_source(source_id, source_data))


@router.delete("/{source_id}")
async def delete_source_content(
    source_id: int,
    user: Optional[Dict] = Depends(require_editor),
    service: SourceContentService = Depends(get_source_content_service)
):
    service.delete_source(source_id)
    return envelope(message="Source content deleted successfully")


@router.post("/{source_id}/process")
async def process_source_content(
    source_id: int,
    user: Optional[Dict] = Depends(require_editor),
    service: SourceContentService = Depends(get_source_content_service)
):
    """Clean the stored text, save processed_text and counts, return the chunks"""
    return envelope(service.process_source(source_id), message="Text processed successfully")
