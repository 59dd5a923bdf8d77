import asyncio
from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from hockey_cms.config import settings
from hockey_cms.core.dependencies import require_editor, require_job_runner
from hockey_cms.core.responses import envelope
from hockey_cms.database.supabase_client import get_service_supabase
from hockey_cms.modules.generation.gemini_client import GeminiClient, get_gemini_client
from hockey_cms.modules.generation_jobs.schemas import BulkGenerateRequest
from hockey_cms.modules.generation_jobs.service import GenerationJobService, build_job_service
from supabase import Client
from typing import Dict, Optional

router = APIRouter(tags=["generation-jobs"])


def get_job_service(
    supabase: Client = Depends(get_service_supabase),
    gemini: GeminiClient = Depends(get_gemini_client)
) -> GenerationJobService:
    return build_job_service(supabase, gemini)


@router.post("/bulk-generate")
async def bulk_generate(
    request: BulkGenerateRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationJobService = Depends(get_job_service)
):
    """Queue generation of every content type for one source"""
    jobs = service.start_bulk_generation(request.source_content_id)
    return envelope(jobs, count=len(jobs))


@router.post("/bulk-generate/cancel")
async def cancel_bulk_generate(
    request: BulkGenerateRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationJobService = Depends(get_job_service)
):
    cancelled = service.cancel_bulk_generation(request.source_content_id)
    return envelope(
        {"cancelledCount": cancelled},
        message=f"Cancelled {cancelled} job(s)"
    )


@router.post("/process-jobs", dependencies=[Depends(require_job_runner)])
async def process_jobs(service: GenerationJobService = Depends(get_job_service)):
    """Process the oldest pending job; called by a scheduler or the background worker"""
    # Gemini and database calls are blocking
    result = await run_in_threadpool(service.process_next_job)
    if result["processed"] and settings.job_delay_seconds > 0:
        # Space out Gemini calls
        await asyncio.sleep(settings.job_delay_seconds)
    message = result.pop("message")
    return envelope(result, message=message)


@router.get("/generation-jobs")
async def list_generation_jobs(
    source_content_id: Optional[int] = None,
    status: Optional[str] = None,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationJobService = Depends(get_job_service)
):
    rows, count = service.list_jobs(source_content_id=source_content_id, status=status, limit=limit, offset=offset)
    return envelope(rows, count=count)
