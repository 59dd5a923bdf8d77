from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from hockey_cms.core.content_types import is_trivia, normalize_content_type
from hockey_cms.core.dependencies import require_editor
from hockey_cms.core.responses import envelope
from hockey_cms.modules.generation.gemini_client import GeminiClient, get_gemini_client
from hockey_cms.modules.generation.schemas import GenerateRequest, ReadableTriviaRequest
from hockey_cms.modules.generation.service import GenerationService
from typing import Dict, Optional

router = APIRouter(prefix="/gemini", tags=["generation"])


def get_generation_service(gemini: GeminiClient = Depends(get_gemini_client)) -> GenerationService:
    return GenerationService(gemini)


@router.post("/generate/{content_type}")
async def generate_content(
    content_type: str,
    request: GenerateRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationService = Depends(get_generation_service)
):
    """Generate draft items of one content type for review in the CMS"""
    try:
        kind = normalize_content_type(content_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unsupported content type: {content_type}")
    result = await run_in_threadpool(
        service.generate_for_review, kind, request.source_content, request.custom_prompt
    )
    return envelope(result)


@router.post("/trivia-readable")
async def generate_readable_trivia(
    request: ReadableTriviaRequest,
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationService = Depends(get_generation_service)
):
    """Markdown trivia for the editor; save it with /trivia/save-markdown/{question_type}"""
    if not is_trivia(request.question_type):
        raise HTTPException(status_code=400, detail="questionType must be a trivia type")
    result = await run_in_threadpool(
        service.generate_readable_trivia, request.source_content, request.custom_prompt, request.question_type
    )
    return envelope(result)


@router.get("/test")
async def test_connection(
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationService = Depends(get_generation_service)
):
    result = await run_in_threadpool(service.test_connection)
    return envelope(result, message="Gemini API is working")


@router.get("/models")
async def list_models(
    user: Optional[Dict] = Depends(require_editor),
    service: GenerationService = Depends(get_generation_service)
):
    models = await run_in_threadpool(service.list_models)
    return envelope(models, count=len(models))
