from fastapi import APIRouter, Depends, Query
from hockey_cms.config import settings
from hockey_cms.core.dependencies import get_current_user, require_editor
from hockey_cms.core.responses import envelope
from hockey_cms.database.supabase_client import get_supabase
from hockey_cms.modules.prompts.files import PromptTemplateStore, load_topics
from hockey_cms.modules.prompts.schemas import PromptCreate, PromptUpdate, PromptSaveDb, PromptFileSave
from hockey_cms.modules.prompts.service import PromptService
from supabase import Client
from typing import Dict, Any, Optional

router = APIRouter(prefix="/prompts", tags=["prompts"])
topics_router = APIRouter(prefix="/topics", tags=["prompts"])


def get_prompt_service(supabase: Client = Depends(get_supabase)) -> PromptService:
    return PromptService(supabase)


def get_template_store() -> PromptTemplateStore:
    return PromptTemplateStore(settings.prompts_dir)


@router.get("")
async def list_prompts(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: Optional[Dict] = Depends(require_editor),
    service: PromptService = Depends(get_prompt_service)
):
    rows, total = service.list_prompts(limit=limit, offset=offset)
    return envelope(rows, total=total)


@router.post("", status_code=201)
async def create_prompt(
    prompt_data: PromptCreate,
    user: Optional[Dict] = Depends(require_editor),
    service: PromptService = Depends(get_prompt_service)
):
    if not prompt_data.created_by and user:
        prompt_data.created_by = user.get("id")
    return envelope(service.create_prompt(prompt_data), message="Prompt created successfully")


@router.get("/active/{content_type}")
async def get_active_prompt(
    content_type: str,
    user: Optional[Dict] = Depends(require_editor),
    service: PromptService = Depends(get_prompt_service)
):
    """The prompt the job processor uses for this content type"""
    return envelope(service.get_active_prompt(content_type))


@router.post("/save-db", status_code=201)
async def save_prompt_to_db(
    prompt_data: PromptSaveDb,
    user: Dict[str, Any] = Depends(get_current_user),
    service: PromptService = Depends(get_prompt_service)
):
    """Save a prompt builder result; always requires a signed-in user"""
    return envelope(
        service.save_prompt_to_db(prompt_data, user["id"]),
        message="Prompt saved to database successfully"
    )


@router.post("/save", status_code=201)
async def save_prompt_template(
    prompt_data: PromptFileSave,
    user: Optional[Dict] = Depends(require_editor),
    store: PromptTemplateStore = Depends(get_template_store)
):
    """Write a prompt template as a Markdown file under the prompts directory"""
    saved = store.save_template(prompt_data.prompt_name, prompt_data.prompt_content, prompt_data.category)
    return envelope(
        message=f"Prompt saved successfully as {saved['fileName']}",
        filePath=saved["filePath"]
    )


@router.get("/templates/{category}")
async def list_prompt_templates(
    category: str,
    user: Optional[Dict] = Depends(require_editor),
    store: PromptTemplateStore = Depends(get_template_store)
):
    templates = store.list_templates(category)
    return envelope(templates, count=len(templates))


@router.get("/{prompt_id}")
async def get_prompt(
    prompt_id: int,
    user: Optional[Dict] = Depends(require_editor),
    service: PromptService = Depends(get_prompt_service)
):
    return envelope(service.get_prompt(prompt_id))


@router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: int,
    prompt_data: PromptUpdate,
    user: Optional[Dict] = Depends(require_editor),
    service: PromptService = Depends(get_prompt_service)
):
    return envelope(service.update_prompt(prompt_id, prompt_data), message="Prompt updated successfully")


@router.delete("/{prompt_id}")
async def delete_prompt(
    prompt_id: int,
    user: Optional[Dict] = Depends(require_editor),
    service: PromptService = Depends(get_prompt_service)
):
    service.delete_prompt(prompt_id)
    return envelope(message="Prompt deleted successfully")


@topics_router.get("/{content_type}")
async def get_topics(content_type: str):
    """Topic ideas parsed from the Markdown topic files"""
    topics = load_topics(settings.topics_dir, content_type)
    return envelope(topics, count=len(topics), contentType=content_type)
