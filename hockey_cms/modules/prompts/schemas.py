from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
from hockey_cms.core.schemas import RequiredText


class PromptCreate(BaseModel):
    prompt_content: RequiredText
    content_type: str
    name: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None
    created_by: Optional[str] = None


class PromptUpdate(BaseModel):
    prompt_content: Optional[str] = None
    content_type: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None


class PromptSaveDb(BaseModel):
    name: RequiredText
    category: RequiredText
    prompt_content: RequiredText
    selections: Optional[Dict[str, Any]] = None


class PromptFileSave(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_name: RequiredText = Field(alias="promptName")
    prompt_content: RequiredText = Field(alias="promptContent")
    category: RequiredText
