from enum import Enum
from pydantic import BaseModel
from typing import Optional
from hockey_cms.core.schemas import RequiredText


class IngestStatus(str, Enum):
    READY = "ready"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SourceContentCreate(BaseModel):
    content_text: RequiredText
    title: Optional[str] = None
    theme: Optional[str] = None
    category: Optional[str] = None


class SourceContentUpdate(BaseModel):
    content_text: Optional[str] = None
    title: Optional[str] = None
    theme: Optional[str] = None
    category: Optional[str] = None
    status: Optional[IngestStatus] = None


class PreviewProcessingRequest(BaseModel):
    text: RequiredText
