from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


ACTIVE_JOB_STATUSES = [JobStatus.PENDING.value, JobStatus.IN_PROGRESS.value]


class BulkGenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_content_id: int = Field(alias="sourceContentId")
