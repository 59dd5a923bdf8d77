from pydantic import BaseModel, ConfigDict, Field
from hockey_cms.core.content_types import ContentType


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_content: str = Field(alias="sourceContent")
    custom_prompt: str = Field(alias="customPrompt")


class ReadableTriviaRequest(GenerateRequest):
    question_type: ContentType = Field(ContentType.MULTIPLE_CHOICE, alias="questionType")
