from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from hockey_cms.modules.collections.schemas import WisdomCreate


class SaveItemsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items_to_save: List[Dict[str, Any]] = Field(default_factory=list, alias="itemsToSave")
    source_content_id: Optional[int] = Field(None, alias="sourceContentId")
    created_by: Optional[str] = Field(None, alias="createdBy")
    # Fallback for items that carry no content_type of their own
    content_type: Optional[str] = Field(None, alias="contentType")


class SaveMarkdownRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    source_content_id: Optional[int] = Field(None, alias="sourceContentId")
    created_by: Optional[str] = Field(None, alias="createdBy")


class GeneratedWisdom(WisdomCreate):
    # Penalty-box musings often come back without a "from the box" line
    from_the_box: str = ""
