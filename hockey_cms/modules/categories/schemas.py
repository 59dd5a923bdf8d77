from pydantic import BaseModel
from typing import Optional
from hockey_cms.core.schemas import RequiredText


class CategoryBase(BaseModel):
    name: RequiredText
    description: Optional[str] = None
    emoji: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(CategoryBase):
    pass
