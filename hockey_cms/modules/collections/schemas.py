from pydantic import BaseModel
from typing import List, Optional
from hockey_cms.core.schemas import RequiredText
from hockey_cms.core.status import PublicationStatus


class CollectionBase(BaseModel):
    attribution: Optional[str] = None
    status: Optional[PublicationStatus] = None
    source_content_id: Optional[int] = None
    used_in: Optional[List[str]] = None
    display_order: Optional[int] = None


class ThemedBase(CollectionBase):
    theme: Optional[str] = None
    category: Optional[str] = None


class StatCreate(ThemedBase):
    stat_text: RequiredText
    stat_value: Optional[str] = None
    stat_category: Optional[str] = None
    year: Optional[int] = None


class StatUpdate(ThemedBase):
    stat_text: Optional[str] = None
    stat_value: Optional[str] = None
    stat_category: Optional[str] = None
    year: Optional[int] = None


class GreetingCreate(CollectionBase):
    greeting_text: RequiredText


class GreetingUpdate(CollectionBase):
    greeting_text: Optional[str] = None


class MotivationalCreate(ThemedBase):
    quote: RequiredText
    context: Optional[str] = None


class MotivationalUpdate(ThemedBase):
    quote: Optional[str] = None
    context: Optional[str] = None


class WisdomCreate(ThemedBase):
    title: RequiredText
    musing: RequiredText
    from_the_box: RequiredText


class WisdomUpdate(ThemedBase):
    title: Optional[str] = None
    musing: Optional[str] = None
    from_the_box: Optional[str] = None
