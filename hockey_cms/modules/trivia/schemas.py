from pydantic import BaseModel, StrictBool, field_validator
from typing import Optional, List, Literal
from hockey_cms.core.schemas import RequiredText
from hockey_cms.core.status import PublicationStatus

Difficulty = Literal["Easy", "Medium", "Hard"]


class TriviaBase(BaseModel):
    explanation: Optional[str] = None
    category: Optional[str] = None
    theme: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    attribution: Optional[str] = None
    status: Optional[PublicationStatus] = None
    source_content_id: Optional[int] = None
    display_order: Optional[int] = None


class MultipleChoiceCreate(TriviaBase):
    question_text: RequiredText
    correct_answer: RequiredText
    wrong_answers: List[str]

    @field_validator("wrong_answers")
    @classmethod
    def exactly_three_wrong_answers(cls, value: List[str]) -> List[str]:
        if len(value) != 3:
            raise ValueError("wrong_answers must contain exactly 3 items")
        if any(not answer or not answer.strip() for answer in value):
            raise ValueError("All wrong_answers must be non-empty strings")
        return [answer.strip() for answer in value]


class MultipleChoiceUpdate(TriviaBase):
    question_text: Optional[str] = None
    correct_answer: Optional[str] = None
    wrong_answers: Optional[List[str]] = None

    @field_validator("wrong_answers")
    @classmethod
    def exactly_three_wrong_answers(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is not None and len(value) != 3:
            raise ValueError("wrong_answers must contain exactly 3 items")
        return value


class TrueFalseCreate(TriviaBase):
    question_text: RequiredText
    is_true: StrictBool


class TrueFalseUpdate(TriviaBase):
    question_text: Optional[str] = None
    is_true: Optional[bool] = None


class WhoAmICreate(TriviaBase):
    question_text: RequiredText
    correct_answer: RequiredText


class WhoAmIUpdate(TriviaBase):
    question_text: Optional[str] = None
    correct_answer: Optional[str] = None
