from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


class TestCase(CamelModel):
    __test__ = False

    input: str
    expected_output: str


class Question(CamelModel):
    title: str
    description: str = ""
    test_cases: List[TestCase] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Question title is required.")
        return v


class ContestCreate(CamelModel):
    name: str
    time_limit_minutes: int = Field(ge=1)
    questions: List[Question] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Contest name is required.")
        return v


class ContestCreated(CamelModel):
    id: str


class QuestionPublic(CamelModel):
    title: str
    description: str = ""


class ContestPublic(CamelModel):
    id: str
    name: str
    time_limit_minutes: int
    questions: List[QuestionPublic] = []
    created_at: Optional[datetime] = None


class ContestEnvelope(CamelModel):
    contest: ContestPublic


class ContestSummary(CamelModel):
    id: str
    name: str
    time_limit_minutes: int
    question_count: int
    created_at: Optional[datetime] = None


class Contest(CamelModel):
    """Full contest including hidden test cases. Never returned over the API."""
    id: str
    name: str
    time_limit_minutes: int
    questions: List[Question] = []
    created_at: Optional[datetime] = None
