"""Schemas for the question bank and its lookup tables."""

from typing import Optional

from pydantic import Field

from api.schemas.common import CamelModel


class LookupResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None


class QuestionFilter(CamelModel):
    """Conjunctive equality filter; omitted fields match everything."""

    technology_id: Optional[int] = None
    experience_level_id: Optional[int] = None
    question_type_id: Optional[int] = None
    count: int = Field(3, ge=1, le=100, description="Number of questions to draw")


class QuestionCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    technology_id: int
    experience_level_id: int
    question_type_id: int
    evaluates_technical: bool = False
    evaluates_problem_solving: bool = False
    evaluates_communication: bool = False
    is_custom: bool = False


class QuestionUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    answer: Optional[str] = Field(None, min_length=1)
    technology_id: Optional[int] = None
    experience_level_id: Optional[int] = None
    question_type_id: Optional[int] = None
    evaluates_technical: Optional[bool] = None
    evaluates_problem_solving: Optional[bool] = None
    evaluates_communication: Optional[bool] = None
    is_custom: Optional[bool] = None


class QuestionResponse(CamelModel):
    id: int
    title: str
    content: str
    answer: str
    technology_id: int
    experience_level_id: int
    question_type_id: int
    evaluates_technical: bool
    evaluates_problem_solving: bool
    evaluates_communication: bool
    is_custom: bool


class QuestionDetailResponse(QuestionResponse):
    technology: Optional[LookupResponse] = None
    experience_level: Optional[LookupResponse] = None
    question_type: Optional[LookupResponse] = None
