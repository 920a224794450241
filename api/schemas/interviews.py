"""Schemas for interviews, interview questions and scoring."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from api.schemas.candidates import CandidateResponse
from api.schemas.common import CamelModel
from api.schemas.questions import QuestionDetailResponse, QuestionFilter
from core.scoring import MAX_SCORE, MIN_SCORE
from database.models.interviews import InterviewStatus, Recommendation


class InterviewCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    candidate_id: int
    date: datetime
    assignee_id: Optional[int] = None
    notes: Optional[str] = None


class InterviewGenerate(InterviewCreate):
    """Create an interview and attach randomly drawn questions in one step."""

    filter: QuestionFilter = Field(default_factory=QuestionFilter)


class InterviewUpdate(CamelModel):
    """Editable scheduling fields. Status and scores have dedicated endpoints."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime] = None
    assignee_id: Optional[int] = None
    notes: Optional[str] = None


class HRDecisionRequest(CamelModel):
    decision: Literal["hired", "rejected"]
    hr_notes: Optional[str] = None


class InterviewResponse(CamelModel):
    id: int
    title: str
    candidate_id: int
    date: datetime
    status: InterviewStatus
    assignee_id: Optional[int] = None
    technical_score: Optional[int] = None
    problem_solving_score: Optional[int] = None
    communication_score: Optional[int] = None
    overall_score: Optional[int] = None
    recommendation: Optional[Recommendation] = None
    notes: Optional[str] = None
    hr_notes: Optional[str] = None
    created_by_admin: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InterviewQuestionCreate(CamelModel):
    interview_id: int
    question_id: int
    score: Optional[int] = Field(None, ge=MIN_SCORE, le=MAX_SCORE)
    notes: Optional[str] = None
    skipped: bool = False


class InterviewQuestionUpdate(CamelModel):
    score: Optional[int] = Field(None, ge=MIN_SCORE, le=MAX_SCORE)
    notes: Optional[str] = None
    skipped: Optional[bool] = None


class InterviewQuestionResponse(CamelModel):
    id: int
    interview_id: int
    question_id: int
    score: Optional[int] = None
    notes: Optional[str] = None
    skipped: bool


class InterviewQuestionDetail(InterviewQuestionResponse):
    # None when the bank question was deleted after being attached
    question: Optional[QuestionDetailResponse] = None


class InterviewDetailResponse(InterviewResponse):
    candidate: Optional[CandidateResponse] = None
    questions: list[InterviewQuestionDetail] = Field(default_factory=list)


class ScorePreviewResponse(CamelModel):
    technical_score: float
    problem_solving_score: float
    communication_score: float
    overall_score: float
    scored_count: int
    skipped_count: int
