"""ORM models. Importing this package registers every table on ``Base.metadata``."""

from database.models.users import User, UserRole, UserSession
from database.models.questions import ExperienceLevel, Question, QuestionType, Technology
from database.models.candidates import Candidate, CandidateStatus
from database.models.interviews import (
    ALLOWED_TRANSITIONS,
    Interview,
    InterviewQuestion,
    InterviewStatus,
    Recommendation,
    can_transition,
)
from database.models.jobs import JobPosition
from database.models.applications import ApplicationStatus, JobApplication

__all__ = [
    "User",
    "UserRole",
    "UserSession",
    "Technology",
    "ExperienceLevel",
    "QuestionType",
    "Question",
    "Candidate",
    "CandidateStatus",
    "Interview",
    "InterviewQuestion",
    "InterviewStatus",
    "Recommendation",
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "JobPosition",
    "JobApplication",
    "ApplicationStatus",
]
