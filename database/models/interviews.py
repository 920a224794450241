from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    Integer,
    Text,
    DateTime,
    Enum as SQLEnum,
)
from database.engine import Base
from database.models.candidates import Candidate
from core.utils.datetime import now
from datetime import datetime
from enum import Enum as PyEnum


class InterviewStatus(str, PyEnum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Recommendation(str, PyEnum):
    STRONG_HIRE = "strong_hire"
    HIRE = "hire"
    CONSIDER = "consider"
    PASS = "pass"


# completed and cancelled are terminal
ALLOWED_TRANSITIONS: dict[InterviewStatus, frozenset[InterviewStatus]] = {
    InterviewStatus.SCHEDULED: frozenset(
        {InterviewStatus.IN_PROGRESS, InterviewStatus.CANCELLED}
    ),
    InterviewStatus.IN_PROGRESS: frozenset(
        {InterviewStatus.COMPLETED, InterviewStatus.CANCELLED}
    ),
    InterviewStatus.COMPLETED: frozenset(),
    InterviewStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def can_transition(source: InterviewStatus, target: InterviewStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(source, frozenset())


def _enum(enum_cls: type[PyEnum], name: str) -> SQLEnum:
    return SQLEnum(
        enum_cls,
        name=name,
        native_enum=False,
        length=32,
        values_callable=lambda e: [m.value for m in e],
    )


class Interview(Base):
    """
    Aggregate root for one interview engagement.

    Score fields are snapshots written only by summary generation; editing an
    InterviewQuestion never touches them.
    """

    __tablename__: str = "interviews"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    candidate_id: Mapped[int] = mapped_column(
        ForeignKey("candidates.id"), nullable=False, index=True
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[InterviewStatus] = mapped_column(
        _enum(InterviewStatus, "interview_status"),
        nullable=False,
        default=InterviewStatus.SCHEDULED,
    )
    assignee_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True
    )

    technical_score: Mapped[int | None] = mapped_column(Integer)
    problem_solving_score: Mapped[int | None] = mapped_column(Integer)
    communication_score: Mapped[int | None] = mapped_column(Integer)
    overall_score: Mapped[int | None] = mapped_column(Integer)
    recommendation: Mapped[Recommendation | None] = mapped_column(
        _enum(Recommendation, "interview_recommendation")
    )

    notes: Mapped[str | None] = mapped_column(Text)
    hr_notes: Mapped[str | None] = mapped_column(Text)
    created_by_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    candidate: Mapped["Candidate"] = relationship()
    questions: Mapped[list["InterviewQuestion"]] = relationship(
        back_populates="interview",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InterviewQuestion.id",
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class InterviewQuestion(Base):
    """
    Per-interview scoring record for one bank question.

    ``question_id`` is not a foreign key: deleting a bank
    question leaves these rows pointing at nothing.
    """

    __tablename__: str = "interview_questions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    interview_id: Mapped[int] = mapped_column(
        ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    score: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)
    skipped: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    interview: Mapped["Interview"] = relationship(back_populates="questions")
