from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Text, DateTime, Enum as SQLEnum
from database.engine import Base
from core.utils.datetime import now
from datetime import datetime
from enum import Enum as PyEnum


class CandidateStatus(str, PyEnum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    HIRED = "hired"
    REJECTED = "rejected"


class Candidate(Base):
    """
    A person being evaluated. Status is driven from outside: application
    acceptance/rejection and the HR decision after an interview.
    """

    __tablename__: str = "candidates"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    notes: Mapped[str | None] = mapped_column(Text)
    resume_path: Mapped[str | None] = mapped_column(String(500))
    status: Mapped[CandidateStatus] = mapped_column(
        SQLEnum(
            CandidateStatus,
            name="candidate_status",
            native_enum=False,
            length=32,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=CandidateStatus.NEW,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
