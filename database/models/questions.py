from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Boolean, ForeignKey, Integer, Text, DateTime
from database.engine import Base
from core.utils.datetime import now
from datetime import datetime


# ==================== Lookups ===================== #
class Technology(Base):
    __tablename__: str = "technologies"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class ExperienceLevel(Base):
    __tablename__: str = "experience_levels"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class QuestionType(Base):
    __tablename__: str = "question_types"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


# ==================== Question bank ===================== #
class Question(Base):
    """
    A bank entry. The three ``evaluates_*`` flags are independent: a question
    may feed zero, one or several skill scores.
    """

    __tablename__: str = "questions"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)

    technology_id: Mapped[int] = mapped_column(
        ForeignKey("technologies.id"), nullable=False, index=True
    )
    experience_level_id: Mapped[int] = mapped_column(
        ForeignKey("experience_levels.id"), nullable=False, index=True
    )
    question_type_id: Mapped[int] = mapped_column(
        ForeignKey("question_types.id"), nullable=False, index=True
    )

    evaluates_technical: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    evaluates_problem_solving: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    evaluates_communication: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )

    technology: Mapped["Technology"] = relationship(lazy="joined")
    experience_level: Mapped["ExperienceLevel"] = relationship(lazy="joined")
    question_type: Mapped["QuestionType"] = relationship(lazy="joined")
