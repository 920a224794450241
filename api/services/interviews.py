"""
Interview service functions.

Covers the interview lifecycle (scheduled -> in_progress -> completed, with
cancellation from either open state), the questions attached to an
interview, and the two scoring paths:

* ``update_interview_question`` edits one question's score/notes/skip flag
  and never touches the interview's aggregate fields;
* ``generate_interview_summary`` recomputes and persists the aggregate.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.questions import QuestionFilter
from api.services import questions as question_service
from core.config import settings
from core.exceptions import InvalidStateTransition, NotFoundError, ValidationError
from core.middleware.authorization import (
    ensure_can_act_on_interview,
    ensure_can_view_interview,
    visible_interviews_filter,
)
from core.scoring import ScoredItem, ScorePreview, ScoreSummary, preview, summarize
from core.security import AuditAction, ResourceType, log_audit_event
from database.models.candidates import Candidate, CandidateStatus
from database.models.interviews import (
    Interview,
    InterviewQuestion,
    InterviewStatus,
    can_transition,
)
from database.models.questions import Question
from database.models.users import User, UserRole

logger = logging.getLogger(__name__)

# Summary generation may run (and re-run) once the interview has started
SUMMARY_SOURCE_STATUSES = frozenset({InterviewStatus.IN_PROGRESS, InterviewStatus.COMPLETED})

HR_DECISION_SOURCE_STATUSES = frozenset({InterviewStatus.IN_PROGRESS, InterviewStatus.COMPLETED})

SCHEDULING_FIELDS = ("title", "date", "assignee_id", "notes")


def _columns(obj: Any) -> Dict[str, Any]:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


def _transition(interview: Interview, target: InterviewStatus) -> None:
    if not can_transition(interview.status, target):
        raise InvalidStateTransition(
            f"Cannot move interview {interview.id} from {interview.status.value} to {target.value}"
        )
    interview.status = target


async def _require_interview(db: AsyncSession, interview_id: int) -> Interview:
    interview = await db.get(Interview, interview_id)
    if interview is None:
        raise NotFoundError.for_resource("Interview", interview_id)
    return interview


async def _check_assignee(db: AsyncSession, assignee_id: Optional[int]) -> None:
    if assignee_id is None:
        return
    if await db.get(User, assignee_id) is None:
        raise ValidationError(f"Assignee {assignee_id} does not exist")


# ==================== Interviews ===================== #
async def list_interviews(db: AsyncSession, user: User) -> List[Interview]:
    """Interviews visible to ``user``; see ``visible_interviews_filter``."""
    result = await db.execute(
        select(Interview)
        .where(visible_interviews_filter(user))
        .order_by(Interview.date.desc(), Interview.id.desc())
    )
    return list(result.scalars().all())


async def get_interview(db: AsyncSession, interview_id: int) -> Optional[Interview]:
    return await db.get(Interview, interview_id)


async def get_interview_for_user(db: AsyncSession, interview_id: int, user: User) -> Interview:
    interview = await _require_interview(db, interview_id)
    ensure_can_view_interview(user, interview)
    return interview


async def create_interview(db: AsyncSession, data: Dict[str, Any], actor: User) -> Interview:
    """
    Schedule an interview. Status always starts as scheduled with no scores.

    Raises:
        NotFoundError: the candidate does not exist
        ValidationError: the assignee does not exist
    """
    interview = await _new_interview(db, data, actor)
    await db.commit()
    await db.refresh(interview)
    logger.info(f"Interview {interview.id} scheduled for candidate {interview.candidate_id}")
    return interview


async def _new_interview(db: AsyncSession, data: Dict[str, Any], actor: User) -> Interview:
    if await db.get(Candidate, data["candidate_id"]) is None:
        raise NotFoundError.for_resource("Candidate", data["candidate_id"])
    await _check_assignee(db, data.get("assignee_id"))

    interview = Interview(
        title=data["title"],
        candidate_id=data["candidate_id"],
        date=data["date"],
        assignee_id=data.get("assignee_id"),
        notes=data.get("notes"),
        status=InterviewStatus.SCHEDULED,
        created_by_admin=actor.role == UserRole.ADMIN,
    )
    db.add(interview)
    await db.flush()
    return interview


async def generate_interview(
    db: AsyncSession,
    data: Dict[str, Any],
    filter: QuestionFilter,
    actor: User,
) -> Dict[str, Any]:
    """
    Create an interview and attach randomly drawn questions in one
    transaction. Returns the interview with details.
    """
    interview = await _new_interview(db, data, actor)

    drawn = await question_service.get_random_questions(db, filter)
    for question in drawn:
        db.add(InterviewQuestion(interview_id=interview.id, question_id=question.id))

    await db.commit()
    logger.info(f"Generated interview {interview.id} with {len(drawn)} questions")
    return await get_interview_with_details(db, interview.id)


async def update_interview(
    db: AsyncSession, interview_id: int, changes: Dict[str, Any]
) -> Optional[Interview]:
    """Edit scheduling fields only; status and scores are not writable here."""
    interview = await db.get(Interview, interview_id)
    if interview is None:
        return None

    if "assignee_id" in changes:
        await _check_assignee(db, changes["assignee_id"])

    for field in SCHEDULING_FIELDS:
        if field not in changes:
            continue
        if field in ("title", "date") and changes[field] is None:
            continue
        setattr(interview, field, changes[field])

    await db.commit()
    await db.refresh(interview)
    return interview


async def start_interview(db: AsyncSession, interview_id: int, actor: User) -> Interview:
    interview = await _require_interview(db, interview_id)
    ensure_can_act_on_interview(actor, interview)

    _transition(interview, InterviewStatus.IN_PROGRESS)
    await db.commit()
    await db.refresh(interview)
    logger.info(f"Interview {interview.id} started by user {actor.id}")
    return interview


async def cancel_interview(db: AsyncSession, interview_id: int, actor: User) -> Interview:
    interview = await _require_interview(db, interview_id)

    _transition(interview, InterviewStatus.CANCELLED)
    await db.commit()
    await db.refresh(interview)
    logger.info(f"Interview {interview.id} cancelled by user {actor.id}")
    return interview


async def delete_interview(db: AsyncSession, interview_id: int) -> bool:
    """Delete an interview and every question attached to it."""
    interview = await db.get(Interview, interview_id)
    if interview is None:
        return False

    await db.execute(delete(InterviewQuestion).where(InterviewQuestion.interview_id == interview_id))
    await db.delete(interview)
    await db.commit()
    logger.info(f"Deleted interview {interview_id}")
    return True


# ==================== Interview questions ===================== #
async def get_interview_questions(db: AsyncSession, interview_id: int) -> List[InterviewQuestion]:
    result = await db.execute(
        select(InterviewQuestion)
        .where(InterviewQuestion.interview_id == interview_id)
        .order_by(InterviewQuestion.id)
    )
    return list(result.scalars().all())


async def get_interview_question(db: AsyncSession, interview_question_id: int) -> Optional[InterviewQuestion]:
    return await db.get(InterviewQuestion, interview_question_id)


async def create_interview_question(db: AsyncSession, data: Dict[str, Any]) -> InterviewQuestion:
    """
    Attach a bank question to an interview.

    Allowed while the interview is scheduled or in progress. With
    ``REQUIRE_IN_PROGRESS_FOR_QUESTIONS`` enabled only in_progress is allowed.
    """
    interview = await _require_interview(db, data["interview_id"])

    if interview.is_terminal:
        raise InvalidStateTransition(
            f"Cannot add questions to a {interview.status.value} interview"
        )
    if (
        settings.require_in_progress_for_questions
        and interview.status != InterviewStatus.IN_PROGRESS
    ):
        raise InvalidStateTransition("Questions can only be added once the interview has started")

    if await db.get(Question, data["question_id"]) is None:
        raise NotFoundError.for_resource("Question", data["question_id"])

    interview_question = InterviewQuestion(
        interview_id=interview.id,
        question_id=data["question_id"],
        score=data.get("score"),
        notes=data.get("notes"),
        skipped=bool(data.get("skipped", False)),
    )
    db.add(interview_question)
    await db.commit()
    await db.refresh(interview_question)
    return interview_question


async def update_interview_question(
    db: AsyncSession, interview_question_id: int, changes: Dict[str, Any]
) -> Optional[InterviewQuestion]:
    """
    Partial update of score, notes and skipped.

    The parent interview's aggregate scores are left as they are until the
    next summary generation.
    """
    interview_question = await db.get(InterviewQuestion, interview_question_id)
    if interview_question is None:
        return None

    for field in ("score", "notes", "skipped"):
        if field not in changes:
            continue
        if field == "skipped" and changes[field] is None:
            continue
        setattr(interview_question, field, changes[field])

    await db.commit()
    await db.refresh(interview_question)
    return interview_question


async def delete_interview_question(db: AsyncSession, interview_question_id: int) -> bool:
    interview_question = await db.get(InterviewQuestion, interview_question_id)
    if interview_question is None:
        return False

    await db.delete(interview_question)
    await db.commit()
    return True


# ==================== Scoring ===================== #
async def _questions_by_id(db: AsyncSession, question_ids: List[int]) -> Dict[int, Question]:
    if not question_ids:
        return {}
    result = await db.execute(select(Question).where(Question.id.in_(question_ids)))
    return {question.id: question for question in result.scalars().unique().all()}


async def _scored_items(db: AsyncSession, interview_id: int) -> List[ScoredItem]:
    """
    Interview questions paired with their bank flags. Rows whose bank
    question has been deleted are left out.
    """
    attached = await get_interview_questions(db, interview_id)
    bank = await _questions_by_id(db, [iq.question_id for iq in attached])

    items = []
    for iq in attached:
        question = bank.get(iq.question_id)
        if question is None:
            continue
        items.append(ScoredItem(
            score=iq.score,
            skipped=iq.skipped,
            evaluates_technical=question.evaluates_technical,
            evaluates_problem_solving=question.evaluates_problem_solving,
            evaluates_communication=question.evaluates_communication,
        ))
    return items


def _apply_summary(interview: Interview, summary: ScoreSummary) -> None:
    interview.technical_score = summary.technical_score
    interview.problem_solving_score = summary.problem_solving_score
    interview.communication_score = summary.communication_score
    interview.overall_score = summary.overall_score
    interview.recommendation = summary.recommendation


async def generate_interview_summary(
    db: AsyncSession,
    interview_id: int,
    actor: Optional[User] = None,
) -> Interview:
    """
    Recompute and persist the interview's skill scores, overall score and
    recommendation, and mark it completed.

    With no scored, non-skipped question the interview is returned
    unchanged. Otherwise the interview must be in progress, or already
    completed (re-running gives the same result).

    Raises:
        NotFoundError: unknown interview
        InvalidStateTransition: interview is scheduled or cancelled
    """
    interview = await _require_interview(db, interview_id)
    if actor is not None:
        ensure_can_act_on_interview(actor, interview)

    summary = summarize(await _scored_items(db, interview_id))
    if summary is None:
        logger.info(f"Interview {interview_id} has no scored questions; summary skipped")
        return interview

    if interview.status not in SUMMARY_SOURCE_STATUSES:
        raise InvalidStateTransition(
            f"Cannot generate a summary for a {interview.status.value} interview"
        )

    _apply_summary(interview, summary)
    if interview.status != InterviewStatus.COMPLETED:
        _transition(interview, InterviewStatus.COMPLETED)

    await db.commit()
    await db.refresh(interview)

    log_audit_event(
        AuditAction.GENERATE_SUMMARY,
        ResourceType.INTERVIEW,
        interview.id,
        user_id=actor.id if actor else None,
        details={
            "overall_score": summary.overall_score,
            "recommendation": summary.recommendation.value if summary.recommendation else None,
        },
    )
    return interview


async def get_score_preview(db: AsyncSession, interview_id: int) -> ScorePreview:
    """Live, unpersisted estimate of the interview's scores."""
    await _require_interview(db, interview_id)
    return preview(await _scored_items(db, interview_id))


async def record_hr_decision(
    db: AsyncSession,
    interview_id: int,
    decision: str,
    hr_notes: Optional[str],
    actor: User,
) -> Interview:
    """
    Final hire/reject call. Completes the interview if it is still in
    progress and sets the candidate's status to the decision.
    """
    interview = await _require_interview(db, interview_id)
    if interview.status not in HR_DECISION_SOURCE_STATUSES:
        raise InvalidStateTransition(
            f"Cannot record a decision for a {interview.status.value} interview"
        )

    candidate_status = CandidateStatus(decision)
    if candidate_status not in (CandidateStatus.HIRED, CandidateStatus.REJECTED):
        raise ValidationError("Decision must be 'hired' or 'rejected'")

    candidate = await db.get(Candidate, interview.candidate_id)
    if candidate is None:
        raise NotFoundError.for_resource("Candidate", interview.candidate_id)

    interview.hr_notes = hr_notes
    if interview.status != InterviewStatus.COMPLETED:
        _transition(interview, InterviewStatus.COMPLETED)
    candidate.status = candidate_status

    await db.commit()
    await db.refresh(interview)

    log_audit_event(
        AuditAction.HR_DECISION,
        ResourceType.INTERVIEW,
        interview.id,
        user_id=actor.id,
        details={"candidate_id": candidate.id, "decision": candidate_status.value},
    )
    return interview


# ==================== Details ===================== #
async def get_interview_with_details(db: AsyncSession, interview_id: int) -> Optional[Dict[str, Any]]:
    """
    Interview plus its candidate and attached questions. Each attached
    question carries its bank question (with lookup names), or None if that
    question has since been deleted.
    """
    interview = await db.get(Interview, interview_id)
    if interview is None:
        return None

    candidate = await db.get(Candidate, interview.candidate_id)
    attached = await get_interview_questions(db, interview_id)
    bank = await _questions_by_id(db, [iq.question_id for iq in attached])

    details = _columns(interview)
    details["candidate"] = candidate
    details["questions"] = [
        {**_columns(iq), "question": bank.get(iq.question_id)}
        for iq in attached
    ]
    return details
