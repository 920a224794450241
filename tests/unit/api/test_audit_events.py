"""
Tests for audit events emitted by the candidate, question and job services.

Tests:
- Create, update and delete are each recorded with the acting user
- Candidate details are masked because they carry PII
"""

from unittest.mock import patch

import pytest

from api.services import candidates as candidate_service
from api.services import jobs as job_service
from api.services import questions as question_service
from core.security import AuditAction, ResourceType, log_audit_event
from database.models.questions import ExperienceLevel, QuestionType, Technology


def recorded(events):
    """(action, resource type, resource id, user id) for every emitted event."""
    return [
        (event["action"], event["resource_type"], event["resource_id"], event["user_id"])
        for event in events
    ]


@pytest.fixture
def audit():
    """Events emitted by the services, still written to the audit log."""
    events = []

    def capture(*args, **kwargs):
        event = log_audit_event(*args, **kwargs)
        events.append(event)
        return event

    with patch("api.services.candidates.log_audit_event", capture), \
            patch("api.services.questions.log_audit_event", capture), \
            patch("api.services.jobs.log_audit_event", capture):
        yield events


class TestCandidateAudit:

    @pytest.mark.asyncio
    async def test_lifecycle_is_recorded(self, db, audit):
        candidate = await candidate_service.create_candidate(
            db, {"name": "Ada Lovelace", "email": "ada@example.com"}, acting_user_id=7
        )
        await candidate_service.update_candidate(db, candidate.id, {"phone": "555-0100"}, acting_user_id=7)
        await candidate_service.delete_candidate(db, candidate.id, acting_user_id=7)

        cid = str(candidate.id)
        assert recorded(audit) == [
            (AuditAction.CREATE.value, ResourceType.CANDIDATE.value, cid, 7),
            (AuditAction.UPDATE.value, ResourceType.CANDIDATE.value, cid, 7),
            (AuditAction.DELETE.value, ResourceType.CANDIDATE.value, cid, 7),
        ]

    @pytest.mark.asyncio
    async def test_candidate_details_are_masked(self, db, audit):
        await candidate_service.create_candidate(db, {"name": "Ada Lovelace", "email": "ada@example.com"})

        event = audit[0]
        assert event["contains_pii"] is True
        assert event["details"]["name"] == "A***[12]"
        assert event["details"]["email"] == "a***[15]"
        assert event["details"]["status"] == "new"


class TestQuestionAudit:

    @pytest.mark.asyncio
    async def test_lifecycle_is_recorded(self, db, audit):
        technology = Technology(name="Python")
        level = ExperienceLevel(name="beginner")
        qtype = QuestionType(name="algorithms")
        db.add_all([technology, level, qtype])
        await db.commit()

        question = await question_service.create_question(db, {
            "title": "Lists",
            "content": "Reverse a list.",
            "answer": "Slicing.",
            "technology_id": technology.id,
            "experience_level_id": level.id,
            "question_type_id": qtype.id,
        }, acting_user_id=3)
        await question_service.update_question(db, question.id, {"title": "Lists again"}, acting_user_id=3)
        await question_service.delete_question(db, question.id, acting_user_id=3)

        qid = str(question.id)
        assert recorded(audit) == [
            (AuditAction.CREATE.value, ResourceType.QUESTION.value, qid, 3),
            (AuditAction.UPDATE.value, ResourceType.QUESTION.value, qid, 3),
            (AuditAction.DELETE.value, ResourceType.QUESTION.value, qid, 3),
        ]
        assert audit[1]["details"] == {"fields": ["title"]}


class TestJobAudit:

    @pytest.mark.asyncio
    async def test_lifecycle_is_recorded(self, db, audit):
        job = await job_service.create_job(db, {"title": "Backend Engineer"}, acting_user_id=2)
        await job_service.update_job(db, job.id, {"is_open": False}, acting_user_id=2)
        await job_service.delete_job(db, job.id, acting_user_id=2)

        jid = str(job.id)
        assert recorded(audit) == [
            (AuditAction.CREATE.value, ResourceType.JOB.value, jid, 2),
            (AuditAction.UPDATE.value, ResourceType.JOB.value, jid, 2),
            (AuditAction.DELETE.value, ResourceType.JOB.value, jid, 2),
        ]

    @pytest.mark.asyncio
    async def test_missing_job_records_nothing(self, db, audit):
        assert await job_service.delete_job(db, 404, acting_user_id=2) is False
        assert recorded(audit) == []
