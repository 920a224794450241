"""
End-to-end interview workflow over HTTP.

HR adds a candidate and schedules an interview for the technical
interviewer, who starts it, scores the questions and generates the
summary. HR then records the hiring decision.
"""

import pytest

from core.config import settings

API = settings.api_v1_prefix


def lookup_id(client, headers, path, name):
    items = client.get(f"{API}/{path}", headers=headers).json()
    return next(item["id"] for item in items if item["name"] == name)


@pytest.fixture
def question_ids(client, auth_headers):
    """Three bank questions covering one skill each."""
    headers = auth_headers["hr"]
    technology_id = lookup_id(client, headers, "technologies", "Python")
    level_id = lookup_id(client, headers, "experience-levels", "intermediate")
    type_id = lookup_id(client, headers, "question-types", "algorithms")

    ids = {}
    for skill in ("technical", "problemSolving", "communication"):
        response = client.post(f"{API}/questions", headers=headers, json={
            "title": f"{skill} question",
            "content": "Explain.",
            "answer": "Because.",
            "technologyId": technology_id,
            "experienceLevelId": level_id,
            "questionTypeId": type_id,
            f"evaluates{skill[0].upper()}{skill[1:]}": True,
            "isCustom": True,
        })
        assert response.status_code == 201, response.text
        ids[skill] = response.json()["id"]
    return ids


@pytest.fixture
def candidate_id(client, auth_headers):
    response = client.post(
        f"{API}/candidates",
        json={"name": "Ada Lovelace", "email": "ada@example.com", "phone": "555-0199"},
        headers=auth_headers["hr"],
    )
    assert response.status_code == 201, response.text
    assert response.json()["status"] == "in_progress"
    return response.json()["id"]


@pytest.fixture
def interview(client, auth_headers, user_ids, candidate_id, interview_date):
    response = client.post(f"{API}/interviews", headers=auth_headers["hr"], json={
        "title": "Backend interview",
        "candidateId": candidate_id,
        "date": interview_date,
        "assigneeId": user_ids["technical_interviewer"],
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestInterviewFlow:

    def test_full_flow(self, client, auth_headers, interview, question_ids, candidate_id):
        interviewer = auth_headers["technical_interviewer"]
        interview_id = interview["id"]
        assert interview["status"] == "scheduled"
        assert interview["overallScore"] is None

        started = client.post(f"{API}/interviews/{interview_id}/start", headers=interviewer)
        assert started.status_code == 200
        assert started.json()["status"] == "in_progress"

        scores = {"technical": 5, "problemSolving": 4, "communication": 3}
        for skill, question_id in question_ids.items():
            response = client.post(f"{API}/interview-questions", headers=interviewer, json={
                "interviewId": interview_id,
                "questionId": question_id,
                "score": scores[skill],
            })
            assert response.status_code == 201, response.text

        preview = client.get(f"{API}/interviews/{interview_id}/score-preview", headers=interviewer).json()
        assert preview["overallScore"] == 4.0
        assert preview["scoredCount"] == 3

        summary = client.post(f"{API}/interviews/{interview_id}/summary", headers=interviewer)
        assert summary.status_code == 200
        body = summary.json()
        assert body["status"] == "completed"
        assert body["technicalScore"] == 5
        assert body["problemSolvingScore"] == 4
        assert body["communicationScore"] == 3
        assert body["overallScore"] == 4
        assert body["recommendation"] == "hire"

        decision = client.post(
            f"{API}/interviews/{interview_id}/decision",
            headers=auth_headers["hr"],
            json={"decision": "hired", "hrNotes": "Strong backend skills"},
        )
        assert decision.status_code == 200
        assert decision.json()["hrNotes"] == "Strong backend skills"

        candidate = client.get(f"{API}/candidates/{candidate_id}", headers=auth_headers["hr"]).json()
        assert candidate["status"] == "hired"

    def test_details_include_question_and_lookups(self, client, auth_headers, interview, question_ids):
        client.post(f"{API}/interview-questions", headers=auth_headers["hr"], json={
            "interviewId": interview["id"],
            "questionId": question_ids["technical"],
        })

        details = client.get(f"{API}/interviews/{interview['id']}/details", headers=auth_headers["director"])

        assert details.status_code == 200
        body = details.json()
        assert body["candidate"]["name"] == "Ada Lovelace"
        question = body["questions"][0]["question"]
        assert question["evaluatesTechnical"] is True
        assert question["technology"]["name"] == "Python"

    def test_illegal_transitions_are_409(self, client, auth_headers, interview):
        hr = auth_headers["hr"]
        interview_id = interview["id"]

        response = client.post(f"{API}/interviews/{interview_id}/decision", headers=hr, json={"decision": "hired"})
        assert response.status_code == 409

        assert client.post(f"{API}/interviews/{interview_id}/cancel", headers=hr).status_code == 200

        response = client.post(f"{API}/interviews/{interview_id}/start", headers=hr)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATE_TRANSITION"

    def test_score_out_of_range(self, client, auth_headers, interview, question_ids):
        response = client.post(f"{API}/interview-questions", headers=auth_headers["hr"], json={
            "interviewId": interview["id"],
            "questionId": question_ids["technical"],
            "score": 6,
        })

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_summary_with_nothing_scored_changes_nothing(self, client, auth_headers, interview):
        hr = auth_headers["hr"]
        client.post(f"{API}/interviews/{interview['id']}/start", headers=hr)

        response = client.post(f"{API}/interviews/{interview['id']}/summary", headers=hr)

        assert response.status_code == 200
        assert response.json()["status"] == "in_progress"
        assert response.json()["recommendation"] is None

    def test_generate_interview(self, client, auth_headers, candidate_id, interview_date):
        response = client.post(f"{API}/interviews/generate", headers=auth_headers["hr"], json={
            "title": "Generated",
            "candidateId": candidate_id,
            "date": interview_date,
            "filter": {"count": 2},
        })

        assert response.status_code == 201, response.text
        questions = response.json()["questions"]
        assert len(questions) == 2
        assert len({q["questionId"] for q in questions}) == 2

    def test_deleting_bank_question_keeps_interview_question(self, client, auth_headers, interview, question_ids):
        hr = auth_headers["hr"]
        client.post(f"{API}/interview-questions", headers=hr, json={
            "interviewId": interview["id"],
            "questionId": question_ids["technical"],
        })

        assert client.delete(f"{API}/questions/{question_ids['technical']}", headers=hr).status_code == 204

        details = client.get(f"{API}/interviews/{interview['id']}/details", headers=hr).json()
        assert len(details["questions"]) == 1
        assert details["questions"][0]["question"] is None

    def test_delete_candidate_removes_interviews(self, client, auth_headers, interview, candidate_id):
        hr = auth_headers["hr"]

        assert client.delete(f"{API}/candidates/{candidate_id}", headers=hr).status_code == 204

        assert client.get(f"{API}/interviews/{interview['id']}", headers=hr).status_code == 404
