"""
Public job board and application flow over HTTP.

Tests:
- Job visibility for anonymous visitors and HR
- Resume upload validation and storage
- Application submission and review with email notifications
"""

from unittest.mock import patch

import pytest
from starlette.datastructures import UploadFile

from core.config import settings

API = settings.api_v1_prefix


@pytest.fixture
def sent_emails():
    """Capture outgoing mail instead of talking to SMTP."""
    with patch("core.integrations.email.EmailService.send_email", return_value=True) as send:
        yield send


@pytest.fixture
def jobs(client, auth_headers):
    hr = auth_headers["hr"]
    open_job = client.post(f"{API}/jobs", headers=hr, json={
        "title": "Backend Engineer",
        "department": "Engineering",
        "requirements": ["Python", "SQL"],
    })
    closed_job = client.post(f"{API}/jobs", headers=hr, json={"title": "Filled Role", "isOpen": False})
    assert open_job.status_code == 201, open_job.text
    return {"open": open_job.json()["id"], "closed": closed_job.json()["id"]}


def apply(client, job_id, **overrides):
    form = {
        "fullName": "Grace Hopper",
        "email": "grace@example.com",
        "phone": "555-0100",
        "jobId": job_id,
    }
    form.update(overrides)
    return client.post(f"{API}/applications", json=form)


class TestJobBoard:

    def test_anonymous_sees_open_jobs_only(self, client, jobs):
        response = client.get(f"{API}/jobs", params={"includeClosed": "true"})

        assert [job["title"] for job in response.json()] == ["Backend Engineer"]
        assert response.json()[0]["requirements"] == ["Python", "SQL"]

    def test_hr_can_include_closed(self, client, auth_headers, jobs):
        response = client.get(f"{API}/jobs", params={"includeClosed": "true"}, headers=auth_headers["hr"])

        assert len(response.json()) == 2

    def test_closed_job_hidden_from_public(self, client, auth_headers, jobs):
        assert client.get(f"{API}/jobs/{jobs['closed']}").status_code == 404
        assert client.get(f"{API}/jobs/{jobs['closed']}", headers=auth_headers["hr"]).status_code == 200

    def test_only_hr_manages_jobs(self, client, auth_headers, jobs):
        assert client.post(f"{API}/jobs", json={"title": "x"}).status_code == 401
        assert client.put(
            f"{API}/jobs/{jobs['open']}", json={"isOpen": False}, headers=auth_headers["director"]
        ).status_code == 403

        response = client.put(f"{API}/jobs/{jobs['open']}", json={"isOpen": False}, headers=auth_headers["hr"])
        assert response.status_code == 200
        assert response.json()["isOpen"] is False


class TestResumeUpload:

    def test_upload_pdf(self, client, upload_dir):
        response = client.post(
            f"{API}/uploads/resume",
            files={"resume": ("jane_doe_resume.pdf", b"%PDF-1.4 test", "application/pdf")},
        )

        assert response.status_code == 201, response.text
        body = response.json()
        assert body["path"].startswith("/uploads/resume-")
        assert body["path"].endswith(".pdf")
        assert body["originalFilename"] == "jane_doe_resume.pdf"
        assert body["suggestedName"] == "Jane Doe"
        stored = upload_dir / body["path"].rsplit("/", 1)[1]
        assert stored.read_bytes() == b"%PDF-1.4 test"

    @pytest.mark.parametrize("filename, content_type, content", [
        ("script.exe", "application/octet-stream", b"MZ"),
        ("resume.pdf", "image/png", b"png"),
        ("resume.pdf", "application/pdf", b""),
    ])
    def test_rejected_files(self, client, filename, content_type, content):
        response = client.post(
            f"{API}/uploads/resume", files={"resume": (filename, content, content_type)}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_too_large(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size_mb", 0)

        response = client.post(
            f"{API}/uploads/resume", files={"resume": ("resume.pdf", b"x" * 10, "application/pdf")}
        )

        assert response.status_code == 400
        assert "too large" in response.json()["error"]["message"]

    def test_oversized_upload_is_read_only_past_limit(self, client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size_mb", 1)
        limit = 1024 * 1024
        read_sizes = []
        original_read = UploadFile.read

        async def tracking_read(self, size=-1):
            data = await original_read(self, size)
            read_sizes.append((size, len(data)))
            return data

        monkeypatch.setattr(UploadFile, "read", tracking_read)

        response = client.post(
            f"{API}/uploads/resume",
            files={"resume": ("resume.pdf", b"x" * (limit * 2), "application/pdf")},
        )

        assert response.status_code == 400
        assert "too large" in response.json()["error"]["message"]
        assert (limit + 1, limit + 1) in read_sizes
        assert all(0 <= size <= limit + 1 for size, _ in read_sizes)


class TestApplications:

    def test_submit_sends_confirmation(self, client, jobs, sent_emails):
        response = apply(client, jobs["open"], resume="/uploads/resume-1-2.pdf")

        assert response.status_code == 201, response.text
        body = response.json()
        assert body["message"] == "Application submitted successfully"
        assert body["application"]["status"] == "pending"
        assert body["candidate"]["status"] == "new"
        assert body["candidate"]["resumePath"] == "/uploads/resume-1-2.pdf"

        sent_emails.assert_called_once()
        to_email, subject = sent_emails.call_args.args[:2]
        assert to_email == "grace@example.com"
        assert "Backend Engineer" in subject

    def test_closed_job_rejected(self, client, jobs, sent_emails):
        response = apply(client, jobs["closed"])

        assert response.status_code == 400
        sent_emails.assert_not_called()

    def test_invalid_email(self, client, jobs):
        assert apply(client, jobs["open"], email="not-an-email").status_code == 400

    def test_listing_requires_hr(self, client, auth_headers, jobs, sent_emails):
        apply(client, jobs["open"])

        assert client.get(f"{API}/applications").status_code == 401
        assert client.get(f"{API}/applications", headers=auth_headers["director"]).status_code == 403

        response = client.get(f"{API}/applications", params={"jobId": jobs["open"]}, headers=auth_headers["hr"])
        assert response.status_code == 200
        assert response.json()[0]["candidate"]["name"] == "Grace Hopper"
        assert response.json()[0]["job"]["title"] == "Backend Engineer"

    @pytest.mark.parametrize("decision, candidate_status, subject_word", [
        ("accepted", "in_progress", "Accepted"),
        ("rejected", "new", "Status Update"),
    ])
    def test_review_updates_candidate_and_notifies(
        self, client, auth_headers, jobs, sent_emails, decision, candidate_status, subject_word
    ):
        application_id = apply(client, jobs["open"]).json()["application"]["id"]
        sent_emails.reset_mock()

        response = client.put(
            f"{API}/applications/{application_id}/status",
            json={"status": decision},
            headers=auth_headers["hr"],
        )

        assert response.status_code == 200, response.text
        assert response.json()["status"] == decision
        assert response.json()["candidate"]["status"] == candidate_status
        sent_emails.assert_called_once()
        assert subject_word in sent_emails.call_args.args[1]

    def test_reviewed_status_sends_nothing(self, client, auth_headers, jobs, sent_emails):
        application_id = apply(client, jobs["open"]).json()["application"]["id"]
        sent_emails.reset_mock()

        response = client.put(
            f"{API}/applications/{application_id}/status",
            json={"status": "reviewed"},
            headers=auth_headers["hr"],
        )

        assert response.status_code == 200
        sent_emails.assert_not_called()

    def test_unknown_application(self, client, auth_headers):
        response = client.put(
            f"{API}/applications/999/status", json={"status": "accepted"}, headers=auth_headers["hr"]
        )

        assert response.status_code == 404
