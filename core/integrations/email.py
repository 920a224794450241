"""
Candidate notification emails over SMTP.

Sending is fire-and-forget: callers schedule these functions as background
tasks, and a failed send is logged and reported as ``False``, never raised.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    body: str


class EmailService:
    """Email service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        use_ssl: Optional[bool] = None,
        enabled: Optional[bool] = None,
    ):
        self.smtp_host = smtp_host or settings.smtp_host
        self.smtp_port = smtp_port or settings.smtp_port
        self.smtp_user = smtp_user or settings.smtp_user
        self.smtp_password = smtp_password or settings.smtp_password
        self.from_email = from_email or settings.from_email
        self.from_name = from_name or settings.from_name
        self.use_ssl = settings.smtp_secure if use_ssl is None else use_ssl
        self.enabled = settings.email_enabled if enabled is None else enabled

    def send_email(self, to_email: str, subject: str, body: str, html: bool = False) -> bool:
        """
        Send a single email.

        Returns:
            True if the message was handed to the SMTP server
        """
        if not self.enabled:
            logger.info(f"Email disabled; skipped '{subject}'")
            return False

        msg = MIMEMultipart()
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = to_email
        msg['Subject'] = subject
        msg.attach(MIMEText(body, 'html' if html else 'plain'))

        try:
            if self.use_ssl:
                server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port)
            else:
                server = smtplib.SMTP(self.smtp_host, self.smtp_port)
            with server:
                if not self.use_ssl:
                    server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg, from_addr=self.from_email, to_addrs=[to_email])
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email '{subject}': {e}")
            return False

        logger.info(f"Email sent: '{subject}'")
        return True


def application_received_template(candidate_name: str, job_title: str, company: str) -> EmailTemplate:
    return EmailTemplate(
        subject=f"Application Received - {job_title} at {company}",
        body=(
            f"Dear {candidate_name},\n\n"
            f"Thank you for applying for the position of {job_title} at {company}.\n\n"
            "We have received your application and our team will review it shortly. "
            "If your profile matches our requirements, we will contact you to "
            "schedule an interview.\n\n"
            f"Best regards,\nThe {company} Recruiting Team"
        ),
    )


def application_accepted_template(candidate_name: str, job_title: str, company: str) -> EmailTemplate:
    return EmailTemplate(
        subject=f"Application Accepted - {job_title} at {company}",
        body=(
            f"Dear {candidate_name},\n\n"
            f"We are pleased to let you know that your application for {job_title} "
            f"at {company} has moved forward to the interview stage.\n\n"
            "A member of our team will reach out shortly to schedule your interview.\n\n"
            f"Best regards,\nThe {company} Recruiting Team"
        ),
    )


def application_rejected_template(candidate_name: str, job_title: str, company: str) -> EmailTemplate:
    return EmailTemplate(
        subject=f"Application Status Update - {job_title} at {company}",
        body=(
            f"Dear {candidate_name},\n\n"
            f"Thank you for your interest in the {job_title} position at {company}. "
            "After careful review we have decided not to move forward with your "
            "application at this time.\n\n"
            "We will keep your details on file and encourage you to apply for "
            "future openings.\n\n"
            f"Best regards,\nThe {company} Recruiting Team"
        ),
    )


def _send(template: EmailTemplate, to_email: str, service: Optional[EmailService]) -> bool:
    return (service or EmailService()).send_email(to_email, template.subject, template.body)


def send_application_confirmation(
    to_email: str, candidate_name: str, job_title: str, service: Optional[EmailService] = None
) -> bool:
    template = application_received_template(candidate_name, job_title, settings.company_name)
    return _send(template, to_email, service)


def send_application_accepted(
    to_email: str, candidate_name: str, job_title: str, service: Optional[EmailService] = None
) -> bool:
    template = application_accepted_template(candidate_name, job_title, settings.company_name)
    return _send(template, to_email, service)


def send_application_rejected(
    to_email: str, candidate_name: str, job_title: str, service: Optional[EmailService] = None
) -> bool:
    template = application_rejected_template(candidate_name, job_title, settings.company_name)
    return _send(template, to_email, service)
