"""Utility helpers for sending reminder emails via SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from lifestream.config import get_settings

logger = logging.getLogger(__name__)


def _describe_sendgrid_error(body: Any) -> str | None:
    """Return the error messages of a SendGrid payload, or the raw text."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not body:
        return None
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body.strip() or None

    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list):
        messages = [
            str(item["message"]) for item in errors if isinstance(item, dict) and item.get("message")
        ]
        if messages:
            return "; ".join(messages)
    return json.dumps(body, default=str)


def _log_sendgrid_failure(status_code: Any, body: Any) -> None:
    details = _describe_sendgrid_error(body)
    if details:
        logger.error("SendGrid request failed with status %s: %s", status_code, details)
    else:
        logger.error("SendGrid request failed with status %s", status_code)


def is_email_configured() -> bool:
    """Return whether SendGrid credentials are available."""

    settings = get_settings()
    return bool(settings.sendgrid_api_key and settings.sendgrid_sender)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email delivery")
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        if getattr(exc, "status_code", None) is None:
            logger.exception("Error sending email via SendGrid")
        else:
            _log_sendgrid_failure(exc.status_code, getattr(exc, "body", None))
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        _log_sendgrid_failure(status_code, getattr(response, "body", None))
        return False

    return True


def send_reminder_email(recipient: str, title: str, body: str) -> bool:
    """Send the reminder for an upcoming event to ``recipient``."""

    html_content = "".join(
        (
            "<p>Hello,</p>",
            f"<p><strong>{escape(title)}</strong></p>",
            f"<p>{escape(body)}</p>",
            "<p>This reminder was sent by your LifeStream calendar.</p>",
        )
    )
    return send_email(title, html_content, recipient)
