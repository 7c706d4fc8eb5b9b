"""
Outbound email: account verification and password reset links.

SendGrid (v3 REST API over httpx) when ``SENDGRID_API_KEY`` is set,
otherwise a console sender that logs each message for local development.
"""

from __future__ import annotations

import abc
import logging

import httpx

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class EmailDispatchError(Exception):
    """Raised when a message could not be handed to the email provider."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class EmailSender(abc.ABC):
    @abc.abstractmethod
    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        """Deliver one message or raise ``EmailDispatchError``."""


class ConsoleEmailSender(EmailSender):
    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        logger.info("Email (not sent, no provider configured) to %s: %s\n%s", to, subject, text)


class SendGridEmailSender(EmailSender):
    def __init__(
        self,
        api_key: str,
        from_email: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._from_email = from_email
        self._timeout = timeout
        self._transport = transport

    def _payload(self, to: str, subject: str, text: str, html: str) -> dict:
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self._from_email},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text},
                {"type": "text/html", "value": html},
            ],
        }

    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    SENDGRID_SEND_URL,
                    json=self._payload(to, subject, text, html),
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.error("SendGrid request failed for %s: %s", to, e, exc_info=True)
            raise EmailDispatchError("Failed to send email") from e

        if resp.status_code >= 400:
            logger.error(
                "SendGrid rejected message to %s: HTTP %s %s",
                to,
                resp.status_code,
                resp.text[:500],
            )
            raise EmailDispatchError("Failed to send email", status_code=resp.status_code)
        logger.info("Email sent to %s: %s", to, subject)


def build_email_sender(cfg: Settings = settings) -> EmailSender:
    if cfg.SENDGRID_API_KEY is not None and cfg.SENDGRID_API_KEY.get_secret_value().strip():
        return SendGridEmailSender(
            cfg.SENDGRID_API_KEY.get_secret_value().strip(),
            cfg.EMAIL_FROM,
            timeout=cfg.EMAIL_TIMEOUT_SEC,
        )
    logger.warning("SENDGRID_API_KEY is not set; emails will only be logged.")
    return ConsoleEmailSender()


# ── Templates ───────────────────────────────────────────────────────
async def send_verification_email(sender: EmailSender, email: str, token: str) -> None:
    url = f"{settings.APP_URL}/verify-email?token={token}"
    await sender.send(
        email,
        "Verify your email",
        f"Welcome to Sports Team Manager! Please verify your email by visiting: {url}",
        (
            "<h1>Welcome to Sports Team Manager!</h1>"
            "<p>Please click the link below to verify your email address:</p>"
            f'<p><a href="{url}">{url}</a></p>'
            "<p>If you didn't create this account, you can safely ignore this email.</p>"
        ),
    )


async def send_password_reset_email(sender: EmailSender, email: str, token: str) -> None:
    url = f"{settings.APP_URL}/reset-password?token={token}"
    minutes = settings.RESET_TOKEN_EXPIRE_MINUTES
    await sender.send(
        email,
        "Password Reset Request",
        f"You requested a password reset. Visit this link to choose a new password: {url}\n"
        f"This link expires in {minutes} minutes.",
        (
            "<h1>Password Reset Request</h1>"
            "<p>You requested a password reset. Click the link below to choose a new one:</p>"
            f'<p><a href="{url}">{url}</a></p>'
            f"<p>This link expires in {minutes} minutes.</p>"
            "<p>If you didn't request this, please ignore this email.</p>"
        ),
    )
