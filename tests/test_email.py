"""
Email sender tests: SendGrid payload and failure mapping via httpx.MockTransport.
"""

import json

import httpx
import pytest
from pydantic import SecretStr

from app.core.config import Settings
from app.services.email import (SENDGRID_SEND_URL, ConsoleEmailSender,
                                EmailDispatchError, SendGridEmailSender,
                                build_email_sender, send_password_reset_email,
                                send_verification_email)


def _sender(handler) -> SendGridEmailSender:
    return SendGridEmailSender(
        "SG.test-key", "noreply@example.com", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_sendgrid_posts_v3_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202)

    await _sender(handler).send("to@example.com", "Hi", "plain body", "<p>html body</p>")

    assert len(seen) == 1
    request = seen[0]
    assert str(request.url) == SENDGRID_SEND_URL
    assert request.headers["Authorization"] == "Bearer SG.test-key"
    payload = json.loads(request.content)
    assert payload["personalizations"] == [{"to": [{"email": "to@example.com"}]}]
    assert payload["from"] == {"email": "noreply@example.com"}
    assert payload["subject"] == "Hi"
    assert [c["type"] for c in payload["content"]] == ["text/plain", "text/html"]


@pytest.mark.asyncio
async def test_sendgrid_rejection_raises_dispatch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"errors": [{"message": "bad key"}]})

    with pytest.raises(EmailDispatchError) as exc_info:
        await _sender(handler).send("to@example.com", "Hi", "t", "h")
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_sendgrid_network_failure_raises_dispatch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(EmailDispatchError) as exc_info:
        await _sender(handler).send("to@example.com", "Hi", "t", "h")
    assert exc_info.value.status_code is None


def test_build_email_sender_falls_back_to_console():
    assert isinstance(build_email_sender(Settings(SENDGRID_API_KEY=None)), ConsoleEmailSender)
    assert isinstance(
        build_email_sender(Settings(SENDGRID_API_KEY=SecretStr("   "))), ConsoleEmailSender
    )
    assert isinstance(
        build_email_sender(Settings(SENDGRID_API_KEY=SecretStr("SG.key"))), SendGridEmailSender
    )


@pytest.mark.asyncio
async def test_templates_carry_token_links(mailer):
    await send_verification_email(mailer, "a@example.com", "tok-verify")
    await send_password_reset_email(mailer, "a@example.com", "tok-reset")

    verify, reset = mailer.outbox
    assert "/verify-email?token=tok-verify" in verify.text
    assert "/verify-email?token=tok-verify" in verify.html
    assert "/reset-password?token=tok-reset" in reset.text
    assert "60 minutes" in reset.text
