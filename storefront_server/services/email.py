# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Transactional email. Logs to console when SMTP not configured.

Callers schedule ``send_email`` as a background task; delivery failures are
logged here and never reach the request that triggered them.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from storefront_server.config import settings

logger = logging.getLogger(__name__)


def _wrap_html(title: str, inner: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: system-ui, sans-serif; color: #333; max-width: 560px;">
<h2>{escape(title)}</h2>
{inner}
</body>
</html>"""


def otp_template(otp: str) -> tuple[str, str]:
    """(plain, html) body carrying the signup verification code."""
    plain = f"Your verification code is: {otp}\n\nEnter this code in the app to verify your email."
    html = _wrap_html(
        "Verify your email",
        f"<p>Your verification code is:</p><p style=\"font-size: 24px;\"><b>{escape(otp)}</b></p>",
    )
    return plain, html


def verified_template() -> tuple[str, str]:
    plain = "Your email has been verified. Thanks for signing up!"
    return plain, _wrap_html("Email verified", f"<p>{plain}</p>")


def forgot_password_template(link: str) -> tuple[str, str]:
    """(plain, html) body with the reset-password link."""
    plain = f"Follow this link to reset your password:\n\n{link}"
    html = _wrap_html(
        "Reset your password",
        f'<p>Follow this link to reset your password:</p><p><a href="{escape(link)}">Reset password</a></p>',
    )
    return plain, html


def password_reset_template() -> tuple[str, str]:
    plain = "Your password has been reset. You can now sign in with your new password."
    return plain, _wrap_html("Password reset successfully", f"<p>{plain}</p>")


def _send_smtp(to: str, subject: str, plain: str, html: str) -> None:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.smtp_from
    msg["To"] = to
    msg.attach(MIMEText(plain, "plain"))
    msg.attach(MIMEText(html, "html"))
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
        server.starttls()
        server.login(settings.smtp_user, settings.smtp_password or "")
        server.sendmail(settings.smtp_from, [to], msg.as_string())


async def send_email(to: str, subject: str, body: tuple[str, str]) -> None:
    """Send an email from a (plain, html) body pair. Logs to console if SMTP not configured."""
    plain, html = body
    if settings.smtp_host and settings.smtp_user:
        try:
            await asyncio.to_thread(_send_smtp, to, subject, plain, html)
        except Exception as e:
            logger.exception("Failed to send email: %s", e)
    else:
        logger.info("Email (SMTP not configured): To=%s Subject=%s", to, subject)
