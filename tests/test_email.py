# Copyright (C) 2024 Storefront Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Email templates and fire-and-forget delivery."""

import logging

import pytest

from storefront_server.services import email

pytestmark = pytest.mark.anyio


async def test_logs_when_smtp_not_configured(monkeypatch, caplog):
    monkeypatch.setattr(email.settings, "smtp_host", None)
    with caplog.at_level(logging.INFO, logger=email.__name__):
        await email.send_email("a@b.com", "Hello", email.otp_template("1234"))
    assert "SMTP not configured" in caplog.text
    assert "a@b.com" in caplog.text
    assert "1234" not in caplog.text


async def test_smtp_failure_is_logged_not_raised(monkeypatch, caplog):
    monkeypatch.setattr(email.settings, "smtp_host", "smtp.invalid")
    monkeypatch.setattr(email.settings, "smtp_user", "user")

    def boom(*args):
        raise OSError("connection refused")

    monkeypatch.setattr(email, "_send_smtp", boom)
    await email.send_email("a@b.com", "Hello", email.verified_template())
    assert "Failed to send email" in caplog.text


async def test_reset_link_is_escaped_in_html():
    plain, html = email.forgot_password_template("http://x/reset-password?token=ab&id=1")
    assert "token=ab&id=1" in plain
    assert "token=ab&amp;id=1" in html
