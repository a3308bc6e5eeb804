"""Tests for SMTP delivery."""

import smtplib

import pytest

from premarket.config import EmailSettings
from premarket.errors import ConfigError, DeliveryError
from premarket.notifications.email_notifier import EmailNotifier


@pytest.fixture
def settings():
    return EmailSettings(sender="me@example.com", password="secret", recipient="you@example.com")


@pytest.fixture
def smtp(mocker):
    smtp_cls = mocker.patch("premarket.notifications.email_notifier.smtplib.SMTP")
    return smtp_cls.return_value.__enter__.return_value


def test_message_has_plain_and_html_parts(settings):
    msg = EmailNotifier(settings).build_message("<p>hi</p>", "hi", "Daily Market Report - Oct 16, 2026")

    assert msg["Subject"] == "Daily Market Report - Oct 16, 2026"
    assert msg["To"] == "you@example.com"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_send_report_logs_in_and_sends(settings, smtp):
    EmailNotifier(settings).send_report("<p>hi</p>", "hi", "subject")

    smtp.starttls.assert_called_once()
    smtp.login.assert_called_once_with("me@example.com", "secret")
    smtp.send_message.assert_called_once()


def test_auth_failure_raises_delivery_error(settings, smtp):
    smtp.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
    with pytest.raises(DeliveryError, match="App Password"):
        EmailNotifier(settings).send_report("<p>hi</p>", "hi", "subject")


def test_connection_failure_raises_delivery_error(settings, mocker):
    mocker.patch("premarket.notifications.email_notifier.smtplib.SMTP", side_effect=OSError("no route"))
    with pytest.raises(DeliveryError, match="no route"):
        EmailNotifier(settings).send_report("<p>hi</p>", "hi", "subject")


def test_unconfigured_notifier_refuses_to_send(smtp):
    notifier = EmailNotifier(EmailSettings())
    assert notifier.enabled is False
    with pytest.raises(ConfigError):
        notifier.send_report("<p>hi</p>", "hi", "subject")
    smtp.send_message.assert_not_called()
