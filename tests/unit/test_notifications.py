from unittest.mock import MagicMock

import pytest

from boutique import config
from boutique.errors import NotificationError, PaymentProviderError
from boutique.notifications import service as notifications
from boutique.notifications.mailer import Mailer
from boutique.notifications.messages import (
    format_admin_alert,
    format_amount,
    format_customer_confirmation,
    format_items,
)

SESSION = {
    "id": "cs_test_1",
    "amount_total": 3998,
    "currency": "chf",
    "customer_email": "client@example.com",
    "created": 1700000000,
    "line_items": [{"description": "Bague <argent>", "quantity": 2, "amount_total": 3998}],
}


class FakeMailer:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, html):
        if to in self.fail_for:
            raise NotificationError("smtp down")
        self.sent.append((to, subject, html))


@pytest.fixture
def stripe_session(monkeypatch):
    calls = []

    def _fake_get_session(session_id, *, with_line_items=False):
        calls.append((session_id, with_line_items))
        return dict(SESSION, id=session_id)

    monkeypatch.setattr("boutique.checkout.stripe_client.get_session", _fake_get_session)
    return calls


def test_format_amount():
    assert format_amount(1999, "chf") == "19.99 CHF"
    assert format_amount(None, None) == "0.00 CHF"


def test_messages_render_items_and_escape_html():
    assert "2x Bague &lt;argent&gt; - 39.98 CHF" in format_items(SESSION)
    assert format_items({"line_items": []}) == "Aucun article"
    subject, html = format_customer_confirmation(SESSION)
    assert subject == "Commande confirmée"
    assert "cs_test_1" in html and "39.98 CHF" in html
    subject, html = format_admin_alert(SESSION)
    assert subject == "NOUVELLE VENTE : 39.98 CHF"
    assert "client@example.com" in html


def test_dispatch_sends_customer_and_admin_emails(monkeypatch, stripe_session):
    monkeypatch.setattr(config, "ADMIN_EMAIL", "admin@example.com")
    mailer = FakeMailer()
    result = notifications.dispatch_order_notifications("cs_test_1", mailer=mailer)
    assert result == {"customer": "sent", "admin": "sent"}
    assert [to for to, _, _ in mailer.sent] == ["client@example.com", "admin@example.com"]
    assert stripe_session == [("cs_test_1", True)]


def test_dispatch_skips_missing_recipients(monkeypatch):
    monkeypatch.setattr(
        "boutique.checkout.stripe_client.get_session",
        lambda session_id, with_line_items=False: dict(SESSION, customer_email=None),
    )
    mailer = FakeMailer()
    assert notifications.dispatch_order_notifications("cs_test_1", mailer=mailer) == {"customer": "skipped", "admin": "skipped"}
    assert mailer.sent == []


def test_customer_failure_does_not_block_admin_alert(monkeypatch, stripe_session):
    monkeypatch.setattr(config, "ADMIN_EMAIL", "admin@example.com")
    mailer = FakeMailer(fail_for={"client@example.com"})
    result = notifications.dispatch_order_notifications("cs_test_1", mailer=mailer)
    assert result == {"customer": "failed", "admin": "sent"}


def test_refetch_failure_is_logged_not_raised(monkeypatch):
    def _fail(session_id, with_line_items=False):
        raise PaymentProviderError("stripe down")

    monkeypatch.setattr("boutique.checkout.stripe_client.get_session", _fail)
    mailer = FakeMailer()
    assert notifications.dispatch_order_notifications("cs_test_1", mailer=mailer) == {"customer": "failed", "admin": "failed"}
    assert mailer.sent == []


def test_mailer_requires_host():
    with pytest.raises(NotificationError):
        Mailer(host="", port=587).send("a@example.com", "s", "<p>x</p>")


def test_mailer_uses_starttls_and_login(monkeypatch):
    smtp_cls = MagicMock()
    monkeypatch.setattr("boutique.notifications.mailer.smtplib.SMTP", smtp_cls)
    Mailer(host="smtp.example.com", port=587, user="shop@example.com", password="pw", timeout=3).send(
        "client@example.com", "Commande confirmée", "<p>ok</p>"
    )
    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=3)
    server = smtp_cls.return_value.__enter__.return_value
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("shop@example.com", "pw")
    msg = server.send_message.call_args[0][0]
    assert msg["To"] == "client@example.com"


def test_mailer_wraps_smtp_errors(monkeypatch):
    smtp_cls = MagicMock(side_effect=OSError("connection refused"))
    monkeypatch.setattr("boutique.notifications.mailer.smtplib.SMTP", smtp_cls)
    with pytest.raises(NotificationError):
        Mailer(host="smtp.example.com", port=587).send("a@example.com", "s", "<p>x</p>")
