import json
import time

import pytest

from boutique.errors import PersistenceError


def _payload(event_type="checkout.session.completed", session_id="cs_test_1", cart_id=None):
    session = {
        "id": session_id,
        "amount_total": 1999,
        "currency": "chf",
        "customer_details": {"email": "client@example.com"},
        "metadata": {"cart_id": cart_id} if cart_id else {},
    }
    return json.dumps({"id": "evt_1", "type": event_type, "data": {"object": session}}).encode("utf-8")


@pytest.fixture
def dispatched(monkeypatch):
    calls = []
    monkeypatch.setattr("boutique.checkout.views.dispatch_order_notifications", lambda session_id: calls.append(session_id))
    return calls


def _post(client, payload, signature):
    headers = {"content-type": "application/json"}
    if signature is not None:
        headers["stripe-signature"] = signature
    return client.post("/checkout/webhook", content=payload, headers=headers)


def test_missing_signature_is_rejected(client, orders, dispatched):
    res = _post(client, _payload(), None)
    assert res.status_code == 400
    assert res.text.startswith("Webhook Error:")
    assert orders == {} and dispatched == []


def test_tampered_payload_is_rejected(client, orders, dispatched, sign_webhook):
    signature = sign_webhook(_payload(session_id="cs_original"))
    res = _post(client, _payload(session_id="cs_forged"), signature)
    assert res.status_code == 400
    assert res.text.startswith("Webhook Error:")
    assert orders == {} and dispatched == []


def test_replayed_old_signature_is_rejected(client, orders, dispatched, sign_webhook):
    payload = _payload()
    old = int(time.time()) - 365 * 24 * 3600
    res = _post(client, payload, sign_webhook(payload, timestamp=old))
    assert res.status_code == 400
    assert res.text.startswith("Webhook Error:")
    assert orders == {} and dispatched == []


def test_completed_event_is_acknowledged_and_notifies_once(client, orders, dispatched, sign_webhook):
    payload = _payload()
    res = _post(client, payload, sign_webhook(payload))
    assert res.status_code == 200
    assert res.json() == {"received": True}
    assert orders["cs_test_1"]["status"] == "paid"
    assert dispatched == ["cs_test_1"]

    # Redélivrance du même événement: acquitté, aucun second email
    res = _post(client, payload, sign_webhook(payload))
    assert res.status_code == 200
    assert dispatched == ["cs_test_1"]


def test_expired_and_unknown_events_are_acknowledged(client, orders, dispatched, sign_webhook):
    for event_type, session_id in (("checkout.session.expired", "cs_exp"), ("invoice.paid", "in_1")):
        payload = _payload(event_type=event_type, session_id=session_id)
        res = _post(client, payload, sign_webhook(payload))
        assert res.status_code == 200
        assert res.json() == {"received": True}
    assert orders == {"cs_exp": {"status": "expired", "cart_id": None}}
    assert dispatched == []


def test_persistence_failure_returns_500_so_stripe_retries(client, monkeypatch, dispatched, sign_webhook):
    def _down(**kwargs):
        raise PersistenceError("db down")

    monkeypatch.setattr("boutique.checkout.repository.claim_session", _down)
    payload = _payload()
    res = _post(client, payload, sign_webhook(payload))
    assert res.status_code == 500
    assert dispatched == []


def test_notification_failure_does_not_change_acknowledgement(client, orders, monkeypatch, sign_webhook):
    def _fail(session_id, with_line_items=False):
        from boutique.errors import PaymentProviderError
        raise PaymentProviderError("stripe down")

    monkeypatch.setattr("boutique.checkout.stripe_client.get_session", _fail)
    payload = _payload()
    res = _post(client, payload, sign_webhook(payload))
    assert res.status_code == 200
    assert res.json() == {"received": True}
