import os
import pytest
from typing import Generator, Dict, Any, List
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

import bcrypt

# Désactive l'init fastapi-limiter (évite toute connexion Redis pendant les tests)
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from boutique import config
from boutique.app_setup.factory import create_app
from boutique.utils.security import require_admin

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery"
# rounds=4: hash rapide, suffisant pour les tests
ADMIN_PASSWORD_HASH = bcrypt.hashpw(ADMIN_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture()
def app():
    # App neuve par test: store de paniers mémoire isolé
    return create_app()

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture(autouse=True)
def _test_config(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_dummy")
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
    monkeypatch.setattr(config, "CHECKOUT_CURRENCY", "chf")
    monkeypatch.setattr(config, "ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", ADMIN_PASSWORD_HASH)
    monkeypatch.setattr(config, "ADMIN_EMAIL", "")

# Mock database dependency for all tests
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    """
    Aucun test ne parle à Supabase: les clients sont remplacés par des MagicMock.
    Les tests patchent ensuite les fonctions de repository dont ils ont besoin.
    """
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: MagicMock())

@pytest.fixture
def products(monkeypatch) -> Dict[str, Dict[str, Any]]:
    """Catalogue en mémoire branché sur catalog.repository.get_product."""
    catalog: Dict[str, Dict[str, Any]] = {
        "p1": {"id": "p1", "name": "Bague argent", "description": "Argent 925", "price": 19.99,
               "images": ["https://cdn.example.test/bague.jpg"], "availability": "available"},
        "p2": {"id": "p2", "name": "Collier", "description": None, "price": 45.5,
               "images": [], "availability": "available"},
        "p3": {"id": "p3", "name": "Bracelet épuisé", "price": 12.0, "availability": "not available"},
    }
    monkeypatch.setattr("boutique.catalog.repository.get_product", lambda product_id: catalog.get(str(product_id)))
    return catalog

@pytest.fixture
def stripe_sessions(monkeypatch) -> List[Dict[str, Any]]:
    """Remplace stripe_client.create_session et enregistre chaque appel."""
    calls: List[Dict[str, Any]] = []

    def _fake_create_session(**kwargs):
        calls.append(kwargs)
        n = len(calls)
        return {"id": f"cs_test_{n}", "url": f"https://checkout.stripe.test/pay/cs_test_{n}"}

    monkeypatch.setattr("boutique.checkout.stripe_client.create_session", _fake_create_session)
    return calls

@pytest.fixture
def orders(monkeypatch) -> Dict[str, Dict[str, Any]]:
    """Registre des commandes en mémoire avec la même garde d'unicité que orders.stripe_session_id."""
    rows: Dict[str, Dict[str, Any]] = {}

    def _fake_claim_session(*, session_id, status, **kwargs):
        if session_id in rows:
            return False
        rows[session_id] = {"status": status, **kwargs}
        return True

    monkeypatch.setattr("boutique.checkout.repository.claim_session", _fake_claim_session)
    return rows

@pytest.fixture
def admin_client(app, client):
    """Client dont les routes admin sont déverrouillées (sans passer par /admin/login)."""
    app.dependency_overrides[require_admin] = lambda: {"username": ADMIN_USERNAME}
    yield client
    app.dependency_overrides.clear()

@pytest.fixture
def login_admin(client):
    def _login(username: str = ADMIN_USERNAME, password: str = ADMIN_PASSWORD):
        return client.post("/admin/login", json={"username": username, "password": password})
    return _login

@pytest.fixture
def sign_webhook():
    """Construit un en-tête Stripe-Signature valide (t=...,v1=HMAC-SHA256) pour un corps brut."""
    import hashlib
    import hmac
    import time

    def _sign(payload: bytes, secret: str = "whsec_test_secret", timestamp: int | None = None) -> str:
        ts = int(timestamp if timestamp is not None else time.time())
        signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
        sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
        return f"t={ts},v1={sig}"
    return _sign
