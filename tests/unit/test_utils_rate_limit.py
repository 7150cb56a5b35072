import pytest
from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient
from boutique.utils import rate_limit
from boutique.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.get("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.get("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429


def test_rate_limit_is_per_path_and_session(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=60))
    client.cookies.set("session", "cookie-a")

    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
    # Autre chemin: compteur distinct
    assert client.get("/limitedB").status_code == 200
    # Autre session: compteur distinct
    client.cookies.set("session", "cookie-b")
    assert client.get("/limitedA").status_code == 200


def test_rate_limit_disabled_flag_is_noop():
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)
    for _ in range(3):
        assert client.get("/limitedA").status_code == 200
    assert client.get("/rl_info").json()["enabled"] is False


def test_rate_limit_fallback_forgets_clients_after_window(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    clock = {"now": 1000.0}
    monkeypatch.setattr(rate_limit, "_clock", lambda: clock["now"])
    app = _make_app(times=1, seconds=60)
    client = TestClient(app)

    for n in range(20):
        client.cookies.set("session", f"cookie-{n}")
        assert client.get("/limitedA").status_code == 200
    assert len(app.state._rl_store) == 20

    # Fenêtre écoulée: le client suivant ne retrouve que sa propre clé
    clock["now"] += 61
    client.cookies.set("session", "cookie-late")
    assert client.get("/limitedA").status_code == 200
    assert len(app.state._rl_store) == 1

    # Un client revenu après la fenêtre repart de zéro
    client.cookies.set("session", "cookie-0")
    assert client.get("/limitedA").status_code == 200
    assert client.get("/limitedA").status_code == 429
