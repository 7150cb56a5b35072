import json
from unittest.mock import MagicMock

import fakeredis
import pytest
import redis

from boutique.cart.models import CartState
from boutique.cart.store import InMemorySessionStore, RedisSessionStore, build_session_store
from boutique.errors import PersistenceError

PRODUCT = {"id": "p1", "name": "Bague", "price": 19.99}


def _cart(qty=1) -> CartState:
    cart = CartState()
    cart.add(PRODUCT, qty)
    return cart


def test_memory_store_isolates_sessions():
    store = InMemorySessionStore()
    store.save("s1", _cart(2))
    assert store.get("s1").list()[0].quantity == 2
    assert store.get("s2").is_empty()


def test_memory_store_returns_copies():
    store = InMemorySessionStore()
    store.save("s1", _cart(1))
    cart = store.get("s1")
    cart.add(PRODUCT, 5)
    # Non sauvegardé: le store n'a pas bougé
    assert store.get("s1").list()[0].quantity == 1


def test_memory_store_discard_and_empty_save():
    store = InMemorySessionStore()
    store.save("s1", _cart())
    store.discard("s1")
    assert store.get("s1").is_empty()
    store.save("s2", _cart())
    store.save("s2", CartState())
    assert store.get("s2").is_empty()
    store.discard("never-existed")


@pytest.fixture
def redis_store():
    client = fakeredis.FakeRedis(decode_responses=True)
    return RedisSessionStore(client, ttl_seconds=600), client


def test_redis_store_saves_json_with_ttl(redis_store):
    store, client = redis_store
    store.save("abc", _cart(3))
    raw = client.get("cart:abc")
    assert json.loads(raw)["items"][0]["quantity"] == 3
    assert 0 < client.ttl("cart:abc") <= 600
    assert store.get("abc").list()[0].quantity == 3


def test_redis_store_discard_and_empty_save(redis_store):
    store, client = redis_store
    store.save("abc", _cart())
    store.save("abc", CartState())
    assert client.get("cart:abc") is None
    store.save("abc", _cart())
    store.discard("abc")
    assert store.get("abc").is_empty()


def test_redis_store_ignores_corrupt_payload(redis_store):
    store, client = redis_store
    client.set("cart:abc", "{not json")
    assert store.get("abc").is_empty()


def test_redis_store_wraps_redis_errors():
    client = MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    client.delete.side_effect = redis.ConnectionError("down")
    store = RedisSessionStore(client, ttl_seconds=60)
    with pytest.raises(PersistenceError):
        store.get("abc")
    with pytest.raises(PersistenceError):
        store.discard("abc")


def test_build_session_store_defaults_to_memory():
    assert isinstance(build_session_store("memory", "redis://unused", 60), InMemorySessionStore)
    assert isinstance(build_session_store("redis", "redis://127.0.0.1:6379/9", 60), RedisSessionStore)
