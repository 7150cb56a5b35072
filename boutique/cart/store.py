"""
Stockage des paniers par session navigateur.

SessionStore.get(session_id) -> CartState est injecté dans les handlers
(voir cart/dependencies.py) au lieu d'un état de session implicite.
- InMemorySessionStore: dict process-local (dev, tests, mono-worker)
- RedisSessionStore: JSON dans Redis avec TTL (multi-workers)
"""
import json
import logging
import threading
from typing import Dict, Protocol

import redis

from boutique.errors import PersistenceError
from .models import CartState

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get(self, session_id: str) -> CartState: ...
    def save(self, session_id: str, cart: CartState) -> None: ...
    def discard(self, session_id: str) -> None: ...


class InMemorySessionStore:
    def __init__(self):
        self._carts: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> CartState:
        with self._lock:
            # Copie: les mutations ne sont visibles qu'après save()
            return CartState.from_dict(self._carts.get(session_id))

    def save(self, session_id: str, cart: CartState) -> None:
        with self._lock:
            if cart.is_empty():
                self._carts.pop(session_id, None)
            else:
                self._carts[session_id] = cart.to_dict()

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._carts.pop(session_id, None)


class RedisSessionStore:
    key_prefix = "cart:"

    def __init__(self, client: "redis.Redis", ttl_seconds: int):
        self._redis = client
        self._ttl = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int) -> "RedisSessionStore":
        client = redis.from_url(url, encoding="utf-8", decode_responses=True, socket_timeout=5)
        return cls(client, ttl_seconds)

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    def get(self, session_id: str) -> CartState:
        try:
            raw = self._redis.get(self._key(session_id))
        except redis.RedisError as e:
            logger.exception("cart.store.get failed cart_id=%s", session_id)
            raise PersistenceError("Panier indisponible") from e
        if not raw:
            return CartState()
        try:
            return CartState.from_dict(json.loads(raw))
        except (ValueError, TypeError):
            logger.warning("cart.store.get: panier corrompu ignoré cart_id=%s", session_id)
            return CartState()

    def save(self, session_id: str, cart: CartState) -> None:
        try:
            if cart.is_empty():
                self._redis.delete(self._key(session_id))
            else:
                self._redis.set(self._key(session_id), json.dumps(cart.to_dict()), ex=self._ttl)
        except redis.RedisError as e:
            logger.exception("cart.store.save failed cart_id=%s", session_id)
            raise PersistenceError("Panier indisponible") from e

    def discard(self, session_id: str) -> None:
        try:
            self._redis.delete(self._key(session_id))
        except redis.RedisError as e:
            logger.exception("cart.store.discard failed cart_id=%s", session_id)
            raise PersistenceError("Panier indisponible") from e


def build_session_store(backend: str, redis_url: str, ttl_seconds: int) -> SessionStore:
    if backend == "redis":
        return RedisSessionStore.from_url(redis_url, ttl_seconds)
    return InMemorySessionStore()
