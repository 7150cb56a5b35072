"""
Factory d'application utilisée par les entrypoints (boutique.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI

from boutique import config
from boutique.cart.store import build_session_store
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware, register_no_cache_middleware
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app() -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - le store des paniers (app.state.session_store)
      - middlewares de base, sécurité, no-cache
      - gestionnaires d'exceptions et routers
    """
    app = FastAPI(title="Boutique API", lifespan=lifespan)
    app.state.session_store = build_session_store(
        config.CART_STORE_BACKEND, config.CART_REDIS_URL, config.CART_TTL_SECONDS
    )
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
