from uuid import uuid4
from fastapi import Depends, Request

from boutique.catalog.service import lookup_available_product
from .service import CartService
from .store import SessionStore

CART_SESSION_KEY = "cart_id"

def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store

def get_cart_id(request: Request) -> str:
    """Identifiant du panier stocké dans la session cookie (créé à la première visite)."""
    cart_id = request.session.get(CART_SESSION_KEY)
    if not cart_id:
        cart_id = uuid4().hex
        request.session[CART_SESSION_KEY] = cart_id
    return cart_id

def rotate_cart_id(request: Request) -> str:
    """
    Attribue un nouveau panier à la session après un passage en caisse.
    L'ancien identifiant reste propriété de la session Stripe (metadata.cart_id):
    le webhook peut le supprimer sans toucher au panier suivant.
    """
    cart_id = uuid4().hex
    request.session[CART_SESSION_KEY] = cart_id
    return cart_id

def get_cart_service(
    store: SessionStore = Depends(get_session_store),
    cart_id: str = Depends(get_cart_id),
) -> CartService:
    return CartService(store, cart_id, lookup_available_product)
