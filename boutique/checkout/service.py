"""
Cas d'usage 'checkout': orchestre line_items et stripe_client.
Aucune commande n'est enregistrée ici: c'est le webhook qui écrit l'état terminal.
"""
import logging
from typing import Any, Dict, Optional

from boutique import config
from boutique.cart.service import CartService
from boutique.errors import PaymentProviderError
from . import line_items as li
from . import stripe_client

logger = logging.getLogger(__name__)

SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"

def with_session_placeholder(success_url: str) -> str:
    """Ajoute session_id={CHECKOUT_SESSION_ID} pour que /success puisse relire la session."""
    if SESSION_ID_PLACEHOLDER in success_url:
        return success_url
    sep = "&" if "?" in success_url else "?"
    return f"{success_url}{sep}session_id={SESSION_ID_PLACEHOLDER}"

def _redirect_url(value: Any, default: str) -> str:
    url = value.strip() if isinstance(value, str) else ""
    return url or default

def create_checkout_session(
    items: Any,
    *,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
    metadata: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Crée une session Checkout depuis une liste d'articles bruts.
    - Lève InvalidRequest avant tout appel Stripe si la liste est vide/invalide
    - Lève PaymentProviderError si Stripe échoue
    Retour: {"id", "url"}
    """
    line_items = li.build_line_items(items)
    return _create(line_items, success_url, cancel_url, metadata)

def create_checkout_session_from_cart(
    cart_service: CartService,
    *,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Crée une session Checkout depuis le panier de la session, puis vide le panier.
    metadata.cart_id permet au webhook de nettoyer le panier côté store.
    """
    cart = cart_service.load()
    line_items = li.cart_line_items(cart)
    session = _create(line_items, success_url, cancel_url, {"cart_id": cart_service.cart_id})
    cart_service.clear()
    return session

def _create(line_items, success_url, cancel_url, metadata) -> Dict[str, Any]:
    session = stripe_client.create_session(
        line_items=line_items,
        success_url=with_session_placeholder(_redirect_url(success_url, config.CHECKOUT_SUCCESS_URL)),
        cancel_url=_redirect_url(cancel_url, config.CHECKOUT_CANCEL_URL),
        metadata=metadata,
    )
    if not session.get("url"):
        raise PaymentProviderError("Session Stripe sans URL")
    logger.info(
        "checkout.session created id=%s items=%s amount=%s",
        session.get("id"), len(line_items), li.total_minor_units(line_items),
    )
    return {"id": session.get("id"), "url": session.get("url")}
