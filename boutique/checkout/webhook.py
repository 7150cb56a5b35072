"""
Réception des webhooks Stripe Checkout.

Machine à états sur event.type:
- checkout.session.completed -> commande 'paid', nettoyage panier, notifications
- checkout.session.expired   -> commande 'expired', nettoyage panier
- autre                      -> ignoré (acquitté)
Chaque session n'est traitée qu'une fois (repository.claim_session).
"""
import logging
from typing import Any, Callable, Dict, Optional

from boutique.cart.store import SessionStore
from boutique.errors import PersistenceError
from . import repository
from . import stripe_client

logger = logging.getLogger(__name__)

COMPLETED = "checkout.session.completed"
EXPIRED = "checkout.session.expired"

def verify_event(payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
    """
    Vérifie la signature puis décode l'enveloppe {type, data}.
    - SignatureInvalid si la signature échoue ou est rejouée hors délai (aucun traitement)
    - InvalidRequest si le corps signé n'est pas un objet JSON
    """
    return stripe_client.construct_event(payload, sig_header)

def _session_object(event: Dict[str, Any]) -> Dict[str, Any]:
    obj = ((event or {}).get("data") or {}).get("object") or {}
    return obj if isinstance(obj, dict) else {}

def _discard_cart(store: Optional[SessionStore], cart_id: Optional[str], session_id: str) -> None:
    if not store or not cart_id:
        return
    try:
        store.discard(cart_id)
    except PersistenceError:
        logger.exception("webhook: nettoyage panier impossible session_id=%s cart_id=%s", session_id, cart_id)

def handle_event(
    event: Dict[str, Any],
    *,
    store: Optional[SessionStore] = None,
    notify: Optional[Callable[[str], Any]] = None,
) -> Dict[str, Any]:
    """
    Applique l'événement vérifié.
    - notify(session_id) est appelé une seule fois par session payée
    - PersistenceError remonte si la garde d'idempotence ne peut pas être écrite
    """
    event_type = (event or {}).get("type")
    if event_type not in (COMPLETED, EXPIRED):
        logger.info("webhook: événement ignoré type=%s id=%s", event_type, (event or {}).get("id"))
        return {"status": "ignored"}

    session = _session_object(event)
    session_id = session.get("id")
    if not session_id:
        logger.warning("webhook: session sans id type=%s event_id=%s", event_type, event.get("id"))
        return {"status": "ignored"}
    cart_id = (session.get("metadata") or {}).get("cart_id")

    if event_type == COMPLETED:
        customer_email = (session.get("customer_details") or {}).get("email") or session.get("customer_email")
        fresh = repository.claim_session(
            session_id=session_id,
            status=repository.STATUS_PAID,
            amount_total=int(session.get("amount_total") or 0),
            currency=session.get("currency"),
            customer_email=customer_email,
            cart_id=cart_id,
        )
        if not fresh:
            return {"status": "duplicate"}
        logger.info(
            "webhook: paiement réussi session_id=%s amount=%s currency=%s",
            session_id, session.get("amount_total"), session.get("currency"),
        )
        _discard_cart(store, cart_id, session_id)
        if notify:
            notify(session_id)
        return {"status": "paid"}

    fresh = repository.claim_session(session_id=session_id, status=repository.STATUS_EXPIRED, cart_id=cart_id)
    if not fresh:
        return {"status": "duplicate"}
    logger.info("webhook: checkout abandonné session_id=%s", session_id)
    _discard_cart(store, cart_id, session_id)
    return {"status": "expired"}
