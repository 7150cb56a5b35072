"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.

Les objets Stripe sont convertis en dicts simples (session_to_dict) pour que
le reste du code ne dépende pas des classes du SDK.
"""
import logging
from typing import Any, Dict, List, Optional

import stripe

from boutique import config
from boutique.errors import InvalidRequest, PaymentProviderError, SignatureInvalid

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = stripe.Webhook.DEFAULT_TOLERANCE

# module boutique.checkout.stripe_client
def require_stripe():
    """
    Configure et retourne le module stripe prêt à l'emploi.
    - stripe.api_key depuis STRIPE_SECRET_KEY
    - timeout borné et aucune relance interne: c'est l'appelant (navigateur, Stripe) qui relance
    """
    if not config.STRIPE_SECRET_KEY:
        raise PaymentProviderError("STRIPE_SECRET_KEY manquant")
    stripe.api_key = config.STRIPE_SECRET_KEY
    stripe.max_network_retries = 0
    if not isinstance(stripe.default_http_client, stripe.RequestsClient):
        stripe.default_http_client = stripe.RequestsClient(timeout=config.STRIPE_TIMEOUT_SECONDS)
    return stripe

def _get(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)

def session_to_dict(session: Any) -> Dict[str, Any]:
    """
    Normalise une session Checkout (objet SDK ou dict) en dict:
    {id, url, status, payment_status, amount_total, currency, customer_email, created, metadata, line_items}
    """
    customer_details = _get(session, "customer_details")
    line_items_obj = _get(session, "line_items")
    raw_items = _get(line_items_obj, "data") or []
    items: List[Dict[str, Any]] = []
    for li in raw_items:
        items.append({
            "description": _get(li, "description") or "Article",
            "quantity": _get(li, "quantity") or 1,
            "amount_total": _get(li, "amount_total") or 0,
        })
    metadata = _get(session, "metadata") or {}
    if not isinstance(metadata, dict):
        metadata = metadata.to_dict() if hasattr(metadata, "to_dict") else {}
    return {
        "id": _get(session, "id"),
        "url": _get(session, "url"),
        "status": _get(session, "status"),
        "payment_status": _get(session, "payment_status"),
        "amount_total": _get(session, "amount_total") or 0,
        "currency": _get(session, "currency") or config.CHECKOUT_CURRENCY,
        "customer_email": _get(customer_details, "email") or _get(session, "customer_email"),
        "created": _get(session, "created"),
        "metadata": dict(metadata),
        "line_items": items,
    }

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    success_url: str,
    cancel_url: str,
    metadata: Optional[Dict[str, str]] = None,
    mode: str = "payment",
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout hébergée.
    Retour: dict normalisé (au minimum "id" et "url").
    Lève PaymentProviderError sur toute erreur Stripe (réseau, validation).
    """
    client = require_stripe()
    try:
        session = client.checkout.Session.create(
            mode=mode,
            line_items=line_items,
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata or {},
        )
    except stripe.StripeError as e:
        logger.exception("stripe.create_session failed")
        raise PaymentProviderError() from e
    return session_to_dict(session)

def get_session(session_id: str, *, with_line_items: bool = False) -> Dict[str, Any]:
    """Récupère une session Checkout (optionnellement avec expand line_items)."""
    client = require_stripe()
    try:
        if with_line_items:
            session = client.checkout.Session.retrieve(session_id, expand=["line_items"])
        else:
            session = client.checkout.Session.retrieve(session_id)
    except stripe.StripeError as e:
        logger.exception("stripe.get_session failed session_id=%s", session_id)
        raise PaymentProviderError("Session Stripe introuvable") from e
    return session_to_dict(session)

def construct_event(payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
    """
    Vérifie l'en-tête Stripe-Signature (HMAC + fenêtre de 300 s sur t=) puis
    décode l'événement en dict simple.
    - SignatureInvalid: secret absent, en-tête absent, signature fausse ou trop ancienne
    - InvalidRequest: corps signé qui n'est pas un objet JSON
    """
    secret = config.STRIPE_WEBHOOK_SECRET
    if not secret:
        raise SignatureInvalid("STRIPE_WEBHOOK_SECRET non configuré")
    if not sig_header:
        raise SignatureInvalid("En-tête Stripe-Signature manquant")
    try:
        event = stripe.Webhook.construct_event(
            payload, sig_header, secret, tolerance=WEBHOOK_TOLERANCE_SECONDS
        )
    except (stripe.SignatureVerificationError, UnicodeDecodeError) as e:
        raise SignatureInvalid(str(e)) from e
    except (ValueError, AttributeError) as e:
        # JSON invalide, ou JSON valide qui n'est pas un objet (le SDK appelle .get dessus)
        raise InvalidRequest("Invalid payload") from e
    return event.to_dict()
