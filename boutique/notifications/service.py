"""
Dispatcher des notifications post-paiement.

Fail-open: le paiement est déjà final, une erreur d'email est journalisée
(avec l'id de session pour rejouer l'envoi à la main) et jamais relancée.
"""
import logging
from typing import Dict, Optional

from boutique import config
from boutique.checkout import stripe_client
from boutique.errors import ShopError
from .mailer import Mailer
from .messages import format_admin_alert, format_customer_confirmation

logger = logging.getLogger(__name__)

SENT = "sent"
SKIPPED = "skipped"
FAILED = "failed"

def dispatch_order_notifications(session_id: str, mailer: Optional[Mailer] = None) -> Dict[str, str]:
    """
    Relit la session Stripe (avec line_items) puis envoie:
    - la confirmation au client (si email connu)
    - l'alerte de vente à ADMIN_EMAIL (si configuré)
    Retour: {"customer": sent|skipped|failed, "admin": ...}
    """
    result = {"customer": SKIPPED, "admin": SKIPPED}
    if not session_id:
        logger.error("notifications: session_id manquant")
        return {"customer": FAILED, "admin": FAILED}

    try:
        session = stripe_client.get_session(session_id, with_line_items=True)
    except ShopError:
        logger.exception("notifications: relecture session impossible session_id=%s", session_id)
        return {"customer": FAILED, "admin": FAILED}

    mailer = mailer or Mailer.from_config()

    customer_email = session.get("customer_email")
    if customer_email:
        subject, html = format_customer_confirmation(session)
        result["customer"] = _send(mailer, customer_email, subject, html, session_id, "customer")

    if config.ADMIN_EMAIL:
        subject, html = format_admin_alert(session)
        result["admin"] = _send(mailer, config.ADMIN_EMAIL, subject, html, session_id, "admin")

    return result

def _send(mailer: Mailer, to: str, subject: str, html: str, session_id: str, kind: str) -> str:
    try:
        mailer.send(to, subject, html)
        return SENT
    except ShopError:
        logger.exception("notifications: envoi %s échoué session_id=%s to=%s", kind, session_id, to)
        return FAILED
