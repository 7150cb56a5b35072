"""
Accès aux données pour la feature 'checkout' (table 'orders').

La contrainte UNIQUE sur orders.stripe_session_id sert de garde d'idempotence:
un événement webhook redélivré ne peut pas être traité deux fois.
"""
from typing import Any, Dict, Optional
import logging

from postgrest.exceptions import APIError

import boutique.infra.supabase_client as supabase_client
from boutique.errors import PersistenceError

logger = logging.getLogger(__name__)

TABLE = "orders"
UNIQUE_VIOLATION = "23505"

STATUS_PAID = "paid"
STATUS_EXPIRED = "expired"

# module boutique.checkout.repository
def claim_session(
    *,
    session_id: str,
    status: str,
    amount_total: int = 0,
    currency: Optional[str] = None,
    customer_email: Optional[str] = None,
    cart_id: Optional[str] = None,
) -> bool:
    """
    Enregistre l'état terminal d'une session Checkout.
    - True: première réception, l'appelant doit exécuter les effets de bord
    - False: session déjà traitée (doublon webhook), aucun effet de bord
    - Lève PersistenceError pour toute autre erreur base
    """
    row: Dict[str, Any] = {
        "stripe_session_id": session_id,
        "status": status,
        "amount_total": amount_total,
        "currency": currency,
        "customer_email": customer_email,
        "cart_id": cart_id,
    }
    try:
        supabase_client.get_service_supabase().table(TABLE).insert(row).execute()
        return True
    except APIError as e:
        if str(getattr(e, "code", "")) == UNIQUE_VIOLATION:
            logger.info("checkout.repository.claim_session duplicate session_id=%s status=%s", session_id, status)
            return False
        logger.exception("checkout.repository.claim_session failed session_id=%s", session_id)
        raise PersistenceError("Enregistrement commande impossible") from e
    except Exception as e:
        logger.exception("checkout.repository.claim_session failed session_id=%s", session_id)
        raise PersistenceError("Enregistrement commande impossible") from e
