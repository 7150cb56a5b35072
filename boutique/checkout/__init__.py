"""
Module 'checkout' (feature-first): point d'entrée public.
Réunit construction des line items, client Stripe, registre des commandes et webhook.
"""

from .line_items import to_minor_units, make_line_item, build_line_items, cart_line_items
from .stripe_client import require_stripe, create_session, get_session, construct_event
from .repository import claim_session
from .service import create_checkout_session, create_checkout_session_from_cart
from .webhook import verify_event, handle_event

__all__ = [
    # line items
    "to_minor_units",
    "make_line_item",
    "build_line_items",
    "cart_line_items",
    # stripe
    "require_stripe",
    "create_session",
    "get_session",
    "construct_event",
    # repository
    "claim_session",
    # services
    "create_checkout_session",
    "create_checkout_session_from_cart",
    "verify_event",
    "handle_event",
]
