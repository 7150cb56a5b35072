"""
Cas d'usage 'panier': relie le SessionStore et le catalog lookup.
"""
import logging
from typing import Any, Callable, Dict, List

from .models import CartEntry, CartState, parse_quantity
from .store import SessionStore

logger = logging.getLogger(__name__)

ProductLookup = Callable[[str], Dict[str, Any]]


class CartService:
    """
    Panier d'une session navigateur.
    - Chaque opération relit le panier puis le sauvegarde: le store reste la source de vérité.
    - lookup doit lever ProductUnavailable pour un produit absent ou 'not available'.
    """

    def __init__(self, store: SessionStore, cart_id: str, lookup: ProductLookup):
        self.store = store
        self.cart_id = cart_id
        self.lookup = lookup

    def load(self) -> CartState:
        return self.store.get(self.cart_id)

    def add(self, product_id: str, quantity: Any = 1) -> CartEntry:
        qty = parse_quantity(quantity)
        product = self.lookup(str(product_id))
        cart = self.load()
        entry = cart.add(product, qty)
        self.store.save(self.cart_id, cart)
        logger.info("cart.add cart_id=%s product_id=%s qty=%s", self.cart_id, product_id, entry.quantity)
        return entry

    def update(self, product_id: str, quantity: Any) -> CartEntry:
        cart = self.load()
        entry = cart.update(product_id, quantity)
        self.store.save(self.cart_id, cart)
        return entry

    def remove(self, product_id: str) -> None:
        cart = self.load()
        cart.remove(product_id)
        self.store.save(self.cart_id, cart)

    def list(self) -> List[CartEntry]:
        return self.load().list()

    def clear(self) -> None:
        self.store.discard(self.cart_id)
