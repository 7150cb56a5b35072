"""
Logique panier pure (pas de Stripe, pas de DB).

Un CartState est une map ordonnée productId -> CartEntry; l'ordre d'insertion
est conservé pour list() et pour les line_items Stripe.
"""
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

from boutique.errors import InvalidQuantity, NotFound


def parse_quantity(raw: Any) -> int:
    """Entier >= 1 obligatoire (les bool et flottants non entiers sont refusés)."""
    if isinstance(raw, bool):
        raise InvalidQuantity()
    if isinstance(raw, float) and not raw.is_integer():
        raise InvalidQuantity()
    try:
        qty = int(raw)
    except (TypeError, ValueError):
        raise InvalidQuantity()
    if qty <= 0:
        raise InvalidQuantity("La quantité doit être supérieure à 0")
    return qty


@dataclass
class CartEntry:
    productId: str
    name: str
    price: float
    quantity: int
    description: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_product(cls, product: Dict[str, Any], quantity: int) -> "CartEntry":
        images = product.get("images") or []
        return cls(
            productId=str(product.get("id")),
            name=product.get("name") or "Article",
            price=float(product.get("price") or 0),
            quantity=quantity,
            description=product.get("description") or None,
            image=images[0] if images else None,
        )


@dataclass
class CartState:
    entries: Dict[str, CartEntry] = field(default_factory=dict)

    def add(self, product: Dict[str, Any], quantity: int = 1) -> CartEntry:
        quantity = parse_quantity(quantity)
        product_id = str(product.get("id"))
        entry = self.entries.get(product_id)
        if entry:
            entry.quantity += quantity
            return entry
        entry = CartEntry.from_product(product, quantity)
        self.entries[product_id] = entry
        return entry

    def update(self, product_id: str, quantity: Any) -> CartEntry:
        quantity = parse_quantity(quantity)
        entry = self.entries.get(str(product_id))
        if not entry:
            raise NotFound("Article absent du panier")
        entry.quantity = quantity
        return entry

    def remove(self, product_id: str) -> None:
        self.entries.pop(str(product_id), None)

    def list(self) -> List[CartEntry]:
        return list(self.entries.values())

    def clear(self) -> None:
        self.entries.clear()

    def is_empty(self) -> bool:
        return not self.entries

    def total(self) -> float:
        return round(sum(e.price * e.quantity for e in self.entries.values()), 2)

    def to_dict(self) -> Dict[str, Any]:
        return {"items": [asdict(e) for e in self.entries.values()]}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CartState":
        cart = cls()
        for raw in (data or {}).get("items") or []:
            entry = CartEntry(**raw)
            cart.entries[entry.productId] = entry
        return cart

    def summary(self) -> Dict[str, Any]:
        items = [asdict(e) for e in self.entries.values()]
        return {
            "items": items,
            "totalQuantity": sum(e.quantity for e in self.entries.values()),
            "total": self.total(),
        }
