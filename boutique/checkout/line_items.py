"""
Conversion panier / saisie client -> line_items Stripe (pas d'appel réseau).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List

from boutique import config
from boutique.cart.models import CartState
from boutique.errors import InvalidRequest

# module boutique.checkout.line_items
def to_minor_units(price: Any) -> int:
    """
    Prix décimal (unités majeures) -> entier en centimes, arrondi half-up.
    - Passe par str() pour éviter les artefacts binaires (19.99 * 100 = 1998.999...).
    - Lève InvalidRequest si le prix n'est pas un nombre fini > 0.
    """
    if isinstance(price, bool):
        raise InvalidRequest("Prix invalide")
    try:
        amount = Decimal(str(price).strip())
    except (InvalidOperation, ValueError):
        raise InvalidRequest("Prix invalide")
    if not amount.is_finite():
        raise InvalidRequest("Prix invalide")
    minor = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if minor <= 0:
        raise InvalidRequest("Le prix doit être supérieur à 0")
    return minor

def _quantity(raw: Any) -> int:
    if raw is None:
        return 1
    if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
        raise InvalidRequest("Quantité invalide")
    try:
        qty = int(raw)
    except (TypeError, ValueError):
        raise InvalidRequest("Quantité invalide")
    if qty < 1:
        raise InvalidRequest("Quantité invalide")
    return qty

def make_line_item(
    *,
    name: str,
    price: Any,
    quantity: Any = 1,
    description: str | None = None,
    image: str | None = None,
) -> Dict[str, Any]:
    product_data: Dict[str, Any] = {"name": name}
    if description:
        product_data["description"] = description
    if image:
        product_data["images"] = [image]
    return {
        "quantity": _quantity(quantity),
        "price_data": {
            "currency": config.CHECKOUT_CURRENCY,
            "unit_amount": to_minor_units(price),
            "product_data": product_data,
        },
    }

def build_line_items(items: Any) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe depuis une saisie client.
    - items: liste non vide de {name, price, quantity?, description?, images?}
    - images: seule la première URL est transmise à Stripe
    - Lève InvalidRequest si la liste est absente/vide/pas une liste ou si un article est invalide
    """
    if not isinstance(items, list) or not items:
        raise InvalidRequest("No items provided")
    line_items: List[Dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            raise InvalidRequest("Article invalide")
        name = str(item.get("name") or "").strip()
        if not name:
            raise InvalidRequest("Nom d'article manquant")
        if item.get("price") is None:
            raise InvalidRequest(f"Prix manquant pour '{name}'")
        images = item.get("images")
        if isinstance(images, str):
            images = [images]
        line_items.append(make_line_item(
            name=name,
            price=item.get("price"),
            quantity=item.get("quantity"),
            description=item.get("description") or None,
            image=(images[0] if isinstance(images, list) and images else None),
        ))
    return line_items

def cart_line_items(cart: CartState) -> List[Dict[str, Any]]:
    if cart.is_empty():
        raise InvalidRequest("Panier vide")
    return [
        make_line_item(
            name=entry.name,
            price=entry.price,
            quantity=entry.quantity,
            description=entry.description,
            image=entry.image,
        )
        for entry in cart.list()
    ]

def total_minor_units(line_items: List[Dict[str, Any]]) -> int:
    return sum(li["price_data"]["unit_amount"] * li["quantity"] for li in line_items)
