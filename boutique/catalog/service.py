"""
Cas d'usage 'catalogue': pagination admin et lookup pour le panier.
"""
import math
from typing import Any, Dict, Optional

from boutique.errors import NotFound, ProductUnavailable
from . import repository
from .models import NOT_AVAILABLE

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 5

def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default

def list_products(
    page: Any = None,
    limit: Any = None,
    category: Optional[str] = None,
    materials: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Page du catalogue filtrée (catégorie, matériaux).
    - page/limit invalides ou <= 0 => 1 / 5
    - totalPages = ceil(totalCount / limit)
    """
    page = _positive_int(page, DEFAULT_PAGE)
    limit = _positive_int(limit, DEFAULT_LIMIT)
    items, total = repository.fetch_products_page(
        offset=(page - 1) * limit,
        limit=limit,
        category=category or None,
        materials=materials or None,
    )
    return {
        "page": page,
        "limit": limit,
        "totalCount": total,
        "totalPages": math.ceil(total / limit),
        "items": items,
    }

def get_product_or_404(product_id: str) -> dict:
    product = repository.get_product(product_id)
    if not product:
        raise NotFound("Product not found")
    return product

def is_available(product: Optional[Dict[str, Any]]) -> bool:
    if not product:
        return False
    return str(product.get("availability") or "").strip().lower() != NOT_AVAILABLE

def lookup_available_product(product_id: str) -> dict:
    """
    Catalog lookup utilisé par le panier.
    Lève ProductUnavailable si le produit n'existe pas ou est marqué 'not available'.
    """
    product = repository.get_product(product_id)
    if not is_available(product):
        raise ProductUnavailable(f"Produit {product_id} indisponible")
    return product
