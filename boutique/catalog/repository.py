"""
Accès aux données du catalogue (table 'products').
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
# Import du module (et non des fonctions) pour que les tests puissent patcher les clients
import boutique.infra.supabase_client as supabase_client
from boutique.errors import PersistenceError

logger = logging.getLogger(__name__)

TABLE = "products"

# module boutique.catalog.repository
def get_product(product_id: str) -> Optional[dict]:
    """
    Retourne le produit par id, ou None s'il n'existe pas.
    - Lève PersistenceError si la base est injoignable.
    """
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select("*")
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("catalog.repository.get_product failed id=%s", product_id)
        raise PersistenceError("Lecture produit impossible") from e
    rows = res.data or []
    return rows[0] if rows else None

def fetch_products_page(
    *,
    offset: int,
    limit: int,
    category: Optional[str] = None,
    materials: Optional[str] = None,
) -> Tuple[List[dict], int]:
    """
    Retourne (items, total) pour une page filtrée du catalogue.
    - category: égalité stricte
    - materials: recherche partielle insensible à la casse
    """
    try:
        query = supabase_client.get_supabase().table(TABLE).select("*", count="exact")
        if category:
            query = query.eq("category", category)
        if materials:
            query = query.ilike("materials", f"%{materials}%")
        res = (
            query
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
    except Exception as e:
        logger.exception("catalog.repository.fetch_products_page failed category=%s materials=%s", category, materials)
        raise PersistenceError("Lecture catalogue impossible") from e
    items = res.data or []
    total = getattr(res, "count", None)
    if total is None:
        total = len(items)
    return items, int(total)

def create_product(data: Dict[str, Any]) -> dict:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(data).execute()
    except Exception as e:
        logger.exception("catalog.repository.create_product failed data=%s", data)
        raise PersistenceError("Création produit impossible") from e
    rows = res.data or []
    return rows[0] if rows else dict(data)

def update_product(product_id: str, data: Dict[str, Any]) -> Optional[dict]:
    """Retourne la ligne mise à jour, ou None si aucun produit ne correspond."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update(data)
            .eq("id", str(product_id))
            .execute()
        )
    except Exception as e:
        logger.exception("catalog.repository.update_product failed id=%s", product_id)
        raise PersistenceError("Mise à jour produit impossible") from e
    rows = res.data or []
    return rows[0] if rows else None

def delete_product(product_id: str) -> Optional[dict]:
    """Retourne la ligne supprimée, ou None si aucun produit ne correspond."""
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .delete()
            .eq("id", str(product_id))
            .execute()
        )
    except Exception as e:
        logger.exception("catalog.repository.delete_product failed id=%s", product_id)
        raise PersistenceError("Suppression produit impossible") from e
    rows = res.data or []
    return rows[0] if rows else None
