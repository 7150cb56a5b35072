"""
Accès aux données des bannières hero (table 'hero').
Les images (bytea[]) ne sont lues que par get_hero_images.
"""
from typing import Any, Dict, List, Optional
import logging

import boutique.infra.supabase_client as supabase_client
from boutique.errors import PersistenceError
from boutique.utils.uploads import from_bytea, to_bytea

logger = logging.getLogger(__name__)

TABLE = "hero"
PUBLIC_COLUMNS = "id, heroheader, herotitle1, herotitle2, herotitle3, targeturl, heroimg_count, created_at, updated_at"

# module boutique.heroes.repository
def list_heroes() -> List[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select(PUBLIC_COLUMNS)
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("heroes.repository.list_heroes failed")
        raise PersistenceError("Failed to fetch heroes") from e

def get_hero(hero_id: str) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select(PUBLIC_COLUMNS)
            .eq("id", hero_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("heroes.repository.get_hero failed id=%s", hero_id)
        raise PersistenceError("Failed to fetch hero") from e
    rows = res.data or []
    return rows[0] if rows else None

def create_hero(data: Dict[str, Any]) -> dict:
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(data).execute()
    except Exception as e:
        logger.exception("heroes.repository.create_hero failed")
        raise PersistenceError("Failed to create hero") from e
    rows = res.data or []
    return _public(rows[0]) if rows else dict(data)

def update_hero(hero_id: str, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update(data)
            .eq("id", hero_id)
            .execute()
        )
    except Exception as e:
        logger.exception("heroes.repository.update_hero failed id=%s", hero_id)
        raise PersistenceError("Failed to update hero") from e
    rows = res.data or []
    return _public(rows[0]) if rows else None

def delete_hero(hero_id: str) -> bool:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .delete()
            .eq("id", hero_id)
            .execute()
        )
    except Exception as e:
        logger.exception("heroes.repository.delete_hero failed id=%s", hero_id)
        raise PersistenceError("Failed to delete hero") from e
    return bool(res.data)

def set_hero_images(hero_id: str, images: List[bytes], updated_at: str) -> Optional[dict]:
    """Remplace toutes les images du hero (et heroimg_count)."""
    return update_hero(hero_id, {
        "heroimg": [to_bytea(img) for img in images],
        "heroimg_count": len(images),
        "updated_at": updated_at,
    })

def get_hero_images(hero_id: str) -> List[bytes]:
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select("heroimg")
            .eq("id", hero_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("heroes.repository.get_hero_images failed id=%s", hero_id)
        raise PersistenceError("Heroimg serve error") from e
    rows = res.data or []
    if not rows:
        return []
    return [img for img in (from_bytea(v) for v in (rows[0].get("heroimg") or [])) if img]

def _public(row: Dict[str, Any]) -> Dict[str, Any]:
    row = dict(row)
    row.pop("heroimg", None)
    return row
