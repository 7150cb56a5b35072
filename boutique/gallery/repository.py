"""
Accès aux données de la galerie (table 'gallery': avatar bytea + gallery bytea[]).
"""
from typing import List, Optional
import logging

import boutique.infra.supabase_client as supabase_client
from boutique.errors import PersistenceError
from boutique.utils.uploads import from_bytea, to_bytea

logger = logging.getLogger(__name__)

TABLE = "gallery"

# module boutique.gallery.repository
def create_entry(name: str, avatar: Optional[bytes], images: List[bytes]) -> dict:
    row = {
        "name": name,
        "avatar": to_bytea(avatar),
        "gallery": [to_bytea(img) for img in images],
        "avatar_size": len(avatar) if avatar else None,
        "gallery_count": len(images),
    }
    try:
        res = supabase_client.get_service_supabase().table(TABLE).insert(row).execute()
    except Exception as e:
        logger.exception("gallery.repository.create_entry failed name=%s", name)
        raise PersistenceError("Enregistrement galerie impossible") from e
    rows = res.data or []
    created = rows[0] if rows else {}
    return {"id": created.get("id"), "name": created.get("name", name), "created_at": created.get("created_at")}

def list_entries() -> List[dict]:
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select("id, name, avatar_size, gallery_count")
            .order("created_at", desc=True)
            .execute()
        )
        return res.data or []
    except Exception as e:
        logger.exception("gallery.repository.list_entries failed")
        raise PersistenceError("Lecture galerie impossible") from e

def _select_one(entry_id: str, column: str):
    try:
        res = (
            supabase_client.get_supabase()
            .table(TABLE)
            .select(column)
            .eq("id", entry_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("gallery.repository.%s failed id=%s", column, entry_id)
        raise PersistenceError("Lecture galerie impossible") from e
    rows = res.data or []
    return rows[0].get(column) if rows else None

def get_avatar(entry_id: str) -> Optional[bytes]:
    return from_bytea(_select_one(entry_id, "avatar"))

def get_gallery_images(entry_id: str) -> List[bytes]:
    values = _select_one(entry_id, "gallery") or []
    return [img for img in (from_bytea(v) for v in values) if img]
