"""
Validation des images uploadées et encodage bytea pour PostgREST.

PostgREST échange les colonnes bytea sous forme de chaîne hexadécimale
préfixée par '\\x'.
"""
from typing import List, Optional

from fastapi import UploadFile

from boutique import config
from boutique.errors import InvalidRequest

async def read_images(files: Optional[List[UploadFile]], *, max_count: int, field: str) -> List[bytes]:
    """
    Lit les fichiers d'un champ multipart.
    - Refuse tout type non image/*
    - Refuse les fichiers > MAX_UPLOAD_BYTES (8 Mo) et plus de max_count fichiers
    """
    files = [f for f in (files or []) if f is not None and f.filename]
    if len(files) > max_count:
        raise InvalidRequest(f"Trop de fichiers pour '{field}' (max {max_count})")
    buffers: List[bytes] = []
    for f in files:
        if not (f.content_type or "").startswith("image/"):
            raise InvalidRequest("Invalid file type, only images are allowed!")
        limit = config.MAX_UPLOAD_BYTES
        if f.size is not None and f.size > limit:
            raise InvalidRequest("File >8MB")
        # Lecture bornée: un octet de plus suffit pour détecter le dépassement
        data = await f.read(limit + 1)
        if len(data) > limit:
            raise InvalidRequest("File >8MB")
        buffers.append(data)
    return buffers

def to_bytea(data: Optional[bytes]) -> Optional[str]:
    if data is None:
        return None
    return "\\x" + data.hex()

def from_bytea(value: Optional[str]) -> Optional[bytes]:
    if not value:
        return None
    if value.startswith("\\x"):
        value = value[2:]
    try:
        return bytes.fromhex(value)
    except ValueError:
        return None

def parse_index(raw: str) -> Optional[int]:
    """Index 0-based; None si non entier ou négatif."""
    try:
        idx = int(raw)
    except (TypeError, ValueError):
        return None
    return idx if idx >= 0 else None
