"""
Bannières hero de la page d'accueil.
- Lecture publique: /api/hero, /api/hero/{id}, /api/heroimg/{id}/{idx}
- Écriture admin: /admin/hero (CRUD) et /admin/heroimg/{id} (upload, 3 images max)
"""
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from boutique.errors import InvalidRequest, MissingFields
from boutique.utils.security import require_admin
from boutique.utils.uploads import parse_index, read_images
from . import repository

api_router = APIRouter(prefix="/api", tags=["Hero"])
admin_router = APIRouter(prefix="/admin", tags=["Admin hero"], dependencies=[Depends(require_admin)])

REQUIRED_FIELDS = ["heroHeader", "heroTitle1", "heroTitle2", "heroTitle3", "targetUrl"]
MAX_HERO_IMAGES = 3

def _not_found() -> JSONResponse:
    return JSONResponse({"success": False, "message": "Hero not found"}, status_code=404)

async def _hero_payload(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequest("Invalid JSON body")
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid JSON body")
    missing = [f for f in REQUIRED_FIELDS if not body.get(f)]
    if missing:
        raise MissingFields(missing)
    # Colonnes Postgres en minuscules (heroHeader -> heroheader)
    return {f.lower(): body[f] for f in REQUIRED_FIELDS}

@api_router.get("/hero")
def list_heroes():
    heroes = repository.list_heroes()
    return {"success": True, "data": heroes, "count": len(heroes)}

@api_router.get("/hero/{hero_id}")
def get_hero(hero_id: str):
    hero = repository.get_hero(hero_id)
    if not hero:
        return _not_found()
    return {"success": True, "data": hero}

@api_router.get("/heroimg/{hero_id}/{idx}")
def get_hero_image(hero_id: str, idx: str):
    index = parse_index(idx)
    if index is None:
        return JSONResponse({"error": "Invalid idx (0-based)"}, status_code=400)
    images = repository.get_hero_images(hero_id)
    if index >= len(images):
        return JSONResponse({"error": "No image at index"}, status_code=404)
    return Response(content=images[index], media_type="image/jpeg")

@admin_router.post("/hero", status_code=201)
async def create_hero(request: Request):
    payload = await _hero_payload(request)
    hero = repository.create_hero(payload)
    return JSONResponse({"success": True, "data": hero, "message": "Hero created successfully"}, status_code=201)

@admin_router.put("/hero/{hero_id}")
async def update_hero(hero_id: str, request: Request):
    payload = await _hero_payload(request)
    hero = repository.update_hero(hero_id, payload)
    if not hero:
        return _not_found()
    return {"success": True, "data": hero, "message": "Hero updated successfully"}

@admin_router.delete("/hero/{hero_id}")
def delete_hero(hero_id: str):
    if not repository.delete_hero(hero_id):
        return _not_found()
    return {"success": True, "message": "Hero deleted successfully"}

@admin_router.post("/heroimg/{hero_id}")
async def upload_hero_images(hero_id: str, heroImg: List[UploadFile] = File(default=[])):
    """Remplace les images du hero (champ multipart 'heroImg', 3 max, 8 Mo max chacune)."""
    images = await read_images(heroImg, max_count=MAX_HERO_IMAGES, field="heroImg")
    hero = repository.set_hero_images(hero_id, images, datetime.now(timezone.utc).isoformat())
    if not hero:
        return _not_found()
    return {"success": True, "hero": hero}
