from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse, Response

from boutique.utils.security import require_admin
from boutique.utils.uploads import parse_index, read_images
from . import repository

api_router = APIRouter(prefix="/api/gallery", tags=["Gallery"])
admin_router = APIRouter(prefix="/admin", tags=["Admin gallery"], dependencies=[Depends(require_admin)])

# module boutique.gallery.views
@admin_router.post("/gallery")
async def upload_gallery(
    name: Optional[str] = Form(default=None),
    avatar: List[UploadFile] = File(default=[]),
    gallery: List[UploadFile] = File(default=[]),
):
    """
    Crée une entrée de galerie (multipart).
    - avatar: 1 image max; gallery: 8 images max; 8 Mo max par fichier, image/* uniquement
    """
    avatars = await read_images(avatar, max_count=1, field="avatar")
    images = await read_images(gallery, max_count=8, field="gallery")
    product = repository.create_entry((name or "").strip() or "Unnamed", avatars[0] if avatars else None, images)
    return {"success": True, "product": product}

@api_router.get("")
def list_gallery():
    return repository.list_entries()

@api_router.get("/{entry_id}/avatar")
def get_avatar(entry_id: str):
    data = repository.get_avatar(entry_id)
    if not data:
        return JSONResponse({"error": "No avatar"}, status_code=404)
    return Response(content=data, media_type="image/jpeg")

@api_router.get("/{entry_id}/gallery/{idx}")
def get_gallery_image(entry_id: str, idx: str):
    index = parse_index(idx)
    if index is None:
        return JSONResponse({"error": "Invalid index"}, status_code=404)
    images = repository.get_gallery_images(entry_id)
    if index >= len(images):
        return JSONResponse({"error": "No gallery image"}, status_code=404)
    return Response(content=images[index], media_type="image/jpeg")
