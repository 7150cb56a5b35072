from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from boutique.errors import NotFound
from boutique.utils.security import require_admin
from . import repository
from . import service
from .models import ProductIn, ProductUpdate

router = APIRouter(prefix="/admin/products", tags=["Admin products"], dependencies=[Depends(require_admin)])

# module boutique.catalog.views
@router.get("")
def admin_list_products(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    category: Optional[str] = None,
    materials: Optional[str] = Query(default=None),
):
    """Liste paginée: {page, limit, totalCount, totalPages, items} (5 par page par défaut)."""
    return service.list_products(page=page, limit=limit, category=category, materials=materials)

@router.get("/{product_id}")
def admin_get_product(product_id: str):
    return service.get_product_or_404(product_id)

@router.post("", status_code=201)
def admin_create_product(payload: ProductIn):
    return repository.create_product(payload.model_dump())

@router.put("/{product_id}")
def admin_update_product(product_id: str, payload: ProductUpdate):
    data = payload.model_dump(exclude_unset=True)
    if not data:
        return service.get_product_or_404(product_id)
    updated = repository.update_product(product_id, data)
    if not updated:
        raise NotFound("Product not found")
    return updated

@router.delete("/{product_id}")
def admin_delete_product(product_id: str):
    deleted = repository.delete_product(product_id)
    if not deleted:
        raise NotFound("Product not found")
    return JSONResponse({"message": "Product deleted", "data": deleted})
