from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from boutique.errors import InvalidRequest
from boutique.utils.rate_limit import optional_rate_limit
from boutique.checkout import service as checkout_service
from .dependencies import get_cart_service, rotate_cart_id
from .service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequest("Invalid JSON body")
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid JSON body")
    return body

async def _optional_json_body(request: Request) -> Dict[str, Any]:
    if not await request.body():
        return {}
    return await _json_body(request)

# module boutique.cart.views
@router.get("")
def get_cart(cart: CartService = Depends(get_cart_service)):
    return cart.load().summary()

@router.post("/add")
async def add_to_cart(request: Request, cart: CartService = Depends(get_cart_service)):
    """
    Ajoute un produit au panier: {productId, quantity?=1}.
    - 404 si le produit n'existe pas ou est 'not available' (panier inchangé)
    - 400 si quantity n'est pas un entier >= 1
    """
    body = await _json_body(request)
    product_id = str(body.get("productId") or "").strip()
    if not product_id:
        raise InvalidRequest("productId manquant")
    entry = cart.add(product_id, body.get("quantity", 1))
    return {"item": asdict(entry), "cart": cart.load().summary()}

@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def checkout_cart(request: Request, cart: CartService = Depends(get_cart_service)):
    """Crée la session Checkout depuis le panier, le vide puis attribue un nouveau panier à la session. Body optionnel {success_url?, cancel_url?}."""
    body = await _optional_json_body(request)
    session = checkout_service.create_checkout_session_from_cart(
        cart,
        success_url=body.get("success_url"),
        cancel_url=body.get("cancel_url"),
    )
    rotate_cart_id(request)
    return JSONResponse({"url": session["url"]})

@router.put("/{product_id}")
async def update_cart_item(product_id: str, request: Request, cart: CartService = Depends(get_cart_service)):
    body = await _json_body(request)
    entry = cart.update(product_id, body.get("quantity"))
    return {"item": asdict(entry), "cart": cart.load().summary()}

@router.delete("/{product_id}")
def remove_cart_item(product_id: str, cart: CartService = Depends(get_cart_service)):
    cart.remove(product_id)
    return cart.load().summary()
