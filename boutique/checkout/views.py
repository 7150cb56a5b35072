import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

from boutique.cart.dependencies import get_session_store
from boutique.cart.store import SessionStore
from boutique.config import PUBLIC_DIR
from boutique.errors import InvalidRequest, ShopError, SignatureInvalid
from boutique.notifications.service import dispatch_order_notifications
from boutique.utils.rate_limit import optional_rate_limit
from boutique.utils.templates import templates
from boutique.checkout import service as checkout_service
from boutique.checkout import stripe_client
from boutique.checkout import webhook

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/checkout", tags=["Checkout"])
pages_router = APIRouter(tags=["Checkout pages"])

# module boutique.checkout.views
@router.post("/create-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_checkout_session(request: Request):
    """
    Crée une session Checkout Stripe à partir d'articles bruts.
    - Entrée JSON: { "line_items": [{name, description?, price, quantity?, images?}], success_url?, cancel_url? }
    - 400 {error} si line_items absent/vide/pas une liste (avant tout appel Stripe)
    - 500 {error} si Stripe échoue
    - 200 {url}
    """
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequest("Invalid JSON body")
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid JSON body")
    session = checkout_service.create_checkout_session(
        body.get("line_items"),
        success_url=body.get("success_url"),
        cancel_url=body.get("cancel_url"),
    )
    return JSONResponse({"url": session["url"]})

@router.post("/webhook", include_in_schema=False)
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    store: SessionStore = Depends(get_session_store),
):
    """
    Webhook Stripe (Checkout).
    - Signature: corps brut + en-tête Stripe-Signature; échec => 400 texte, aucun traitement
    - Acquittement {"received": true} dès que l'événement est accepté
    - Les emails partent en tâche de fond, après la réponse: leur échec n'affecte pas Stripe
    """
    payload = await request.body()
    try:
        event = webhook.verify_event(payload, request.headers.get("stripe-signature"))
    except (SignatureInvalid, InvalidRequest) as e:
        logger.warning("webhook rejeté: %s", e.message)
        return PlainTextResponse(f"Webhook Error: {e.message}", status_code=400)

    outcome = webhook.handle_event(
        event,
        store=store,
        notify=lambda session_id: background_tasks.add_task(dispatch_order_notifications, session_id),
    )
    logger.info("webhook traité event_id=%s type=%s status=%s", event.get("id"), event.get("type"), outcome.get("status"))
    return JSONResponse({"received": True})

@pages_router.get("/success", include_in_schema=False)
def success_page(request: Request, session_id: Optional[str] = None):
    """
    Page de confirmation après paiement.
    - Relit la session Stripe pour afficher le récapitulatif
    - Sans session_id ou si Stripe échoue: page statique public/success.html
    """
    fallback = FileResponse(str(PUBLIC_DIR / "success.html"))
    if not session_id:
        return fallback
    try:
        session = stripe_client.get_session(session_id, with_line_items=True)
    except ShopError:
        logger.exception("success_page: relecture session impossible session_id=%s", session_id)
        return fallback
    return templates.TemplateResponse(request, "success.html", {"session": session})
