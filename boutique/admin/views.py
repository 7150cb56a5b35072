import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from boutique.errors import Unauthorized
from boutique.utils.rate_limit import optional_rate_limit
from boutique.utils.security import require_admin, login_admin_session, logout_admin_session
from .service import check_credentials

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin auth"])

class LoginRequest(BaseModel):
    username: str
    password: str

@router.post("/login", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def admin_login(req: LoginRequest, request: Request):
    """Connexion admin: pose le nom d'utilisateur dans la session cookie."""
    if not check_credentials(req.username, req.password):
        logger.warning("admin.login refusé username=%s", req.username)
        raise Unauthorized("Identifiants invalides")
    login_admin_session(request, req.username.strip())
    return {"success": True, "username": req.username.strip()}

@router.post("/logout")
def admin_logout(request: Request):
    logout_admin_session(request)
    return {"success": True}

@router.get("/me")
def admin_me(admin: Dict[str, Any] = Depends(require_admin)):
    return admin
