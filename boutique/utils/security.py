from fastapi import Request
from typing import Dict, Any

from boutique.errors import Unauthorized

ADMIN_SESSION_KEY = "admin"

def get_current_admin(request: Request) -> Dict[str, Any] | None:
    """Lit l'admin connecté depuis la session cookie (SessionMiddleware)."""
    username = request.session.get(ADMIN_SESSION_KEY)
    if not username:
        return None
    return {"username": username}

def require_admin(request: Request) -> Dict[str, Any]:
    admin = get_current_admin(request)
    if not admin:
        raise Unauthorized("Connexion admin requise")
    return admin

def login_admin_session(request: Request, username: str) -> None:
    request.session[ADMIN_SESSION_KEY] = username

def logout_admin_session(request: Request) -> None:
    request.session.pop(ADMIN_SESSION_KEY, None)
