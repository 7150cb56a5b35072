# module boutique.admin.service
import logging
import secrets

import bcrypt

from boutique import config

logger = logging.getLogger(__name__)

def hash_password(password: str) -> str:
    # Hash bcrypt avec salt auto
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def check_credentials(username: str, password: str) -> bool:
    """
    Vérifie le couple (username, password) contre ADMIN_USERNAME / ADMIN_PASSWORD_HASH.
    - False si aucun hash n'est configuré (pas de compte admin par défaut)
    - Un hash mal formé est journalisé et refusé
    """
    expected_hash = config.ADMIN_PASSWORD_HASH
    if not expected_hash or not isinstance(username, str) or not isinstance(password, str):
        return False
    username_ok = secrets.compare_digest(username.strip().encode("utf-8"), config.ADMIN_USERNAME.encode("utf-8"))
    try:
        password_ok = bcrypt.checkpw(password.encode("utf-8"), expected_hash.encode("utf-8"))
    except ValueError:
        logger.error("ADMIN_PASSWORD_HASH invalide (hash bcrypt attendu)")
        return False
    return username_ok and password_ok
