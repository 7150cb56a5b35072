# boutique.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

PUBLIC_DIR = BASE_DIR / "public"
TEMPLATES_DIR = BASE_DIR / "templates"

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose les chemins utiles (PUBLIC_DIR, TEMPLATES_DIR)
- Normalise et expose les secrets/URLs (Supabase, Stripe, SMTP), sécurité cookies, CORS/hosts
- Fournit les URLs de redirection par défaut du checkout
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name)) or default)
    except ValueError:
        return default

# Supabase: URL et clés (anon/service)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON_KEY = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe: clés publiques/privées et secret webhook
STRIPE_PUBLIC_KEY = _clean_env(os.getenv("STRIPE_PUBLIC_KEY") or "")
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_WEBHOOK_SECRET = _clean_env(os.getenv("STRIPE_WEBHOOK_SECRET") or "")
STRIPE_TIMEOUT_SECONDS = _int_env("STRIPE_TIMEOUT_SECONDS", 10)

# Checkout: devise de règlement fixe et redirections par défaut
CHECKOUT_CURRENCY = (_clean_env(os.getenv("CHECKOUT_CURRENCY")) or "chf").lower()
CHECKOUT_SUCCESS_URL = _clean_env(os.getenv("CHECKOUT_SUCCESS_URL") or "http://localhost:3000/success")
CHECKOUT_CANCEL_URL = _clean_env(os.getenv("CHECKOUT_CANCEL_URL") or "http://localhost:3000/checkout-test.html")

# Panier: "memory" (processus) ou "redis"
CART_STORE_BACKEND = (_clean_env(os.getenv("CART_STORE_BACKEND")) or "memory").lower()
CART_REDIS_URL = _clean_env(os.getenv("CART_REDIS_URL") or "redis://127.0.0.1:6379/1")
CART_TTL_SECONDS = _int_env("CART_TTL_SECONDS", 7 * 24 * 60 * 60)

# SMTP: relais pour les emails de commande
EMAIL_HOST = _clean_env(os.getenv("EMAIL_HOST") or "")
EMAIL_PORT = _int_env("EMAIL_PORT", 587)
EMAIL_USER = _clean_env(os.getenv("EMAIL_USER") or "")
EMAIL_PASS = _clean_env(os.getenv("EMAIL_PASS") or "")
EMAIL_USE_TLS = (os.getenv("EMAIL_USE_TLS", "true").lower() == "true")
EMAIL_TIMEOUT_SECONDS = _int_env("EMAIL_TIMEOUT_SECONDS", 10)
EMAIL_FROM_NAME = _clean_env(os.getenv("EMAIL_FROM_NAME") or "Boutique")
ADMIN_EMAIL = _clean_env(os.getenv("ADMIN_EMAIL") or "")

# Compte admin unique (hash bcrypt, jamais le mot de passe en clair)
ADMIN_USERNAME = _clean_env(os.getenv("ADMIN_USERNAME") or "admin")
ADMIN_PASSWORD_HASH = _clean_env(os.getenv("ADMIN_PASSWORD_HASH") or "")

# Cookies / sessions
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "replace_me_with_a_long_random_secret")
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Uploads d'images (hero, galerie)
MAX_UPLOAD_BYTES = 8 * 1024 * 1024
