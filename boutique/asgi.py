"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production: `uvicorn boutique.asgi:app` (ou gunicorn -k uvicorn.workers.UvicornWorker).
- Toute la configuration est centralisée dans boutique.app_setup.factory.
"""

from boutique.app_setup.factory import create_app

app = create_app()
