"""
Registre central des routers.
- Boutique: panier, checkout (+ page /success)
- Lecture publique: hero, galerie
- Admin: auth, produits, hero, galerie
- Health
"""
from fastapi import FastAPI
from boutique.admin import views as admin_views
from boutique.cart import views as cart_views
from boutique.catalog import views as catalog_views
from boutique.checkout import views as checkout_views
from boutique.gallery import views as gallery_views
from boutique.heroes import views as heroes_views
from boutique.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # Boutique
    app.include_router(cart_views.router)
    app.include_router(checkout_views.router)
    app.include_router(checkout_views.pages_router)
    # Lecture publique
    app.include_router(heroes_views.api_router)
    app.include_router(gallery_views.api_router)
    # Admin
    app.include_router(admin_views.router)
    app.include_router(catalog_views.router)
    app.include_router(heroes_views.admin_router)
    app.include_router(gallery_views.admin_router)
    # Health & monitoring
    app.include_router(health_router)
