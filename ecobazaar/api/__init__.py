# ecobazaar/api/__init__.py
from fastapi import FastAPI

from ecobazaar.api.routers import admin, carts, health, orders, products, profiles


def create_app(lifespan=None) -> FastAPI:
    app = FastAPI(
        title="EcoBazaar",
        description="Storefront backend with carbon accounting and eco recommendations.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(profiles.router)
    app.include_router(admin.router)

    return app
