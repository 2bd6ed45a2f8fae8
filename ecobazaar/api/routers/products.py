# ecobazaar/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends

from ecobazaar.api.deps import get_session
from ecobazaar.api.errors import to_http_error
from ecobazaar.data.database import get_store
from ecobazaar.data.store import RecordStore
from ecobazaar.domain.errors import EcoBazaarError
from ecobazaar.domain.schemas import Product, ProductCreate, SellerStats, SessionContext
from ecobazaar.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(store: RecordStore):
    return ProductService(store)


@router.get("", response_model=List[Product])
def list_products(store: RecordStore = Depends(get_store)):
    """Catalog, newest first."""
    try:
        return get_service(store).list_catalog()
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.post("", response_model=Product, status_code=201)
def create_product(
    payload: ProductCreate,
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return get_service(store).create_product(session, payload)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.get("/seller", response_model=List[Product])
def list_seller_products(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return get_service(store).list_seller_products(session)
    except EcoBazaarError as e:
        raise to_http_error(e)


@router.get("/seller/stats", response_model=SellerStats)
def seller_stats(
    session: SessionContext = Depends(get_session),
    store: RecordStore = Depends(get_store),
):
    try:
        return get_service(store).seller_stats(session)
    except EcoBazaarError as e:
        raise to_http_error(e)
